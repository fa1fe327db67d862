"""
Rule-based résumé parser.
Keyword-anchored sections plus regex contact extraction; the terminal
fallback when no LLM is configured or the LLM call fails. Never raises:
missing data comes back as empty fields.
"""

from __future__ import annotations
import logging, re
from typing import Dict, List, Optional, Sequence, Tuple

from cleaner import (
    canonical_skill,
    categorize_skill,
    clean_resume,
    dedupe,
    new_resume,
    normalise_end_date,
    smart_split,
)
from keywords import (
    BOILERPLATE_WORDS,
    CERT_ISSUERS,
    CERT_KEYWORDS,
    DEGREE_KEYWORDS,
    INSTITUTION_HINTS,
    LANGUAGE_NAMES,
    PROFICIENCY_LEVELS,
    SKILL_VOCABULARY,
)

logger = logging.getLogger(__name__)

EMAIL = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PHONES = (
    re.compile(r"\+\d{1,3}[\s.-]?\(?\d{1,4}\)?(?:[\s.-]?\d{2,4}){2,4}"),
    re.compile(r"\(\d{3}\)\s*\d{3}[\s.-]?\d{4}"),
    re.compile(r"\b\d{3}[\s.-]\d{3}[\s.-]\d{4}\b"),
    re.compile(r"\b\d{10,12}\b"),
)
LINKEDIN = re.compile(r"(?:https?://)?(?:[a-z]{2,3}\.)?linkedin\.com/(?:in|pub|company)/[^\s,;|)]+", re.I)
URL = re.compile(r"(?:https?://|www\.)[^\s,;|)]+|\b(?:github|gitlab)\.com/[^\s,;|)]+", re.I)
LOCATION = re.compile(r"^[A-Z][A-Za-z .'-]{1,30},\s*(?:[A-Z]{2}|[A-Z][a-z]+(?: [A-Z][a-z]+)?)$")

YEAR = re.compile(r"\b(?:19|20)\d{2}\b")
_MONTH = r"(?:jan|feb|mar|apr|may|jun|jul|aug|sep|sept|oct|nov|dec)[a-z]*\.?"
_DATE = rf"(?:{_MONTH}\s+|\d{{1,2}}/)?(?:19|20)\d{{2}}"
DATE_RANGE = re.compile(
    rf"(?P<start>{_DATE})\s*(?:-|–|—|to|until)\s*(?P<end>{_DATE}|present|current|now)", re.I
)
DATE_TOKEN = re.compile(rf"{_DATE}|\bpresent\b|\bcurrent\b", re.I)
GPA = re.compile(r"\bGPA\s*[:\-]?\s*(\d\.\d{1,2})(?:\s*/\s*\d(?:\.\d+)?)?", re.I)
BULLET = re.compile(r"^[•▪●◦·*\-–—]\s*")

SUMMARY_HDRS = ("professional summary", "career objective", "summary", "objective", "profile", "about me")
SKILL_HDRS = ("technical skills", "core competencies", "skills", "competencies")
EXPERIENCE_HDRS = ("work experience", "professional experience", "experience", "employment", "work history")
EDUCATION_HDRS = ("education", "academic background", "qualifications")
CERT_HDRS = ("certifications", "certificates", "licenses", "credentials")
LANGUAGE_HDRS = ("languages",)

NEXT_SECTION = re.compile(
    r"^(?:(?:professional|technical|work|key|core|relevant|academic|additional|career)\s+)?"
    r"(?P<kw>experience|education|skills|projects|certifications|certificates|licenses|"
    r"languages|references|summary|objective|profile|employment|work history|awards|interests)\b"
)
SHORT_LINE = 40

MAX_SKILLS = 20
MAX_JOBS = 10
MAX_EDUCATION = 10
MAX_CERTS = 10
MAX_LANGUAGES = 10


def parse_resume_rule(raw: str) -> Dict:
    try:
        return _parse(raw or "")
    except Exception:  # noqa: BLE001
        logger.exception("Rule-based parser failed; returning an empty résumé")
        return new_resume()


def _parse(raw: str) -> Dict:
    out = new_resume()
    lines = [ln.strip() for ln in raw.splitlines()]
    filled = [ln for ln in lines if ln]

    # contact block
    info = out["personalInfo"]
    if m := EMAIL.search(raw):
        info["email"] = m.group()
    info["phone"] = _phone(raw)
    if m := LINKEDIN.search(raw):
        info["linkedin"] = m.group().rstrip(".")
    info["website"] = next(
        (u.rstrip(".") for u in URL.findall(raw) if "linkedin" not in u.lower()), ""
    )
    head = _header_block(filled)
    info["name"] = _name(filled)
    info["location"] = _location(head, info["name"])

    # sections
    out["skills"] = _skills(lines, raw)
    out["experience"] = _jobs(extract_section(lines, EXPERIENCE_HDRS))
    out["education"] = _edu(extract_section(lines, EDUCATION_HDRS))
    out["certifications"] = _certs(lines)
    out["languages"] = _languages(lines, raw)
    out["summary"] = _summary(lines, out["skills"], out["experience"], raw)
    logger.debug(
        "Rule-based parse: %d skills, %d jobs, %d education entries",
        len(out["skills"]), len(out["experience"]), len(out["education"]),
    )
    return clean_resume(out)


# ───────────────────────────────────────── sections ──
def _strip_marks(line: str) -> str:
    return re.sub(r"^[^A-Za-z]+", "", line).lower()


def is_section_header(line: str, own: Sequence[str] = ()) -> bool:
    """Short line starting with a section keyword that is not one of `own`."""
    low = _strip_marks(line)
    if not low or len(low) >= SHORT_LINE:
        return False
    m = NEXT_SECTION.match(low)
    if not m:
        return False
    kw = m.group("kw")
    return not any(kw in o or o in kw for o in own)


def _looks_like_header(low: str, hit: str) -> bool:
    if len(low) < SHORT_LINE and len(low.split()) <= 4:
        return True
    colon = low.find(":")
    return colon != -1 and low.find(hit) < colon


def find_section_start(lines: List[str], synonyms: Sequence[str],
                       exclude: Sequence[str] = ()) -> Optional[int]:
    for i, ln in enumerate(lines):
        low = ln.lower()
        if not low or any(x in low for x in exclude):
            continue
        hit = next((s for s in synonyms if s in low), None)
        if hit and _looks_like_header(low, hit):
            return i
    return None


def extract_section(lines: List[str], synonyms: Sequence[str],
                    exclude: Sequence[str] = ()) -> List[str]:
    """Body lines of the first section whose header mentions a synonym.

    Text after a colon on the header line is the first body line. The body
    ends at the next short line that starts with another section keyword.
    Blank lines are kept so callers can chunk on them.
    """
    start = find_section_start(lines, synonyms, exclude)
    if start is None:
        return []
    body = []
    header = lines[start]
    if ":" in header and (rest := header.split(":", 1)[1].strip()):
        body.append(rest)
    for ln in lines[start + 1:]:
        if is_section_header(ln, synonyms):
            break
        body.append(ln.strip())
    return body


def _header_block(filled: List[str]) -> List[str]:
    head = []
    for ln in filled[:10]:
        if is_section_header(ln):
            break
        head.append(ln)
    return head


# ───────────────────────────────────────── contact ──
def _phone(raw: str) -> str:
    for pattern in PHONES:
        if m := pattern.search(raw):
            return m.group().strip()
    return ""


def _is_contact(line: str) -> bool:
    return bool(EMAIL.search(line) or any(p.search(line) for p in PHONES))


def _has_boilerplate(low: str) -> bool:
    return any(re.search(rf"(?<![a-zé]){w}(?![a-zé])", low) for w in BOILERPLATE_WORDS)


def _name(filled: List[str]) -> str:
    candidates = [ln for ln in filled[:10] if not is_section_header(ln)]
    for ln in candidates:
        if "@" in ln or re.search(r"\d", ln) or not 3 <= len(ln) <= 50:
            continue
        if _has_boilerplate(ln.lower()):
            continue
        tokens = ln.split()
        if 2 <= len(tokens) <= 5 and all(re.fullmatch(r"[A-Za-z][A-Za-z.'\-]*", t) for t in tokens):
            return ln
    for ln in candidates[:5]:
        if not 5 <= len(ln) <= 50 or _is_contact(ln) or ln[0].isdigit():
            continue
        if "," in ln or "|" in ln or _has_boilerplate(ln.lower()):
            continue
        return ln
    return ""


def _location(head: List[str], name: str) -> str:
    for ln in head:
        if ln == name:
            continue
        for part in re.split(r"\s*[|•·]\s*", ln):
            part = part.strip()
            if not LOCATION.match(part) or _is_contact(part):
                continue
            city, region = [p.strip() for p in part.split(",", 1)]
            if city in SKILL_VOCABULARY or region in SKILL_VOCABULARY:
                continue
            return part
    return ""


# ───────────────────────────────────────── skills ──
def _term_pattern(term: str) -> re.Pattern:
    flags = 0 if len(term) <= 3 else re.I
    return re.compile(rf"(?<![\w+#]){re.escape(term)}(?![\w+#])", flags)


def _evidence_level(name: str, raw: str) -> int:
    """70 for a single mention, +5 per extra mention, capped at 100."""
    hits = len(re.findall(rf"(?<![\w+#]){re.escape(name)}(?![\w+#])", raw, re.I))
    return min(100, 70 + 5 * max(0, hits - 1))


def _vocab_scan(raw: str, limit: int) -> List[str]:
    return [term for term in SKILL_VOCABULARY if _term_pattern(term).search(raw)][:limit]


def _skills(lines: List[str], raw: str) -> List[Dict]:
    body = extract_section(lines, SKILL_HDRS)
    names: List[str] = []
    if body:
        # drop "Programming Languages:" style sub-labels
        stripped = [ln.split(":", 1)[1] if ":" in ln and len(ln.split(":", 1)[0]) < 30 else ln
                    for ln in body]
        toks = smart_split("\n".join(stripped))
        names = dedupe(
            [canonical_skill(t) for t in toks
             if 1 <= len(t) <= 50 and not re.fullmatch(r"[\d\s.,%+/-]+", t)],
            MAX_SKILLS,
        )
    if not names:
        names = _vocab_scan(raw, MAX_SKILLS)
    return [
        {"name": n, "level": _evidence_level(n, raw), "category": categorize_skill(n)}
        for n in names
    ]


# ───────────────────────────────────────── experience ──
def _is_bullet(line: str) -> bool:
    return bool(BULLET.match(line)) and len(line) > 2


def is_date_line(line: str) -> bool:
    if not YEAR.search(line):
        return False
    low = line.lower()
    return bool(re.search(r"[-–—/]|\bto\b|present|current", low))


def date_range(line: str) -> Tuple[str, str]:
    if m := DATE_RANGE.search(line):
        return m.group("start").strip(), normalise_end_date(m.group("end"))
    found = DATE_TOKEN.findall(line)
    if not found:
        return "", ""
    end = found[-1] if len(found) > 1 else ""
    if re.search(r"\bpresent\b|\bcurrent\b", line, re.I):
        end = "Present"
    return found[0].strip(), normalise_end_date(end)


def _strip_dates(line: str) -> str:
    line = DATE_RANGE.sub("", line)
    line = DATE_TOKEN.sub("", line)
    return re.sub(r"^[\s,|•()\-–—]+|[\s,|•()\-–—]+$", "", line)


def _starts_dated_entry(body: List[str], i: int, cur: List[str]) -> bool:
    """Title line of a new entry in a section without blank lines."""
    if not any(is_date_line(ln) for ln in cur) or _is_bullet(body[i]):
        return False
    if is_date_line(body[i]):
        return bool(_strip_dates(body[i]))
    nxt = body[i + 1] if i + 1 < len(body) else ""
    return is_date_line(nxt) and not _strip_dates(nxt)


def _chunks(body: List[str]) -> List[List[str]]:
    content = [i for i, ln in enumerate(body) if ln]
    dense = bool(content) and all(body[i] for i in range(content[0], content[-1] + 1))
    chunks, cur = [], []
    for i, ln in enumerate(body):
        if not ln:
            if cur:
                chunks.append(cur)
            cur = []
            continue
        # a plain line right after bullets opens the next entry
        if cur and _is_bullet(cur[-1]) and not _is_bullet(ln) and len(ln) < 60:
            chunks.append(cur)
            cur = []
        elif cur and dense and _starts_dated_entry(body, i, cur):
            chunks.append(cur)
            cur = []
        cur.append(ln)
    if cur:
        chunks.append(cur)
    return chunks


def _split_title(line: str) -> Tuple[str, str]:
    parts = re.split(r"\s+(?:at|@)\s+|\s*\|\s*|\s+[–—]\s+", line, maxsplit=1)
    if len(parts) == 2 and all(p.strip() for p in parts):
        return parts[0].strip(), parts[1].strip()
    return line, ""


def _jobs(body: List[str]) -> List[Dict]:
    jobs = []
    for chunk in _chunks(body):
        job = {"company": "", "position": "", "startDate": "", "endDate": "",
               "description": "", "achievements": []}
        date_idx = next((i for i, ln in enumerate(chunk[:3]) if is_date_line(ln)), None)
        desc = []
        for i, ln in enumerate(chunk):
            if i == date_idx:
                job["startDate"], job["endDate"] = date_range(ln)
                ln = _strip_dates(ln)
                if not ln:
                    continue
            if _is_bullet(ln):
                job["achievements"].append(BULLET.sub("", ln).strip())
            elif i < 3 and not job["position"]:
                job["position"], company = _split_title(ln)
                job["company"] = job["company"] or company
            elif i < 3 and not job["company"]:
                job["company"] = ln
            else:
                desc.append(ln)
        job["description"] = " ".join(desc)
        if job["position"] or job["company"]:
            jobs.append(job)
    return jobs[:MAX_JOBS]


# ───────────────────────────────────────── education ──
def _degree_match(line: str) -> Optional[re.Match]:
    found = [
        m for kw in DEGREE_KEYWORDS
        if (m := re.search(rf"(?<![A-Za-z]){re.escape(kw)}[^,\n|;]*", line, re.I))
    ]
    return min(found, key=lambda m: m.start()) if found else None


def _institution(rest: str) -> str:
    parts = [p.strip(" .:-–—()") for p in re.split(r"[,|;]|\s[-–—]\s", rest)]
    parts = [re.sub(r"\s+", " ", p) for p in parts if p and re.search(r"[A-Za-z]", p)]
    hinted = next((p for p in parts if any(h in p.lower() for h in INSTITUTION_HINTS)), None)
    return hinted or ", ".join(parts)


def _edu(body: List[str]) -> List[Dict]:
    entries: List[Dict] = []
    pending = ""
    for ln in body:
        if len(ln) < 10:
            continue
        years = YEAR.findall(ln)
        year = years[-1] if years else ""
        gpa_m = GPA.search(ln)
        deg_m = _degree_match(ln)
        if deg_m:
            degree = YEAR.sub("", deg_m.group()).strip(" -–—()")
            rest = ln[:deg_m.start()] + "," + ln[deg_m.end():]
            # "BS in CS from MIT" keeps the school in the degree phrase
            if m := re.search(r"\s+(?:from|at)\s+(.+)$", degree, re.I):
                rest += "," + m.group(1)
                degree = degree[:m.start()].strip()
            if gpa_m:
                rest = rest.replace(gpa_m.group(), "")
            field_m = re.search(r"\bin\s+(.+)$", degree, re.I)
            entries.append({
                "institution": _institution(YEAR.sub("", rest)) or pending,
                "degree": degree,
                "field": field_m.group(1).strip() if field_m else "",
                "year": year,
                "gpa": gpa_m.group(1) if gpa_m else "",
            })
            pending = ""
        elif gpa_m and entries:
            entries[-1]["gpa"] = entries[-1]["gpa"] or gpa_m.group(1)
        elif any(h in ln.lower() for h in INSTITUTION_HINTS):
            school = _institution(YEAR.sub("", ln))
            if entries and not entries[-1]["institution"]:
                entries[-1]["institution"] = school
                entries[-1]["year"] = entries[-1]["year"] or year
            else:
                pending = school
    if pending:
        entries.append({"institution": pending, "degree": "", "field": "", "year": "", "gpa": ""})
    return entries[:MAX_EDUCATION]


# ───────────────────────────────────────── certifications / languages ──
def _cert(item: str) -> Dict:
    year = YEAR.findall(item)
    issuer = next(
        (i for i in CERT_ISSUERS if re.search(rf"\b{re.escape(i)}\b", item, re.I)), ""
    )
    name = YEAR.sub("", item).split(",")[0]
    name = re.sub(r"\s*[(\[]\s*[)\]]", "", name).strip(" -–—:()")
    return {"name": name, "issuer": issuer, "date": year[-1] if year else ""}


def _certs(lines: List[str]) -> List[Dict]:
    body = extract_section(lines, CERT_HDRS)
    if body:
        items = [BULLET.sub("", p).strip() for ln in body for p in re.split(r"[;|•]", ln)]
    else:
        items = [
            BULLET.sub("", ln) for ln in lines
            if 5 <= len(ln) <= 100 and not is_section_header(ln)
            and any(re.search(rf"\b{k}", ln, re.I) for k in CERT_KEYWORDS)
        ]
    certs, seen = [], set()
    for item in items:
        if len(item) < 3:
            continue
        cert = _cert(item)
        if len(cert["name"]) >= 3 and cert["name"].lower() not in seen:
            seen.add(cert["name"].lower())
            certs.append(cert)
    return certs[:MAX_CERTS]


def _language_entry(text: str, name: str) -> Dict:
    low = text.lower()
    prof = next((p for p in PROFICIENCY_LEVELS if re.search(rf"\b{p}\b", low)), "")
    return {"name": name, "proficiency": prof.capitalize()}


def _languages(lines: List[str], raw: str) -> List[Dict]:
    body = extract_section(lines, LANGUAGE_HDRS, exclude=("programming", "coding", "scripting"))
    found, seen = [], set()
    if body:
        for ln in body:
            for part in re.split(r"[,;|•·]", ln):
                name = next((n for n in LANGUAGE_NAMES if re.search(rf"\b{n}\b", part, re.I)), None)
                if name and name not in seen:
                    seen.add(name)
                    found.append(_language_entry(part, name))
    else:
        for ln in raw.splitlines():
            for name in LANGUAGE_NAMES:
                if name == "English" or name in seen:
                    continue
                if re.search(rf"\b{name}\b", ln):
                    seen.add(name)
                    found.append(_language_entry(ln, name))
    return found[:MAX_LANGUAGES]


# ───────────────────────────────────────── summary ──
def _experience_phrase(jobs: List[Dict]) -> str:
    years = [int(y) for j in jobs for y in YEAR.findall(f"{j['startDate']} {j['endDate']}")]
    if len(years) > 1 and max(years) > min(years):
        return f"{max(years) - min(years)}+ years"
    if jobs:
        return f"{len(jobs)} role{'s' if len(jobs) > 1 else ''}"
    return ""


def _summary(lines: List[str], skills: List[Dict], jobs: List[Dict], raw: str) -> str:
    start = find_section_start(lines, SUMMARY_HDRS, exclude=("linkedin", "http", "@"))
    if start is not None:
        header = lines[start]
        window = ([header.split(":", 1)[1].strip()] if ":" in header else []) + lines[start + 1:]
        picked = []
        for ln in window:
            if is_section_header(ln, SUMMARY_HDRS):
                break
            if len(ln) > 20 and "@" not in ln and not ln[0].isdigit():
                picked.append(ln)
            if len(picked) == 3:
                break
        if picked:
            return " ".join(picked)[:500]

    top = ", ".join(s["name"] for s in skills[:3])
    duration = _experience_phrase(jobs)
    if duration and top:
        return f"Professional with {duration} of experience in {top}."
    if duration:
        return f"Professional with {duration} of experience."
    if top:
        return f"Professional skilled in {top}."

    # low confidence: a slice of the body text
    words = [w for w in raw.split() if len(w) > 3 and "@" not in w and re.search(r"[A-Za-z]", w)]
    if len(words) >= 20:
        return " ".join(words[10:40])[:500]
    return ""

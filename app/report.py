from pathlib import Path
from jinja2 import Environment, FileSystemLoader

from orchestrator import ParseResult

_CSS_PATH = Path(__file__).parent / "static" / "report.css"
env = Environment(loader=FileSystemLoader(Path(__file__).parent / "templates"),
                  autoescape=True)


def score_band(score: int) -> str:
    if score >= 80:
        return "good"
    if score >= 60:
        return "fair"
    return "low"


env.filters["band"] = score_band


def render_report(result: ParseResult, inline_css: bool = True) -> str:
    """Render a parse result → HTML.  If inline_css=True, embed CSS in a <style> tag."""
    css_inline = _CSS_PATH.read_text(encoding="utf-8") if inline_css else ""
    return env.get_template("report.html").render(
        r=result.resume,
        scores=result.scores,
        method=result.method,
        fallback_reason=result.fallback_reason,
        inline_css=css_inline,
    )

import streamlit as st

# MUST be the first Streamlit command
st.set_page_config(layout="wide", page_title="Résumé Analyzer")

import json
import logging

from config import DEFAULT_MODEL, Settings
from enhancer import enhance_resume
from errors import ResumeError
from orchestrator import ExtractionOrchestrator
from report import render_report

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# Available models for each provider
MODEL_OPTIONS = {
    "OpenAI": ["gpt-4o-mini", "gpt-4o", "gpt-4-turbo"],
    "Gemini": ["gemini-2.0-flash", "gemini-1.5-pro", "gemini-1.5-flash"],
    "Ollama": ["llama3.1:8b", "llama3.1:70b", "qwen2.5:7b", "mistral:7b"],
}

MEDIA_TYPES = {
    "pdf": "application/pdf",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}

# Initialize session state variables
if "selected_provider" not in st.session_state:
    st.session_state.selected_provider = "OpenAI"
if "selected_model" not in st.session_state:
    st.session_state.selected_model = DEFAULT_MODEL["openai"]
if "result" not in st.session_state:
    st.session_state.result = None
# Tracks the name of the file whose result is on screen
if "processed_file_name" not in st.session_state:
    st.session_state.processed_file_name = None
if "enhancement" not in st.session_state:
    st.session_state.enhancement = None


def build_orchestrator() -> ExtractionOrchestrator:
    """Orchestrator for the provider/model currently selected in the UI."""
    settings = Settings.from_env(
        provider=st.session_state.selected_provider.lower(),
        model=st.session_state.selected_model,
    )
    return ExtractionOrchestrator(settings)


def reset_output_state():
    st.session_state.result = None
    st.session_state.processed_file_name = None
    st.session_state.enhancement = None


st.title("📄 Résumé Analyzer")
st.markdown("Upload a résumé to extract structured data and score its completeness")

# --- LLM PROVIDER AND MODEL SELECTION ---
st.markdown("### 🤖 AI Model Configuration")

col_provider, col_model = st.columns([1, 2])

with col_provider:
    provider = st.selectbox(
        "Provider",
        options=list(MODEL_OPTIONS.keys()),
        index=list(MODEL_OPTIONS.keys()).index(st.session_state.selected_provider),
        key="provider_select",
        help="Without an API key the rule-based parser is used",
    )

with col_model:
    # Reset to first model of new provider
    if provider != st.session_state.selected_provider:
        st.session_state.selected_provider = provider
        st.session_state.selected_model = MODEL_OPTIONS[provider][0]

    model = st.selectbox(
        "Model",
        options=MODEL_OPTIONS[provider],
        index=MODEL_OPTIONS[provider].index(st.session_state.selected_model)
        if st.session_state.selected_model in MODEL_OPTIONS[provider] else 0,
        key="model_select",
    )

st.session_state.selected_provider = provider
st.session_state.selected_model = model

orchestrator = build_orchestrator()
if orchestrator.client is None:
    st.info("ℹ️ No AI provider configured: résumés are parsed with the rule-based parser")

st.divider()

uploaded_file = st.file_uploader("Upload résumé", type=list(MEDIA_TYPES))

if uploaded_file is None:
    reset_output_state()
elif uploaded_file.name != st.session_state.processed_file_name:
    reset_output_state()
    extension = uploaded_file.name.rsplit(".", 1)[-1].lower()
    media_type = uploaded_file.type or MEDIA_TYPES.get(extension, "")
    with st.spinner("🔍 Extracting and analyzing résumé..."):
        try:
            st.session_state.result = orchestrator.process_document(uploaded_file.getvalue(), media_type)
        except ResumeError as exc:
            st.error(exc.message)
        except Exception as exc:
            logging.getLogger(__name__).exception("Unexpected error while processing %s", uploaded_file.name)
            st.error(f"Unexpected error: {exc}")
        else:
            st.session_state.processed_file_name = uploaded_file.name

# --- Display Area ---
result = st.session_state.result
if result is not None:
    resume, scores = result.resume, result.scores

    if result.fallback_reason:
        st.warning(f"⚠️ AI extraction failed, used rule-based parsing instead: {result.fallback_reason}")
    else:
        st.success(f"✅ Résumé parsed with {'AI' if result.method == 'ai' else 'rule-based'} extraction")

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Overall", scores["overallScore"])
    col2.metric("Skills", scores["skillsScore"])
    col3.metric("Experience", scores["experienceScore"])
    col4.metric("Education", scores["educationScore"])

    tab_data, tab_report = st.tabs(["📋 Extracted data", "📊 Report"])

    with tab_data:
        info = resume["personalInfo"]
        st.subheader(info["name"] or "Unnamed candidate")
        st.markdown(" · ".join(v for k, v in info.items() if k != "name" and v))
        if resume["summary"]:
            st.markdown(f"**Summary:** {resume['summary']}")

        if resume["skills"]:
            st.markdown("**🛠️ Skills**")
            for skill in resume["skills"]:
                st.progress(skill["level"] / 100, text=f"{skill['name']} · {skill['category']}")

        if resume["experience"]:
            st.markdown("**💼 Experience**")
            for job in resume["experience"]:
                with st.expander(f"{job['position']} · {job['company']}".strip(" ·")):
                    if job["startDate"] or job["endDate"]:
                        st.caption(f"{job['startDate']} – {job['endDate']}")
                    if job["description"]:
                        st.write(job["description"])
                    for achievement in job["achievements"]:
                        st.markdown(f"- {achievement}")

        if resume["education"]:
            st.markdown("**🎓 Education**")
            for edu in resume["education"]:
                st.markdown(f"- {edu['degree']} {edu['institution']} {edu['year']}".strip())

        if resume["certifications"]:
            st.markdown("**📜 Certifications**")
            for cert in resume["certifications"]:
                st.markdown(f"- {cert['name']} {cert['issuer']} {cert['date']}".strip())

        if resume["languages"]:
            st.markdown("**🌍 Languages**")
            st.markdown(", ".join(
                f"{lang['name']} ({lang['proficiency']})" if lang["proficiency"] else lang["name"]
                for lang in resume["languages"]
            ))

    with tab_report:
        report_html = render_report(result)
        st.components.v1.html(report_html, height=700, scrolling=True)
        st.download_button(
            label="📥 Download report",
            data=report_html,
            file_name="resume_report.html",
            mime="text/html",
        )

    st.download_button(
        label="📥 Download JSON",
        data=json.dumps(result.to_dict(), ensure_ascii=False, indent=2),
        file_name="resume.json",
        mime="application/json",
    )

    st.divider()
    st.subheader("✨ Enhance with AI")
    if st.button("Generate improved content", type="primary"):
        with st.spinner("Rewriting summary and experience..."):
            st.session_state.enhancement = enhance_resume(resume, orchestrator.client, orchestrator.settings)

    enhancement = st.session_state.enhancement
    if enhancement:
        st.markdown(f"**Summary:** {enhancement['enhancedSummary']}")
        for item in enhancement["improvedExperiences"]:
            st.markdown(f"- {item['description']}")
        if enhancement["skillSuggestions"]:
            st.markdown("**Suggested skills:** " + ", ".join(enhancement["skillSuggestions"]))

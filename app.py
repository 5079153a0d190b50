"""
Legal-Ease AI - Streamlit Application

Interactive search interface over simulated legal cases, showing the
advocate who handled each matching case.
"""

import html
from typing import Optional

import streamlit as st

from config import get_settings
from corpus import Advocate, CaseRecord, CorpusLoadError, load_corpus
from search import LegalSearchEngine

# ─── Page Config ─────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="Legal-Ease AI",
    page_icon="⚖️",
    layout="wide",
    initial_sidebar_state="expanded",
)

# ─── Custom CSS ──────────────────────────────────────────────────────────────

st.markdown("""
<style>
    .case-card {
        background-color: #f8f9fa;
        border-radius: 10px;
        padding: 20px;
        margin-bottom: 15px;
        border-left: 4px solid #1E88E5;
    }
    .case-title {
        font-size: 1.2em;
        font-weight: 600;
        color: #1E88E5;
        margin-bottom: 5px;
    }
    .case-meta {
        color: #666;
        font-size: 0.9em;
        margin-bottom: 10px;
    }
    .case-snippet {
        color: #333;
        line-height: 1.6;
    }
    .relevance-badge {
        background-color: #4CAF50;
        color: white;
        padding: 2px 8px;
        border-radius: 12px;
        font-size: 0.8em;
    }
    .keyword-tag {
        background-color: #E3F2FD;
        color: #1565C0;
        padding: 2px 8px;
        border-radius: 12px;
        font-size: 0.8em;
        margin-right: 4px;
    }
</style>
""", unsafe_allow_html=True)


# ─── Data Loading ────────────────────────────────────────────────────────────

@st.cache_resource
def load_search_engine() -> LegalSearchEngine:
    """Load the corpus once and bind the search engine to it."""
    store = load_corpus(get_settings().data_path)
    return LegalSearchEngine(store)


# ─── Main App ────────────────────────────────────────────────────────────────

def main():
    try:
        engine = load_search_engine()
    except CorpusLoadError as e:
        st.error(f"Could not load legal cases data: {e}")
        st.stop()

    store = engine.store

    # ─── Sidebar ─────────────────────────────────────────────────────────────

    with st.sidebar:
        st.title("⚖️ Legal-Ease AI")
        st.markdown("---")

        stats = engine.get_stats()

        col1, col2 = st.columns(2)
        with col1:
            st.metric("Cases", f"{stats['total_cases']:,}")
        with col2:
            st.metric("Advocates", stats['total_advocates'])

        st.markdown("---")

        st.subheader("Suggestions")
        suggestion = st.selectbox(
            "Search by keyword",
            [""] + store.suggestions(),
            format_func=lambda k: k or "Pick a keyword...",
        )

        st.markdown("---")
        st.caption(
            "⚠️ This is a simulated educational tool. All legal content "
            "is fictional and for demonstration only."
        )

    # ─── Main Content ────────────────────────────────────────────────────────

    st.title("🔍 Find Similar Legal Cases")
    st.markdown("Describe your legal problem and we'll match it to past cases")

    query = st.text_input(
        "Search",
        value=suggestion,
        placeholder="e.g. landlord kept my security deposit...",
        label_visibility="collapsed"
    )

    if query:
        matches = engine.search(query)

        st.markdown(f"### Found {len(matches)} matching cases")

        if matches:
            for match in matches:
                render_case_card(
                    match.case,
                    engine.advocate_for(match),
                    score=match.relevance_score,
                )
        else:
            st.info("No matching cases. Try describing the problem with different words.")

    else:
        st.markdown("### 📚 Browse Cases")
        st.markdown("Enter a description above, or browse the case library:")

        for case in store.cases:
            render_case_card(case, store.find_advocate_by_id(case.advocate_id))


def render_case_card(case: CaseRecord, advocate: Optional[Advocate], score: Optional[int] = None):
    """Render a case as a styled card."""
    title = html.escape(str(case.extra.get('title', f'Case #{case.id}')))
    category = html.escape(str(case.extra.get('category', 'General')))
    badge = f' | <span class="relevance-badge">Score {score}</span>' if score is not None else ''
    tags = "".join(
        f'<span class="keyword-tag">{html.escape(k)}</span>' for k in case.keywords
    )

    with st.container():
        st.markdown(f"""
        <div class="case-card">
            <div class="case-title">{title}</div>
            <div class="case-meta">
                📋 Case #{case.id} |
                🏷️ {category}
                {badge}
            </div>
            <div class="case-snippet">{html.escape(case.problem_statement)}</div>
            <div style="margin-top: 10px;">{tags}</div>
        </div>
        """, unsafe_allow_html=True)

        with st.expander("View Law and Advocate"):
            law = case.simulated_law
            if law.get('title'):
                st.markdown(f"**Law:** {law['title']} {law.get('section', '')}")
            st.markdown(case.law_explanation)
            if case.extra.get('outcome'):
                st.markdown(f"**Outcome:** {case.extra['outcome']}")
            st.markdown("---")
            if advocate:
                st.markdown(f"**Advocate:** {advocate.name}")
                st.markdown(f"**Specialization:** {advocate.specialization}")
                if advocate.extra.get('experience_years'):
                    st.markdown(f"**Experience:** {advocate.extra['experience_years']} years")
            else:
                st.markdown("*Advocate information not available*")


if __name__ == "__main__":
    main()

"""
app.py
======
Streamlit web UI for Detective Casebook.

Responsibilities:
  - Configure and render the Streamlit page (layout, dark-noir theme).
  - Open the case session once per browser session and wire its
    notifications to toasts.
  - Render the sidebar (case progress, career stars, start over).
  - Render the tabs: Scene, Clues, Suspects, Notebook, Deduction.

This file contains only UI logic. All progression logic lives in
game_engine.py and the components it wires; all narrative data lives in
case files / case_data.py; all formatting lives in ui_helpers.py.

Run with:
    streamlit run app.py
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

import streamlit as st
from dotenv import load_dotenv

# Load .env before any engine code runs so DETECTIVE_* overrides apply.
load_dotenv()

# ---------------------------------------------------------------------------
# Logging configuration
#
# basicConfig is called here, the Streamlit entry point, so it runs once per
# process however many times Streamlit reruns the script. Every module under
# "detective.*" emits to this handler through the logger hierarchy.
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("detective.app")

from case_loader import available_case_ids
from config import GAME_CONFIG
from errors import CaseError
from event_bus import (
    CASE_COMPLETED,
    CLUE_COLLECTED,
    CLUE_MARKED_IMPORTANT,
    CLUE_UNLOCKED,
    DEDUCTION_SUBMITTED,
    QUESTION_UNLOCKED,
)
from game_engine import CaseSession
from models import TimelineEntryType
from ui_helpers import (
    build_css,
    describe_draft,
    entry_icon,
    format_stars,
    toast_for_event,
)


# ============================================================
# PAGE CONFIGURATION
# ============================================================

st.set_page_config(
    page_title="Detective Casebook",
    page_icon="🔍",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown(
    f"<style>{build_css()}</style><div class='vignette'></div>",
    unsafe_allow_html=True,
)


# ============================================================
# SESSION STATE
# ============================================================

_TOAST_EVENTS = (
    CLUE_COLLECTED, CLUE_UNLOCKED, QUESTION_UNLOCKED,
    CLUE_MARKED_IMPORTANT, CASE_COMPLETED, DEDUCTION_SUBMITTED,
)


def _queue_toasts(session: CaseSession) -> None:
    """
    Subscribe toast handlers. Handlers only queue text; the queue is drained
    with st.toast() on the next render pass.
    """
    for event in _TOAST_EVENTS:
        def _handler(payload: Mapping[str, Any], event: str = event) -> None:
            text = toast_for_event(event, payload)
            if text:
                st.session_state.toasts.append(text)
        session.bus.subscribe(event, _handler)


def open_case(case_id: str) -> None:
    """Open ``case_id`` and reset all per-case UI state."""
    old = st.session_state.get("session")
    if old is not None:
        old.close()
    session = CaseSession.open(case_id)
    _queue_toasts(session)
    st.session_state.session       = session
    st.session_state.case_id       = case_id
    st.session_state.last_answer   = None
    st.session_state.last_result   = None
    st.session_state.current_suspect = (
        session.catalog.suspects[0].id if session.catalog.suspects else None
    )


def init_session_state() -> None:
    """
    Initialise Streamlit session state on first run.

    Uses a defaults dict so new keys can be added in one place.
    """
    defaults: dict = {
        "toasts":          [],
        "session":         None,
        "case_id":         None,
        "current_suspect": None,
        "last_answer":     None,
        "last_result":     None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value
    if st.session_state.session is None:
        open_case(GAME_CONFIG.default_case_id)


def drain_toasts() -> None:
    for text in st.session_state.toasts:
        st.toast(text)
    st.session_state.toasts = []


# ============================================================
# SIDEBAR
# ============================================================

def render_sidebar(session: CaseSession) -> None:
    st.sidebar.markdown(
        '<div class="sidebar-header">🗂️ CASE FILE</div>', unsafe_allow_html=True
    )

    case_ids = available_case_ids()
    current  = st.session_state.case_id
    chosen = st.sidebar.selectbox(
        "Case", case_ids, index=case_ids.index(current) if current in case_ids else 0
    )
    if chosen != current:
        open_case(chosen)
        st.rerun()

    total     = len(session.catalog.clues)
    collected = len(session.progress.collected_clue_ids)
    st.sidebar.markdown(f"**Clues:** {collected}/{total}")
    st.sidebar.progress(collected / total if total else 0.0)

    asked = len(session.progress.asked_question_ids)
    st.sidebar.markdown(f"**Questions asked:** {asked}")
    st.sidebar.markdown(f"**Notebook entries:** {session.timeline_count()}")

    career = session.career()
    stars  = career.case_stars.get(session.case_id)
    if stars is not None:
        st.sidebar.markdown(f"**Best rating:** {format_stars(stars)}")
    st.sidebar.caption(
        f"Solved cases: {len(career.completed_cases)} · total ★ {career.total_stars}"
    )

    st.sidebar.markdown("---")
    if st.sidebar.button("🔄 Start over", use_container_width=True):
        session.start_over()
        st.session_state.last_answer = None
        st.session_state.last_result = None
        st.rerun()


# ============================================================
# TABS
# ============================================================

def render_scene(session: CaseSession) -> None:
    for scene in session.catalog.case.scenes:
        st.markdown(f"#### {scene.scene_id.replace('_', ' ').title()}")
        cols = st.columns(max(1, len(scene.hotspots)))
        for col, hotspot in zip(cols, scene.hotspots):
            searched = bool(hotspot.clue_id) and session.resolver.is_clue_collected(
                hotspot.clue_id
            )
            label = f"{'✔ ' if searched else '🔎 '}{hotspot.label or hotspot.hotspot_id}"
            if col.button(label, key=f"hs_{hotspot.hotspot_id}", disabled=searched,
                          use_container_width=True):
                if not session.search_hotspot(hotspot.hotspot_id):
                    st.session_state.toasts.append("Nothing new here.")
                st.rerun()


def render_clues(session: CaseSession) -> None:
    clues = session.collected_clues()
    if not clues:
        st.info("No clues yet. Search the scene or question the suspects.")
        return
    for clue in clues:
        important = session.resolver.is_clue_important(clue.id)
        left, right = st.columns([6, 1])
        tags = " · ".join(clue.tags)
        left.markdown(
            f"<div class='clue-card{' important' if important else ''}'>"
            f"<b>{clue.name}</b><br>{clue.description}"
            f"<div class='clue-tags'>{tags}</div></div>",
            unsafe_allow_html=True,
        )
        if right.button("★" if important else "☆", key=f"imp_{clue.id}"):
            session.toggle_important(clue.id)
            st.rerun()


def render_suspects(session: CaseSession) -> None:
    suspects = session.catalog.suspects
    names = {s.id: s.name for s in suspects}
    ids = list(names)
    current = st.session_state.current_suspect
    suspect_id = st.radio(
        "Suspect",
        ids,
        index=ids.index(current) if current in ids else 0,
        format_func=names.get,
        horizontal=True,
    )
    if suspect_id != current:
        st.session_state.current_suspect = suspect_id
        st.session_state.last_answer = None

    suspect = session.catalog.get_suspect(suspect_id)
    st.caption(suspect.bio)

    for question in session.available_questions(suspect_id):
        asked = session.resolver.is_question_asked(suspect_id, question.id)
        label = f"{'✓ ' if asked else ''}{question.text}"
        if st.button(label, key=f"q_{suspect_id}_{question.id}", use_container_width=True):
            result = session.ask_question(suspect_id, question.id)
            st.session_state.last_answer = (suspect.name, result.question.text, result.answer)
            st.rerun()

    if st.session_state.last_answer:
        name, text, answer = st.session_state.last_answer
        st.markdown(f"**Q:** {text}")
        st.markdown(
            f"<div class='answer-bubble'><b>{name}:</b> {answer}</div>",
            unsafe_allow_html=True,
        )


def render_notebook(session: CaseSession) -> None:
    kinds = ["All"] + [k.value for k in TimelineEntryType]
    choice = st.selectbox("Show", kinds)
    kind = None if choice == "All" else TimelineEntryType(choice)
    for entry in session.timeline_entries(kind):
        st.markdown(
            f"<div class='timeline-entry'><span class='timeline-stamp'>"
            f"{entry.timestamp}</span>{entry_icon(entry)} {entry.description}</div>",
            unsafe_allow_html=True,
        )


def render_deduction(session: CaseSession) -> None:
    catalog = session.catalog
    draft   = session.draft

    def _select(label, options, current, key):
        ids = [None] + [o[0] for o in options]
        texts = dict(options)
        return st.selectbox(
            label, ids,
            index=ids.index(current) if current in ids else 0,
            format_func=lambda v: "— choose —" if v is None else texts[v],
            key=key,
        )

    with st.form("deduction"):
        killer = _select("Killer", [(s.id, s.name) for s in catalog.suspects],
                         draft.killer_id, "d_killer")
        motive = _select("Motive", [(m.id, m.text) for m in catalog.motives],
                         draft.motive_id, "d_motive")
        weapon = _select("Weapon", [(w.id, w.text) for w in catalog.weapons],
                         draft.weapon_id, "d_weapon")
        evidence = _select("Key evidence",
                           [(e.id, e.text) for e in catalog.key_evidence_options()],
                           draft.key_evidence_id, "d_evidence")
        save_col, submit_col = st.columns(2)
        save   = save_col.form_submit_button("💾 Save draft", use_container_width=True)
        submit = submit_col.form_submit_button("⚖️ Accuse", type="primary",
                                               use_container_width=True)

    if save or submit:
        session.deduction.update_draft(
            killer_id=killer, motive_id=motive, weapon_id=weapon, key_evidence_id=evidence,
        )
    if submit:
        st.session_state.last_result = session.submit_deduction()

    if st.button("Clear selections"):
        session.clear_selections()
        st.session_state.last_result = None
        st.rerun()

    result = st.session_state.last_result
    if result is None:
        with st.expander("Current draft"):
            for label, value in describe_draft(catalog, session.draft).items():
                st.markdown(f"**{label}:** {value}")
        return

    if not result.complete:
        st.warning(result.explanation)
    elif result.correct:
        stars = session.career().case_stars.get(session.case_id, 0)
        st.markdown(f"<div class='star-rating'>{format_stars(stars)}</div>",
                    unsafe_allow_html=True)
        st.markdown(f"<div class='verdict-solved'>{result.explanation}</div>",
                    unsafe_allow_html=True)
    else:
        st.markdown(f"<div class='verdict-wrong'>{result.explanation}</div>",
                    unsafe_allow_html=True)


# ============================================================
# MAIN
# ============================================================

def main() -> None:
    try:
        init_session_state()
    except CaseError as exc:
        logger.error("Could not open case: %s", exc)
        st.error(f"Could not open case: {exc}")
        return

    session: CaseSession = st.session_state.session
    render_sidebar(session)

    st.markdown(f"<h1 class='main-header'>{session.catalog.case.title}</h1>",
                unsafe_allow_html=True)
    st.markdown(f"<div class='case-file'>{session.catalog.case.intro_text}</div>",
                unsafe_allow_html=True)

    tabs = st.tabs(["🏚️ Scene", "🔍 Clues", "👥 Suspects", "📓 Notebook", "⚖️ Deduction"])
    renderers = (render_scene, render_clues, render_suspects, render_notebook,
                 render_deduction)
    for tab, render in zip(tabs, renderers):
        with tab:
            try:
                render(session)
            except CaseError as exc:
                logger.error("UI action failed: %s", exc)
                st.error(str(exc))

    drain_toasts()


main()

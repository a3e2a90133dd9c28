"""
ui_helpers.py
=============
Stateless presentation helpers shared by the CLI and the Streamlit UI.

These functions format engine objects for display but carry no game state of
their own; they receive everything as arguments. Keeping them separate from
app.py means they can be imported and tested without a Streamlit session.

Contains:
  - entry_icon() / format_entry() : notebook lines
  - format_clue()                 : one-line clue summary with importance star
  - format_stars()                : ★★☆ rating strings
  - describe_draft()              : human-readable accusation draft
  - toast_for_event()             : toast text for engine notifications
  - build_css()                   : the dark-noir CSS string
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from case_loader import CaseCatalog
from errors import NotFound
from event_bus import (
    CASE_COMPLETED,
    CLUE_COLLECTED,
    CLUE_MARKED_IMPORTANT,
    CLUE_UNLOCKED,
    DEDUCTION_SUBMITTED,
    QUESTION_UNLOCKED,
)
from models import Clue, DeductionDraft, TimelineEntry, TimelineEntryType


# ---------------------------------------------------------------------------
# Notebook
# ---------------------------------------------------------------------------

_ENTRY_ICONS: Dict[TimelineEntryType, str] = {
    TimelineEntryType.CASE_STARTED:      "📁",
    TimelineEntryType.CLUE_FOUND:        "🔍",
    TimelineEntryType.CLUE_UNLOCKED:     "🗝️",
    TimelineEntryType.QUESTION_ASKED:    "💬",
    TimelineEntryType.QUESTION_UNLOCKED: "❓",
    TimelineEntryType.DEDUCTION_MADE:    "⚖️",
}


def entry_icon(entry: TimelineEntry) -> str:
    """Icon for a notebook entry. Successful deductions get a check mark."""
    if entry.kind == TimelineEntryType.DEDUCTION_MADE:
        return "✅" if entry.related_id == "True" else "❌"
    return _ENTRY_ICONS.get(entry.kind, "•")


def format_entry(entry: TimelineEntry) -> str:
    """
    One notebook line.

    Example:
        [23:15] 🔍 Found clue: Sooty Candlestick
    """
    stamp = f"[{entry.timestamp}] " if entry.timestamp else ""
    return f"{stamp}{entry_icon(entry)} {entry.description}"


# ---------------------------------------------------------------------------
# Clues, ratings, drafts
# ---------------------------------------------------------------------------

def format_clue(clue: Clue, important: bool = False) -> str:
    star = "★ " if important else "  "
    return f"{star}{clue.name} ({clue.id})"


def format_stars(stars: int, max_stars: int = 3) -> str:
    stars = max(0, min(max_stars, stars))
    return "★" * stars + "☆" * (max_stars - stars)


def _label(catalog: CaseCatalog, field: str, value: Optional[str]) -> str:
    if not value:
        return "—"
    try:
        if field == "killer_id":
            return catalog.get_suspect(value).name
        if field == "motive_id":
            return catalog.get_motive(value).text
        if field == "weapon_id":
            return catalog.get_weapon(value).text
    except NotFound:
        return value
    for option in catalog.key_evidence_options():
        if option.id == value:
            return option.text
    return value


def describe_draft(catalog: CaseCatalog, draft: DeductionDraft) -> Dict[str, str]:
    """
    Map each accusation field to a display label ("—" when unset).

    Returns:
        Ordered dict: Killer, Motive, Weapon, Key evidence.
    """
    return {
        "Killer":       _label(catalog, "killer_id", draft.killer_id),
        "Motive":       _label(catalog, "motive_id", draft.motive_id),
        "Weapon":       _label(catalog, "weapon_id", draft.weapon_id),
        "Key evidence": _label(catalog, "key_evidence_id", draft.key_evidence_id),
    }


# ---------------------------------------------------------------------------
# Toasts
# ---------------------------------------------------------------------------

def toast_for_event(event: str, payload: Mapping[str, Any]) -> Optional[str]:
    """
    Short toast text for an engine notification, or None for events that
    don't deserve one.
    """
    if event == CLUE_COLLECTED:
        return f"🔍 Found: {payload['clue'].name}"
    if event == CLUE_UNLOCKED:
        return f"🗝️ New clue: {payload['clue'].name}"
    if event == QUESTION_UNLOCKED:
        return "❓ New question unlocked"
    if event == CLUE_MARKED_IMPORTANT:
        return "★ Marked important" if payload["is_important"] else "☆ Unmarked"
    if event == CASE_COMPLETED:
        return "🎉 Case solved!"
    if event == DEDUCTION_SUBMITTED and not payload["correct"]:
        return "❌ Not quite. Keep investigating."
    return None


# ---------------------------------------------------------------------------
# Dark-noir CSS
# ---------------------------------------------------------------------------

def build_css() -> str:
    """
    Return the dark-noir CSS string injected into the Streamlit app.

    Returns:
        A raw CSS string (without <style> tags; the caller wraps it).
    """
    return """
    @import url('https://fonts.googleapis.com/css2?family=Special+Elite&family=Courier+Prime:wght@400;700&display=swap');

    html, body, .stApp, .main, .block-container {
        background: linear-gradient(180deg, #0a0a0a 0%, #141414 60%, #0d0d0d 100%) !important;
        color: #c0c0c0 !important;
    }
    section[data-testid="stSidebar"], [data-testid="stSidebarContent"] {
        background-color: #0d0d0d !important;
        border-right: 1px solid #222 !important;
    }

    .main-header {
        text-align: center; color: #8B0000;
        font-family: 'Special Elite', cursive;
        text-shadow: 2px 2px 4px #000; letter-spacing: 3px;
    }
    .sub-header {
        text-align: center; color: #666;
        font-family: 'Courier Prime', monospace; font-style: italic;
    }
    .sidebar-header {
        color: #8B0000; font-family: 'Special Elite', cursive;
        letter-spacing: 2px; text-align: center; padding: 10px;
        border-bottom: 1px solid #333;
    }

    .case-file {
        background: linear-gradient(145deg, #1a1a1a, #2d2d2d);
        padding: 25px; border-radius: 5px;
        border-left: 4px solid #8B0000;
        font-family: 'Courier Prime', monospace;
    }
    .clue-card {
        background: linear-gradient(145deg, #1a1a1a, #252525);
        padding: 12px 15px; border-radius: 6px; margin: 8px 0;
        border: 1px solid #333;
    }
    .clue-card.important { border-color: #b8860b; box-shadow: 0 0 8px rgba(184,134,11,0.3); }
    .clue-tags { color: #777; font-size: 0.85em; }

    .answer-bubble {
        background-color: #1a1a1a; border-left: 3px solid #8B0000;
        padding: 10px 14px; margin: 6px 0 14px 0;
        font-family: 'Special Elite', cursive; line-height: 1.7;
    }

    .timeline-entry {
        font-family: 'Courier Prime', monospace;
        border-bottom: 1px dashed #2a2a2a; padding: 6px 0;
    }
    .timeline-stamp { color: #8B0000; margin-right: 8px; }

    .verdict-solved, .verdict-wrong {
        padding: 20px; border-radius: 6px; text-align: center;
        font-family: 'Special Elite', cursive; white-space: pre-wrap;
    }
    .verdict-solved { border: 2px solid #2e7d32; color: #a5d6a7; }
    .verdict-wrong  { border: 2px solid #8B0000; color: #ef9a9a; }
    .star-rating    { font-size: 48px; color: #b8860b; text-align: center; }

    .stButton > button {
        background: linear-gradient(145deg, #2d2d2d, #1a1a1a);
        color: #c0c0c0; border: 1px solid #444;
        font-family: 'Courier Prime', monospace;
    }
    .stButton > button:hover { border-color: #8B0000; color: #8B0000; }
    .stButton > button[kind="primary"] {
        background: linear-gradient(145deg, #8B0000, #5a0000); color: #fff; border: none;
    }
    .stProgress > div > div { background-color: #8B0000 !important; }

    .vignette {
        position: fixed; top: 0; left: 0; width: 100%; height: 100%;
        pointer-events: none;
        background: radial-gradient(ellipse at center, transparent 40%, rgba(0,0,0,0.6) 100%);
        z-index: 0;
    }
"""

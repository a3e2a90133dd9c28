"""
config.py
=========
Central configuration module for Detective Casebook.

All tunable constants, storage keys, timeline formatting, and star-rating
thresholds live here so they can be adjusted without touching engine logic.

A handful of paths can be overridden from the environment (or a ``.env``
file loaded by the entry point):

    DETECTIVE_SAVE_DIR      — directory holding per-case save blobs
    DETECTIVE_CASES_DIR     — directory holding ``<case_id>.json`` case files
    DETECTIVE_DEFAULT_CASE  — case opened when the client is given none

Usage:
    from config import STORAGE_CONFIG, TIMELINE_CONFIG, SCORING_CONFIG, GAME_CONFIG
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StorageConfig:
    """
    Keys and locations used by the progress store.

    Attributes:
        save_dir:         Directory used by JsonFileStore for save blobs.
        save_key_prefix:  Prefix prepended to a case id to form its save key.
        career_key:       Key of the cross-case record (completed cases, stars).
        last_case_key:    Key remembering the most recently loaded case id.
    """
    save_dir:        str = field(
        default_factory=lambda: os.environ.get("DETECTIVE_SAVE_DIR", ".saves")
    )
    save_key_prefix: str = "detective_game_"
    career_key:      str = "detective_game_progress"
    last_case_key:   str = "detective_game_last_case"


# ---------------------------------------------------------------------------
# Timeline
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TimelineConfig:
    """
    Formatting of notebook (timeline) entries.

    Attributes:
        question_preview_chars: Maximum length of the question text quoted in a
                                QuestionAsked entry, ellipsis included.
        timestamp_format:       strftime format for entry timestamps. Display
                                precision only; ordering is insertion order.
    """
    question_preview_chars: int = 40
    timestamp_format:       str = "%H:%M"


# ---------------------------------------------------------------------------
# Star rating
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScoringConfig:
    """
    Thresholds for the 0-3 star rating awarded when a case is solved.

    Attributes:
        max_stars:              Rating for a flawless solve.
        free_wrong_attempts:    Wrong submissions tolerated before losing a star.
        attempts_per_star:      Further wrong submissions that cost one more star.
        thorough_clue_ratio:    Share of the case's clues that must have been
                                collected to keep the top star.
    """
    max_stars:           int   = 3
    free_wrong_attempts: int   = 0
    attempts_per_star:   int   = 2
    thorough_clue_ratio: float = 0.75


# ---------------------------------------------------------------------------
# Game
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GameConfig:
    """
    Top-level settings shared by both clients.

    Attributes:
        cases_dir:        Directory searched for ``<case_id>.json`` files before
                          falling back to the built-in cases.
        default_case_id:  Case opened when none is given.
        deduction_fields: Number of fields in a complete accusation.
    """
    cases_dir:        str = field(
        default_factory=lambda: os.environ.get("DETECTIVE_CASES_DIR", "cases")
    )
    default_case_id:  str = field(
        default_factory=lambda: os.environ.get("DETECTIVE_DEFAULT_CASE", "case_001")
    )
    deduction_fields: int = 4


# ---------------------------------------------------------------------------
# Singleton instances (import-ready)
# ---------------------------------------------------------------------------

STORAGE_CONFIG  = StorageConfig()
TIMELINE_CONFIG = TimelineConfig()
SCORING_CONFIG  = ScoringConfig()
GAME_CONFIG     = GameConfig()

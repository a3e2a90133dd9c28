"""
timeline.py
===========
The Timeline Recorder: the detective's notebook.

Entries are appended to a Progress instance and never reordered or removed.
The recorder does not persist anything itself; the component that owns the
mutation (unlock_resolver.py, deduction.py, progress_store.py) persists the
Progress once its whole operation has succeeded.

The clock is injectable so tests can pin timestamps.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, List, Optional

from config import TIMELINE_CONFIG
from models import Clue, Progress, Question, Suspect, TimelineEntry, TimelineEntryType

Clock = Callable[[], datetime]


def truncate_text(text: str, max_length: int) -> str:
    """
    Shorten ``text`` to at most ``max_length`` characters.

    Longer text keeps its first ``max_length - 3`` characters followed by
    "...".

    Example:
        >>> truncate_text("Where were you when Victor died last night?", 20)
        'Where were you wh...'
    """
    if not text:
        return ""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


class TimelineRecorder:
    """Builds and appends notebook entries; answers timeline queries."""

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or datetime.now

    def _timestamp(self) -> str:
        return self._clock().strftime(TIMELINE_CONFIG.timestamp_format)

    def _append(
        self,
        progress: Progress,
        kind: TimelineEntryType,
        description: str,
        related_id: str,
    ) -> TimelineEntry:
        entry = TimelineEntry(
            kind=kind,
            description=description,
            timestamp=self._timestamp(),
            related_id=related_id,
        )
        progress.timeline_entries.append(entry)
        return entry

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def case_started(self, progress: Progress) -> TimelineEntry:
        return self._append(
            progress, TimelineEntryType.CASE_STARTED,
            "Investigation started", progress.case_id,
        )

    def clue_found(self, progress: Progress, clue: Clue) -> TimelineEntry:
        return self._append(
            progress, TimelineEntryType.CLUE_FOUND,
            f"Found clue: {clue.name}", clue.id,
        )

    def clue_unlocked(
        self, progress: Progress, clue: Clue, suspect: Suspect
    ) -> TimelineEntry:
        return self._append(
            progress, TimelineEntryType.CLUE_UNLOCKED,
            f"Learned from {suspect.name}: {clue.name}", clue.id,
        )

    def question_asked(
        self, progress: Progress, suspect: Suspect, question: Question
    ) -> TimelineEntry:
        preview = truncate_text(question.text, TIMELINE_CONFIG.question_preview_chars)
        return self._append(
            progress, TimelineEntryType.QUESTION_ASKED,
            f'Asked {suspect.name}: "{preview}"', question.id,
        )

    def question_unlocked(
        self, progress: Progress, suspect: Suspect, question: Question
    ) -> TimelineEntry:
        preview = truncate_text(question.text, TIMELINE_CONFIG.question_preview_chars)
        return self._append(
            progress, TimelineEntryType.QUESTION_UNLOCKED,
            f'New question for {suspect.name}: "{preview}"', question.id,
        )

    def deduction_made(self, progress: Progress, correct: bool) -> TimelineEntry:
        description = "Case solved!" if correct else "Deduction was not correct"
        return self._append(
            progress, TimelineEntryType.DEDUCTION_MADE, description, str(correct),
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @staticmethod
    def entries(progress: Progress) -> List[TimelineEntry]:
        """All entries, oldest first. Returns a copy."""
        return list(progress.timeline_entries)

    @staticmethod
    def entries_of_kind(
        progress: Progress, kind: TimelineEntryType
    ) -> List[TimelineEntry]:
        return [e for e in progress.timeline_entries if e.kind == kind]

    @staticmethod
    def count(progress: Progress) -> int:
        return len(progress.timeline_entries)

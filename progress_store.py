"""
progress_store.py
=================
The Progress Store: loads, persists, and clears per-case player progress.

Each case's Progress lives under ``<save_key_prefix><case_id>`` in a
KeyValueStore as the JSON blob described in models.Progress. A separate
career record tracks which cases have been solved and their best star
rating across every case.

Public API summary:
    store = ProgressStore(MemoryStore())
    store.load(case_id)                 → Progress (fresh default if absent)
    store.persist(progress)             → None
    store.clear(case_id)                → None
    store.has_save(case_id)             → bool
    store.last_case_id()                → str | None
    store.career()                      → CareerRecord
    store.complete_case(case_id, stars) → CareerRecord
    store.reset_all()                   → None

Every failure of the storage medium, including a save blob that can no
longer be decoded, surfaces as PersistenceUnavailable.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from pydantic import ValidationError

from config import STORAGE_CONFIG
from errors import PersistenceUnavailable
from models import CareerRecord, Progress
from storage import KeyValueStore
from timeline import TimelineRecorder

logger = logging.getLogger("detective.progress_store")


class ProgressStore:
    """
    Maps case ids to persisted Progress blobs.

    Attributes:
        backend:  The raw key-value medium.
        timeline: Recorder used to seed new saves with a CaseStarted entry.
    """

    def __init__(
        self,
        backend: KeyValueStore,
        timeline: Optional[TimelineRecorder] = None,
    ) -> None:
        self.backend  = backend
        self.timeline = timeline or TimelineRecorder()

    @staticmethod
    def _key(case_id: str) -> str:
        return f"{STORAGE_CONFIG.save_key_prefix}{case_id}"

    # ------------------------------------------------------------------
    # Per-case progress
    # ------------------------------------------------------------------

    def new_progress(self, case_id: str) -> Progress:
        """Build (without persisting) a fresh Progress with a CaseStarted entry."""
        progress = Progress(case_id=case_id)
        self.timeline.case_started(progress)
        return progress

    def load(self, case_id: str) -> Progress:
        """
        Load progress for ``case_id``, creating and persisting a default
        instance when no save exists.

        Loading twice without an intervening mutation returns equal state.

        Raises:
            PersistenceUnavailable: The medium failed or the blob is corrupt.
        """
        blob = self.backend.get(self._key(case_id))

        if blob is None:
            progress = self.new_progress(case_id)
            self.persist(progress)
            logger.info("Created new save for case %s", case_id)
        else:
            try:
                progress = Progress.from_blob(blob)
            except ValidationError as exc:
                logger.error("Save for case %s is corrupt: %s", case_id, exc)
                raise PersistenceUnavailable(
                    f"Save data for case {case_id!r} could not be decoded"
                ) from exc
            if progress.case_id and progress.case_id != case_id:
                logger.warning(
                    "Save under %s declares caseId=%r; using %r.",
                    self._key(case_id), progress.case_id, case_id,
                )
            progress.case_id = case_id
            logger.debug(
                "Loaded save for case %s (%d timeline entries)",
                case_id, len(progress.timeline_entries),
            )

        self.backend.set(STORAGE_CONFIG.last_case_key, case_id)
        return progress

    def persist(self, progress: Progress) -> None:
        """
        Write ``progress`` to the medium under its case id.

        Raises:
            PersistenceUnavailable: The write failed; nothing was saved.
        """
        self.backend.set(self._key(progress.case_id), progress.to_blob())
        logger.debug("Saved progress for case %s", progress.case_id)

    @contextmanager
    def transaction(self, progress: Progress) -> Iterator[Progress]:
        """
        Mutate a working copy of ``progress`` and commit it atomically.

        The body edits the yielded copy. When the body finishes, the copy is
        persisted and only then copied back into ``progress``. If the body
        raises or the write fails, ``progress`` and the saved blob both keep
        their previous state.

        Usage:
            with store.transaction(progress) as working:
                working.collected_clue_ids.append(clue_id)
        """
        working = progress.model_copy(deep=True)
        yield working
        self.persist(working)
        for name in Progress.model_fields:
            setattr(progress, name, getattr(working, name))

    def clear(self, case_id: str) -> None:
        """Delete the save for ``case_id``. Clearing a missing save is a no-op."""
        self.backend.delete(self._key(case_id))
        logger.info("Cleared progress for case %s", case_id)

    def has_save(self, case_id: str) -> bool:
        return self.backend.has(self._key(case_id))

    def last_case_id(self) -> Optional[str]:
        """The case most recently passed to load(), if any."""
        return self.backend.get(STORAGE_CONFIG.last_case_key)

    # ------------------------------------------------------------------
    # Career record
    # ------------------------------------------------------------------

    def career(self) -> CareerRecord:
        """
        Cross-case record of solved cases. An unreadable record is logged and
        replaced by an empty one, since it only feeds menus.
        """
        blob = self.backend.get(STORAGE_CONFIG.career_key)
        if blob is None:
            return CareerRecord()
        try:
            return CareerRecord.model_validate_json(blob)
        except ValidationError as exc:
            logger.warning("Career record is corrupt, starting a new one: %s", exc)
            return CareerRecord()

    def complete_case(self, case_id: str, stars: int) -> CareerRecord:
        """Mark ``case_id`` solved, keeping the best star rating seen so far."""
        record = self.career()
        if case_id not in record.completed_cases:
            record.completed_cases.append(case_id)
        record.case_stars[case_id] = max(record.case_stars.get(case_id, 0), stars)
        self.backend.set(
            STORAGE_CONFIG.career_key, record.model_dump_json(by_alias=True)
        )
        logger.info(
            "Case %s completed — stars=%d (best=%d)",
            case_id, stars, record.case_stars[case_id],
        )
        return record

    def reset_all(self) -> None:
        """Delete every case save, the career record, and the last-case marker."""
        prefix = STORAGE_CONFIG.save_key_prefix
        for key in self.backend.keys():
            if key.startswith(prefix):
                self.backend.delete(key)
        logger.info("All saved progress cleared.")

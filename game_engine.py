"""
game_engine.py
==============
Case progression engine for Detective Casebook.

Contains:
  CaseSession — the single orchestrating class that wires the catalog,
                progress store, unlock resolver, deduction verifier, timeline
                recorder, and event bus for one open case, and exposes a clean
                API consumed by both the Streamlit UI (app.py) and the CLI
                runner (cli.py).

Nothing here is a global: every collaborator is passed in, so tests build a
session over a MemoryStore and a hand-written catalog.

Public API summary:
    session = CaseSession.open("case_001", store=ProgressStore(JsonFileStore(".saves")))
    session.search_hotspot(hotspot_id)             → bool
    session.collect_clue(clue_id)                  → bool
    session.toggle_important(clue_id)              → bool
    session.available_questions(suspect_id)        → [Question]
    session.ask_question(suspect_id, question_id)  → AskResult
    session.set_killer(...) / set_motive(...) / set_weapon(...) / set_key_evidence(...)
    session.submit_deduction(draft=None)           → DeductionResult
    session.clear_selections()                     → None
    session.timeline_entries(kind=None)            → [TimelineEntry]
    session.start_over()                           → None
    session.close()                                → None

Logging
-------
Every significant event is emitted through the standard ``logging`` module
under the ``detective`` logger hierarchy. Configure level and destination
once at your entry point, e.g.:

    import logging
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

The logger name for this module is ``detective.game_engine``.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from case_loader import CaseCatalog, load_case
from config import STORAGE_CONFIG
from deduction import DeductionVerifier
from event_bus import EventBus
from models import (
    AskResult,
    CareerRecord,
    Clue,
    DeductionDraft,
    DeductionResult,
    Progress,
    Question,
    TimelineEntry,
    TimelineEntryType,
)
from progress_store import ProgressStore
from scoring import calculate_stars
from storage import JsonFileStore
from timeline import Clock, TimelineRecorder
from unlock_resolver import UnlockResolver

# ---------------------------------------------------------------------------
# Module-level logger
# ---------------------------------------------------------------------------
logger = logging.getLogger("detective.game_engine")


class CaseSession:
    """
    One open case: catalog, live progress, and the components acting on it.

    Attributes:
        catalog:   Read-only case content.
        store:     Progress store (owns the persistence medium).
        bus:       Notification channel for this session.
        timeline:  Notebook recorder shared by every component.
        progress:  The live Progress; replaced only by start_over().
        resolver:  Unlock resolver bound to ``progress``.
        deduction: Deduction verifier bound to ``progress``.
    """

    def __init__(
        self,
        catalog: CaseCatalog,
        store: ProgressStore,
        bus: Optional[EventBus] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.catalog  = catalog
        self.store    = store
        self.bus      = bus or EventBus()
        self.timeline = TimelineRecorder(clock)
        self.store.timeline = self.timeline

        self.progress: Progress = self.store.load(catalog.case_id)
        self._bind_components()

        logger.info(
            "CaseSession opened — case_id=%s, clues=%d/%d, timeline=%d",
            catalog.case_id,
            len(self.progress.collected_clue_ids),
            len(catalog.clues),
            len(self.progress.timeline_entries),
        )

    @classmethod
    def open(
        cls,
        case_id: str,
        store: Optional[ProgressStore] = None,
        bus: Optional[EventBus] = None,
        cases_dir: Optional[str] = None,
        clock: Optional[Clock] = None,
    ) -> "CaseSession":
        """
        Load ``case_id`` and its progress.

        Without a store, saves go to a JsonFileStore under
        STORAGE_CONFIG.save_dir.

        Raises:
            NotFound:               Unknown case id.
            CaseLoadError:          The case file is invalid.
            PersistenceUnavailable: The save could not be read or created.
        """
        catalog = load_case(case_id, cases_dir)
        if store is None:
            store = ProgressStore(JsonFileStore(STORAGE_CONFIG.save_dir))
        return cls(catalog, store, bus=bus, clock=clock)

    def _bind_components(self) -> None:
        self.resolver = UnlockResolver(
            self.catalog, self.store, self.progress, self.bus, self.timeline
        )
        self.deduction = DeductionVerifier(
            self.catalog, self.store, self.progress, self.bus, self.timeline
        )

    @property
    def case_id(self) -> str:
        return self.catalog.case_id

    # ------------------------------------------------------------------
    # Clues
    # ------------------------------------------------------------------

    def search_hotspot(self, hotspot_id: str) -> bool:
        """
        Search a scene hotspot and collect the clue hidden there.

        Returns:
            True if a clue was newly collected; False if the hotspot holds no
            clue or its clue was already collected.

        Raises:
            NotFound: Unknown hotspot, or the hotspot names an unknown clue.
        """
        hotspot = self.catalog.get_hotspot(hotspot_id)
        if not hotspot.clue_id:
            logger.debug("Hotspot %s holds no clue", hotspot_id)
            return False
        return self.resolver.collect_clue(hotspot.clue_id)

    def collect_clue(self, clue_id: str) -> bool:
        return self.resolver.collect_clue(clue_id)

    def toggle_important(self, clue_id: str) -> bool:
        return self.resolver.toggle_important(clue_id)

    def collected_clues(self) -> List[Clue]:
        return self.resolver.get_collected_clues()

    def important_clues(self) -> List[Clue]:
        return self.resolver.get_important_clues()

    # ------------------------------------------------------------------
    # Interrogation
    # ------------------------------------------------------------------

    def available_questions(self, suspect_id: str) -> List[Question]:
        return self.resolver.get_available_questions(suspect_id)

    def is_question_available(self, suspect_id: str, question_id: str) -> bool:
        return self.resolver.is_question_available(suspect_id, question_id)

    def ask_question(self, suspect_id: str, question_id: str) -> AskResult:
        return self.resolver.ask_question(suspect_id, question_id)

    # ------------------------------------------------------------------
    # Deduction
    # ------------------------------------------------------------------

    @property
    def draft(self) -> DeductionDraft:
        return self.deduction.get_draft()

    def set_killer(self, suspect_id: Optional[str]) -> DeductionDraft:
        return self.deduction.set_killer(suspect_id)

    def set_motive(self, motive_id: Optional[str]) -> DeductionDraft:
        return self.deduction.set_motive(motive_id)

    def set_weapon(self, weapon_id: Optional[str]) -> DeductionDraft:
        return self.deduction.set_weapon(weapon_id)

    def set_key_evidence(self, evidence_id: Optional[str]) -> DeductionDraft:
        return self.deduction.set_key_evidence(evidence_id)

    def clear_selections(self) -> None:
        self.deduction.clear_selections()

    def submit_deduction(
        self, draft: Optional[DeductionDraft] = None
    ) -> DeductionResult:
        """
        Submit an accusation (the persisted draft when ``draft`` is None).

        A correct accusation also records the case in the career record with
        a star rating from scoring.calculate_stars().
        """
        wrong_before = self.deduction.wrong_attempts()
        result = self.deduction.submit(draft)
        if result.correct:
            stars = calculate_stars(
                wrong_before,
                len(self.progress.collected_clue_ids),
                len(self.catalog.clues),
            )
            self.store.complete_case(self.case_id, stars)
        return result

    def career(self) -> CareerRecord:
        return self.store.career()

    # ------------------------------------------------------------------
    # Timeline
    # ------------------------------------------------------------------

    def timeline_entries(
        self, kind: Optional[TimelineEntryType] = None
    ) -> List[TimelineEntry]:
        """Notebook entries oldest first, optionally only one kind."""
        if kind is None:
            return self.timeline.entries(self.progress)
        return self.timeline.entries_of_kind(self.progress, kind)

    def timeline_count(self) -> int:
        return self.timeline.count(self.progress)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start_over(self) -> None:
        """
        Throw away this case's progress and begin again.

        The save is deleted and a fresh Progress, seeded with a single
        CaseStarted entry, is created and persisted. Subscriptions survive.
        """
        logger.info("Start over requested for case %s", self.case_id)
        self.store.clear(self.case_id)
        self.progress = self.store.load(self.case_id)
        self._bind_components()

    def close(self) -> None:
        """Tear the session down: drop every event subscription."""
        self.bus.clear()
        logger.info("CaseSession closed — case_id=%s", self.case_id)

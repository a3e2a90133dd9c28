"""
unlock_resolver.py
==================
The Unlock Resolver: what is available, asked, and collected right now, and
what changes when the detective picks up a clue or asks a question.

Public API summary:
    resolver.is_question_available(suspect_id, question_id) → bool
    resolver.get_available_questions(suspect_id)            → [Question]
    resolver.is_question_asked(suspect_id, question_id)     → bool
    resolver.is_clue_collected(clue_id)                     → bool
    resolver.is_clue_important(clue_id)                     → bool
    resolver.get_collected_clues()                          → [Clue]
    resolver.get_important_clues()                          → [Clue]
    resolver.collect_clue(clue_id)                          → bool
    resolver.toggle_important(clue_id)                      → bool
    resolver.ask_question(suspect_id, question_id)          → AskResult

Every mutation runs inside ProgressStore.transaction(), so the save blob is
rewritten before the call returns, and notifications are published only
after that write succeeded.

Clue ids in the progress sets are case-wide. Asked and unlocked questions are
stored as suspect-qualified keys (models.question_key), because question ids
are only unique within their suspect; bare ids from older saves still count
for every suspect owning that id.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from case_loader import CaseCatalog
from event_bus import (
    CLUE_COLLECTED,
    CLUE_MARKED_IMPORTANT,
    CLUE_UNLOCKED,
    QUESTION_UNLOCKED,
    EventBus,
)
from models import AskResult, Clue, Progress, Question, question_key
from progress_store import ProgressStore
from timeline import TimelineRecorder

logger = logging.getLogger("detective.unlock_resolver")


class UnlockResolver:
    """
    Availability queries and unlock effects for one open case.

    Attributes:
        catalog:  Read-only case content.
        store:    Progress store the mutations are committed through.
        progress: The live Progress of this case (shared with the session).
        bus:      Notification channel.
        timeline: Notebook recorder.
    """

    def __init__(
        self,
        catalog: CaseCatalog,
        store: ProgressStore,
        progress: Progress,
        bus: EventBus,
        timeline: Optional[TimelineRecorder] = None,
    ) -> None:
        self.catalog  = catalog
        self.store    = store
        self.progress = progress
        self.bus      = bus
        self.timeline = timeline or TimelineRecorder()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_question_available(self, suspect_id: str, question_id: str) -> bool:
        """
        True if the question is initial for its suspect or has been unlocked.

        Unknown suspect or question ids are never available.
        """
        if self.catalog.is_initial_question(suspect_id, question_id):
            return True
        if not self.catalog.has_question(suspect_id, question_id):
            return False
        return self._has_key(self.progress.unlocked_question_ids, suspect_id, question_id)

    def get_available_questions(self, suspect_id: str) -> List[Question]:
        """
        The suspect's available questions in catalog order, recomputed on
        every call.

        Raises:
            NotFound: Unknown suspect.
        """
        suspect = self.catalog.get_suspect(suspect_id)
        return [
            q for q in suspect.questions
            if self.is_question_available(suspect_id, q.id)
        ]

    @staticmethod
    def _has_key(ids: List[str], suspect_id: str, question_id: str) -> bool:
        return question_key(suspect_id, question_id) in ids or question_id in ids

    def is_question_asked(self, suspect_id: str, question_id: str) -> bool:
        return self._has_key(self.progress.asked_question_ids, suspect_id, question_id)

    def is_clue_collected(self, clue_id: str) -> bool:
        return clue_id in self.progress.collected_clue_ids

    def is_clue_important(self, clue_id: str) -> bool:
        return clue_id in self.progress.important_clue_ids

    def get_collected_clues(self) -> List[Clue]:
        """Collected clues in the order they were collected."""
        return [
            self.catalog.get_clue(cid)
            for cid in self.progress.collected_clue_ids
            if self.catalog.has_clue(cid)
        ]

    def get_important_clues(self) -> List[Clue]:
        return [
            self.catalog.get_clue(cid)
            for cid in self.progress.important_clue_ids
            if self.catalog.has_clue(cid)
        ]

    # ------------------------------------------------------------------
    # Clues
    # ------------------------------------------------------------------

    def collect_clue(self, clue_id: str) -> bool:
        """
        Put a clue in the player's possession.

        Returns:
            True if newly collected, False if it was already collected (in
            which case nothing is recorded or published).

        Raises:
            NotFound:               Unknown clue id.
            PersistenceUnavailable: The save could not be written.
        """
        clue = self.catalog.get_clue(clue_id)

        if self.is_clue_collected(clue_id):
            logger.debug("Clue already collected: %s", clue_id)
            return False

        with self.store.transaction(self.progress) as working:
            working.collected_clue_ids.append(clue_id)
            self.timeline.clue_found(working, clue)

        logger.info("Collected clue: %s (%s)", clue.name, clue_id)
        self.bus.publish(CLUE_COLLECTED, {"clue": clue})
        return True

    def toggle_important(self, clue_id: str) -> bool:
        """
        Flip the important flag of a clue.

        The clue does not have to be collected first. Uncollected clues are
        flagged all the same and the anomaly is logged.

        Returns:
            The new flag value.

        Raises:
            NotFound: Unknown clue id.
        """
        self.catalog.get_clue(clue_id)

        if not self.is_clue_collected(clue_id):
            logger.warning("Toggling importance of uncollected clue %s", clue_id)

        with self.store.transaction(self.progress) as working:
            if clue_id in working.important_clue_ids:
                working.important_clue_ids.remove(clue_id)
                is_important = False
            else:
                working.important_clue_ids.append(clue_id)
                is_important = True

        logger.info("Clue %s important=%s", clue_id, is_important)
        self.bus.publish(
            CLUE_MARKED_IMPORTANT,
            {"clue_id": clue_id, "is_important": is_important},
        )
        return is_important

    # ------------------------------------------------------------------
    # Questions
    # ------------------------------------------------------------------

    def ask_question(self, suspect_id: str, question_id: str) -> AskResult:
        """
        Ask a suspect a question and apply its unlock spec.

        Flow:
          1. Resolve suspect and question (NotFound if either is unknown).
          2. If the question is not available, log a warning and carry on;
             callers gate with is_question_available() first.
          3. On the first ask, mark it asked and record a QuestionAsked entry.
          4. For each question id the unlock spec names that is not unlocked
             yet: unlock it and record a QuestionUnlocked entry.
          5. For each clue id it names that is not collected yet: collect it
             and record a ClueUnlocked entry.
          6. Persist, then publish question:unlocked / clue:unlocked.

        Asking again returns the same answer and records nothing new.
        """
        suspect  = self.catalog.get_suspect(suspect_id)
        question = self.catalog.get_question(suspect_id, question_id)

        if not self.is_question_available(suspect_id, question_id):
            logger.warning(
                "Question %s/%s asked before it was available.",
                suspect_id, question_id,
            )

        first_time = not self.is_question_asked(suspect_id, question_id)
        result = AskResult(suspect_id=suspect_id, question=question, first_time=first_time)
        events: List[Tuple[str, Dict[str, Any]]] = []

        with self.store.transaction(self.progress) as working:
            if first_time:
                working.asked_question_ids.append(question_key(suspect_id, question_id))
                self.timeline.question_asked(working, suspect, question)

            if question.unlocks:
                for qid in question.unlocks.questions:
                    owner = self.catalog.find_question_owner(qid, suspect_id)
                    if owner is None:
                        if qid not in working.unlocked_question_ids:
                            working.unlocked_question_ids.append(qid)
                            logger.warning("Unlocked unknown question id %r", qid)
                        continue
                    owner_id, unlocked = owner
                    if self._has_key(working.unlocked_question_ids, owner_id, qid):
                        continue
                    working.unlocked_question_ids.append(question_key(owner_id, qid))
                    self.timeline.question_unlocked(
                        working, self.catalog.get_suspect(owner_id), unlocked
                    )
                    result.unlocked_questions.append(unlocked)
                    events.append(
                        (QUESTION_UNLOCKED, {"suspect_id": owner_id, "question": unlocked})
                    )

                for cid in question.unlocks.clues:
                    if not self.catalog.has_clue(cid):
                        logger.warning("Question %s unlocks unknown clue %r", question_id, cid)
                        continue
                    if cid in working.collected_clue_ids:
                        continue
                    clue = self.catalog.get_clue(cid)
                    working.collected_clue_ids.append(cid)
                    self.timeline.clue_unlocked(working, clue, suspect)
                    result.unlocked_clues.append(clue)
                    events.append((CLUE_UNLOCKED, {"clue": clue}))

        logger.info(
            "Asked %s: %s (first_time=%s, unlocked questions=%d, clues=%d)",
            suspect.name,
            question_id,
            first_time,
            len(result.unlocked_questions),
            len(result.unlocked_clues),
        )
        for name, payload in events:
            self.bus.publish(name, payload)
        return result

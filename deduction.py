"""
deduction.py
============
The Deduction Verifier: the accusation draft and its final check.

The draft (killer, motive, weapon, key evidence) is edited field by field and
re-persisted after each edit. submit() compares a complete draft with the
case solution; an incomplete draft yields a DeductionResult with
``complete=False`` instead of raising, so the UI can simply prompt the player
to finish.

Submitting never clears the draft. clear_selections() does that explicitly.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from case_loader import CaseCatalog
from config import GAME_CONFIG
from event_bus import CASE_COMPLETED, DEDUCTION_SUBMITTED, EventBus
from errors import NotFound
from models import DeductionDraft, DeductionResult, Progress, TimelineEntryType
from progress_store import ProgressStore
from timeline import TimelineRecorder

logger = logging.getLogger("detective.deduction")

INCOMPLETE_MESSAGE = (
    "Choose a killer, a motive, a weapon, and the key evidence before submitting."
)


def is_complete(draft: DeductionDraft) -> bool:
    """True when all four accusation fields are non-empty."""
    return all(
        (draft.killer_id, draft.motive_id, draft.weapon_id, draft.key_evidence_id)
    )


def build_feedback(killer: bool, motive: bool, weapon: bool, evidence: bool) -> str:
    """
    Explain a wrong accusation: one line per wrong field, then the tally.

    Example:
        >>> print(build_feedback(True, True, True, False))
        Your deduction is not entirely right:
        - The key evidence is wrong
        <BLANKLINE>
        3/4 correct. Review your clues.
    """
    lines: List[str] = ["Your deduction is not entirely right:"]
    if not killer:
        lines.append("- The killer is wrong")
    if not motive:
        lines.append("- The motive is wrong")
    if not weapon:
        lines.append("- The weapon is wrong")
    if not evidence:
        lines.append("- The key evidence is wrong")

    correct_count = sum((killer, motive, weapon, evidence))
    lines.append("")
    lines.append(
        f"{correct_count}/{GAME_CONFIG.deduction_fields} correct. Review your clues."
    )
    return "\n".join(lines)


class DeductionVerifier:
    """
    Draft editing and accusation checking for one open case.

    Attributes:
        catalog:  Read-only case content (holds the solution).
        store:    Progress store the draft and timeline are committed through.
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
    # Draft
    # ------------------------------------------------------------------

    def get_draft(self) -> DeductionDraft:
        """A copy of the persisted draft."""
        return self.progress.deduction_selections.model_copy()

    def update_draft(self, **fields: Optional[str]) -> DeductionDraft:
        """
        Set one or more draft fields and persist the draft.

        Accepted keywords: killer_id, motive_id, weapon_id, key_evidence_id.
        A value of None (or "") clears that field.

        Raises:
            NotFound:   A value does not name a selectable option.
            TypeError:  An unknown keyword was given.
        """
        unknown = set(fields) - set(DeductionDraft.model_fields)
        if unknown:
            raise TypeError(f"Unknown draft fields: {sorted(unknown)}")

        for name, value in fields.items():
            if value:
                self._check_option(name, value)

        with self.store.transaction(self.progress) as working:
            for name, value in fields.items():
                setattr(working.deduction_selections, name, value or None)

        logger.info("Draft updated: %s", fields)
        return self.get_draft()

    def _check_option(self, field_name: str, value: str) -> None:
        if field_name == "killer_id":
            self.catalog.get_suspect(value)
        elif field_name == "motive_id":
            self.catalog.get_motive(value)
        elif field_name == "weapon_id":
            self.catalog.get_weapon(value)
        elif value not in {e.id for e in self.catalog.key_evidence_options()}:
            raise NotFound("key evidence", value)

    def set_killer(self, suspect_id: Optional[str]) -> DeductionDraft:
        return self.update_draft(killer_id=suspect_id)

    def set_motive(self, motive_id: Optional[str]) -> DeductionDraft:
        return self.update_draft(motive_id=motive_id)

    def set_weapon(self, weapon_id: Optional[str]) -> DeductionDraft:
        return self.update_draft(weapon_id=weapon_id)

    def set_key_evidence(self, evidence_id: Optional[str]) -> DeductionDraft:
        return self.update_draft(key_evidence_id=evidence_id)

    def clear_selections(self) -> None:
        """Persist an empty draft. Nothing is recorded or published."""
        with self.store.transaction(self.progress) as working:
            working.deduction_selections = DeductionDraft()
        logger.info("Draft cleared for case %s", self.catalog.case_id)

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def wrong_attempts(self) -> int:
        """Incorrect submissions recorded in the notebook so far."""
        return sum(
            1
            for e in self.timeline.entries_of_kind(
                self.progress, TimelineEntryType.DEDUCTION_MADE
            )
            if e.related_id == "False"
        )

    def submit(self, draft: Optional[DeductionDraft] = None) -> DeductionResult:
        """
        Check an accusation against the solution.

        Args:
            draft: The accusation to check; defaults to the persisted draft.

        Returns:
            An incomplete result (``complete=False``) when any field is
            missing: nothing is recorded or published in that case.
            Otherwise the per-field verdict. A correct accusation carries
            the case's authored explanation and publishes case:completed;
            a wrong one carries generated feedback. Either way a
            DeductionMade entry is recorded and deduction:submitted is
            published.
        """
        if draft is None:
            draft = self.get_draft()

        if not is_complete(draft):
            logger.info("Deduction submitted with missing fields; not scored.")
            return DeductionResult(complete=False, explanation=INCOMPLETE_MESSAGE)

        solution = self.catalog.solution
        killer_correct   = draft.killer_id == solution.killer_id
        motive_correct   = draft.motive_id == solution.motive_id
        weapon_correct   = draft.weapon_id == solution.weapon_id
        evidence_correct = draft.key_evidence_id == solution.key_evidence_id
        correct = killer_correct and motive_correct and weapon_correct and evidence_correct

        explanation = (
            solution.explanation
            if correct
            else build_feedback(killer_correct, motive_correct, weapon_correct, evidence_correct)
        )

        with self.store.transaction(self.progress) as working:
            self.timeline.deduction_made(working, correct)

        logger.info(
            "Deduction submitted — case=%s correct=%s "
            "(killer=%s, motive=%s, weapon=%s, evidence=%s)",
            self.catalog.case_id, correct,
            killer_correct, motive_correct, weapon_correct, evidence_correct,
        )

        if correct:
            self.bus.publish(CASE_COMPLETED, {})
        self.bus.publish(
            DEDUCTION_SUBMITTED, {"correct": correct, "explanation": explanation}
        )

        return DeductionResult(
            complete=True,
            correct=correct,
            killer_correct=killer_correct,
            motive_correct=motive_correct,
            weapon_correct=weapon_correct,
            evidence_correct=evidence_correct,
            explanation=explanation,
        )

"""
case_loader.py
==============
The Case Catalog: validated, indexed, read-only case content.

load_case() reads ``<cases_dir>/<case_id>.json`` when it exists and falls back
to the built-in cases in case_data.py. The resulting CaseCatalog indexes every
clue, suspect, and question by id, validates cross references, and decides
once per question whether it is *initial* (available without being unlocked),
so availability checks never rescan the catalog.

Initial questions
-----------------
A suspect's first question is always initial. A later question is initial
only if no unlock spec anywhere in the case names it; such orphans are
reported at load time because well-formed cases never contain them.

Question ids need only be unique within their suspect. An unlock spec names a
bare id, which resolves to the asking suspect's question when it has one and
otherwise to the first suspect in case order that does (find_question_owner).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

from pydantic import ValidationError

from case_data import BUILTIN_CASES
from config import GAME_CONFIG
from errors import CaseLoadError, NotFound
from models import Case, Clue, KeyEvidence, Motive, Question, Suspect, Weapon

logger = logging.getLogger("detective.case_loader")


class CaseCatalog:
    """
    Immutable, indexed view of one Case.

    Attributes:
        case:          The validated Case model.
        case_id:       Shortcut for case.case_id.
    """

    def __init__(self, case: Case) -> None:
        self.case    = case
        self.case_id = case.case_id

        self._clues:     Dict[str, Clue]    = {c.id: c for c in case.clues}
        self._suspects:  Dict[str, Suspect] = {s.id: s for s in case.suspects}
        self._motives:   Dict[str, Motive]  = {m.id: m for m in case.motives}
        self._weapons:   Dict[str, Weapon]  = {w.id: w for w in case.weapons}
        self._hotspots = {
            h.hotspot_id: h for scene in case.scenes for h in scene.hotspots
        }

        # (suspect_id, question_id) -> Question
        self._questions: Dict[Tuple[str, str], Question] = {
            (s.id, q.id): q for s in case.suspects for q in s.questions
        }

        # Unlock targets resolved to their owning suspect.
        referenced: Set[Tuple[str, str]] = set()
        for suspect in case.suspects:
            for question in suspect.questions:
                if not question.unlocks:
                    continue
                for qid in question.unlocks.questions:
                    owner = self.find_question_owner(qid, suspect.id)
                    if owner is not None:
                        referenced.add((owner[0], qid))
        self._initial: Dict[Tuple[str, str], bool] = {}
        for suspect in case.suspects:
            for index, question in enumerate(suspect.questions):
                self._initial[(suspect.id, question.id)] = (
                    index == 0 or (suspect.id, question.id) not in referenced
                )

        self._validate(referenced)
        logger.info(
            "Catalog ready — case_id=%s, clues=%d, suspects=%d, questions=%d",
            self.case_id,
            len(self._clues),
            len(self._suspects),
            len(self._questions),
        )

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _validate(self, referenced: Set[Tuple[str, str]]) -> None:
        """Log dangling references, orphaned and shared question ids. Never raises."""
        known_questions = {qid for (_, qid) in self._questions}

        owners: Dict[str, List[str]] = {}
        for suspect_id, qid in self._questions:
            owners.setdefault(qid, []).append(suspect_id)
        for qid, suspect_ids in owners.items():
            if len(suspect_ids) > 1:
                logger.warning(
                    "Question id %r is shared by suspects %s; unlocks naming it "
                    "resolve to the asking suspect first.",
                    qid, ", ".join(suspect_ids),
                )

        for suspect in self.case.suspects:
            for index, question in enumerate(suspect.questions):
                if index > 0 and (suspect.id, question.id) not in referenced:
                    logger.warning(
                        "Question %s/%s is never unlocked; treating it as initial.",
                        suspect.id, question.id,
                    )
                if not question.unlocks:
                    continue
                for qid in question.unlocks.questions:
                    if qid not in known_questions:
                        logger.warning(
                            "Question %s/%s unlocks unknown question %r.",
                            suspect.id, question.id, qid,
                        )
                for cid in question.unlocks.clues:
                    if cid not in self._clues:
                        logger.warning(
                            "Question %s/%s unlocks unknown clue %r.",
                            suspect.id, question.id, cid,
                        )

        for hotspot in self._hotspots.values():
            if hotspot.clue_id and hotspot.clue_id not in self._clues:
                logger.warning(
                    "Hotspot %s names unknown clue %r.",
                    hotspot.hotspot_id, hotspot.clue_id,
                )

        solution = self.case.solution
        checks = (
            ("killer", solution.killer_id, self._suspects),
            ("motive", solution.motive_id, self._motives),
            ("weapon", solution.weapon_id, self._weapons),
        )
        for label, value, table in checks:
            if value not in table:
                logger.warning("Solution %s %r is not in the catalog.", label, value)
        evidence_ids = {e.id for e in self.key_evidence_options()}
        if solution.key_evidence_id not in evidence_ids:
            logger.warning(
                "Solution key evidence %r is not a selectable option.",
                solution.key_evidence_id,
            )

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    @property
    def clues(self) -> List[Clue]:
        return list(self.case.clues)

    @property
    def suspects(self) -> List[Suspect]:
        return list(self.case.suspects)

    @property
    def motives(self) -> List[Motive]:
        return list(self.case.motives)

    @property
    def weapons(self) -> List[Weapon]:
        return list(self.case.weapons)

    @property
    def solution(self):
        return self.case.solution

    def has_clue(self, clue_id: str) -> bool:
        return clue_id in self._clues

    def has_question(self, suspect_id: str, question_id: str) -> bool:
        return (suspect_id, question_id) in self._questions

    def get_clue(self, clue_id: str) -> Clue:
        """Return the clue or raise NotFound."""
        try:
            return self._clues[clue_id]
        except KeyError:
            raise NotFound("clue", clue_id) from None

    def get_suspect(self, suspect_id: str) -> Suspect:
        """Return the suspect or raise NotFound."""
        try:
            return self._suspects[suspect_id]
        except KeyError:
            raise NotFound("suspect", suspect_id) from None

    def get_question(self, suspect_id: str, question_id: str) -> Question:
        """Return one of a suspect's questions or raise NotFound."""
        self.get_suspect(suspect_id)
        try:
            return self._questions[(suspect_id, question_id)]
        except KeyError:
            raise NotFound("question", f"{suspect_id}/{question_id}") from None

    def find_question_owner(
        self,
        question_id: str,
        prefer_suspect: Optional[str] = None,
    ) -> Optional[Tuple[str, Question]]:
        """
        Locate the suspect owning ``question_id``.

        Unlock specs name bare question ids that may belong to any suspect.
        ``prefer_suspect`` is searched first so a question id reused by two
        suspects resolves to the one being interrogated.

        Returns:
            (suspect_id, Question), or None when no suspect has the id.
        """
        if prefer_suspect and (prefer_suspect, question_id) in self._questions:
            return prefer_suspect, self._questions[(prefer_suspect, question_id)]
        for suspect in self.case.suspects:
            if (suspect.id, question_id) in self._questions:
                return suspect.id, self._questions[(suspect.id, question_id)]
        return None

    def is_initial_question(self, suspect_id: str, question_id: str) -> bool:
        """True when the question is available without being unlocked."""
        return self._initial.get((suspect_id, question_id), False)

    def get_motive(self, motive_id: str) -> Motive:
        try:
            return self._motives[motive_id]
        except KeyError:
            raise NotFound("motive", motive_id) from None

    def get_weapon(self, weapon_id: str) -> Weapon:
        try:
            return self._weapons[weapon_id]
        except KeyError:
            raise NotFound("weapon", weapon_id) from None

    def get_hotspot(self, hotspot_id: str):
        try:
            return self._hotspots[hotspot_id]
        except KeyError:
            raise NotFound("hotspot", hotspot_id) from None

    def key_evidence_options(self) -> List[KeyEvidence]:
        """
        Options offered for the key-evidence field.

        Uses the case's explicit ``deductionOptions.keyEvidences`` when
        present, otherwise one option per clue.
        """
        options = self.case.deduction_options
        if options and options.key_evidences:
            return list(options.key_evidences)
        return [KeyEvidence(id=c.id, text=c.name, clue_id=c.id) for c in self.case.clues]


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def parse_case(raw: Dict) -> CaseCatalog:
    """
    Validate a raw case dict into a CaseCatalog.

    Raises:
        CaseLoadError: The dict does not match the case schema.
    """
    try:
        case = Case.model_validate(raw)
    except ValidationError as exc:
        raise CaseLoadError(f"Invalid case data: {exc}") from exc
    return CaseCatalog(case)


def load_case(case_id: str, cases_dir: Optional[str] = None) -> CaseCatalog:
    """
    Load a case by id.

    Search order:
      1. ``<cases_dir>/<case_id>.json`` (cases_dir defaults to GAME_CONFIG).
      2. BUILTIN_CASES from case_data.py.

    Raises:
        NotFound:      No file and no built-in case with this id.
        CaseLoadError: The file exists but is unreadable or invalid.
    """
    directory = Path(cases_dir if cases_dir is not None else GAME_CONFIG.cases_dir)
    path = directory / f"{case_id}.json"

    if path.is_file():
        logger.info("Loading case %s from %s", case_id, path)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise CaseLoadError(f"Could not read case file {path}: {exc}") from exc
    elif case_id in BUILTIN_CASES:
        logger.info("Loading built-in case %s", case_id)
        raw = BUILTIN_CASES[case_id]
    else:
        logger.error("Case %s not found in %s or built-ins.", case_id, directory)
        raise NotFound("case", case_id)

    catalog = parse_case(raw)
    if catalog.case_id != case_id:
        logger.warning(
            "Case file %s declares caseId=%r; progress will be saved under %r.",
            path, catalog.case_id, catalog.case_id,
        )
    return catalog


def available_case_ids(cases_dir: Optional[str] = None) -> List[str]:
    """All case ids loadable from the cases directory or the built-ins, sorted."""
    directory = Path(cases_dir if cases_dir is not None else GAME_CONFIG.cases_dir)
    ids = set(BUILTIN_CASES)
    if directory.is_dir():
        ids.update(p.stem for p in directory.glob("*.json"))
    return sorted(ids)

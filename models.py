"""
models.py
=========
Shared data models for Detective Casebook.

Contains:
  - Catalog models   : immutable case content (clues, suspects, questions,
                       scenes, motives, weapons, solution) parsed from the case
                       JSON schema.
  - Progress models  : the mutable per-case player state and its persisted
                       shape (timeline entries, deduction draft).
  - Result objects   : DeductionResult and AskResult returned to callers.

Case files and save blobs use camelCase keys (``caseId``, ``introText``,
``collectedClueIds`` ...). Every model accepts both the camelCase key and the
Python attribute name, and serialises back to camelCase.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# ---------------------------------------------------------------------------
# Catalog (read-only case content)
# ---------------------------------------------------------------------------

class CatalogModel(BaseModel):
    """Base for frozen catalog models keyed by camelCase JSON names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class UnlockSpec(CatalogModel):
    """Question and clue ids revealed when the owning question is asked."""

    questions: List[str] = Field(default_factory=list)
    clues:     List[str] = Field(default_factory=list)


class Question(CatalogModel):
    """
    One branch of an interrogation.

    Attributes:
        id:      Unique within its suspect.
        text:    The prompt the detective asks.
        answer:  The suspect's scripted reply.
        unlocks: Optional content revealed the first time this is asked.
    """

    id:      str
    text:    str
    answer:  str
    unlocks: Optional[UnlockSpec] = None


class Suspect(CatalogModel):
    """A person of interest and their ordered question list."""

    id:          str
    name:        str
    bio:         str = ""
    avatar_path: Optional[str] = None
    questions:   List[Question] = Field(default_factory=list)


class Clue(CatalogModel):
    """A piece of evidence the detective can collect."""

    id:          str
    name:        str
    description: str = ""
    sprite_path: Optional[str] = None
    tags:        List[str] = Field(default_factory=list)


class Hotspot(CatalogModel):
    """A searchable spot in a scene that yields a clue."""

    hotspot_id: str
    x:          float = 0.0
    y:          float = 0.0
    clue_id:    Optional[str] = None
    label:      str = ""


class Scene(CatalogModel):
    scene_id:               str
    background_sprite_path: Optional[str] = None
    hotspots:               List[Hotspot] = Field(default_factory=list)


class Motive(CatalogModel):
    id:   str
    text: str


class Weapon(CatalogModel):
    id:   str
    text: str


class KeyEvidence(CatalogModel):
    """A key-evidence option, optionally backed by a clue."""

    id:      str
    text:    str
    clue_id: Optional[str] = None


class DeductionOptions(CatalogModel):
    key_evidences: List[KeyEvidence] = Field(default_factory=list)


class Solution(CatalogModel):
    """The ground truth an accusation is checked against."""

    killer_id:       str
    motive_id:       str
    weapon_id:       str
    key_evidence_id: str
    explanation:     str = ""


class Case(CatalogModel):
    """
    Root of a case file.

    Attributes:
        case_id:           Opaque id the case is selected and saved by.
        title:             Display title.
        difficulty:        Free-form difficulty label.
        intro_text:        Briefing shown when the case opens.
        scenes:            Ordered scenes with their hotspots.
        clues:             Every collectable clue.
        suspects:          Suspects in display order.
        motives, weapons:  Flat accusation options.
        deduction_options: Optional explicit key-evidence options.
        solution:          Ground truth.
    """

    case_id:           str
    title:             str
    difficulty:        str = ""
    intro_text:        str = ""
    scenes:            List[Scene] = Field(default_factory=list)
    clues:             List[Clue] = Field(default_factory=list)
    suspects:          List[Suspect] = Field(default_factory=list)
    motives:           List[Motive] = Field(default_factory=list)
    weapons:           List[Weapon] = Field(default_factory=list)
    deduction_options: Optional[DeductionOptions] = None
    solution:          Solution


# ---------------------------------------------------------------------------
# Progress (mutable player state)
# ---------------------------------------------------------------------------

class TimelineEntryType(str, Enum):
    """Kinds of notebook entries."""

    CLUE_FOUND        = "ClueFound"
    QUESTION_ASKED    = "QuestionAsked"
    QUESTION_UNLOCKED = "QuestionUnlocked"
    CLUE_UNLOCKED     = "ClueUnlocked"
    DEDUCTION_MADE    = "DeductionMade"
    CASE_STARTED      = "CaseStarted"


class TimelineEntry(BaseModel):
    """
    One immutable notebook record.

    Attributes:
        kind:        Entry type (serialised as ``type``).
        description: Human-readable line shown in the notebook.
        timestamp:   Wall-clock time at display precision.
        related_id:  Clue id, question id, case id, or "True"/"False" for
                     deductions.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    kind:        TimelineEntryType = Field(alias="type")
    description: str = ""
    timestamp:   str = ""
    related_id:  str = Field(default="", alias="relatedId")


class DeductionDraft(BaseModel):
    """
    The player's in-progress accusation. Every field is optional.

    Older saves used ``selectedKillerId``-style keys; those are still read.
    """

    model_config = ConfigDict(populate_by_name=True)

    killer_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("killerId", "killer_id", "selectedKillerId"),
        serialization_alias="killerId",
    )
    motive_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("motiveId", "motive_id", "selectedMotiveId"),
        serialization_alias="motiveId",
    )
    weapon_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("weaponId", "weapon_id", "selectedWeaponId"),
        serialization_alias="weaponId",
    )
    key_evidence_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "keyEvidenceId", "key_evidence_id", "selectedKeyEvidenceId"
        ),
        serialization_alias="keyEvidenceId",
    )


def question_key(suspect_id: str, question_id: str) -> str:
    """
    Progress key of a suspect's question, e.g. ``"butler/Q1"``.

    Question ids are only unique within their suspect, so the asked and
    unlocked lists store suspect-qualified keys. Saves written before the
    qualification hold bare ids; those still match every suspect's question
    with that id.
    """
    return f"{suspect_id}/{question_id}"


class Progress(BaseModel):
    """
    Mutable snapshot of everything the player has done in one case.

    The id lists behave as ordered sets: the engine never inserts an id twice,
    and order records when each id was first added. Duplicates in a loaded
    blob are dropped, keeping the first occurrence.

    Attributes:
        case_id:               Case this progress belongs to.
        collected_clue_ids:    Clues in the player's possession.
        important_clue_ids:    Clues flagged important by the player.
        asked_question_ids:    Questions asked at least once (see question_key).
        unlocked_question_ids: Questions revealed by another question.
        timeline_entries:      Append-only notebook, oldest first.
        deduction_selections:  Current accusation draft.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    case_id:               str = ""
    collected_clue_ids:    List[str] = Field(default_factory=list)
    important_clue_ids:    List[str] = Field(default_factory=list)
    asked_question_ids:    List[str] = Field(default_factory=list)
    unlocked_question_ids: List[str] = Field(default_factory=list)
    timeline_entries:      List[TimelineEntry] = Field(default_factory=list)
    deduction_selections:  DeductionDraft = Field(default_factory=DeductionDraft)

    @field_validator(
        "collected_clue_ids",
        "important_clue_ids",
        "asked_question_ids",
        "unlocked_question_ids",
        "timeline_entries",
        mode="before",
    )
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value

    @field_validator(
        "collected_clue_ids",
        "important_clue_ids",
        "asked_question_ids",
        "unlocked_question_ids",
        mode="after",
    )
    @classmethod
    def _dedupe(cls, value: List[str]) -> List[str]:
        return list(dict.fromkeys(value))

    @field_validator("deduction_selections", mode="before")
    @classmethod
    def _none_as_empty_draft(cls, value):
        return {} if value is None else value

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------

    def to_blob(self) -> str:
        """Serialise to the JSON save blob (camelCase keys)."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_blob(cls, blob: str) -> "Progress":
        """
        Parse a save blob. Unknown keys are ignored and missing or null
        fields fall back to their defaults.
        """
        return cls.model_validate_json(blob)


class CareerRecord(BaseModel):
    """Cross-case record: which cases were solved and their best star rating."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    completed_cases: List[str] = Field(default_factory=list)
    case_stars:      Dict[str, int] = Field(default_factory=dict)

    @property
    def total_stars(self) -> int:
        return sum(self.case_stars.values())


# ---------------------------------------------------------------------------
# Results returned to callers
# ---------------------------------------------------------------------------

class DeductionResult(BaseModel):
    """
    Outcome of submitting an accusation.

    ``complete`` is False when one or more fields were missing; in that case
    every correctness flag is False and nothing was recorded.
    """

    complete:         bool = True
    correct:          bool = False
    killer_correct:   bool = False
    motive_correct:   bool = False
    weapon_correct:   bool = False
    evidence_correct: bool = False
    explanation:      str  = ""

    @property
    def correct_count(self) -> int:
        return sum(
            (self.killer_correct, self.motive_correct,
             self.weapon_correct, self.evidence_correct)
        )


@dataclass
class AskResult:
    """
    What happened when a question was asked.

    Attributes:
        suspect_id:         Suspect who was asked.
        question:           The catalog question.
        first_time:         False when the question had already been asked.
        unlocked_questions: Questions newly revealed by this ask.
        unlocked_clues:     Clues newly placed in the player's possession.
    """

    suspect_id:         str
    question:           Question
    first_time:         bool
    unlocked_questions: List[Question] = field(default_factory=list)
    unlocked_clues:     List[Clue] = field(default_factory=list)

    @property
    def answer(self) -> str:
        return self.question.answer

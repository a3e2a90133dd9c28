import copy
from datetime import datetime

import pytest

from case_loader import parse_case
from errors import PersistenceUnavailable
from event_bus import (
    CASE_COMPLETED,
    CLUE_COLLECTED,
    CLUE_MARKED_IMPORTANT,
    CLUE_UNLOCKED,
    DEDUCTION_SUBMITTED,
    QUESTION_UNLOCKED,
    EventBus,
)
from game_engine import CaseSession
from progress_store import ProgressStore
from storage import MemoryStore


RAW_CASE = {
    "caseId": "test_case",
    "title": "The Quiet Manor",
    "introText": "Someone died. Find out who.",
    "scenes": [
        {
            "sceneId": "hall",
            "hotspots": [
                {"hotspotId": "drawer", "x": 10, "y": 20, "clueId": "c1", "label": "Drawer"},
                {"hotspotId": "window", "x": 30, "y": 40, "label": "Window"},
            ],
        }
    ],
    "clues": [
        {"id": "c1", "name": "Bloody Glove", "description": "A glove."},
        {"id": "c2", "name": "Train Ticket", "description": "One way."},
        {"id": "e1", "name": "Signed Letter", "description": "The confession."},
        {"id": "e2", "name": "Muddy Boot", "description": "A red herring."},
    ],
    "suspects": [
        {
            "id": "butler",
            "name": "Jeeves",
            "bio": "The butler.",
            "questions": [
                {"id": "Q1", "text": "Where were you?", "answer": "Polishing silver.",
                 "unlocks": {"questions": ["Q2"]}},
                {"id": "Q2", "text": "Who did you see in the hall after dinner last night?",
                 "answer": "Her ladyship.", "unlocks": {"clues": ["c2"]}},
                {"id": "Q3", "text": "What about the letter?", "answer": "I posted it."},
            ],
        },
        {
            "id": "k1",
            "name": "Lady Ashford",
            "bio": "The widow.",
            "questions": [
                {"id": "k1_q1", "text": "Did you write this?", "answer": "Perhaps.",
                 "unlocks": {"questions": ["Q3"], "clues": ["e1"]}},
            ],
        },
    ],
    "motives": [{"id": "m1", "text": "Money"}, {"id": "m2", "text": "Love"}],
    "weapons": [{"id": "w1", "text": "Rope"}, {"id": "w2", "text": "Poison"}],
    "solution": {
        "killerId": "k1",
        "motiveId": "m1",
        "weaponId": "w1",
        "keyEvidenceId": "e1",
        "explanation": "Lady Ashford strangled him for the money.",
    },
}

ALL_EVENTS = (
    CLUE_COLLECTED,
    CLUE_UNLOCKED,
    CLUE_MARKED_IMPORTANT,
    QUESTION_UNLOCKED,
    DEDUCTION_SUBMITTED,
    CASE_COMPLETED,
)


class FlakyStore(MemoryStore):
    """MemoryStore whose writes can be switched off to simulate a full disk."""

    def __init__(self):
        super().__init__()
        self.fail_writes = False

    def set(self, key, value):
        if self.fail_writes:
            raise PersistenceUnavailable("disk full")
        super().set(key, value)


@pytest.fixture()
def raw_case():
    return copy.deepcopy(RAW_CASE)


@pytest.fixture()
def catalog(raw_case):
    return parse_case(raw_case)


@pytest.fixture()
def backend():
    return FlakyStore()


@pytest.fixture()
def store(backend):
    return ProgressStore(backend)


@pytest.fixture()
def bus():
    return EventBus()


@pytest.fixture()
def events(bus):
    """Every notification published on ``bus``, as (name, payload) pairs."""
    seen = []
    for name in ALL_EVENTS:
        bus.subscribe(name, lambda payload, name=name: seen.append((name, payload)))
    return seen


@pytest.fixture()
def fixed_clock():
    return lambda: datetime(2026, 3, 14, 21, 30)


@pytest.fixture()
def session(catalog, store, bus, events, fixed_clock):
    return CaseSession(catalog, store, bus=bus, clock=fixed_clock)

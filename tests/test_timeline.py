from datetime import datetime

from models import Clue, Progress, Question, Suspect, TimelineEntryType
from timeline import TimelineRecorder, truncate_text


def _recorder():
    return TimelineRecorder(clock=lambda: datetime(2026, 1, 2, 9, 5))


def test_truncate_text():
    assert truncate_text("short", 40) == "short"
    assert truncate_text("x" * 40, 40) == "x" * 40
    assert truncate_text("x" * 41, 40) == "x" * 37 + "..."
    assert truncate_text("", 40) == ""


def test_entries_are_appended_in_order():
    recorder = _recorder()
    progress = Progress(case_id="case_x")
    suspect = Suspect(id="s1", name="Ada")
    clue = Clue(id="c1", name="Glove")
    question = Question(id="q1", text="Where?", answer="Here.")

    recorder.case_started(progress)
    recorder.clue_found(progress, clue)
    recorder.question_asked(progress, suspect, question)
    recorder.question_unlocked(progress, suspect, question)
    recorder.clue_unlocked(progress, clue, suspect)
    recorder.deduction_made(progress, False)

    entries = TimelineRecorder.entries(progress)
    assert [(e.kind, e.description, e.related_id) for e in entries] == [
        (TimelineEntryType.CASE_STARTED, "Investigation started", "case_x"),
        (TimelineEntryType.CLUE_FOUND, "Found clue: Glove", "c1"),
        (TimelineEntryType.QUESTION_ASKED, 'Asked Ada: "Where?"', "q1"),
        (TimelineEntryType.QUESTION_UNLOCKED, 'New question for Ada: "Where?"', "q1"),
        (TimelineEntryType.CLUE_UNLOCKED, "Learned from Ada: Glove", "c1"),
        (TimelineEntryType.DEDUCTION_MADE, "Deduction was not correct", "False"),
    ]
    assert all(e.timestamp == "09:05" for e in entries)
    assert TimelineRecorder.count(progress) == 6


def test_entries_returns_a_copy():
    progress = Progress(case_id="case_x")
    _recorder().case_started(progress)
    TimelineRecorder.entries(progress).clear()
    assert TimelineRecorder.count(progress) == 1


def test_entries_of_kind():
    recorder = _recorder()
    progress = Progress(case_id="case_x")
    recorder.deduction_made(progress, False)
    recorder.clue_found(progress, Clue(id="c1", name="Glove"))
    recorder.deduction_made(progress, True)

    made = TimelineRecorder.entries_of_kind(progress, TimelineEntryType.DEDUCTION_MADE)
    assert [e.description for e in made] == ["Deduction was not correct", "Case solved!"]

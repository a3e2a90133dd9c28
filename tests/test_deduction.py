import pytest

from deduction import INCOMPLETE_MESSAGE, build_feedback, is_complete
from errors import NotFound
from event_bus import CASE_COMPLETED, DEDUCTION_SUBMITTED
from models import DeductionDraft, TimelineEntryType


SOLUTION = dict(killer_id="k1", motive_id="m1", weapon_id="w1", key_evidence_id="e1")


def test_is_complete():
    assert is_complete(DeductionDraft(**SOLUTION))
    assert not is_complete(DeductionDraft(killer_id="k1", motive_id="m1", weapon_id="w1"))
    assert not is_complete(DeductionDraft(**{**SOLUTION, "weapon_id": ""}))


def test_feedback_lists_wrong_fields_in_order():
    text = build_feedback(False, True, False, True)
    assert text.splitlines() == [
        "Your deduction is not entirely right:",
        "- The killer is wrong",
        "- The weapon is wrong",
        "",
        "2/4 correct. Review your clues.",
    ]


def test_correct_submission(session, events):
    result = session.deduction.submit(DeductionDraft(**SOLUTION))

    assert result.complete and result.correct
    assert result.correct_count == 4
    assert result.explanation == "Lady Ashford strangled him for the money."

    names = [n for n, _ in events]
    assert names == [CASE_COMPLETED, DEDUCTION_SUBMITTED]
    assert events[1][1] == {"correct": True, "explanation": result.explanation}

    made = session.timeline_entries(TimelineEntryType.DEDUCTION_MADE)
    assert len(made) == 1
    assert made[0].related_id == "True"


def test_wrong_submission_feedback(session, events):
    draft = DeductionDraft(killer_id="butler", motive_id="m1", weapon_id="w2", key_evidence_id="e1")
    result = session.deduction.submit(draft)

    assert result.complete and not result.correct
    assert (result.killer_correct, result.motive_correct,
            result.weapon_correct, result.evidence_correct) == (False, True, False, True)
    assert "- The killer is wrong" in result.explanation
    assert "- The weapon is wrong" in result.explanation
    assert "motive is wrong" not in result.explanation
    assert result.explanation.endswith("2/4 correct. Review your clues.")

    assert [n for n, _ in events] == [DEDUCTION_SUBMITTED]
    assert events[0][1]["correct"] is False
    assert session.timeline_entries(TimelineEntryType.DEDUCTION_MADE)[0].related_id == "False"


def test_incomplete_submission_has_no_side_effects(session, events):
    before = session.timeline_count()
    result = session.deduction.submit(DeductionDraft(killer_id="k1"))

    assert result.complete is False
    assert result.correct is False
    assert result.explanation == INCOMPLETE_MESSAGE
    assert session.timeline_count() == before
    assert events == []


def test_submit_uses_persisted_draft(session, store):
    session.set_killer("k1")
    session.set_motive("m1")
    session.set_weapon("w1")
    session.set_key_evidence("e1")

    assert store.load("test_case").deduction_selections == DeductionDraft(**SOLUTION)
    assert session.deduction.submit().correct is True
    # Submitting leaves the draft in place.
    assert session.draft == DeductionDraft(**SOLUTION)


def test_update_draft_rejects_unknown_options(session):
    with pytest.raises(NotFound):
        session.set_killer("nobody")
    with pytest.raises(NotFound):
        session.set_motive("greed")
    with pytest.raises(NotFound):
        session.set_weapon("spoon")
    with pytest.raises(NotFound) as info:
        session.set_key_evidence("nothing")
    assert info.value.kind == "key evidence"
    assert session.draft == DeductionDraft()


def test_update_draft_rejects_unknown_fields(session):
    with pytest.raises(TypeError):
        session.deduction.update_draft(accomplice_id="butler")


def test_update_draft_clears_with_none_or_empty(session):
    session.deduction.update_draft(killer_id="k1", motive_id="m1")
    draft = session.deduction.update_draft(killer_id="", motive_id=None)
    assert draft.killer_id is None
    assert draft.motive_id is None


def test_clear_selections(session, store, events):
    session.set_killer("k1")
    session.clear_selections()
    assert session.draft == DeductionDraft()
    assert store.load("test_case").deduction_selections == DeductionDraft()
    assert events == []


def test_get_draft_returns_copy(session):
    draft = session.draft
    draft.killer_id = "k1"
    assert session.draft.killer_id is None


def test_wrong_attempts_counted_from_notebook(session):
    wrong = DeductionDraft(**{**SOLUTION, "motive_id": "m2"})
    session.deduction.submit(wrong)
    session.deduction.submit(wrong)
    session.deduction.submit(DeductionDraft(killer_id="k1"))
    assert session.deduction.wrong_attempts() == 2

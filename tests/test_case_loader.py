import json

import pytest

from case_loader import available_case_ids, load_case, parse_case
from errors import CaseLoadError, NotFound


def test_lookups(catalog):
    assert catalog.case_id == "test_case"
    assert catalog.get_clue("c1").name == "Bloody Glove"
    assert catalog.get_suspect("butler").name == "Jeeves"
    assert catalog.get_question("butler", "Q2").answer == "Her ladyship."
    assert catalog.get_motive("m1").text == "Money"
    assert catalog.get_weapon("w2").text == "Poison"
    assert catalog.get_hotspot("drawer").clue_id == "c1"


@pytest.mark.parametrize(
    "lookup, args, kind",
    [
        ("get_clue", ("zz",), "clue"),
        ("get_suspect", ("zz",), "suspect"),
        ("get_question", ("butler", "zz"), "question"),
        ("get_question", ("zz", "Q1"), "suspect"),
        ("get_motive", ("zz",), "motive"),
        ("get_weapon", ("zz",), "weapon"),
        ("get_hotspot", ("zz",), "hotspot"),
    ],
)
def test_missing_ids_raise_not_found(catalog, lookup, args, kind):
    with pytest.raises(NotFound) as info:
        getattr(catalog, lookup)(*args)
    assert info.value.kind == kind


def test_initial_questions(catalog):
    assert catalog.is_initial_question("butler", "Q1")
    assert not catalog.is_initial_question("butler", "Q2")
    assert not catalog.is_initial_question("butler", "Q3")
    assert catalog.is_initial_question("k1", "k1_q1")
    assert not catalog.is_initial_question("ghost", "Q1")


def test_orphan_question_is_initial_and_reported(raw_case, caplog):
    raw_case["suspects"][0]["questions"].append(
        {"id": "Q4", "text": "Anything else?", "answer": "No."}
    )
    with caplog.at_level("WARNING", logger="detective.case_loader"):
        catalog = parse_case(raw_case)
    assert catalog.is_initial_question("butler", "Q4")
    assert "never unlocked" in caplog.text


def test_dangling_references_are_reported(raw_case, caplog):
    raw_case["suspects"][0]["questions"][0]["unlocks"]["clues"] = ["missing_clue"]
    raw_case["solution"]["weaponId"] = "axe"
    with caplog.at_level("WARNING", logger="detective.case_loader"):
        parse_case(raw_case)
    assert "unknown clue 'missing_clue'" in caplog.text
    assert "Solution weapon 'axe'" in caplog.text


def test_find_question_owner(catalog):
    assert catalog.find_question_owner("Q3")[0] == "butler"
    assert catalog.find_question_owner("k1_q1", prefer_suspect="butler")[0] == "k1"
    assert catalog.find_question_owner("nope") is None


def test_key_evidence_defaults_to_clues(catalog):
    options = catalog.key_evidence_options()
    assert [o.id for o in options] == ["c1", "c2", "e1", "e2"]
    assert options[0].text == "Bloody Glove"


def test_explicit_key_evidence_options(raw_case):
    raw_case["deductionOptions"] = {
        "keyEvidences": [{"id": "e1", "text": "The letter", "clueId": "e1"}]
    }
    catalog = parse_case(raw_case)
    assert [o.text for o in catalog.key_evidence_options()] == ["The letter"]


def test_parse_case_rejects_invalid_data(raw_case):
    del raw_case["solution"]
    with pytest.raises(CaseLoadError):
        parse_case(raw_case)


def test_load_case_prefers_file(tmp_path, raw_case):
    raw_case["caseId"] = "case_001"
    raw_case["title"] = "Overridden"
    (tmp_path / "case_001.json").write_text(json.dumps(raw_case), encoding="utf-8")

    assert load_case("case_001", str(tmp_path)).case.title == "Overridden"


def test_load_case_falls_back_to_builtin(tmp_path):
    catalog = load_case("case_001", str(tmp_path))
    assert catalog.case.title == "The Blackwood Mansion"
    assert len(catalog.clues) == 7


def test_load_case_errors(tmp_path):
    with pytest.raises(NotFound):
        load_case("case_404", str(tmp_path))

    (tmp_path / "broken.json").write_text("{oops", encoding="utf-8")
    with pytest.raises(CaseLoadError):
        load_case("broken", str(tmp_path))


def test_available_case_ids(tmp_path, raw_case):
    (tmp_path / "test_case.json").write_text(json.dumps(raw_case), encoding="utf-8")
    assert available_case_ids(str(tmp_path)) == ["case_001", "test_case"]
    assert available_case_ids(str(tmp_path / "missing")) == ["case_001"]


def test_shared_question_ids_resolve_per_suspect(raw_case, caplog):
    raw_case["suspects"][1]["questions"].append(
        {"id": "Q2", "text": "And then?", "answer": "Nothing."}
    )
    raw_case["suspects"][1]["questions"][0]["unlocks"]["questions"].append("Q2")
    with caplog.at_level("WARNING", logger="detective.case_loader"):
        catalog = parse_case(raw_case)

    assert "Question id 'Q2' is shared by suspects butler, k1" in caplog.text
    assert not catalog.is_initial_question("k1", "Q2")
    assert not catalog.is_initial_question("butler", "Q2")
    assert catalog.find_question_owner("Q2", prefer_suspect="k1")[0] == "k1"
    assert catalog.find_question_owner("Q2")[0] == "butler"

import pytest

from cli import execute, subscribe_toasts


@pytest.fixture()
def ctx():
    return {"suspect": None}


def test_quit(session, ctx, capsys):
    assert execute(session, "/quit", ctx) is False
    assert "Case file closed." in capsys.readouterr().out


def test_blank_line_is_ignored(session, ctx):
    assert execute(session, "   ", ctx) is True


def test_search_and_list_clues(session, ctx, capsys):
    subscribe_toasts(session)
    execute(session, "/search drawer", ctx)
    execute(session, "/search window", ctx)
    execute(session, "/important c1", ctx)
    execute(session, "/clues", ctx)

    out = capsys.readouterr().out
    assert ">> 🔍 Found: Bloody Glove" in out
    assert "Nothing new here." in out
    assert "★ Bloody Glove (c1)" in out
    assert "(1/4 collected)" in out


def test_talk_and_ask(session, ctx, capsys):
    execute(session, "/ask 1", ctx)
    assert "Pick someone first" in capsys.readouterr().out

    execute(session, "/talk butler", ctx)
    assert ctx["suspect"] == "butler"

    execute(session, "/ask Q2", ctx)
    assert "can't ask that yet" in capsys.readouterr().out

    execute(session, "/ask 1", ctx)
    out = capsys.readouterr().out
    assert "[Jeeves]: Polishing silver." in out
    assert session.is_question_available("butler", "Q2")


def test_notebook_filter(session, ctx, capsys):
    execute(session, "/search drawer", ctx)
    capsys.readouterr()

    execute(session, "/notebook ClueFound", ctx)
    lines = capsys.readouterr().out.strip().splitlines()
    assert lines == ["[21:30] 🔍 Found clue: Bloody Glove"]

    execute(session, "/notebook Nonsense", ctx)
    assert "Kinds:" in capsys.readouterr().out


def test_accuse(session, ctx, capsys):
    execute(session, "/accuse", ctx)
    assert "Motives  : ['m1', 'm2']" in capsys.readouterr().out

    execute(session, "/accuse butler m1 w1 e1", ctx)
    assert "3/4 correct" in capsys.readouterr().out
    assert session.career().completed_cases == []

    execute(session, "/accuse k1 m1 w1 e1", ctx)
    out = capsys.readouterr().out
    assert "CASE SOLVED" in out
    assert session.career().completed_cases == ["test_case"]


def test_restart(session, ctx, capsys):
    execute(session, "/search drawer", ctx)
    execute(session, "/talk butler", ctx)
    execute(session, "/restart", ctx)
    assert ctx["suspect"] is None
    assert session.collected_clues() == []


def test_unknown_command(session, ctx, capsys):
    execute(session, "/dance", ctx)
    assert "Unknown command" in capsys.readouterr().out

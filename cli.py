"""
cli.py
======
Command-line interface for Detective Casebook.

Provides a text-based game loop for development, testing, and playing
without Streamlit. All progression logic is delegated to CaseSession; this
module only handles I/O.

Usage:
    python cli.py [case_id]

Commands during play:
    /scene                        — list scenes and their hotspots
    /search <hotspot>             — search a hotspot for a clue
    /clues                        — list collected clues (★ = important)
    /clue <id>                    — show a clue's description
    /important <id>               — toggle a clue's important flag
    /suspects                     — list suspects
    /talk <id>                    — choose the suspect to question
    /ask <n | question id>        — ask the current suspect a question
    /notebook [kind]              — show the timeline (optionally one kind)
    /accuse                       — show accusation options and the draft
    /accuse <killer> <motive> <weapon> <evidence> — submit an accusation
    /restart                      — clear progress and start over
    /quit                         — exit the game
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

# Load .env before config is imported so DETECTIVE_* overrides apply.
load_dotenv()

from config import GAME_CONFIG
from errors import CaseError, NotFound
from event_bus import (
    CASE_COMPLETED,
    CLUE_COLLECTED,
    CLUE_MARKED_IMPORTANT,
    CLUE_UNLOCKED,
    DEDUCTION_SUBMITTED,
    QUESTION_UNLOCKED,
)
from game_engine import CaseSession
from models import TimelineEntryType
from ui_helpers import describe_draft, format_clue, format_entry, format_stars, toast_for_event

logger = logging.getLogger("detective.cli")

_TOAST_EVENTS = (
    CLUE_COLLECTED, CLUE_UNLOCKED, QUESTION_UNLOCKED,
    CLUE_MARKED_IMPORTANT, CASE_COMPLETED, DEDUCTION_SUBMITTED,
)


def subscribe_toasts(session: CaseSession) -> None:
    """Print a toast line for every engine notification that has one."""
    for event in _TOAST_EVENTS:
        def _handler(payload: Mapping[str, Any], event: str = event) -> None:
            text = toast_for_event(event, payload)
            if text:
                print(f"  >> {text}")
        session.bus.subscribe(event, _handler)


def print_briefing(session: CaseSession) -> None:
    case = session.catalog.case
    print("\n" + "=" * 60)
    print(f"   {case.title.upper()}")
    print("=" * 60)
    print(f"\n{case.intro_text}")
    print("\nCommands: /scene, /search, /clues, /suspects, /talk, /ask, "
          "/notebook, /accuse, /restart, /quit")
    print("-" * 60)


def _show_questions(session: CaseSession, suspect_id: str) -> None:
    for n, q in enumerate(session.available_questions(suspect_id), start=1):
        mark = "✓" if session.resolver.is_question_asked(suspect_id, q.id) else " "
        print(f"  {n}. [{mark}] {q.text}  ({q.id})")


def execute(session: CaseSession, line: str, ctx: Dict[str, Optional[str]]) -> bool:
    """
    Run one player command.

    Args:
        session: The open case.
        line:    Raw input line.
        ctx:     Mutable client state; ``ctx["suspect"]`` is the suspect
                 currently being questioned.

    Returns:
        False when the player quits, True otherwise.
    """
    parts = line.split()
    if not parts:
        return True
    command, args = parts[0].lower(), parts[1:]
    catalog = session.catalog

    # ---- Command: quit ----
    if command in {"/quit", "quit", "exit"}:
        print("Case file closed.")
        return False

    # ---- Command: scenes & hotspots ----
    if command == "/scene":
        for scene in catalog.case.scenes:
            print(f"  [{scene.scene_id}]")
            for h in scene.hotspots:
                found = h.clue_id and session.resolver.is_clue_collected(h.clue_id)
                print(f"    {h.hotspot_id:<12} {h.label}{'  (searched)' if found else ''}")
        return True

    if command == "/search":
        if not args:
            print("Usage: /search <hotspot>")
            return True
        if not session.search_hotspot(args[0]):
            print("  Nothing new here.")
        return True

    # ---- Command: clues ----
    if command == "/clues":
        clues = session.collected_clues()
        if not clues:
            print("  No clues yet.")
        for clue in clues:
            print("  " + format_clue(clue, session.resolver.is_clue_important(clue.id)))
        print(f"  ({len(clues)}/{len(catalog.clues)} collected)")
        return True

    if command == "/clue":
        if not args:
            print("Usage: /clue <id>")
            return True
        if not session.resolver.is_clue_collected(args[0]):
            print("  You haven't found that clue.")
            return True
        clue = catalog.get_clue(args[0])
        print(f"  {clue.name}: {clue.description}")
        return True

    if command == "/important":
        if not args:
            print("Usage: /important <id>")
            return True
        session.toggle_important(args[0])
        return True

    # ---- Command: suspects & questioning ----
    if command == "/suspects":
        for s in catalog.suspects:
            print(f"  {s.id:<10} {s.name} — {s.bio}")
        return True

    if command == "/talk":
        if not args:
            print("Usage: /talk <suspect_id>")
            return True
        suspect = catalog.get_suspect(args[0])
        ctx["suspect"] = suspect.id
        print(f"Now questioning: {suspect.name}")
        _show_questions(session, suspect.id)
        return True

    if command == "/ask":
        suspect_id = ctx.get("suspect")
        if not suspect_id:
            print("Pick someone first: /talk <suspect_id>")
            return True
        if not args:
            _show_questions(session, suspect_id)
            return True
        available = session.available_questions(suspect_id)
        choice = args[0]
        if choice.isdigit() and 1 <= int(choice) <= len(available):
            question_id = available[int(choice) - 1].id
        else:
            question_id = choice
        if not session.is_question_available(suspect_id, question_id):
            print("  You can't ask that yet.")
            return True
        result = session.ask_question(suspect_id, question_id)
        print(f"\n  Q: {result.question.text}")
        print(f"  [{catalog.get_suspect(suspect_id).name}]: {result.answer}")
        return True

    # ---- Command: notebook ----
    if command == "/notebook":
        kind = None
        if args:
            try:
                kind = TimelineEntryType(args[0])
            except ValueError:
                print(f"Kinds: {[k.value for k in TimelineEntryType]}")
                return True
        for entry in session.timeline_entries(kind):
            print("  " + format_entry(entry))
        return True

    # ---- Command: accuse ----
    if command == "/accuse":
        if not args:
            print(f"Suspects : {[s.id for s in catalog.suspects]}")
            print(f"Motives  : {[m.id for m in catalog.motives]}")
            print(f"Weapons  : {[w.id for w in catalog.weapons]}")
            print(f"Evidence : {[e.id for e in catalog.key_evidence_options()]}")
            for label, value in describe_draft(catalog, session.draft).items():
                print(f"  {label:<13}: {value}")
            return True
        if len(args) != 4:
            print("Usage: /accuse <killer> <motive> <weapon> <evidence>")
            return True
        killer, motive, weapon, evidence = args
        session.deduction.update_draft(
            killer_id=killer, motive_id=motive, weapon_id=weapon, key_evidence_id=evidence
        )
        result = session.submit_deduction()
        print("\n" + result.explanation)
        if result.correct:
            stars = session.career().case_stars.get(session.case_id, 0)
            print(f"\n🎉 CASE SOLVED!  {format_stars(stars)}")
        return True

    # ---- Command: restart ----
    if command == "/restart":
        session.start_over()
        ctx["suspect"] = None
        print("Progress cleared. The case is fresh again.")
        return True

    print("Unknown command. Type /quit to exit.")
    return True


def run_cli(case_id: Optional[str] = None) -> None:
    """
    Main CLI game loop.

    Opens the case, prints the briefing, then processes commands until the
    player quits. Engine errors (unknown ids, storage failures) are reported
    and the loop continues.
    """
    case_id = case_id or GAME_CONFIG.default_case_id
    try:
        session = CaseSession.open(case_id)
    except CaseError as exc:
        print(f"Error: {exc}")
        return

    subscribe_toasts(session)
    print_briefing(session)
    ctx: Dict[str, Optional[str]] = {"suspect": None}

    try:
        while True:
            suspect_id = ctx["suspect"]
            prompt = (
                f"[{catalog_name(session, suspect_id)}]" if suspect_id else "[investigating]"
            )
            line = input(f"\n{prompt} > ").strip()
            try:
                if not execute(session, line, ctx):
                    break
            except NotFound as exc:
                print(f"  {exc}")
            except CaseError as exc:
                logger.error("Command failed: %s", exc)
                print(f"  Error: {exc}")
    finally:
        session.close()


def catalog_name(session: CaseSession, suspect_id: str) -> str:
    return session.catalog.get_suspect(suspect_id).name


if __name__ == "__main__":
    # Configure logging at the entry point so all detective.* loggers emit
    # to stderr. WARNING keeps the game output readable; raise to INFO when
    # debugging progression.
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    run_cli(sys.argv[1] if len(sys.argv) > 1 else None)

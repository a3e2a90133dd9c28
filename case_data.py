"""
case_data.py
============
Built-in narrative content: the Blackwood Mansion murder case.

Cases are plain dicts in exactly the shape of a ``<case_id>.json`` case file,
so this module doubles as a template for writing new cases. case_loader.py
validates them into Case models; nothing here is imported by the engine
directly.

To create a new case:
    1. Copy CASE_001, change ``caseId`` and the content.
    2. Either add it to BUILTIN_CASES or dump it to ``cases/<caseId>.json``.
    3. Every suspect's first question is always available; every other
       question must be named in some question's ``unlocks.questions``.
"""

from __future__ import annotations

from typing import Dict


CASE_001: Dict = {
    "caseId":     "case_001",
    "title":      "The Blackwood Mansion",
    "difficulty": "easy",
    "introText": (
        "Victor Hale was found dead in the library of Blackwood Mansion at "
        "23:15, struck on the head. Three people were in the house that night. "
        "Search the rooms, question everyone, and name the killer."
    ),

    # ------------------------------------------------------------------
    # Scenes and their searchable hotspots
    # ------------------------------------------------------------------
    "scenes": [
        {
            "sceneId": "library",
            "backgroundSpritePath": "scenes/library.png",
            "hotspots": [
                {"hotspotId": "fireplace", "x": 120, "y": 340,
                 "clueId": "soot_candlestick", "label": "Fireplace"},
                {"hotspotId": "desk", "x": 520, "y": 300,
                 "clueId": "torn_will", "label": "Victor's desk"},
                {"hotspotId": "rug", "x": 330, "y": 460,
                 "clueId": "wax_drops", "label": "Persian rug"},
            ],
        },
        {
            "sceneId": "hallway",
            "backgroundSpritePath": "scenes/hallway.png",
            "hotspots": [
                {"hotspotId": "coat_rack", "x": 80, "y": 250,
                 "clueId": "doctor_bag", "label": "Coat rack"},
                {"hotspotId": "stairs", "x": 600, "y": 220,
                 "clueId": "muddy_slipper", "label": "Servants' stairs"},
            ],
        },
    ],

    # ------------------------------------------------------------------
    # Clues
    # ------------------------------------------------------------------
    "clues": [
        {"id": "soot_candlestick", "name": "Sooty Candlestick",
         "description": "A brass candlestick pushed deep into the ashes. "
                        "The base is dented and wiped clean.",
         "spritePath": "clues/candlestick.png", "tags": ["weapon", "library"]},
        {"id": "torn_will", "name": "Torn Will",
         "description": "A draft will, torn in half. Lydia's name is struck out.",
         "spritePath": "clues/will.png", "tags": ["motive", "document"]},
        {"id": "wax_drops", "name": "Wax Drops",
         "description": "Fresh candle wax on the rug, leading toward the fireplace.",
         "tags": ["library"]},
        {"id": "doctor_bag", "name": "Doctor's Bag",
         "description": "Dr. Vale's bag, still in the hall although he says he "
                        "left at 22:45.",
         "tags": ["alibi"]},
        {"id": "muddy_slipper", "name": "Silk Slipper",
         "description": "One of Lydia's slippers, damp at the heel, left on the "
                        "servants' stairs.",
         "tags": ["alibi", "lydia"]},
        {"id": "appointment_book", "name": "Appointment Book",
         "description": "Dr. Vale's diary. The 22:45 entry was written in a "
                        "different ink.",
         "tags": ["alibi", "document"]},
        {"id": "laundry_ticket", "name": "Laundry Ticket",
         "description": "Eleanor's basement ticket, stamped 23:10.",
         "tags": ["alibi"]},
    ],

    # ------------------------------------------------------------------
    # Suspects and branching questions
    # ------------------------------------------------------------------
    "suspects": [
        {
            "id": "lydia",
            "name": "Lydia Blackwood",
            "bio": "Victor's niece and heir. Elegant, composed, dislikes being challenged.",
            "questions": [
                {"id": "lydia_q1", "text": "Where were you when Victor died?",
                 "answer": "In my bedroom, reading. I heard nothing.",
                 "unlocks": {"questions": ["lydia_q2"]}},
                {"id": "lydia_q2", "text": "Did you argue with your uncle tonight?",
                 "answer": "We discussed family matters. Nothing that concerns you.",
                 "unlocks": {"questions": ["lydia_q3", "vale_q2"]}},
                {"id": "lydia_q3",
                 "text": "Why was your name struck from the will he was drafting?",
                 "answer": "He was angry. He would have calmed down by morning. "
                           "He always did.",
                 "unlocks": {"clues": ["torn_will"]}},
            ],
        },
        {
            "id": "vale",
            "name": "Dr. Marcus Vale",
            "bio": "The family doctor. Charming, sarcastic, quick to change the subject.",
            "questions": [
                {"id": "vale_q1", "text": "When did you leave the mansion?",
                 "answer": "At a quarter to eleven, after Victor's check-up. "
                           "It's in my book.",
                 "unlocks": {"questions": ["vale_q3"],
                             "clues": ["appointment_book"]}},
                {"id": "vale_q2", "text": "What did Lydia tell you about the will?",
                 "answer": "Only that Victor was being difficult. She was upset. "
                           "Anyone would be.",
                 "unlocks": {"questions": ["eleanor_q2"]}},
                {"id": "vale_q3",
                 "text": "Why is your bag still hanging in the hall?",
                 "answer": "I... must have forgotten it. I was tired.",
                 "unlocks": {"clues": ["doctor_bag"]}},
            ],
        },
        {
            "id": "eleanor",
            "name": "Eleanor Wright",
            "bio": "The housekeeper. Anxious, loyal, terrified of losing her position.",
            "questions": [
                {"id": "eleanor_q1", "text": "Where were you at eleven o'clock?",
                 "answer": "Down in the basement with the laundry, ma'am. "
                           "I have the ticket.",
                 "unlocks": {"clues": ["laundry_ticket"]}},
                {"id": "eleanor_q2",
                 "text": "Did you see anyone on the servants' stairs?",
                 "answer": "Miss Lydia. Around twenty past. She was in a hurry "
                           "and she'd lost a slipper.",
                 "unlocks": {"clues": ["muddy_slipper"]}},
            ],
        },
    ],

    # ------------------------------------------------------------------
    # Accusation options
    # ------------------------------------------------------------------
    "motives": [
        {"id": "inheritance", "text": "To protect her inheritance"},
        {"id": "jealousy",    "text": "Jealousy"},
        {"id": "blackmail",   "text": "To stop a blackmailer"},
        {"id": "revenge",     "text": "Revenge for an old wrong"},
    ],
    "weapons": [
        {"id": "candlestick",    "text": "Brass candlestick"},
        {"id": "poker",          "text": "Fireplace poker"},
        {"id": "letter_opener",  "text": "Letter opener"},
        {"id": "poison",         "text": "Poison"},
    ],

    # ------------------------------------------------------------------
    # Ground truth
    # ------------------------------------------------------------------
    "solution": {
        "killerId":      "lydia",
        "motiveId":      "inheritance",
        "weaponId":      "candlestick",
        "keyEvidenceId": "muddy_slipper",
        "explanation": (
            "Lydia Blackwood killed her uncle with the brass candlestick after "
            "he struck her from his will. She hid the candlestick in the "
            "fireplace and fled down the servants' stairs, where Eleanor saw "
            "her and where she lost her slipper. Dr. Vale altered his "
            "appointment book to give her time."
        ),
    },
}


BUILTIN_CASES: Dict[str, Dict] = {
    CASE_001["caseId"]: CASE_001,
}
"""
Dict mapping case id → raw case dict.

Consulted by case_loader.load_case() when no ``<case_id>.json`` exists in the
configured cases directory.
"""

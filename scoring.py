"""
scoring.py
==========
Deterministic, side-effect-free star rating for a solved case.

Kept apart from the deduction verifier so it can be unit-tested on its own
and retuned through ScoringConfig in config.py without touching any engine
or UI code.
"""

from __future__ import annotations

from config import SCORING_CONFIG


def calculate_stars(
    wrong_attempts:  int,
    clues_collected: int,
    total_clues:     int,
) -> int:
    """
    Rate a solved case from 1 to ``max_stars`` (default 3).

    Breakdown:
        Start at max_stars.
        Wrong submissions beyond free_wrong_attempts cost one star, and one
        more for every further attempts_per_star wrong submissions.
        Collecting less than thorough_clue_ratio of the clues costs one star.

    A solved case never rates below one star.

    Args:
        wrong_attempts:  Incorrect submissions made before the correct one.
        clues_collected: Clues in the player's possession at solve time.
        total_clues:     Clues in the case.

    Returns:
        Integer star rating.

    Examples:
        >>> calculate_stars(0, 7, 7)
        3
        >>> calculate_stars(1, 7, 7)
        2
        >>> calculate_stars(5, 1, 7)
        1
    """
    cfg = SCORING_CONFIG

    # --- Accuracy penalty ---
    penalty = 0
    extra = wrong_attempts - cfg.free_wrong_attempts
    if extra > 0:
        penalty += 1 + (extra - 1) // cfg.attempts_per_star

    # --- Thoroughness penalty ---
    if total_clues > 0 and clues_collected / total_clues < cfg.thorough_clue_ratio:
        penalty += 1

    return max(1, min(cfg.max_stars, cfg.max_stars - penalty))

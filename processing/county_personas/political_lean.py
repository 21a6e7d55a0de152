"""
Functions for classifying political lean from two-party vote.

Only Democratic and Republican votes count toward the denominator; a
county (or state) is then placed on a five-point scale by share thresholds.
"""

import logging
from typing import Iterable, Optional, Tuple

import numpy as np
import pandas as pd

from .models import ElectionResult, PoliticalLean

logger = logging.getLogger(__name__)

DEMOCRATIC = 'DEMOCRAT'
REPUBLICAN = 'REPUBLICAN'

STRONG_THRESHOLD = 0.60
LEAN_THRESHOLD = 0.55
SWING_MARGIN = 0.05

DEFAULT_RECENT_YEARS = 3

POLITICAL_COLORS = {
    PoliticalLean.STRONGLY_DEMOCRATIC: '#1e40af',
    PoliticalLean.DEMOCRATIC: '#3b82f6',
    PoliticalLean.SWING: '#8b5cf6',
    PoliticalLean.REPUBLICAN: '#dc2626',
    PoliticalLean.STRONGLY_REPUBLICAN: '#991b1b',
}


def classify_party(party: str) -> Optional[str]:
    """
    Map a raw party label to DEMOCRAT, REPUBLICAN or None.

    Matching is a case-insensitive substring test, so "DEMOCRATIC" and
    "DEMOCRATIC-FARMER-LABOR" both count as Democratic.
    """
    label = str(party).upper()
    if DEMOCRATIC in label:
        return DEMOCRATIC
    if REPUBLICAN in label:
        return REPUBLICAN
    return None


def tally_two_party_votes(elections: Iterable[ElectionResult]) -> Tuple[int, int]:
    """
    Sum Democratic and Republican votes across all candidates in elections.

    Args:
        elections: Election results to pool

    Returns:
        (democratic_votes, republican_votes)
    """
    dem_votes = 0
    rep_votes = 0
    for election in elections:
        for candidate in election.candidates:
            side = classify_party(candidate.party)
            if side == DEMOCRATIC:
                dem_votes += candidate.votes
            elif side == REPUBLICAN:
                rep_votes += candidate.votes
    return dem_votes, rep_votes


def calculate_two_party_share(dem_votes: float, rep_votes: float) -> float:
    """
    Calculate Democratic two-party vote share: D / (D + R)

    Returns 0.0 when there are no two-party votes.
    """
    total = dem_votes + rep_votes
    if total <= 0:
        return 0.0
    return dem_votes / total


def classify_vote_shares(dem_votes: float, rep_votes: float) -> PoliticalLean:
    """
    Place a two-party vote tally on the five-point scale.

    Thresholds are checked in order: Democratic strong/lean, Republican
    strong/lean, near-even margin, then whichever side is larger.

    Args:
        dem_votes: Democratic votes
        rep_votes: Republican votes

    Returns:
        PoliticalLean
    """
    if dem_votes + rep_votes <= 0:
        return PoliticalLean.SWING

    dem_share = calculate_two_party_share(dem_votes, rep_votes)
    rep_share = rep_votes / (dem_votes + rep_votes)
    margin = abs(dem_share - rep_share)

    if dem_share > STRONG_THRESHOLD:
        return PoliticalLean.STRONGLY_DEMOCRATIC
    if dem_share > LEAN_THRESHOLD:
        return PoliticalLean.DEMOCRATIC
    if rep_share > STRONG_THRESHOLD:
        return PoliticalLean.STRONGLY_REPUBLICAN
    if rep_share > LEAN_THRESHOLD:
        return PoliticalLean.REPUBLICAN
    if margin < SWING_MARGIN:
        return PoliticalLean.SWING

    return PoliticalLean.DEMOCRATIC if dem_share > rep_share else PoliticalLean.REPUBLICAN


def calculate_political_lean(
    elections: list,
    recent_years: int = DEFAULT_RECENT_YEARS
) -> PoliticalLean:
    """
    Classify a county from its most recent elections.

    Args:
        elections: ElectionResults sorted most recent first
        recent_years: How many of the leading elections to pool

    Returns:
        PoliticalLean (swing when there is no two-party vote)

    Raises:
        ValueError: If recent_years is less than 1
    """
    if recent_years < 1:
        raise ValueError(f"recent_years must be at least 1, got {recent_years}")

    window = elections[:recent_years]
    dem_votes, rep_votes = tally_two_party_votes(window)
    if dem_votes + rep_votes <= 0:
        logger.debug(f"No two-party votes in {len(window)} elections; classifying as swing")
    return classify_vote_shares(dem_votes, rep_votes)


def classify_lean_series(dem_votes: pd.Series, rep_votes: pd.Series) -> pd.Series:
    """
    Vectorized classify_vote_shares for tables of county tallies.

    Args:
        dem_votes: Democratic votes per row
        rep_votes: Republican votes per row

    Returns:
        Series of lean values (strings)
    """
    total = dem_votes + rep_votes
    safe_total = total.where(total > 0)
    dem_share = dem_votes / safe_total
    rep_share = rep_votes / safe_total
    margin = (dem_share - rep_share).abs()

    conditions = [
        total <= 0,
        dem_share > STRONG_THRESHOLD,
        dem_share > LEAN_THRESHOLD,
        rep_share > STRONG_THRESHOLD,
        rep_share > LEAN_THRESHOLD,
        margin < SWING_MARGIN,
        dem_share > rep_share,
    ]
    choices = [
        PoliticalLean.SWING.value,
        PoliticalLean.STRONGLY_DEMOCRATIC.value,
        PoliticalLean.DEMOCRATIC.value,
        PoliticalLean.STRONGLY_REPUBLICAN.value,
        PoliticalLean.REPUBLICAN.value,
        PoliticalLean.SWING.value,
        PoliticalLean.DEMOCRATIC.value,
    ]

    return pd.Series(
        np.select(conditions, choices, default=PoliticalLean.REPUBLICAN.value),
        index=dem_votes.index
    )


def get_political_color(lean: PoliticalLean) -> str:
    """Map color used by the frontend for a lean."""
    return POLITICAL_COLORS[PoliticalLean(lean)]

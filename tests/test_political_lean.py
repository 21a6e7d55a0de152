"""Tests for two-party share and lean classification."""

from __future__ import annotations

import copy
import logging

import pandas as pd
import pytest

from county_personas.election_parser import parse_election_data
from county_personas.models import Candidate, ElectionResult, PoliticalLean
from county_personas.political_lean import (
    calculate_political_lean,
    calculate_two_party_share,
    classify_lean_series,
    classify_party,
    classify_vote_shares,
    get_political_color,
    tally_two_party_votes,
)

from conftest import county_rows, make_election_text


def make_election(year: int, dem: int, rep: int, other: int = 0) -> ElectionResult:
    total = dem + rep + other
    candidates = [
        Candidate('DEM CANDIDATE', 'DEMOCRAT', dem, dem / total if total else 0.0),
        Candidate('REP CANDIDATE', 'REPUBLICAN', rep, rep / total if total else 0.0),
    ]
    if other:
        candidates.append(Candidate('GREEN CANDIDATE', 'GREEN', other, other / total))
    return ElectionResult(
        year=year,
        county_fips='06037',
        county_name='LOS ANGELES',
        state_abbr='CA',
        state_name='CALIFORNIA',
        candidates=candidates,
        total_votes=total,
    )


@pytest.mark.parametrize(
    "dem, rep, expected",
    [
        (601, 399, PoliticalLean.STRONGLY_DEMOCRATIC),
        (600, 400, PoliticalLean.DEMOCRATIC),
        (560, 440, PoliticalLean.DEMOCRATIC),
        (550, 450, PoliticalLean.DEMOCRATIC),
        (520, 480, PoliticalLean.SWING),
        (480, 520, PoliticalLean.SWING),
        (450, 550, PoliticalLean.REPUBLICAN),
        (440, 560, PoliticalLean.REPUBLICAN),
        (400, 600, PoliticalLean.REPUBLICAN),
        (399, 601, PoliticalLean.STRONGLY_REPUBLICAN),
        (0, 0, PoliticalLean.SWING),
    ],
)
def test_classify_vote_shares_thresholds(dem: int, rep: int, expected: PoliticalLean) -> None:
    assert classify_vote_shares(dem, rep) == expected


def test_classify_party_matches_substrings() -> None:
    assert classify_party('DEMOCRATIC-FARMER-LABOR') == 'DEMOCRAT'
    assert classify_party('republican') == 'REPUBLICAN'
    assert classify_party('LIBERTARIAN') is None


def test_third_party_votes_do_not_count() -> None:
    election = make_election(2020, 600, 400, other=5000)

    assert tally_two_party_votes([election]) == (600, 400)
    assert calculate_two_party_share(600, 400) == pytest.approx(0.6)
    assert calculate_two_party_share(0, 0) == 0.0


def test_recent_elections_are_pooled() -> None:
    elections = [
        make_election(2020, 65, 35),
        make_election(2016, 62, 38),
        make_election(2012, 58, 42),
        make_election(2008, 50, 50),
    ]

    # (65 + 62 + 58) / 300 = 0.6167; with 2008, 235 / 400 = 0.5875
    assert calculate_political_lean(elections) == PoliticalLean.STRONGLY_DEMOCRATIC
    assert calculate_political_lean(elections, recent_years=4) == PoliticalLean.DEMOCRATIC


def test_county_file_classified_from_three_recent_years() -> None:
    rows = []
    rows += county_rows(2016, 'CALIFORNIA', 'CA', 'LOS ANGELES', '06037', 65, 35)
    rows += county_rows(2020, 'CALIFORNIA', 'CA', 'LOS ANGELES', '06037', 62, 38)
    rows += county_rows(2024, 'CALIFORNIA', 'CA', 'LOS ANGELES', '06037', 58, 42)

    county = parse_election_data(make_election_text(rows))[0]

    assert [e.year for e in county.elections] == [2024, 2020, 2016]
    # 185 / 300 = 0.6167
    assert calculate_political_lean(county.elections, 3) == PoliticalLean.STRONGLY_DEMOCRATIC


def test_classification_does_not_change_its_input() -> None:
    rows = []
    rows += county_rows(2020, 'OHIO', 'OH', 'CUYAHOGA', '39035', 520, 480, 20)
    rows += county_rows(2016, 'OHIO', 'OH', 'CUYAHOGA', '39035', 480, 520)
    elections = parse_election_data(make_election_text(rows))[0].elections
    before = copy.deepcopy(elections)

    first = calculate_political_lean(elections, 2)
    second = calculate_political_lean(elections, 2)

    assert first == second == PoliticalLean.SWING
    assert elections == before


def test_single_election_window() -> None:
    elections = [make_election(2020, 48, 52), make_election(2016, 90, 10)]

    assert calculate_political_lean(elections, recent_years=1) == PoliticalLean.SWING


def test_no_elections_is_swing() -> None:
    assert calculate_political_lean([]) == PoliticalLean.SWING


def test_window_without_two_party_votes_is_logged(caplog) -> None:
    elections = [make_election(2020, 0, 0, other=50)]

    with caplog.at_level(logging.DEBUG, logger='county_personas.political_lean'):
        assert calculate_political_lean(elections) == PoliticalLean.SWING

    assert 'No two-party votes in 1 elections' in caplog.text


def test_recent_years_must_be_positive() -> None:
    with pytest.raises(ValueError):
        calculate_political_lean([make_election(2020, 60, 40)], recent_years=0)


def test_classify_lean_series_agrees_with_scalar_version() -> None:
    pairs = [(601, 399), (600, 400), (520, 480), (450, 550), (399, 601), (0, 0), (70, 0)]
    dem = pd.Series([d for d, _ in pairs], index=list('abcdefg'))
    rep = pd.Series([r for _, r in pairs], index=list('abcdefg'))

    result = classify_lean_series(dem, rep)

    assert list(result.index) == list('abcdefg')
    assert result.tolist() == [classify_vote_shares(d, r).value for d, r in pairs]


def test_political_colors_cover_every_lean() -> None:
    for lean in PoliticalLean:
        assert get_political_color(lean).startswith('#')
    assert get_political_color('swing') == '#8b5cf6'

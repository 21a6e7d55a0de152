"""
Record types shared across the county persona pipeline.

Election records come out of the parser, Census records out of the ACS
client or the per-state JSON files, and County/State entities are what the
frontend consumes. Every entity serializes to the camelCase JSON shape the
frontend reads via ``to_dict()``.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)


class PoliticalLean(str, Enum):
    """Five-point political lean derived from two-party vote share."""

    STRONGLY_DEMOCRATIC = "strongly-democratic"
    DEMOCRATIC = "democratic"
    SWING = "swing"
    REPUBLICAN = "republican"
    STRONGLY_REPUBLICAN = "strongly-republican"


# ============================================================================
# ELECTION RECORDS
# ============================================================================

@dataclass(frozen=True)
class RawElectionRow:
    year: int
    state_name: str
    state_abbr: str
    county_name: str
    county_fips: str
    candidate_name: str
    party: str
    candidate_votes: int
    total_votes: int


@dataclass(frozen=True)
class Candidate:
    name: str
    party: str
    votes: int
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'party': self.party,
            'votes': self.votes,
            'percentage': self.percentage,
        }


@dataclass
class ElectionResult:
    """One county's presidential result for one year."""

    year: int
    county_fips: str
    county_name: str
    state_abbr: str
    state_name: str
    candidates: List[Candidate]
    total_votes: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'year': self.year,
            'countyFips': self.county_fips,
            'countyName': self.county_name,
            'stateAbbr': self.state_abbr,
            'stateName': self.state_name,
            'candidates': [c.to_dict() for c in self.candidates],
            'totalVotes': self.total_votes,
        }


@dataclass
class CountyElectionData:
    """All elections for one county, most recent first."""

    county_fips: str
    county_name: str
    state_abbr: str
    state_name: str
    elections: List[ElectionResult]

    @property
    def most_recent(self) -> Optional[ElectionResult]:
        return self.elections[0] if self.elections else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'countyFips': self.county_fips,
            'countyName': self.county_name,
            'stateAbbr': self.state_abbr,
            'stateName': self.state_name,
            'elections': [e.to_dict() for e in self.elections],
        }


# ============================================================================
# CENSUS RECORDS
# ============================================================================

def _read_fixed_fields(
    record_type: str,
    data: Mapping[str, Any],
    aliases: Dict[str, str]
) -> Dict[str, float]:
    """
    Map a loosely-typed JSON block onto a fixed set of numeric fields.

    Unknown keys are dropped with a warning; missing keys default to 0.0.

    Args:
        record_type: Name used in log messages
        data: Raw mapping (camelCase or snake_case keys)
        aliases: Accepted key -> field name

    Returns:
        Dictionary of field name -> float
    """
    values = {name: 0.0 for name in set(aliases.values())}
    unknown = []

    for key, value in data.items():
        name = aliases.get(key)
        if name is None:
            unknown.append(key)
            continue
        try:
            values[name] = float(value) if value is not None else 0.0
        except (TypeError, ValueError):
            logger.warning(f"Non-numeric {record_type} value for '{key}': {value!r}")
            values[name] = 0.0

    if unknown:
        logger.warning(f"Ignoring unknown {record_type} keys: {sorted(unknown)}")

    return values


@dataclass(frozen=True)
class CensusRace:
    """Race/ethnicity shares in percent (Hispanic is counted independently)."""

    white: float = 0.0
    black: float = 0.0
    asian: float = 0.0
    native_american: float = 0.0
    pacific_islander: float = 0.0
    other: float = 0.0
    two_or_more: float = 0.0
    hispanic: float = 0.0

    _ALIASES = {
        'white': 'white',
        'black': 'black',
        'asian': 'asian',
        'nativeAmerican': 'native_american',
        'native_american': 'native_american',
        'pacificIslander': 'pacific_islander',
        'pacific_islander': 'pacific_islander',
        'other': 'other',
        'twoOrMore': 'two_or_more',
        'two_or_more': 'two_or_more',
        'hispanic': 'hispanic',
    }

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'CensusRace':
        if not data:
            return cls()
        return cls(**_read_fixed_fields('race', data, cls._ALIASES))

    def to_dict(self) -> Dict[str, float]:
        return {
            'white': self.white,
            'black': self.black,
            'asian': self.asian,
            'nativeAmerican': self.native_american,
            'pacificIslander': self.pacific_islander,
            'other': self.other,
            'twoOrMore': self.two_or_more,
            'hispanic': self.hispanic,
        }


@dataclass(frozen=True)
class CensusEducation:
    """Educational attainment shares (population 25+) in percent."""

    less_than_high_school: float = 0.0
    high_school: float = 0.0
    some_college: float = 0.0
    associates: float = 0.0
    bachelors: float = 0.0
    graduate: float = 0.0

    _ALIASES = {
        'lessThanHighSchool': 'less_than_high_school',
        'less_than_high_school': 'less_than_high_school',
        'highSchool': 'high_school',
        'high_school': 'high_school',
        'someCollege': 'some_college',
        'some_college': 'some_college',
        'associates': 'associates',
        'bachelors': 'bachelors',
        'graduate': 'graduate',
    }

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'CensusEducation':
        if not data:
            return cls()
        return cls(**_read_fixed_fields('education', data, cls._ALIASES))

    def to_dict(self) -> Dict[str, float]:
        return {
            'lessThanHighSchool': self.less_than_high_school,
            'highSchool': self.high_school,
            'someCollege': self.some_college,
            'associates': self.associates,
            'bachelors': self.bachelors,
            'graduate': self.graduate,
        }


@dataclass(frozen=True)
class CensusCountyData:
    """ACS 5-year demographics for one county."""

    county_fips: str
    state_fips: str
    name: str
    population: float
    median_age: float
    race: CensusRace = field(default_factory=CensusRace)
    education: CensusEducation = field(default_factory=CensusEducation)
    median_income: float = 0.0
    mean_income: float = 0.0

    @property
    def full_fips(self) -> str:
        """Five-digit state + county FIPS."""
        return f"{str(self.state_fips).zfill(2)}{str(self.county_fips).zfill(3)}"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'CensusCountyData':
        """
        Build a record from the JSON shape written by the Census fetch.

        Raises:
            KeyError: If a FIPS field is missing
        """
        return cls(
            county_fips=str(data['countyFips']).zfill(3),
            state_fips=str(data['stateFips']).zfill(2),
            name=str(data.get('name', '')),
            population=float(data.get('population') or 0),
            median_age=float(data.get('medianAge') or 0),
            race=CensusRace.from_dict(data.get('race')),
            education=CensusEducation.from_dict(data.get('education')),
            median_income=float(data.get('medianIncome') or 0),
            mean_income=float(data.get('meanIncome') or 0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'countyFips': self.county_fips,
            'stateFips': self.state_fips,
            'name': self.name,
            'population': self.population,
            'medianAge': self.median_age,
            'race': self.race.to_dict(),
            'education': self.education.to_dict(),
            'medianIncome': self.median_income,
            'meanIncome': self.mean_income,
        }


# ============================================================================
# FRONTEND ENTITIES
# ============================================================================

@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float

    def to_dict(self) -> Dict[str, float]:
        return {'lat': self.lat, 'lng': self.lng}


@dataclass(frozen=True)
class AgeProfile:
    median: float
    distribution: Dict[str, float]


@dataclass(frozen=True)
class Demographics:
    age: AgeProfile
    race: Dict[str, float]
    education: Dict[str, float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'age': {
                'median': self.age.median,
                'distribution': dict(self.age.distribution),
            },
            'race': dict(self.race),
            'education': dict(self.education),
        }


@dataclass(frozen=True)
class County:
    """
    A county as shown to the user.

    ``fips`` is the Census join key and must survive every transform;
    enrichment produces a new County rather than mutating this one.
    """

    id: str
    name: str
    state_id: str
    state_name: str
    population: int
    political_lean: PoliticalLean
    median_income: float
    demographics: Demographics
    top_issues: List[str] = field(default_factory=list)
    coordinates: Optional[Coordinates] = None
    fips: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'name': self.name,
            'stateId': self.state_id,
            'stateName': self.state_name,
            'population': self.population,
            'politicalLean': PoliticalLean(self.political_lean).value,
            'medianIncome': self.median_income,
            'demographics': self.demographics.to_dict(),
            'topIssues': list(self.top_issues),
        }
        if self.coordinates is not None:
            data['coordinates'] = self.coordinates.to_dict()
        if self.fips is not None:
            data['fips'] = self.fips
        return data


@dataclass(frozen=True)
class State:
    id: str
    name: str
    abbreviation: str
    population: int
    political_lean: PoliticalLean
    top_issues: List[str]
    coordinates: Coordinates

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'abbreviation': self.abbreviation,
            'population': self.population,
            'politicalLean': PoliticalLean(self.political_lean).value,
            'topIssues': list(self.top_issues),
            'coordinates': self.coordinates.to_dict(),
        }


@dataclass(frozen=True)
class Household:
    size: int
    income: int
    type: str


@dataclass(frozen=True)
class Priority:
    issue: str
    importance: int
    description: str


@dataclass(frozen=True)
class Persona:
    id: str
    county_id: str
    name: str
    age: int
    occupation: str
    household: Household
    political_alignment: PoliticalLean
    top_priorities: List[Priority]
    background: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'countyId': self.county_id,
            'name': self.name,
            'age': self.age,
            'occupation': self.occupation,
            'householdInfo': {
                'size': self.household.size,
                'income': self.household.income,
                'type': self.household.type,
            },
            'politicalAlignment': PoliticalLean(self.political_alignment).value,
            'topPriorities': [
                {'issue': p.issue, 'importance': p.importance, 'description': p.description}
                for p in self.top_priorities
            ],
            'background': self.background,
        }

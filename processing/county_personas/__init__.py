"""
County persona data pipeline: election parsing, political lean, Census enrichment.
"""

from .census_enricher import enrich_counties_with_census_data
from .election_parser import parse_election_data
from .models import CensusCountyData, County, CountyElectionData, PoliticalLean, State
from .political_lean import calculate_political_lean

__all__ = [
    'parse_election_data',
    'calculate_political_lean',
    'enrich_counties_with_census_data',
    'CensusCountyData',
    'County',
    'CountyElectionData',
    'PoliticalLean',
    'State',
]

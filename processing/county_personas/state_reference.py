"""
Static state reference tables: FIPS codes, names, population estimates and
approximate geographic centers for the 50 states plus DC.
"""

from typing import Dict, Optional

from .models import Coordinates

STATE_FIPS: Dict[str, str] = {
    'AL': '01', 'AK': '02', 'AZ': '04', 'AR': '05', 'CA': '06',
    'CO': '08', 'CT': '09', 'DE': '10', 'DC': '11', 'FL': '12',
    'GA': '13', 'HI': '15', 'ID': '16', 'IL': '17', 'IN': '18',
    'IA': '19', 'KS': '20', 'KY': '21', 'LA': '22', 'ME': '23',
    'MD': '24', 'MA': '25', 'MI': '26', 'MN': '27', 'MS': '28',
    'MO': '29', 'MT': '30', 'NE': '31', 'NV': '32', 'NH': '33',
    'NJ': '34', 'NM': '35', 'NY': '36', 'NC': '37', 'ND': '38',
    'OH': '39', 'OK': '40', 'OR': '41', 'PA': '42', 'RI': '44',
    'SC': '45', 'SD': '46', 'TN': '47', 'TX': '48', 'UT': '49',
    'VT': '50', 'VA': '51', 'WA': '53', 'WV': '54', 'WI': '55',
    'WY': '56',
}

FIPS_TO_STATE: Dict[str, str] = {fips: abbr for abbr, fips in STATE_FIPS.items()}

STATE_NAMES: Dict[str, str] = {
    'AL': 'Alabama', 'AK': 'Alaska', 'AZ': 'Arizona', 'AR': 'Arkansas',
    'CA': 'California', 'CO': 'Colorado', 'CT': 'Connecticut', 'DE': 'Delaware',
    'DC': 'District of Columbia', 'FL': 'Florida', 'GA': 'Georgia', 'HI': 'Hawaii',
    'ID': 'Idaho', 'IL': 'Illinois', 'IN': 'Indiana', 'IA': 'Iowa',
    'KS': 'Kansas', 'KY': 'Kentucky', 'LA': 'Louisiana', 'ME': 'Maine',
    'MD': 'Maryland', 'MA': 'Massachusetts', 'MI': 'Michigan', 'MN': 'Minnesota',
    'MS': 'Mississippi', 'MO': 'Missouri', 'MT': 'Montana', 'NE': 'Nebraska',
    'NV': 'Nevada', 'NH': 'New Hampshire', 'NJ': 'New Jersey', 'NM': 'New Mexico',
    'NY': 'New York', 'NC': 'North Carolina', 'ND': 'North Dakota', 'OH': 'Ohio',
    'OK': 'Oklahoma', 'OR': 'Oregon', 'PA': 'Pennsylvania', 'RI': 'Rhode Island',
    'SC': 'South Carolina', 'SD': 'South Dakota', 'TN': 'Tennessee', 'TX': 'Texas',
    'UT': 'Utah', 'VT': 'Vermont', 'VA': 'Virginia', 'WA': 'Washington',
    'WV': 'West Virginia', 'WI': 'Wisconsin', 'WY': 'Wyoming',
}

# 2023 estimates (approximate)
STATE_POPULATIONS: Dict[str, int] = {
    'AL': 5074296, 'AK': 733583, 'AZ': 7276316, 'AR': 3060151,
    'CA': 39029342, 'CO': 5839926, 'CT': 3605944, 'DE': 1018396,
    'DC': 671803, 'FL': 22244823, 'GA': 10912876, 'HI': 1440196,
    'ID': 1900920, 'IL': 12671469, 'IN': 6833037, 'IA': 3200517,
    'KS': 2937150, 'KY': 4512310, 'LA': 4657757, 'ME': 1385340,
    'MD': 6165129, 'MA': 6984723, 'MI': 10037261, 'MN': 5706494,
    'MS': 2940057, 'MO': 6168189, 'MT': 1122867, 'NE': 1967923,
    'NV': 3177776, 'NH': 1395231, 'NJ': 9261699, 'NM': 2117522,
    'NY': 19835913, 'NC': 10698973, 'ND': 779094, 'OH': 11780017,
    'OK': 4019800, 'OR': 4240137, 'PA': 13002700, 'RI': 1095610,
    'SC': 5282634, 'SD': 909824, 'TN': 7051339, 'TX': 30029572,
    'UT': 3380800, 'VT': 647064, 'VA': 8683619, 'WA': 7785786,
    'WV': 1782959, 'WI': 5895908, 'WY': 581381,
}

STATE_COORDINATES: Dict[str, Coordinates] = {
    'AL': Coordinates(32.806671, -86.791130),
    'AK': Coordinates(61.370716, -152.404419),
    'AZ': Coordinates(33.729759, -111.431221),
    'AR': Coordinates(34.969704, -92.373123),
    'CA': Coordinates(36.116203, -119.681564),
    'CO': Coordinates(39.059811, -105.311104),
    'CT': Coordinates(41.597782, -72.755371),
    'DE': Coordinates(39.318523, -75.507141),
    'DC': Coordinates(38.907192, -77.036873),
    'FL': Coordinates(27.766279, -81.686783),
    'GA': Coordinates(33.040619, -83.643074),
    'HI': Coordinates(21.094318, -157.498337),
    'ID': Coordinates(44.240459, -114.478828),
    'IL': Coordinates(40.349457, -88.986137),
    'IN': Coordinates(39.849426, -86.258278),
    'IA': Coordinates(42.011539, -93.210526),
    'KS': Coordinates(38.526600, -96.726486),
    'KY': Coordinates(37.668140, -84.670067),
    'LA': Coordinates(31.169546, -91.867805),
    'ME': Coordinates(44.323535, -69.765261),
    'MD': Coordinates(39.063946, -76.802101),
    'MA': Coordinates(42.230171, -71.530106),
    'MI': Coordinates(43.326618, -84.536095),
    'MN': Coordinates(45.694454, -93.900192),
    'MS': Coordinates(32.741646, -89.678696),
    'MO': Coordinates(38.572954, -92.189283),
    'MT': Coordinates(46.921925, -110.454353),
    'NE': Coordinates(41.125370, -98.268082),
    'NV': Coordinates(38.313515, -117.055374),
    'NH': Coordinates(43.452492, -71.563896),
    'NJ': Coordinates(40.298904, -74.521011),
    'NM': Coordinates(34.840515, -106.248482),
    'NY': Coordinates(42.165726, -74.948051),
    'NC': Coordinates(35.630066, -79.806419),
    'ND': Coordinates(47.528912, -99.784012),
    'OH': Coordinates(40.388783, -82.764915),
    'OK': Coordinates(35.565342, -96.928917),
    'OR': Coordinates(44.572021, -122.070938),
    'PA': Coordinates(40.590752, -77.209755),
    'RI': Coordinates(41.680893, -71.51178),
    'SC': Coordinates(33.856892, -80.945007),
    'SD': Coordinates(44.299782, -99.438828),
    'TN': Coordinates(35.747845, -86.692345),
    'TX': Coordinates(31.054487, -97.563461),
    'UT': Coordinates(40.150032, -111.862434),
    'VT': Coordinates(44.045876, -72.710686),
    'VA': Coordinates(37.769337, -78.169968),
    'WA': Coordinates(47.400902, -121.490494),
    'WV': Coordinates(38.491226, -80.954453),
    'WI': Coordinates(44.268543, -89.616508),
    'WY': Coordinates(42.755966, -107.302490),
}

# Fallback map center (continental US)
DEFAULT_COORDINATES = Coordinates(39.8283, -98.5795)


def get_state_fips(state_abbr: str) -> Optional[str]:
    """Two-digit state FIPS for an abbreviation, or None."""
    return STATE_FIPS.get(str(state_abbr).upper())


def get_state_abbr(state_fips: str) -> Optional[str]:
    """State abbreviation for a (possibly unpadded) state FIPS, or None."""
    return FIPS_TO_STATE.get(str(state_fips).zfill(2))


def get_state_name(state_abbr: str) -> str:
    """Full state name; falls back to the abbreviation itself."""
    return STATE_NAMES.get(str(state_abbr).upper(), state_abbr)


def full_fips(state_fips: str, county_fips: str) -> str:
    """
    Build the 5-digit join key from state and county FIPS.

    >>> full_fips('06', '37')
    '06037'
    """
    return f"{str(state_fips).zfill(2)}{str(county_fips).zfill(3)}"

"""
Hand-authored sample states, counties and personas.

Used when a state has no election-derived counties, and as the persona
source for the frontend.
"""

from typing import List, Optional

from .models import (
    AgeProfile, Coordinates, County, Demographics, Household, Persona,
    PoliticalLean, Priority, State
)

MOCK_STATES: List[State] = [
    State('CA', 'California', 'CA', 39538223, PoliticalLean.STRONGLY_DEMOCRATIC,
          ['Climate Change', 'Housing Affordability'], Coordinates(36.7783, -119.4179)),
    State('TX', 'Texas', 'TX', 29145505, PoliticalLean.REPUBLICAN,
          ['Immigration', 'Energy'], Coordinates(31.9686, -99.9018)),
    State('FL', 'Florida', 'FL', 21538187, PoliticalLean.REPUBLICAN,
          ['Climate Change', 'Tourism'], Coordinates(27.7663, -81.6868)),
    State('NY', 'New York', 'NY', 20201249, PoliticalLean.STRONGLY_DEMOCRATIC,
          ['Healthcare', 'Urban Development'], Coordinates(42.1657, -74.9481)),
    State('PA', 'Pennsylvania', 'PA', 13002700, PoliticalLean.SWING,
          ['Manufacturing', 'Healthcare'], Coordinates(40.5908, -77.2098)),
    State('OH', 'Ohio', 'OH', 11799448, PoliticalLean.SWING,
          ['Manufacturing', 'Education'], Coordinates(40.3888, -82.7649)),
    State('GA', 'Georgia', 'GA', 10711908, PoliticalLean.SWING,
          ['Voting Rights', 'Economic Development'], Coordinates(33.0406, -83.6431)),
    State('NC', 'North Carolina', 'NC', 10439388, PoliticalLean.SWING,
          ['Education', 'Healthcare'], Coordinates(35.5397, -79.8431)),
    State('MI', 'Michigan', 'MI', 10037334, PoliticalLean.SWING,
          ['Automotive Industry', 'Water Quality'], Coordinates(43.3266, -84.5361)),
    State('AZ', 'Arizona', 'AZ', 7151502, PoliticalLean.SWING,
          ['Water Resources', 'Immigration'], Coordinates(34.0489, -111.0937)),
]

MOCK_COUNTIES: List[County] = [
    County(
        id='CA-LA',
        name='Los Angeles County',
        state_id='CA',
        state_name='California',
        population=10014009,
        political_lean=PoliticalLean.STRONGLY_DEMOCRATIC,
        median_income=71000,
        demographics=Demographics(
            age=AgeProfile(37, {'18-34': 28, '35-54': 28, '55+': 44}),
            race={'White': 48, 'Hispanic': 49, 'Asian': 15, 'Black': 8, 'Other': 5},
            education={'High School': 25, 'Some College': 20, 'Bachelor': 35, 'Graduate': 20},
        ),
        top_issues=['Housing Affordability', 'Homelessness', 'Climate Change'],
        coordinates=Coordinates(34.0522, -118.2437),
        fips='06037',
    ),
    County(
        id='TX-Harris',
        name='Harris County',
        state_id='TX',
        state_name='Texas',
        population=4731145,
        political_lean=PoliticalLean.DEMOCRATIC,
        median_income=61000,
        demographics=Demographics(
            age=AgeProfile(34, {'18-34': 32, '35-54': 28, '55+': 40}),
            race={'White': 40, 'Hispanic': 42, 'Black': 19, 'Asian': 7, 'Other': 2},
            education={'High School': 28, 'Some College': 22, 'Bachelor': 28, 'Graduate': 22},
        ),
        top_issues=['Energy', 'Immigration', 'Healthcare'],
        coordinates=Coordinates(29.7604, -95.3698),
        fips='48201',
    ),
    County(
        id='PA-Allegheny',
        name='Allegheny County',
        state_id='PA',
        state_name='Pennsylvania',
        population=1223348,
        political_lean=PoliticalLean.DEMOCRATIC,
        median_income=58000,
        demographics=Demographics(
            age=AgeProfile(41, {'18-34': 24, '35-54': 26, '55+': 50}),
            race={'White': 81, 'Black': 13, 'Asian': 4, 'Other': 2},
            education={'High School': 30, 'Some College': 20, 'Bachelor': 30, 'Graduate': 20},
        ),
        top_issues=['Manufacturing', 'Healthcare', 'Education'],
        coordinates=Coordinates(40.4406, -79.9959),
        fips='42003',
    ),
    County(
        id='OH-Cuyahoga',
        name='Cuyahoga County',
        state_id='OH',
        state_name='Ohio',
        population=1248512,
        political_lean=PoliticalLean.DEMOCRATIC,
        median_income=52000,
        demographics=Demographics(
            age=AgeProfile(40, {'18-34': 25, '35-54': 26, '55+': 49}),
            race={'White': 63, 'Black': 30, 'Asian': 4, 'Other': 3},
            education={'High School': 32, 'Some College': 22, 'Bachelor': 28, 'Graduate': 18},
        ),
        top_issues=['Manufacturing', 'Healthcare', 'Education'],
        coordinates=Coordinates(41.4993, -81.6944),
        fips='39035',
    ),
    County(
        id='TX-Montgomery',
        name='Montgomery County',
        state_id='TX',
        state_name='Texas',
        population=620000,
        political_lean=PoliticalLean.STRONGLY_REPUBLICAN,
        median_income=85000,
        demographics=Demographics(
            age=AgeProfile(38, {'18-34': 28, '35-54': 30, '55+': 42}),
            race={'White': 78, 'Hispanic': 15, 'Black': 4, 'Asian': 3, 'Other': 1},
            education={'High School': 20, 'Some College': 18, 'Bachelor': 35, 'Graduate': 27},
        ),
        top_issues=['Taxes', 'Energy', 'Property Rights'],
        coordinates=Coordinates(30.3072, -95.4920),
        fips='48339',
    ),
]

MOCK_PERSONAS: List[Persona] = [
    Persona(
        id='persona-1',
        county_id='CA-LA',
        name='Alex Martinez',
        age=32,
        occupation='Social Media Manager',
        household=Household(2, 65000, 'Renting apartment with partner'),
        political_alignment=PoliticalLean.DEMOCRATIC,
        top_priorities=[
            Priority('Housing Affordability', 95,
                     'Rent takes up 60% of income. Struggling to save for a down payment '
                     'despite working full-time.'),
            Priority('Climate Change', 85,
                     'Worried about wildfires and air quality. Supports renewable energy transition.'),
            Priority('Healthcare Access', 75,
                     'Employer insurance is expensive. Needs better mental health coverage.'),
        ],
        background=(
            'Alex moved to LA five years ago for work opportunities. Enjoys the diversity and '
            'culture but struggles with the high cost of living. Active in local community '
            'organizing around housing issues.'
        ),
    ),
    Persona(
        id='persona-2',
        county_id='TX-Harris',
        name='Alex Johnson',
        age=45,
        occupation='Oil & Gas Operations Manager',
        household=Household(4, 95000, 'Owns home, two children'),
        political_alignment=PoliticalLean.REPUBLICAN,
        top_priorities=[
            Priority('Energy Industry', 90,
                     'Job security depends on energy sector. Concerned about regulations '
                     'affecting the industry.'),
            Priority('Taxes', 80,
                     "Wants lower taxes to support family savings and children's education fund."),
            Priority('Immigration', 70,
                     'Supports legal immigration but concerned about border security and job '
                     'competition.'),
        ],
        background=(
            'Alex has worked in the energy industry for 20 years. Lives in a suburban '
            'neighborhood, values family stability and economic opportunity. Active in local '
            'church and community sports.'
        ),
    ),
    Persona(
        id='persona-3',
        county_id='PA-Allegheny',
        name='Alex Chen',
        age=38,
        occupation='Manufacturing Technician',
        household=Household(3, 55000, 'Owns home, one child'),
        political_alignment=PoliticalLean.SWING,
        top_priorities=[
            Priority('Manufacturing Jobs', 92,
                     'Worried about factory closures and automation. Needs job training programs.'),
            Priority('Healthcare', 88,
                     'Family has pre-existing conditions. Needs affordable, comprehensive coverage.'),
            Priority('Education', 75,
                     'Wants better public schools and affordable college options for child.'),
        ],
        background=(
            "Alex's family has lived in the Pittsburgh area for three generations. Worked in "
            'manufacturing since high school. Values hard work and community but feels left '
            'behind by economic changes.'
        ),
    ),
    Persona(
        id='persona-4',
        county_id='TX-Montgomery',
        name='Alex Thompson',
        age=52,
        occupation='Small Business Owner (Construction)',
        household=Household(2, 110000, 'Owns home, empty nesters'),
        political_alignment=PoliticalLean.STRONGLY_REPUBLICAN,
        top_priorities=[
            Priority('Property Rights', 95,
                     'Concerned about regulations affecting business operations and property values.'),
            Priority('Taxes', 90,
                     'Wants lower business taxes and fewer regulations to grow the business.'),
            Priority('Energy', 75,
                     'Supports local energy industry and lower energy costs for business.'),
        ],
        background=(
            'Alex started a construction business 25 years ago. Values independence, hard work, '
            'and limited government intervention. Active in local business associations and '
            'conservative political groups.'
        ),
    ),
]


def get_state_by_id(state_id: str) -> Optional[State]:
    return next((s for s in MOCK_STATES if s.id == state_id), None)


def get_counties_by_state(state_id: str) -> List[County]:
    return [c for c in MOCK_COUNTIES if c.state_id == state_id]


def get_county_by_id(county_id: str) -> Optional[County]:
    return next((c for c in MOCK_COUNTIES if c.id == county_id), None)


def get_persona_by_county(county_id: str) -> Optional[Persona]:
    return next((p for p in MOCK_PERSONAS if p.county_id == county_id), None)


def get_persona_by_id(persona_id: str) -> Optional[Persona]:
    return next((p for p in MOCK_PERSONAS if p.id == persona_id), None)

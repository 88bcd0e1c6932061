"""
Field resolvers for the SWAPI schema.

Root resolvers return plain dicts carrying the declared fields of their type;
relation fields keep the upstream URLs until their own resolver fetches them,
so a relation is only fetched when the query selects it.
"""

from typing import Any, Dict, List, Optional

from gql import field_resolver, query

from .client import TYPENAME, ResourceClient

PLANET_FIELDS = ('name', 'diameter', 'climate', 'terrain', 'residents')
PERSON_FIELDS = ('name', 'gender', 'homeworld')


def resource_id(url: Optional[str]) -> Optional[str]:
    """Id embedded in a resource URL, e.g. ".../planets/1/" -> "1"."""
    if not url:
        return None
    return url.rstrip('/').rsplit('/', 1)[-1]


def planet_record(data: Dict[str, Any]) -> Dict[str, Any]:
    record = {field: data.get(field) for field in PLANET_FIELDS}
    record.update(id=resource_id(data.get('url')), **{TYPENAME: 'Planet'})
    return record


def person_record(data: Dict[str, Any]) -> Dict[str, Any]:
    record = {field: data.get(field) for field in PERSON_FIELDS}
    record.update(id=resource_id(data.get('url')), **{TYPENAME: 'Person'})
    return record


def get_client(info) -> ResourceClient:
    return info.context['client']


@query('planet')
async def resolve_planet(parent, info, id: str) -> Dict[str, Any]:
    data = await get_client(info).fetch_resource('planets', id)
    return planet_record(data)


@query('allPlanets')
async def resolve_all_planets(parent, info) -> List[Dict[str, Any]]:
    planets = await get_client(info).fetch_collection('planets')
    return [planet_record(data) for data in planets]


@query('person')
async def resolve_person(parent, info, id: str) -> Dict[str, Any]:
    data = await get_client(info).fetch_resource('people', id)
    return person_record(data)


@query('allPeople')
async def resolve_all_people(parent, info) -> List[Dict[str, Any]]:
    people = await get_client(info).fetch_collection('people')
    return [person_record(data) for data in people]


@field_resolver('Planet', 'residents')
async def resolve_planet_residents(planet, info) -> List[Dict[str, Any]]:
    residents = await get_client(info).fetch_many(planet.get('residents') or [], 'Person')
    return [person_record(data) for data in residents]


@field_resolver('Person', 'homeworld')
async def resolve_person_homeworld(person, info) -> Optional[Dict[str, Any]]:
    url = person.get('homeworld')
    if not url:
        return None
    return planet_record(await get_client(info).fetch_one(url, 'Planet'))

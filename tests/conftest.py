"""
Shared fixtures: a small SWAPI-shaped dataset served through httpx.MockTransport.
"""

import json

import httpx
import pytest
import pytest_asyncio

from swapigql.client import ResourceClient
from swapigql.schema import make_swapi_schema

BASE_URL = 'https://swapi.test/api'


def planet_url(planet_id):
    return f'{BASE_URL}/planets/{planet_id}/'


def person_url(person_id):
    return f'{BASE_URL}/people/{person_id}/'


PLANETS = {
    '1': {
        'name': 'Tatooine',
        'rotation_period': '23',
        'diameter': '10465',
        'climate': 'arid',
        'terrain': 'desert',
        'residents': [person_url(1), person_url(2)],
        'url': planet_url(1),
    },
    '2': {
        'name': 'Alderaan',
        'rotation_period': '24',
        'diameter': '12500',
        'climate': 'temperate',
        'terrain': 'grasslands, mountains',
        'residents': [person_url(5)],
        'url': planet_url(2),
    },
    '3': {
        'name': 'Yavin IV',
        'rotation_period': '24',
        'diameter': '10200',
        'climate': 'temperate, tropical',
        'terrain': 'jungle, rainforests',
        'residents': [],
        'url': planet_url(3),
    },
    # Hoth references a person the upstream does not have.
    '4': {
        'name': 'Hoth',
        'rotation_period': '23',
        'diameter': '7200',
        'climate': 'frozen',
        'terrain': 'tundra, ice caves, mountain ranges',
        'residents': [person_url(1), person_url(99)],
        'url': planet_url(4),
    },
}

PEOPLE = {
    '1': {
        'name': 'Luke Skywalker',
        'height': '172',
        'gender': 'male',
        'homeworld': planet_url(1),
        'url': person_url(1),
    },
    '2': {
        'name': 'C-3PO',
        'height': '167',
        'gender': 'n/a',
        'homeworld': planet_url(1),
        'url': person_url(2),
    },
    '5': {
        'name': 'Leia Organa',
        'height': '150',
        'gender': 'female',
        'homeworld': planet_url(2),
        'url': person_url(5),
    },
}


def build_routes():
    planets = list(PLANETS.values())
    routes = {planet_url(key): value for key, value in PLANETS.items()}
    routes.update({person_url(key): value for key, value in PEOPLE.items()})
    routes[f'{BASE_URL}/planets/'] = {
        'count': len(planets),
        'next': f'{BASE_URL}/planets/?page=2',
        'previous': None,
        'results': planets[:2],
    }
    routes[f'{BASE_URL}/planets/?page=2'] = {
        'count': len(planets),
        'next': None,
        'previous': f'{BASE_URL}/planets/',
        'results': planets[2:],
    }
    routes[f'{BASE_URL}/people/'] = {
        'count': len(PEOPLE),
        'next': None,
        'previous': None,
        'results': list(PEOPLE.values()),
    }
    return routes


class FakeSwapi:
    """Upstream stand-in; records every requested URL."""

    def __init__(self):
        self.routes = build_routes()
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        if url not in self.routes:
            return httpx.Response(404, json={'detail': 'Not found'})
        body = self.routes[url]
        if isinstance(body, httpx.Response):
            return body
        return httpx.Response(200, content=json.dumps(body).encode(), headers={'Content-Type': 'application/json'})


@pytest.fixture
def swapi():
    return FakeSwapi()


@pytest.fixture
def transport(swapi):
    return httpx.MockTransport(swapi)


@pytest_asyncio.fixture
async def client(transport):
    client = ResourceClient(BASE_URL, transport=transport)
    yield client
    await client.close()


@pytest.fixture(scope='session')
def schema():
    return make_swapi_schema()

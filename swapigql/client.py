"""
HTTP client for the upstream Star Wars API.

Every resource is fetched with a plain GET; relation fields in the upstream
records are absolute URLs, so related resources are fetched by URL as well.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from .errors import DecodeError, NotFoundError, UpstreamError

logger = logging.getLogger(__name__)

TYPENAME = '__typename'


class ResourceClient:
    """
    Async client for SWAPI resources.

    Usage:
        client = ResourceClient('https://swapi.dev/api')
        planet = await client.fetch_resource('planets', 1)
        residents = await client.fetch_many(planet['residents'], 'Person')
        await client.close()
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        max_concurrency: int = 10,
        transport: httpx.AsyncBaseTransport = None,
    ) -> None:
        """
        Args:
            base_url: Root of the upstream API (e.g. "https://swapi.dev/api")
            timeout: HTTP request timeout in seconds
            max_concurrency: Upper bound of in-flight upstream requests
            transport: Optional httpx transport, used by tests to mock upstream
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.transport = transport
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport, follow_redirects=True
            )
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def resource_url(self, kind: str, resource_id: Any = None) -> str:
        if resource_id is None:
            return f'{self.base_url}/{kind}/'
        return f'{self.base_url}/{kind}/{resource_id}/'

    async def fetch(self, url: str) -> Dict[str, Any]:
        """
        GET a single upstream URL and return its JSON object.

        Raises:
            NotFoundError: upstream answered 404
            UpstreamError: network failure or any other non-success status
            DecodeError: body is not a JSON object
        """
        client = await self._get_client()
        async with self._semaphore:
            logger.debug('GET %s', url)
            try:
                response = await client.get(url)
            except httpx.RequestError as exc:
                logger.warning('GET %s failed: %s', url, exc)
                raise UpstreamError(url, None, str(exc)) from exc

        if response.status_code == 404:
            raise NotFoundError(url)
        if not response.is_success:
            logger.warning('GET %s returned %s', url, response.status_code)
            raise UpstreamError(url, response.status_code, response.reason_phrase)

        try:
            data = response.json()
        except ValueError as exc:
            raise DecodeError(url, str(exc)) from exc
        if not isinstance(data, dict):
            raise DecodeError(url, f'expected an object, got {type(data).__name__}')
        return data

    async def fetch_resource(self, kind: str, resource_id: Any) -> Dict[str, Any]:
        return await self.fetch(self.resource_url(kind, resource_id))

    async def fetch_collection(self, kind: str) -> List[Dict[str, Any]]:
        """Fetch every record of a collection, following the `next` page links."""
        results = []
        seen = set()
        url = self.resource_url(kind)
        while url:
            if url in seen:
                logger.warning('%s links back to an already fetched page: %s', kind, url)
                break
            seen.add(url)
            page = await self.fetch(url)
            results.extend(page.get('results') or [])
            url = page.get('next')
        return results

    async def fetch_one(self, url: str, type_tag: str) -> Dict[str, Any]:
        data = await self.fetch(url)
        return tag(data, type_tag)

    async def fetch_many(self, urls: Sequence[str], type_tag: str) -> List[Dict[str, Any]]:
        """
        Fetch related resources concurrently, in the order of `urls`.

        The first failing fetch aborts the whole call; no partial list is returned.
        """
        if not urls:
            return []
        results = await asyncio.gather(*(self.fetch(url) for url in urls))
        return [tag(data, type_tag) for data in results]


def tag(data: Dict[str, Any], type_tag: str) -> Dict[str, Any]:
    return {**data, TYPENAME: type_tag}

import contextlib
import logging
import sys

import httpx
import uvicorn

from .applications import GraphQL
from .client import ResourceClient
from .schema import make_swapi_schema
from .settings import Settings

logger = logging.getLogger(__name__)


def configure_logging(level: str = 'INFO') -> None:
    logging.basicConfig(
        level=level.upper(),
        stream=sys.stdout,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
        force=True,
    )


def create_app(settings: Settings = None, transport: httpx.AsyncBaseTransport = None) -> GraphQL:
    """Build the gateway app; `transport` replaces the network for tests."""
    settings = settings or Settings()
    client = ResourceClient(
        settings.swapi_url,
        timeout=settings.timeout,
        max_concurrency=settings.max_concurrency,
        transport=transport,
    )

    @contextlib.asynccontextmanager
    async def lifespan(app):
        logger.info('Proxying %s at %s', settings.swapi_url, settings.path)
        yield
        await client.close()
        logger.info('Upstream client closed')

    def context_builder():
        return {'client': client}

    return GraphQL(
        make_swapi_schema(),
        path=settings.path,
        playground=settings.playground,
        debug=settings.debug,
        context_builder=context_builder,
        lifespan=lifespan,
    )


def main() -> None:
    settings = Settings()
    configure_logging(settings.log_level)
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())

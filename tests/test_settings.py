from swapigql.settings import Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv('SWAPI_GATEWAY_PORT', raising=False)
    settings = Settings(_env_file=None)

    assert settings.swapi_url == 'https://swapi.dev/api'
    assert settings.port == 3000
    assert settings.path == '/graphql'


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv('SWAPI_GATEWAY_SWAPI_URL', 'http://localhost:9000/api')
    monkeypatch.setenv('SWAPI_GATEWAY_PORT', '8080')
    monkeypatch.setenv('SWAPI_GATEWAY_MAX_CONCURRENCY', '3')

    settings = Settings(_env_file=None)

    assert settings.swapi_url == 'http://localhost:9000/api'
    assert settings.port == 8080
    assert settings.max_concurrency == 3

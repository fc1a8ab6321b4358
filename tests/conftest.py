import pytest

from jsconnect import ClientConfig, JSConnect, SSOTokenEncoder

NOW = 1_700_000_000
CLIENT_ID = "abc123"
SECRET = "s3cret"


@pytest.fixture
def config():
    return ClientConfig(client_id=CLIENT_ID, secret=SECRET)


@pytest.fixture
def connect(config):
    return JSConnect(config, clock=lambda: NOW)


@pytest.fixture
def encoder(config):
    return SSOTokenEncoder(config, clock=lambda: NOW)


@pytest.fixture
def alice():
    return {
        "uniqueid": "42",
        "name": "Alice",
        "email": "alice@example.com",
        "photourl": "http://x/y.png",
    }

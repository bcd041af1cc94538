import pytest

from bookshelf_auth.adapters.jwt.codec import HS256TokenCodec
from bookshelf_auth.adapters.security.bcrypt_hasher import BcryptCredentialVerifier
from bookshelf_auth.adapters.stores.memory import InMemoryPrincipalStore
from bookshelf_auth.config import AuthSettings
from bookshelf_auth.domain.entities import Principal
from bookshelf_auth.integrations.common.auth_factory import create_auth_dependencies

SECRET = "test-secret-key-very-secure-1234567890"
OTHER_SECRET = "wrong-secret-key-also-long-enough-0987654321"
NOW = 1_700_000_000


class FixedClock:
    def __init__(self, current: int = NOW) -> None:
        self.current = current

    def now(self) -> int:
        return self.current

    def advance(self, seconds: int) -> None:
        self.current += seconds


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def codec(clock):
    return HS256TokenCodec(secret=SECRET, ttl_seconds=3600, clock=clock)


@pytest.fixture
def verifier():
    # minimum bcrypt cost keeps the suite fast
    return BcryptCredentialVerifier(rounds=4)


@pytest.fixture
def store(verifier):
    return InMemoryPrincipalStore([
        Principal(external_id="alice", credential_hash=verifier.hash("password123")),
        Principal(
            external_id="admin@example.com",
            credential_hash=verifier.hash("password123"),
            roles=["ROLE_ADMIN"],
        ),
    ])


@pytest.fixture
def alice(store):
    return store.find_by_external_id("alice")


@pytest.fixture
def admin(store):
    return store.find_by_external_id("admin@example.com")


@pytest.fixture
def settings():
    return AuthSettings(app_secret=SECRET, token_ttl_seconds=3600, bcrypt_rounds=4)


@pytest.fixture
def auth(settings, store, verifier, clock):
    return create_auth_dependencies(
        settings=settings,
        principal_store=store,
        credential_verifier=verifier,
        clock=clock,
    )

import jwt
import pytest

from bookshelf_auth.adapters.jwt.codec import HS256TokenCodec
from bookshelf_auth.application.use_cases.authenticate import (
    AuthenticateRequestUseCase,
    extract_bearer_token,
)
from bookshelf_auth.domain.entities import Principal
from bookshelf_auth.domain.exceptions import (
    AuthenticationError,
    InvalidSignatureError,
    MalformedHeaderError,
    MalformedTokenError,
    PrincipalNotFoundError,
    TokenExpiredError,
)

from conftest import OTHER_SECRET, SECRET


class ExplodingCodec:
    expires_in = 3600

    def encode(self, principal, ttl_seconds=None):
        raise AssertionError("encode must not be called")

    def decode(self, token):
        raise AssertionError("decode must not be called")


class BrokenCodec(ExplodingCodec):
    def decode(self, token):
        raise RuntimeError("backend exploded")


class CountingStore:
    def __init__(self, inner):
        self.inner = inner
        self.lookups = []
        self.saves = 0

    def find_by_external_id(self, external_id):
        self.lookups.append(external_id)
        return self.inner.find_by_external_id(external_id)

    def find_by_id(self, principal_id):
        return self.inner.find_by_id(principal_id)

    def save(self, principal):
        self.saves += 1
        return self.inner.save(principal)


@pytest.fixture
def authenticator(codec, store):
    return AuthenticateRequestUseCase(token_codec=codec, principal_store=store)


def test_supports_requires_a_header(authenticator):
    assert authenticator.supports("Bearer some_token")
    assert authenticator.supports("")
    assert not authenticator.supports(None)


def test_authenticate_with_valid_token(authenticator, codec, alice):
    result = authenticator.execute(f"Bearer {codec.encode(alice)}")

    assert result.principal == alice
    assert result.claims.subject == "alice"
    assert result.claims.principal_id == alice.id


def test_bearer_scheme_is_case_insensitive(authenticator, codec, alice):
    token = codec.encode(alice)
    assert authenticator.execute(f"bearer {token}").external_id == "alice"
    assert authenticator.execute(f"BEARER   {token}").external_id == "alice"


def test_authenticate_with_admin_role(authenticator, codec, admin):
    result = authenticator.execute(f"Bearer {codec.encode(admin)}")
    assert result.roles == {"ROLE_ADMIN", "ROLE_USER"}


@pytest.mark.parametrize("header", ["InvalidFormat", "", "Bearer", "Bearer    ", "Basic dXNlcjpwYXNz"])
def test_malformed_header_fails_before_decoding(store, header):
    authenticator = AuthenticateRequestUseCase(token_codec=ExplodingCodec(), principal_store=store)

    with pytest.raises(MalformedHeaderError, match="Token manquant ou invalide"):
        authenticator.execute(header)


def test_expired_token(authenticator, codec, clock, alice):
    token = codec.encode(alice)
    clock.advance(7200)

    with pytest.raises(TokenExpiredError) as info:
        authenticator.execute(f"Bearer {token}")
    assert str(info.value) == "Token expiré. Veuillez vous reconnecter."


def test_unknown_principal(authenticator, codec):
    ghost = Principal(external_id="unknown_user", id=99)

    with pytest.raises(PrincipalNotFoundError) as info:
        authenticator.execute(f"Bearer {codec.encode(ghost)}")
    assert str(info.value) == "Utilisateur non trouvé"


def test_invalid_signature(authenticator, clock, alice):
    token = HS256TokenCodec(secret=OTHER_SECRET, clock=clock).encode(alice)

    with pytest.raises(InvalidSignatureError) as info:
        authenticator.execute(f"Bearer {token}")
    assert str(info.value).startswith("Token JWT invalide: ")


def test_malformed_token(authenticator):
    with pytest.raises(MalformedTokenError) as info:
        authenticator.execute("Bearer not-a-jwt")
    assert str(info.value).startswith("Token JWT invalide: ")


def test_token_missing_claims(authenticator, clock):
    token = jwt.encode({"iat": clock.current, "exp": clock.current + 60}, SECRET, algorithm="HS256")

    with pytest.raises(MalformedTokenError, match="^Token JWT invalide: "):
        authenticator.execute(f"Bearer {token}")


def test_unexpected_decoder_errors_are_wrapped(store):
    authenticator = AuthenticateRequestUseCase(token_codec=BrokenCodec(), principal_store=store)

    with pytest.raises(AuthenticationError) as info:
        authenticator.execute("Bearer abc.def.ghi")
    assert str(info.value) == "Token JWT invalide: backend exploded"
    assert isinstance(info.value.__cause__, RuntimeError)


def test_authentication_never_writes(codec, store, alice):
    counting = CountingStore(store)
    authenticator = AuthenticateRequestUseCase(token_codec=codec, principal_store=counting)

    authenticator.execute(f"Bearer {codec.encode(alice)}")

    assert counting.lookups == ["alice"]
    assert counting.saves == 0
    assert store.find_by_external_id("alice").last_issued_token is None


def test_roles_come_from_the_store_not_the_token(authenticator, codec, store, alice):
    token = codec.encode(alice)  # snapshot: ROLE_USER only
    store.save(alice.with_roles(["ROLE_ADMIN"]))

    result = authenticator.execute(f"Bearer {token}")

    assert result.claims.roles == ("ROLE_USER",)
    assert "ROLE_ADMIN" in result.roles


def test_extract_bearer_token():
    assert extract_bearer_token("Bearer abc") == "abc"
    assert extract_bearer_token("bearer   abc  ") == "abc"
    with pytest.raises(MalformedHeaderError):
        extract_bearer_token(None)

import json

import pytest

from bookshelf_auth.adapters.security.bcrypt_hasher import BcryptCredentialVerifier
from bookshelf_auth.adapters.stores.json_file import JsonFilePrincipalStore
from bookshelf_auth.cli import main

from conftest import SECRET


@pytest.fixture(autouse=True)
def env(monkeypatch):
    monkeypatch.setenv("APP_SECRET", SECRET)
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.delenv("PRINCIPAL_STORE_PATH", raising=False)


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "users.json"


def _run(capsys, *argv):
    code = main(list(argv))
    return code, json.loads(capsys.readouterr().out)


def test_create_user_and_generate_token(capsys, store_path):
    code, out = _run(
        capsys, "generate-token", "john", "secret123", "--create", "--role", "ROLE_ADMIN",
        "--store", str(store_path),
    )

    assert code == 0
    assert out["ok"] is True
    assert out["created"] is True
    assert out["uuid"] == "john"
    assert out["id"] == 1
    assert out["roles"] == ["ROLE_ADMIN", "ROLE_USER"]
    assert out["expiresIn"] == 3600
    assert out["usage"] == f"Authorization: Bearer {out['token']}"

    stored = JsonFilePrincipalStore(store_path).find_by_external_id("john")
    assert stored.last_issued_token == out["token"]
    assert stored.credential_hash != "secret123"


def test_generate_token_for_existing_user(capsys, store_path):
    _run(capsys, "generate-token", "john", "secret123", "--create", "--store", str(store_path))
    code, out = _run(capsys, "generate-token", "john", "--store", str(store_path))

    assert code == 0
    assert out["created"] is False
    assert out["roles"] == ["ROLE_USER"]


@pytest.mark.parametrize(
    "argv, message",
    [
        (["generate-token", "john", "--role", "ROLE_ROOT"], "role must be one of"),
        (["generate-token"], "uuid is required"),
        (["generate-token", "ghost"], "does not exist"),
        (["generate-token", "ghost", "--create"], "password is required"),
    ],
)
def test_failures(capsys, store_path, argv, message):
    code, out = _run(capsys, *argv, "--store", str(store_path))

    assert code == 1
    assert out["ok"] is False
    assert message in out["error"]


def test_missing_secret(capsys, monkeypatch, store_path):
    monkeypatch.delenv("APP_SECRET")
    code, out = _run(capsys, "generate-token", "john", "--store", str(store_path))

    assert code == 1
    assert "APP_SECRET" in out["error"]


def test_create_user_with_long_password(capsys, store_path):
    password = "p" * 100
    code, out = _run(capsys, "generate-token", "long", password, "--create", "--store", str(store_path))

    assert code == 0
    assert out["ok"] is True
    stored = JsonFilePrincipalStore(store_path).find_by_external_id("long")
    assert BcryptCredentialVerifier(rounds=4).verify(password, stored.credential_hash)

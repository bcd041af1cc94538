from __future__ import annotations

import base64
import hashlib

import bcrypt

from ...domain.ports import CredentialVerifier

DEFAULT_ROUNDS = 12

# bcrypt only looks at the first 72 bytes and rejects anything longer
MAX_BCRYPT_INPUT_BYTES = 72


def _bcrypt_input(plaintext: str) -> bytes:
    raw = plaintext.encode("utf-8")
    if len(raw) > MAX_BCRYPT_INPUT_BYTES:
        return base64.b64encode(hashlib.sha256(raw).digest())
    return raw


class BcryptCredentialVerifier(CredentialVerifier):
    """
    CredentialVerifier backed by bcrypt.

    Each hash embeds its own random salt and cost, so hashing the same
    password twice yields two different strings that both verify.
    Passwords longer than 72 bytes are pre-hashed with SHA-256 so every
    byte counts.
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        self._rounds = rounds

    def hash(self, plaintext: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(_bcrypt_input(plaintext), salt).decode("utf-8")

    def verify(self, plaintext: str, stored_hash: str) -> bool:
        if not stored_hash:
            return False
        try:
            return bcrypt.checkpw(_bcrypt_input(plaintext), stored_hash.encode("utf-8"))
        except ValueError:
            # not a bcrypt hash (e.g. "Invalid salt")
            return False

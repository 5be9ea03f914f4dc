from __future__ import annotations

import hashlib
import hmac
import logging
import os
from typing import Optional

import bcrypt

logger = logging.getLogger(__name__)

PBKDF2_PREFIX = "pbkdf2$"
PBKDF2_ITERATIONS = 120_000
PBKDF2_SALT_BYTES = 16
BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")
HASH_PREFIXES = (PBKDF2_PREFIX,) + BCRYPT_PREFIXES


def _pbkdf2_hash(password: str, salt: bytes, iterations: int = PBKDF2_ITERATIONS) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)


def _normalize_password_for_bcrypt(password: str) -> bytes:
    """
    bcrypt only considers the first 72 bytes, and bcrypt 5.x raises on
    anything longer, so longer passwords are truncated.
    """
    pw = (password or "").encode("utf-8")
    if len(pw) <= 72:
        return pw
    return pw[:72]


def looks_hashed(credential: Optional[str]) -> bool:
    return bool(credential) and credential.startswith(HASH_PREFIXES)


def hash_password(password: str) -> str:
    hashed = bcrypt.hashpw(_normalize_password_for_bcrypt(password), bcrypt.gensalt())
    return hashed.decode("utf-8")


def hash_password_pbkdf2(password: str, *, iterations: int = PBKDF2_ITERATIONS) -> str:
    salt = os.urandom(PBKDF2_SALT_BYTES)
    digest = _pbkdf2_hash(password, salt, iterations=iterations)
    return f"{PBKDF2_PREFIX}{iterations}${salt.hex()}${digest.hex()}"


class HashedCredential:
    """Stored credential carrying a recognized hash prefix (bcrypt or pbkdf2)."""

    def __init__(self, stored: str) -> None:
        self.stored = stored

    def verify(self, password: str) -> bool:
        if self.stored.startswith(PBKDF2_PREFIX):
            try:
                _, iter_str, salt_hex, digest_hex = self.stored.split("$", 3)
                iterations = int(iter_str)
                salt = bytes.fromhex(salt_hex)
                expected = bytes.fromhex(digest_hex)
            except ValueError:
                return False
            computed = _pbkdf2_hash(password or "", salt, iterations=iterations)
            return hmac.compare_digest(computed, expected)

        try:
            return bcrypt.checkpw(_normalize_password_for_bcrypt(password), self.stored.encode("utf-8"))
        except ValueError:
            return False


class LegacyPlaintextCredential:
    """Unhashed demo/legacy row.

    Only ever read, never written: new users are always hashed, and
    ``leaselink.db.seed.hash_legacy_passwords`` migrates the old rows.
    Remove once no plaintext rows remain.
    """

    def __init__(self, stored: str) -> None:
        self.stored = stored

    def verify(self, password: str) -> bool:
        return hmac.compare_digest((password or "").encode("utf-8"), self.stored.encode("utf-8"))


def credential_for(stored: Optional[str]):
    if looks_hashed(stored):
        return HashedCredential(stored)
    return LegacyPlaintextCredential(stored or "")


def verify_password(password: str, stored: Optional[str]) -> bool:
    if not stored:
        return False
    credential = credential_for(stored)
    if isinstance(credential, LegacyPlaintextCredential):
        logger.warning("legacy plaintext credential checked; rehash pending")
    return credential.verify(password)

"""Password hashing and verification.

Stored credentials have the form ``<salt-hex>:<key-hex>``: a 16 byte random
salt rendered as hex, and a 64 byte PBKDF2-HMAC-SHA512 key derived from the
password and the salt's hex text with 100,000 iterations. The colon can not
appear in either hex component. Hashes already stored by the existing site
use this exact layout and verify unchanged.
"""
import hashlib
import hmac
import secrets
from functools import lru_cache
from typing import Optional, Tuple

from fastapi.concurrency import run_in_threadpool

SALT_BYTES = 16
ITERATIONS = 100_000
KEY_LENGTH = 64
DIGEST = "sha512"
DELIMITER = ":"

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _derive(password: str, salt_hex: str) -> str:
    key = hashlib.pbkdf2_hmac(
        DIGEST,
        password.encode("utf-8"),
        salt_hex.encode("utf-8"),
        ITERATIONS,
        dklen=KEY_LENGTH,
    )
    return key.hex()


def _is_hex(value: str, length: int) -> bool:
    return len(value) == length and all(c in _HEX_DIGITS for c in value)


def _split(stored: str) -> Optional[Tuple[str, str]]:
    parts = stored.split(DELIMITER)
    if len(parts) != 2:
        return None
    salt_hex, key_hex = parts
    if not _is_hex(salt_hex, SALT_BYTES * 2) or not _is_hex(key_hex, KEY_LENGTH * 2):
        return None
    return salt_hex, key_hex


def hash_password(password: str) -> str:
    """Hash a password with a fresh random salt."""
    if not password:
        raise ValueError("Password must not be empty")
    salt_hex = secrets.token_hex(SALT_BYTES)
    return f"{salt_hex}{DELIMITER}{_derive(password, salt_hex)}"


def verify_password(password: str, stored: Optional[str]) -> bool:
    """Check a password against a stored hash.

    Malformed hashes return False, same as a wrong password.
    """
    if not stored or not isinstance(stored, str) or password is None:
        return False
    parsed = _split(stored)
    if parsed is None:
        return False
    salt_hex, key_hex = parsed
    candidate = _derive(password, salt_hex)
    return hmac.compare_digest(candidate, key_hex.lower())


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password(secrets.token_urlsafe(16))


def burn_verification(password: str) -> bool:
    """Spend the cost of one verification against a hash nobody owns.

    Used when the account is unknown or has no password so the response
    time matches a real mismatch. Always returns False.
    """
    verify_password(password or "", _dummy_hash())
    return False


async def hash_password_async(password: str) -> str:
    """Hash off the event loop."""
    return await run_in_threadpool(hash_password, password)


async def verify_password_async(password: str, stored: Optional[str]) -> bool:
    """Verify off the event loop."""
    return await run_in_threadpool(verify_password, password, stored)


async def burn_verification_async(password: str) -> bool:
    return await run_in_threadpool(burn_verification, password)

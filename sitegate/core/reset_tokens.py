"""Password reset tokens.

Tokens are random and fixed length. They are not stored, not bound to a
user and do not expire, so :func:`check_reset_token` can only check shape.
"""
import secrets

TOKEN_BYTES = 32
TOKEN_LENGTH = TOKEN_BYTES * 2

_HEX_DIGITS = frozenset("0123456789abcdef")


def issue_reset_token() -> str:
    return secrets.token_hex(TOKEN_BYTES)


def check_reset_token(token: str) -> bool:
    """True if ``token`` looks like something :func:`issue_reset_token` makes."""
    if not isinstance(token, str) or len(token) != TOKEN_LENGTH:
        return False
    return all(c in _HEX_DIGITS for c in token)

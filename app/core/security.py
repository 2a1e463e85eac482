"""
Password hashing and verification utilities.

Rules:
- Always use a slow, salted, memory-hard KDF (scrypt)
- Compare digests in constant time
- NEVER log plaintext passwords or stored credentials

Stored credential format: "<digest-hex>.<salt-hex>"
- digest: 64-byte scrypt output, hex-encoded (128 chars)
- salt:   16 random bytes, hex-encoded (32 chars)

The salt fed to scrypt is the hex text itself, so credentials written by the
previous Node implementation of the site still verify.
"""
from __future__ import annotations
import hashlib
import hmac
import re
import secrets

SCRYPT_N = 16384
SCRYPT_R = 8
SCRYPT_P = 1
DIGEST_LEN = 64
SALT_BYTES = 16
SEPARATOR = "."

# 128 * r * N bytes are needed; leave headroom over OpenSSL's 32 MiB default.
_MAXMEM = 64 * 1024 * 1024

_HEX_RE = re.compile(r"[0-9a-fA-F]+")
_USERNAME_RE = re.compile(r"[a-zA-Z0-9_]{3,30}")
_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

MIN_PASSWORD_LENGTH = 8


class MalformedCredentialError(ValueError):
    """The stored credential does not have the "<digest-hex>.<salt-hex>" shape."""


def derive_digest(password: str, salt: str) -> bytes:
    """
    Run scrypt over `password` with `salt` (both UTF-8 encoded).

    Errors from the underlying primitive (e.g. memory limits) propagate.
    """
    return hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt.encode("utf-8"),
        n=SCRYPT_N,
        r=SCRYPT_R,
        p=SCRYPT_P,
        maxmem=_MAXMEM,
        dklen=DIGEST_LEN,
    )


def hash_password(plain: str, *, salt: str | None = None) -> str:
    """
    Hash a plaintext password with a fresh random salt.

    Args:
        plain: Plaintext password (length policy is checked elsewhere)
        salt: Explicit hex salt, only for deterministic checks

    Returns:
        Credential string "<digest-hex>.<salt-hex>"

    Raises:
        ValueError: an explicit salt that is not hex-encoded
    """
    if salt is None:
        salt = secrets.token_hex(SALT_BYTES)
    elif not _HEX_RE.fullmatch(salt):
        raise ValueError("salt must be hex-encoded")
    digest = derive_digest(plain, salt)
    return f"{digest.hex()}{SEPARATOR}{salt}"


def split_credential(stored: str) -> tuple[bytes, str]:
    """
    Split a stored credential into (digest bytes, salt text).

    Raises:
        MalformedCredentialError: missing separator, empty or non-hex part,
            or a digest that is not DIGEST_LEN bytes long
    """
    if not isinstance(stored, str) or SEPARATOR not in stored:
        raise MalformedCredentialError("credential has no separator")
    digest_hex, salt = stored.split(SEPARATOR, 1)
    if not digest_hex or not salt:
        raise MalformedCredentialError("credential has an empty part")
    if not _HEX_RE.fullmatch(digest_hex) or not _HEX_RE.fullmatch(salt):
        raise MalformedCredentialError("credential is not hex-encoded")
    if len(digest_hex) != DIGEST_LEN * 2:
        raise MalformedCredentialError("credential digest has the wrong length")
    return bytes.fromhex(digest_hex), salt


def verify_password(plain: str, stored: str) -> bool:
    """
    Verify a plaintext password against a stored credential.

    Re-derives the digest on every call; nothing is cached.

    Returns:
        True if the password matches, False otherwise

    Raises:
        MalformedCredentialError: the stored credential is corrupt. Callers
            must treat this as a denial and log it.
    """
    expected, salt = split_credential(stored)
    candidate = derive_digest(plain, salt)
    return hmac.compare_digest(candidate, expected)


def is_valid_username(username: str) -> bool:
    return bool(_USERNAME_RE.fullmatch(username or ""))


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.fullmatch(email or ""))


def is_valid_password(password: str) -> bool:
    return len(password or "") >= MIN_PASSWORD_LENGTH


# Fixed salt for burn_derivation; its output is never stored or compared.
_DUMMY_SALT = "00" * SALT_BYTES


def burn_derivation(plain: str) -> None:
    """
    Spend one derivation on a login that has no usable stored credential.

    Unknown usernames and corrupt credentials then cost the same time as a
    wrong password.
    """
    derive_digest(plain, _DUMMY_SALT)

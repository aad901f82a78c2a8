# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""
Envelope codec – the client-side encryption used for every shared text.
The server only ever stores the two strings this module produces.

Responsibilities
----------------
1. base64url helpers                          (RFC 4648 §5, no padding)
2. Key derivation                             (PBKDF2-HMAC-SHA256)
3. Text encryption / decryption               (AES-256-GCM)
4. Share-password generation                  (``secrets``)

Wire layout
-----------
cipherText = base64url( salt[16] || ciphertext || tag[16] )
iv         = base64url( nonce[12] )

The iteration count is part of the format: it is not stored with the
envelope, so changing it makes every previously issued link undecryptable.
"""

import base64
import binascii
import re
import secrets
import string
from typing import NamedTuple

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from core.errors import AuthenticationFailure, DecodingFailure, MalformedEnvelope

SALT_SIZE = 16
IV_SIZE = 12            # 96-bit nonce per NIST SP 800-38D
TAG_SIZE = 16
KEY_SIZE = 32           # AES-256
KDF_ITERATIONS = 100_000

PASSWORD_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits + "-_"
PASSWORD_LENGTH = 16

_B64URL_RE = re.compile(r"[A-Za-z0-9_-]*")


class Envelope(NamedTuple):
    """Transport form of one encrypted text: ``(cipher_text, iv)``."""

    cipher_text: str
    iv: str


# ---------------------------------------------------------------------------
# 1.  base64url
# ---------------------------------------------------------------------------


def b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(text: str) -> bytes:
    """
    Strict base64url decode.  Padding is optional; characters outside the
    URL-safe alphabet are rejected rather than silently skipped, and so are
    non-canonical encodings whose unused trailing bits are set.

    Raises ``MalformedEnvelope`` on any decoding problem.
    """
    stripped = text.rstrip("=")
    if not _B64URL_RE.fullmatch(stripped):
        raise MalformedEnvelope("Invalid base64url text")
    padded = stripped + "=" * (-len(stripped) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError) as exc:
        raise MalformedEnvelope("Invalid base64url text") from exc
    # Padding bits of the last character must be zero
    if b64url_encode(raw) != stripped:
        raise MalformedEnvelope("Non-canonical base64url text")
    return raw


# ---------------------------------------------------------------------------
# 2.  PBKDF2-HMAC-SHA256 – key derivation
# ---------------------------------------------------------------------------


def derive_key(password: str, salt: bytes) -> bytes:
    """Derive the 256-bit AES key for *password* under *salt*."""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_SIZE,
        salt=salt,
        iterations=KDF_ITERATIONS,
    )
    return kdf.derive(password.encode("utf-8"))


# ---------------------------------------------------------------------------
# 3.  AES-256-GCM – encryption
# ---------------------------------------------------------------------------


def encrypt_text(plaintext: str, password: str) -> Envelope:
    """
    Encrypt *plaintext* under a key derived from *password*.

    Salt and nonce are drawn fresh on every call, so encrypting the same
    text with the same password twice never reuses a (key, nonce) pair.
    """
    salt = secrets.token_bytes(SALT_SIZE)
    iv = secrets.token_bytes(IV_SIZE)
    key = derive_key(password, salt)
    # No associated data
    ct_and_tag = AESGCM(key).encrypt(iv, plaintext.encode("utf-8"), None)
    return Envelope(
        cipher_text=b64url_encode(salt + ct_and_tag),
        iv=b64url_encode(iv),
    )


def decrypt_text(cipher_text: str, iv: str, password: str) -> str:
    """
    Reverse :func:`encrypt_text`.

    Raises
    ------
    MalformedEnvelope      bad base64url, iv not 12 bytes, or no room for a salt
    AuthenticationFailure  GCM tag mismatch (wrong password or tampered data)
    DecodingFailure        plaintext is not UTF-8
    """
    nonce = b64url_decode(iv)
    if len(nonce) != IV_SIZE:
        raise MalformedEnvelope(f"IV must be {IV_SIZE} bytes")

    combined = b64url_decode(cipher_text)
    if len(combined) < SALT_SIZE:
        raise MalformedEnvelope("Cipher text is shorter than the salt")
    salt, ct_and_tag = combined[:SALT_SIZE], combined[SALT_SIZE:]

    key = derive_key(password, salt)
    try:
        plaintext_bytes = AESGCM(key).decrypt(nonce, ct_and_tag, None)
    except InvalidTag as exc:
        raise AuthenticationFailure("Decryption failed – wrong key or tampered data") from exc

    try:
        return plaintext_bytes.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodingFailure("Decrypted data is not valid UTF-8") from exc


# ---------------------------------------------------------------------------
# 4.  Share passwords
# ---------------------------------------------------------------------------


def generate_random_password(length: int = PASSWORD_LENGTH) -> str:
    """
    Random password drawn from the 64-character URL-safe alphabet, so it
    can be placed in a share URL without escaping.  16 chars = 96 bits.
    """
    if length < 1:
        raise ValueError("Password length must be positive")
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))

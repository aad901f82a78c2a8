# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""
Exception types shared by the envelope codec, the record store, the
exchange endpoints and the share client.

HTTP mapping (see exchange/router.py)
-------------------------------------
InvalidRequest, InvalidTtl    → 400
RecordNotFound                → 404
RecordExpired                 → 410
IdentifierCollision (after retries), StoreUnavailable → 500

The envelope errors never reach the server: decryption is client-side only.
Callers should present all of them as the same "wrong key" message.
"""


class InvalidRequest(ValueError):
    """A submit/fetch request or share URL is missing fields or malformed."""


class InvalidTtl(InvalidRequest):
    """TTL is not a positive integer number of seconds."""


class RecordNotFound(LookupError):
    """No record exists under the requested id."""


class RecordExpired(LookupError):
    """The record existed but its TTL has elapsed.  It is gone afterwards."""


class IdentifierCollision(Exception):
    """A freshly generated id is already taken."""


class StoreUnavailable(RuntimeError):
    """The backing database failed."""


class ExchangeError(RuntimeError):
    """The API answered with something other than success/404/410."""

    def __init__(self, status: int, message: str):
        super().__init__(f"{status}: {message}")
        self.status = status
        self.message = message


# -- Envelope (client-side) --------------------------------------------------


class EnvelopeError(ValueError):
    """Base class for every decryption failure."""


class MalformedEnvelope(EnvelopeError):
    """cipherText / iv are not valid base64url or have the wrong length."""


class AuthenticationFailure(EnvelopeError):
    """GCM tag did not verify: wrong password, corruption or tampering."""


class DecodingFailure(EnvelopeError):
    """Authenticated plaintext is not valid UTF-8."""

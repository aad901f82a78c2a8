# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""
Record identifiers.

``generate_id`` draws ceil(length * 3/4) random bytes from the OS CSPRNG,
base64url-encodes them and truncates the text to *length* characters.
Truncating after encoding leaves the last character carrying fewer random
bits when length is not a multiple of 4; for the default of 12 there is no
truncation and the id holds exactly 72 bits.

No uniqueness check happens here – the primary key of ``texts`` is the only
collision defence (see records/store.py).
"""

import math
import secrets

from core.envelope import b64url_encode

DEFAULT_ID_LENGTH = 12


def generate_id(length: int = DEFAULT_ID_LENGTH) -> str:
    if length < 1:
        raise ValueError("Identifier length must be positive")
    raw = secrets.token_bytes(math.ceil(length * 3 / 4))
    return b64url_encode(raw)[:length]

# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""
Submit / fetch contracts, independent of HTTP.

cipher_text and iv pass through untouched: nothing here decrypts, re-encrypts
or inspects them.  The share URL (``id~password``) is never built here.
"""

from core.errors import IdentifierCollision, InvalidRequest, InvalidTtl
from core.identifiers import DEFAULT_ID_LENGTH
from core.logger import logger
from models.text_record import TextRecord
from records.store import RecordStore

# Fresh ids tried before a collision is reported as a failure
MAX_SUBMIT_ATTEMPTS = 3

MISSING_PARAMS = "Missing required parameters: ttl, cipherText, iv"


def submit_text(
    store: RecordStore,
    cipher_text,
    iv,
    ttl,
    id_length: int = DEFAULT_ID_LENGTH,
    max_ttl: int | None = None,
) -> TextRecord:
    """
    Validate and store one envelope.  Returns the stored record; its ``id``
    and ``expires_at`` go back to the submitter.

    Raises ``InvalidRequest`` / ``InvalidTtl`` for bad input and
    ``IdentifierCollision`` if every attempt hit an existing id.
    """
    if ttl is None or ttl == 0 or not cipher_text or not iv:
        raise InvalidRequest(MISSING_PARAMS)
    if not isinstance(cipher_text, str) or not isinstance(iv, str):
        raise InvalidRequest("cipherText and iv must be strings")
    if isinstance(ttl, bool) or not isinstance(ttl, int) or ttl < 0:
        raise InvalidTtl("ttl must be a positive integer")
    if max_ttl is not None and ttl > max_ttl:
        raise InvalidTtl(f"ttl must not exceed {max_ttl} seconds")

    for attempt in range(1, MAX_SUBMIT_ATTEMPTS + 1):
        try:
            record = store.create(cipher_text, iv, ttl, id_length=id_length)
        except IdentifierCollision as exc:
            logger.warning("Id collision on %s (attempt %d/%d)", exc, attempt, MAX_SUBMIT_ATTEMPTS)
            continue
        logger.info("Stored text %s ttl=%d expires_at=%d", record.id, ttl, record.expires_at)
        return record

    raise IdentifierCollision(f"No free id after {MAX_SUBMIT_ATTEMPTS} attempts")


def fetch_text(store: RecordStore, text_id: str) -> TextRecord:
    """Return the live record, or raise ``RecordNotFound`` / ``RecordExpired``."""
    return store.read(text_id)

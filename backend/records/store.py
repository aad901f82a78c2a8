# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""
Ephemeral record store.

Every operation is a single statement (INSERT, SELECT or DELETE) followed by
a commit; no state is kept between calls apart from the session.

Expiry rules
------------
* A record is dead once ``now >= expires_at``.
* ``read`` never returns a dead record: it deletes it and raises
  ``RecordExpired``.  Check and delete are separate statements, so two
  readers may both try to delete – deleting a missing id is a no-op.
* ``sweep`` removes all dead rows in one statement.  It is an optimisation
  only; ``read`` already enforces expiry.
"""

import time
from typing import Callable

from fastapi import Depends
from sqlalchemy import insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from core.errors import (
    IdentifierCollision,
    InvalidTtl,
    RecordExpired,
    RecordNotFound,
    StoreUnavailable,
)
from core.identifiers import DEFAULT_ID_LENGTH, generate_id
from core.logger import logger
from database import get_db
from models.text_record import TextRecord


class RecordStore:
    """Persist and expire ``TextRecord`` rows through one session."""

    def __init__(self, db: Session, clock: Callable[[], float] = time.time):
        self.db = db
        self._clock = clock

    def now(self) -> int:
        return int(self._clock())

    # -- create --------------------------------------------------------------

    def create(self, cipher_text: str, iv: str, ttl_seconds: int, id_length: int = DEFAULT_ID_LENGTH) -> TextRecord:
        """
        Insert a new record under a freshly generated id.

        Raises ``InvalidTtl`` for ttl <= 0, ``IdentifierCollision`` if the id
        is already taken (the caller picks a new one) and
        ``StoreUnavailable`` for any other database error.
        """
        if isinstance(ttl_seconds, bool) or not isinstance(ttl_seconds, int) or ttl_seconds <= 0:
            raise InvalidTtl("ttl must be a positive integer")

        created_at = self.now()
        values = {
            "id": generate_id(id_length),
            "cipher_text": cipher_text,
            "iv": iv,
            "created_at": created_at,
            "expires_at": created_at + ttl_seconds,
        }
        try:
            # Core INSERT: a duplicate id surfaces as IntegrityError from the
            # primary key, never as a silent overwrite.
            self.db.execute(insert(TextRecord).values(**values))
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise IdentifierCollision(values["id"]) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreUnavailable("Failed to store record") from exc

        return TextRecord(**values)

    # -- read ----------------------------------------------------------------

    def read(self, text_id: str) -> TextRecord:
        """
        Return the live record for *text_id*.

        Raises ``RecordNotFound`` if absent, ``RecordExpired`` (after deleting
        the row) if its TTL has elapsed.
        """
        try:
            record = self.db.query(TextRecord).filter(TextRecord.id == text_id).first()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreUnavailable("Failed to read record") from exc

        if record is None:
            raise RecordNotFound(text_id)

        if record.is_expired(self.now()):
            self.delete(text_id)
            logger.info("Text %s expired – removed on read", text_id)
            raise RecordExpired(text_id)

        return record

    # -- delete / sweep ------------------------------------------------------

    def delete(self, text_id: str) -> None:
        """Unconditional, idempotent delete by id."""
        try:
            self.db.query(TextRecord).filter(TextRecord.id == text_id).delete(
                synchronize_session=False
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreUnavailable("Failed to delete record") from exc

    def sweep(self, now: int | None = None) -> int:
        """Delete every record with ``expires_at <= now``.  Returns the row count."""
        cutoff = self.now() if now is None else now
        try:
            removed = (
                self.db.query(TextRecord)
                .filter(TextRecord.expires_at <= cutoff)
                .delete(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreUnavailable("Failed to sweep expired records") from exc
        return removed


def get_store(db: Session = Depends(get_db)) -> RecordStore:
    """FastAPI dependency: a ``RecordStore`` bound to the request's session."""
    return RecordStore(db)


# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""
Exchange endpoints – store an encrypted text, hand it back by id.

Security invariants enforced by every handler
---------------------------------------------
* The server only sees ``cipherText`` and ``iv``.  The password travels in
  the share URL segment ``id~password``, which the API never receives.
* Neither ciphertext nor IV is ever written to the log.
* Every error, expected or not, is answered with the same
  ``{type, status, message}`` envelope (see main.py for the handlers).
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status

from core.config import settings
from core.errors import (
    IdentifierCollision,
    InvalidRequest,
    RecordExpired,
    RecordNotFound,
    StoreUnavailable,
)
from core.logger import logger
from exchange.schemas import (
    FetchData,
    FetchResponse,
    InfoResponse,
    SubmitData,
    SubmitRequest,
    SubmitResponse,
)
from exchange.service import fetch_text, submit_text
from records.store import RecordStore, get_store

router = APIRouter(prefix="/api", tags=["exchange"])

_STORE_FAIL = "Failed to store data"
_FETCH_FAIL = "Failed to retrieve data"


def _share_base(request: Request) -> str:
    """Origin the recipient will open; the client appends ``/{id}~{key}``."""
    if settings.public_base_url:
        return settings.public_base_url.rstrip("/")
    return str(request.base_url).rstrip("/")


# ---------------------------------------------------------------------------
# GET /api  – service description
# ---------------------------------------------------------------------------


@router.get("", response_model=InfoResponse)
def info():
    return InfoResponse(
        message="Encrypted Text Storage API",
        endpoints={
            "submit": "POST /api/submit",
            "fetch": "GET /api/fetch/{id}",
        },
    )


# ---------------------------------------------------------------------------
# POST /api/submit  – store an envelope
# ---------------------------------------------------------------------------


@router.post("/submit", response_model=SubmitResponse)
def submit(
    body: SubmitRequest,
    request: Request,
    store: RecordStore = Depends(get_store),
):
    """
    Persist ``cipherText`` + ``iv`` for ``ttl`` seconds and return the new id.
    """
    try:
        record = submit_text(
            store,
            body.cipher_text,
            body.iv,
            body.ttl,
            id_length=settings.id_length,
            max_ttl=settings.max_ttl_seconds,
        )
    except InvalidRequest as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except (IdentifierCollision, StoreUnavailable):
        logger.exception("Storage error")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=_STORE_FAIL)

    return SubmitResponse(
        data=SubmitData(
            id=record.id,
            url=f"{_share_base(request)}/{record.id}",
            expires_at=record.expires_at,
        )
    )


# ---------------------------------------------------------------------------
# GET /api/fetch/{id}  – hand back an envelope
# ---------------------------------------------------------------------------


@router.get("/fetch/", include_in_schema=False)
def fetch_without_id():
    """An empty id can never match a record."""
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Text not found")


@router.get("/fetch/{text_id}", response_model=FetchResponse)
def fetch(text_id: str, store: RecordStore = Depends(get_store)):
    """
    Return the stored envelope.  404 if the id is unknown, 410 if it just
    expired (the row is deleted, so the next fetch answers 404).
    """
    try:
        record = fetch_text(store, text_id)
    except RecordNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Text not found")
    except RecordExpired:
        raise HTTPException(status_code=status.HTTP_410_GONE, detail="Text has expired")
    except StoreUnavailable:
        logger.exception("Retrieval error")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=_FETCH_FAIL)

    return FetchResponse(
        data=FetchData(
            id=record.id,
            cipher_text=record.cipher_text,
            iv=record.iv,
            expires_at=record.expires_at,
        )
    )

# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the exchange endpoints."""

from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field, StrictInt


# -- Requests --------------------------------------------------------------
# Every field is optional at the schema level so that a missing one produces
# the protocol's own 400 message instead of a framework validation error.
# cipherText / iv are opaque base64url strings – never parsed server-side.


class SubmitRequest(BaseModel):
    # Strict: JSON true or "60" must not be coerced into a TTL
    ttl: Optional[StrictInt] = None
    cipher_text: Optional[str] = Field(default=None, alias="cipherText")
    iv: Optional[str] = None

    model_config = {"populate_by_name": True}


# -- Responses -------------------------------------------------------------
# Field names on the wire are part of the protocol: submit answers with
# ``expiresAt``; fetch answers with ``cipher_text`` and ``expiresAt``.


class SubmitData(BaseModel):
    id: str
    url: str
    expires_at: int = Field(alias="expiresAt")

    model_config = {"populate_by_name": True}


class SubmitResponse(BaseModel):
    type: Literal["success"] = "success"
    status: int = 200
    data: SubmitData


class FetchData(BaseModel):
    id: str
    cipher_text: str
    iv: str
    expires_at: int = Field(alias="expiresAt")

    model_config = {"populate_by_name": True}


class FetchResponse(BaseModel):
    type: Literal["success"] = "success"
    status: int = 200
    data: FetchData


class ErrorResponse(BaseModel):
    type: Literal["error"] = "error"
    status: int
    message: str


class InfoResponse(BaseModel):
    type: Literal["info"] = "info"
    status: int = 200
    message: str
    endpoints: Dict[str, str]

# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""
Share client – the sender/recipient side of the exchange.

All cryptography happens here, before anything is sent: the API receives
``cipherText`` + ``iv`` only.  The password ends up in the share URL
``{base}/{id}~{password}`` and nowhere else.

    client = ShareClient("https://notes.example.com")
    url = client.share("the launch code is 0000", ttl=3600)
    text = client.open(url)
"""

from typing import Optional, Tuple
from urllib.parse import quote, unquote, urlsplit

import httpx

from core.config import settings
from core.envelope import Envelope, decrypt_text, encrypt_text, generate_random_password
from core.errors import ExchangeError, InvalidRequest, RecordExpired, RecordNotFound

DEFAULT_TTL = 86400  # one day
SHARE_SEPARATOR = "~"


# -- Share URLs ------------------------------------------------------------


def build_share_url(base_url: str, text_id: str, password: str) -> str:
    """``{base}/{id}~{password}``; generated passwords need no escaping."""
    return f"{base_url.rstrip('/')}/{text_id}{SHARE_SEPARATOR}{quote(password, safe='')}"


def parse_share_url(share_url: str) -> Tuple[str, str]:
    """
    Split a share URL into ``(id, password)``.

    Ids never contain ``~``, so the first one in the last path segment is the
    separator and anything after it belongs to the password.
    """
    segment = urlsplit(share_url).path.rstrip("/").rsplit("/", 1)[-1]
    text_id, sep, password = segment.partition(SHARE_SEPARATOR)
    if not sep or not text_id or not password:
        raise InvalidRequest("Invalid URL format. Expected format: /{id}~{key}")
    return text_id, unquote(password)


# -- HTTP client -----------------------------------------------------------


class ShareClient:
    """
    Thin ``httpx`` wrapper around ``POST /api/submit`` and
    ``GET /api/fetch/{id}``.  Pass *http* to reuse an existing client
    (e.g. FastAPI's TestClient).
    """

    def __init__(self, api_url: Optional[str] = None, http: Optional[httpx.Client] = None,
                 timeout: float = 10.0):
        if http is None:
            http = httpx.Client(base_url=api_url or settings.api_url, timeout=timeout)
        self._http = http

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    # -- raw protocol -----------------------------------------------------

    def submit(self, envelope: Envelope, ttl: int = DEFAULT_TTL) -> dict:
        """Upload an envelope.  Returns ``data``: ``id``, ``url``, ``expiresAt``."""
        response = self._http.post(
            "/api/submit",
            json={"ttl": ttl, "cipherText": envelope.cipher_text, "iv": envelope.iv},
        )
        return self._data(response)

    def fetch(self, text_id: str) -> dict:
        """Download an envelope.  Returns ``data``: ``id``, ``cipher_text``, ``iv``, ``expiresAt``."""
        response = self._http.get(f"/api/fetch/{quote(text_id, safe='')}")
        if response.status_code == 404:
            raise RecordNotFound(text_id)
        if response.status_code == 410:
            raise RecordExpired(text_id)
        return self._data(response)

    @staticmethod
    def _data(response: httpx.Response) -> dict:
        try:
            payload = response.json()
        except ValueError:
            raise ExchangeError(response.status_code, response.text or "Invalid response")
        if response.status_code != 200 or payload.get("type") != "success":
            raise ExchangeError(response.status_code, payload.get("message", "Request failed"))
        return payload["data"]

    # -- end to end -------------------------------------------------------

    def share(self, text: str, ttl: int = DEFAULT_TTL, password: Optional[str] = None) -> str:
        """
        Encrypt *text* locally, upload it and return the share URL.
        A random password is generated when none is given.
        """
        password = password or generate_random_password()
        data = self.submit(encrypt_text(text, password), ttl)
        base_url = data["url"].rsplit("/", 1)[0]
        return build_share_url(base_url, data["id"], password)

    def open(self, share_url: str) -> str:
        """
        Fetch and decrypt the text behind *share_url*.

        Raises ``RecordNotFound`` / ``RecordExpired`` from the server, or an
        ``EnvelopeError`` subclass if the key is wrong or the data corrupt.
        """
        text_id, password = parse_share_url(share_url)
        data = self.fetch(text_id)
        return decrypt_text(data["cipher_text"], data["iv"], password)

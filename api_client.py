import logging
import time
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from book import Book
from config import settings
from errors import ApiError, NetworkError, TransportError

logger = logging.getLogger(__name__)


class LibraryApiClient:
    """Kütüphane kitap/kimlik servisine bağlantı havuzlu HTTP istemcisi.

    İstemci durumsuzdur: token her çağrıda parametre olarak verilir,
    oturum durumu ``session.Session`` tarafından tutulur.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        retries: Optional[int] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.retries = max(1, retries if retries is not None else settings.http_retries)

        limits = httpx.Limits(
            max_keepalive_connections=5,
            max_connections=10,
            keepalive_expiry=30.0,
        )
        total = timeout if timeout is not None else settings.http_timeout
        self._client = httpx.Client(
            base_url=self.base_url,
            limits=limits,
            timeout=httpx.Timeout(timeout=total, connect=min(5.0, total)),
            follow_redirects=True,
            transport=transport,
        )

    # ------------------------- Kimlik doğrulama ------------------------- #
    def login(self, email: str, password: str) -> Dict[str, Any]:
        return self._request("POST", "/api/auth/login", json={"email": email, "password": password})

    def register(self, name: str, email: str, password: str, role: str = "user") -> Dict[str, Any]:
        payload = {"name": name, "email": email, "password": password, "role": role}
        return self._request("POST", "/api/auth/register", json=payload)

    def verify(self, token: str) -> Dict[str, Any]:
        return self._request("GET", "/api/auth/verify", token=token)

    # ------------------------- Kitaplar ------------------------- #
    def list_books(self) -> List[Book]:
        """Tüm listeyi getir (sayfalama yok). Aktarım hatalarında yeniden dener."""
        data = self._request_with_retry("GET", "/api/books")
        if not isinstance(data, list):
            raise NetworkError("Unexpected book listing payload")
        return [Book.from_dict(item) for item in data if isinstance(item, dict)]

    def create_book(self, token: str, title: str, author: Optional[str] = None, description: str = "") -> Book:
        payload = {"title": title, "author": author or "", "description": description or ""}
        data = self._request("POST", "/api/books", json=payload, token=token)
        if not isinstance(data, dict):
            raise NetworkError("Unexpected book payload")
        return Book.from_dict(data)

    def delete_book(self, token: str, book_id: str) -> Any:
        """Herhangi bir 2xx başarıdır; onay gövdesi (JSON, düz metin, boş) yorumlanmaz."""
        path = f"/api/books/{quote(str(book_id), safe='')}"
        return self._request("DELETE", path, token=token, parse=False)

    # ------------------------- HTTP yardımcıları ------------------------- #
    @staticmethod
    def _headers(token: Optional[str]) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        token: Optional[str] = None,
        parse: bool = True,
    ) -> Any:
        """``parse=False`` iken JSON olmayan 2xx gövdesi hata sayılmaz, ``None`` döner."""
        try:
            response = self._client.request(method, path, json=json, headers=self._headers(token))
        except httpx.RequestError as exc:
            logger.warning("%s %s başarısız: %s", method, path, exc)
            raise TransportError(f"Could not reach {self.base_url}") from exc

        payload = self._decode(response)
        if not response.is_success:
            raise ApiError(response.status_code, self._error_message(payload))
        if payload is None and response.content and parse:
            raise NetworkError("Server returned an unparseable response")
        return payload

    def _request_with_retry(self, method: str, path: str, backoff: float = 0.5) -> Any:
        """Yalnızca idempotent istekler için üstel geri çekilmeli yeniden deneme.

        Sadece aktarım hataları yeniden denenir; bozuk yanıtlar hemen yükseltilir.
        """
        for attempt in range(self.retries):
            try:
                return self._request(method, path)
            except TransportError:
                if attempt < self.retries - 1:
                    time.sleep(backoff * (2 ** attempt))
                    continue
                raise
        return None

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    @staticmethod
    def _error_message(payload: Any) -> Optional[str]:
        if isinstance(payload, dict):
            for key in ("message", "detail", "error"):
                value = payload.get(key)
                if isinstance(value, str) and value:
                    return value
        return None

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "LibraryApiClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

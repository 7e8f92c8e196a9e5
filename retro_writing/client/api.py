import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000/api"


class ApiError(Exception):
    """Ошибка запроса к API: не-2xx ответ или сбой транспорта"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DocumentApiClient:
    """Клиент REST API документов.

    Разворачивает конверт `{success, message, data}` и запоминает токен
    после signup/login. Таймаут операций не задается сверх таймаута
    соединения httpx.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        self.token = token
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(base_url=base_url)

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "DocumentApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            response = await self._client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error("API request %s %s failed: %s", method, url, e)
            raise ApiError(f"API request failed: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if response.is_error:
            message = payload.get("message") or "API request failed"
            raise ApiError(message, status_code=response.status_code)

        return payload

    # Auth

    async def signup(self, username: str, email: str, password: str) -> Dict[str, Any]:
        payload = await self._request(
            "POST", "/auth/signup",
            json={"username": username, "email": email, "password": password}
        )
        self.token = payload["token"]
        return payload["user"]

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        payload = await self._request(
            "POST", "/auth/login", json={"email": email, "password": password}
        )
        self.token = payload["token"]
        return payload["user"]

    async def me(self) -> Dict[str, Any]:
        payload = await self._request("GET", "/auth/me")
        return payload["user"]

    # Documents

    async def list_documents(self) -> List[Dict[str, Any]]:
        payload = await self._request("GET", "/documents")
        return payload["data"]

    async def search_documents(self, query: str) -> List[Dict[str, Any]]:
        payload = await self._request("GET", "/documents/search", params={"q": query})
        return payload["data"]

    async def get_document(self, document_id: str) -> Dict[str, Any]:
        payload = await self._request("GET", f"/documents/{document_id}")
        return payload["data"]

    async def create_document(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        payload = await self._request("POST", "/documents", json=fields)
        return payload["data"]

    async def update_document(self, document_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        payload = await self._request("PUT", f"/documents/{document_id}", json=fields)
        return payload["data"]

    async def delete_document(self, document_id: str) -> None:
        await self._request("DELETE", f"/documents/{document_id}")

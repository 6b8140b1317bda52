"""HTTP adapter – HttpxHttpClient."""
from __future__ import annotations

from typing import Any

import httpx

from smskit.kernel.errors import AuthError, HttpError, ProviderError

_AUTH_STATUSES = frozenset({401, 403})


class HttpxHttpClient:
    """Thin async httpx wrapper mapping failures onto the SMS error kinds.

    Timeouts and connection problems → :class:`HttpError`; 401/403 →
    :class:`AuthError`; any other non-2xx → :class:`ProviderError`.
    """

    def __init__(
        self,
        provider: str,
        base_url: str = "",
        timeout: float = 10.0,
        *,
        client: httpx.AsyncClient | None = None,
        **kwargs: Any,
    ) -> None:
        self._provider = provider
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout, **kwargs)

    async def __aenter__(self) -> "HttpxHttpClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self._request("POST", url, **kwargs)

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as exc:
            raise HttpError(f"{self._provider}: request timed out: {method} {url}", cause=exc) from exc
        except httpx.HTTPError as exc:
            raise HttpError(f"{self._provider}: {exc}", cause=exc) from exc

        if response.is_success:
            return response

        status = response.status_code
        detail = {"provider": self._provider, "status_code": status, "body": response.text[:500]}
        if status in _AUTH_STATUSES:
            raise AuthError(f"{self._provider}: HTTP {status}", detail=detail)
        raise ProviderError(
            f"{self._provider}: HTTP {status}: {response.text[:200]}",
            provider=self._provider,
            status_code=status,
            detail=detail,
        )


HttpClient = HttpxHttpClient

__all__ = ["HttpClient", "HttpxHttpClient"]

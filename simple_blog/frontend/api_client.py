import logging
import time
from typing import Any

import httpx

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT = 3.0
READ_TIMEOUT = 10.0


class BlogApiError(Exception):
    """The backend answered with an error status"""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code: int = status_code
        self.message: str = message


class BlogApiClient:
    """Wrapper around the backend's /posts routes with automatic timing"""

    def __init__(
        self,
        base_url: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        timeout = httpx.Timeout(
            connect=CONNECT_TIMEOUT,
            read=READ_TIMEOUT,
            write=READ_TIMEOUT,
            pool=READ_TIMEOUT,
        )
        self.client: httpx.AsyncClient = httpx.AsyncClient(
            base_url=base_url.rstrip("/"), timeout=timeout, transport=transport
        )
        self.logger: logging.Logger = logger

    async def _timed_call(self, method: str, path: str, **kwargs) -> Any:
        start: float = time.perf_counter()
        self.logger.info(f"Blog API call: {method} {path}")

        try:
            resp = await self.client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            elapsed: float = time.perf_counter() - start
            self.logger.error(
                f"Blog API failed: {method} {path} after {elapsed:.3f}s - {str(e)}"
            )
            raise

        elapsed = time.perf_counter() - start
        if resp.is_error:
            try:
                body = resp.json()
            except ValueError:
                body = None
            message = body.get("error") if isinstance(body, dict) else None
            message = message or resp.text or resp.reason_phrase
            self.logger.error(
                f"Blog API failed: {method} {path} "
                f"Status: {resp.status_code} after {elapsed:.3f}s - {message}"
            )
            raise BlogApiError(resp.status_code, str(message))

        self.logger.info(f"Blog API completed: {method} {path} in {elapsed:.3f}s")
        return resp.json()

    async def list_posts(self) -> list[dict]:
        return await self._timed_call("GET", "/posts")

    async def create_post(self, title: str, content: str) -> list[dict]:
        return await self._timed_call(
            "POST", "/posts", json={"title": title, "content": content}
        )

    async def aclose(self) -> None:
        await self.client.aclose()

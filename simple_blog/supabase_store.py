import logging
import time
from typing import Any

import httpx

from simple_blog.errors import StorageRejectedError, StorageUnavailableError
from simple_blog.store import PostStore

logger = logging.getLogger(__name__)

TABLE = "posts"


class SupabasePostStore(PostStore):
    """
    Posts table on a hosted Supabase project, reached through its PostgREST
    endpoint. The httpx client keeps its own connection pool.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.rest_url: str = f"{base_url.rstrip('/')}/rest/v1"
        self.client: httpx.AsyncClient = httpx.AsyncClient(
            base_url=self.rest_url,
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            transport=transport,
        )
        self.logger: logging.Logger = logger

    async def _timed_call(self, method: str, path: str, **kwargs) -> Any:
        """Execute a PostgREST call with timing, translating failures to StorageError"""
        start: float = time.perf_counter()
        self.logger.info(f"Supabase call: {method} {path}")

        try:
            resp = await self.client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            elapsed: float = time.perf_counter() - start
            self.logger.error(
                f"Supabase unreachable: {method} {path} after {elapsed:.3f}s - {str(e)}"
            )
            raise StorageUnavailableError(str(e) or type(e).__name__) from e

        elapsed = time.perf_counter() - start
        if resp.is_error:
            message = _error_message(resp)
            self.logger.error(
                f"Supabase call failed: {method} {path} "
                f"Status: {resp.status_code} after {elapsed:.3f}s - {message}"
            )
            raise StorageRejectedError(message)

        self.logger.info(f"Supabase call completed: {method} {path} in {elapsed:.3f}s")
        if not resp.content:
            return []
        try:
            return resp.json()
        except ValueError as e:
            self.logger.error(f"Supabase sent a non-JSON body for {method} {path}")
            raise StorageRejectedError(
                f"Unreadable response from storage: {resp.text[:200]}"
            ) from e

    async def list_posts(self) -> list[dict[str, Any]]:
        return await self._timed_call(
            "GET",
            f"/{TABLE}",
            params={"select": "*", "order": "created_at.desc"},
        )

    async def insert_post(
        self, title: str | None, content: str | None
    ) -> list[dict[str, Any]]:
        return await self._timed_call(
            "POST",
            f"/{TABLE}",
            json=[{"title": title, "content": content}],
            headers={"Prefer": "return=representation"},
        )

    async def close(self) -> None:
        await self.client.aclose()


def _error_message(resp: httpx.Response) -> str:
    # PostgREST errors look like {"code": ..., "message": ..., "details": ...}
    try:
        body = resp.json()
    except ValueError:
        return resp.text or resp.reason_phrase
    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
        if message:
            return str(message)
    return resp.text or resp.reason_phrase

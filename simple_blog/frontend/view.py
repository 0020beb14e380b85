import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

import httpx

from simple_blog.frontend.api_client import BlogApiClient, BlogApiError

logger = logging.getLogger(__name__)


@dataclass
class Draft:
    title: str = ""
    content: str = ""

    def is_complete(self) -> bool:
        return bool(self.title) and bool(self.content)


@dataclass
class BlogView:
    """
    State behind the blog page: the loaded posts and the unsaved draft.

    The list is only ever replaced by a full refetch, never patched locally.
    A failed call leaves the previous list in place and sets `error`.
    """

    api: BlogApiClient
    posts: list[dict] = field(default_factory=list)
    draft: Draft = field(default_factory=Draft)
    error: str | None = None

    async def mount(self) -> None:
        await self.refresh()

    async def refresh(self) -> bool:
        try:
            self.posts = await self.api.list_posts()
        except (BlogApiError, httpx.HTTPError) as e:
            self._fail("load posts", e)
            return False
        self.error = None
        return True

    async def submit(self) -> bool:
        """
        Sends the draft. Returns False without touching the network when
        either field is empty, or when the backend rejects the post.
        """
        if not self.draft.is_complete():
            return False

        try:
            await self.api.create_post(self.draft.title, self.draft.content)
        except (BlogApiError, httpx.HTTPError) as e:
            self._fail("create post", e)
            return False

        self.draft = Draft()
        await self.refresh()
        return True

    def _fail(self, action: str, exc: Exception) -> None:
        message = exc.message if isinstance(exc, BlogApiError) else str(exc)
        logger.warning(f"Could not {action}: {message}")
        self.error = f"Could not {action}: {message or type(exc).__name__}"


def format_timestamp(value: str | datetime | None) -> str:
    """
    Creation time as shown under each post: local time, formatted for the
    current LC_TIME locale. Naive values are stored as UTC.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return value
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone().strftime("%c")

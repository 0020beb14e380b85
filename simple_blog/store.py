import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, String, Text, desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from simple_blog.errors import StorageRejectedError
from simple_blog.perf import time_async_function

logger = logging.getLogger(__name__)

# logging.basicConfig()
# logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)


def utcnow() -> datetime:
    # Naive UTC, so SQLite round-trips compare cleanly
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_post_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    pass


class Post(Base):
    """A blog entry. Append-only: rows are never updated or deleted."""

    __tablename__ = "posts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_post_id)
    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


def post_to_dict(post: Post) -> dict[str, Any]:
    return {
        "id": post.id,
        "title": post.title,
        "content": post.content,
        "created_at": post.created_at,
    }


class PostStore:
    """
    Storage interface the routes talk to.

    Implementations raise StorageError (or a subclass) on any failure and
    return plain dicts with id, title, content and created_at.
    """

    async def list_posts(self) -> list[dict[str, Any]]:
        raise NotImplementedError

    async def insert_post(
        self, title: str | None, content: str | None
    ) -> list[dict[str, Any]]:
        raise NotImplementedError

    async def close(self) -> None:
        return None


class SqlPostStore(PostStore):
    """Posts table in a local SQLAlchemy database (SQLite by default)."""

    def __init__(self, engine: AsyncEngine):
        self.engine: AsyncEngine = engine
        self.session_factory = async_sessionmaker(engine, expire_on_commit=False)

    @classmethod
    def from_url(cls, db_url: str) -> "SqlPostStore":
        return cls(create_async_engine(db_url, echo=False))

    async def init_db(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    @time_async_function
    async def list_posts(self) -> list[dict[str, Any]]:
        try:
            async with self.session_factory() as session:
                query = select(Post).order_by(desc(Post.created_at))
                result = await session.execute(query)
                return [post_to_dict(p) for p in result.scalars().all()]
        except SQLAlchemyError as e:
            raise StorageRejectedError(str(getattr(e, "orig", None) or e)) from e

    @time_async_function
    async def insert_post(
        self, title: str | None, content: str | None
    ) -> list[dict[str, Any]]:
        try:
            async with self.session_factory() as session:
                post = Post(title=title, content=content)
                session.add(post)
                await session.commit()
                logger.info(f"Inserted post {post.id}")
                return [post_to_dict(post)]
        except SQLAlchemyError as e:
            raise StorageRejectedError(str(getattr(e, "orig", None) or e)) from e

    async def close(self) -> None:
        await self.engine.dispose()

# simple_blog/routes/posts.py
import logging

from fastapi import APIRouter, Depends, Request, status

from simple_blog.models import ErrorOut, PostIn, PostOut
from simple_blog.store import PostStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["posts"])

ERROR_RESPONSES = {status.HTTP_400_BAD_REQUEST: {"model": ErrorOut}}


def get_store(request: Request) -> PostStore:
    """The process-wide store created at startup"""
    return request.app.state.store


@router.get("", response_model=list[PostOut], responses=ERROR_RESPONSES)
async def list_posts(store: PostStore = Depends(get_store)):
    """All posts, newest first."""
    return await store.list_posts()


@router.post(
    "",
    response_model=list[PostOut],
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def create_post(payload: PostIn, store: PostStore = Depends(get_store)):
    # No validation: whatever arrived goes to storage untouched
    rows = await store.insert_post(title=payload.title, content=payload.content)
    logger.info(f"Created {len(rows)} post(s)")
    return rows

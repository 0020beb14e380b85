# --- Pydantic Models ---
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class PostIn(BaseModel):
    # Both optional; absent fields go to storage as null
    title: str | None = None
    content: str | None = None


class PostOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str | None = None
    content: str | None = None
    created_at: datetime


class ErrorOut(BaseModel):
    error: str

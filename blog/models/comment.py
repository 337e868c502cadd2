from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


NAME_MAX_LENGTH = 255
POST_MAX_LENGTH = 255
TEXT_MIN_LENGTH = 20
TEXT_MAX_LENGTH = 5000


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CommentBase(SQLModel):
    name: str = Field(max_length=NAME_MAX_LENGTH)
    post: str = Field(index=True, max_length=POST_MAX_LENGTH)
    text: str = Field(max_length=TEXT_MAX_LENGTH)
    parent_comment_id: Optional[int] = Field(default=None, index=True)
    moderated: bool = Field(default=False)


class Comment(CommentBase, table=True):
    __tablename__ = "comments"

    id: Optional[int] = Field(default=None, primary_key=True)
    date: datetime = Field(default_factory=_utcnow, sa_type=DateTime(timezone=True), index=True)


class CommentRead(CommentBase):
    id: int
    date: datetime


@dataclass(slots=True)
class CommentSubmission:
    """A comment body that passed validation."""

    name: str
    text: str
    post: str
    parent_comment_id: Optional[int] = None
    moderated: bool = False

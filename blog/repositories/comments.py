from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from blog.errors import CommentNotFound, DataError
from blog.models.comment import Comment


logger = logging.getLogger(__name__)


@contextmanager
def _statement(session: Session, action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Failed to %s", action)
        raise DataError() from exc


def list_all(session: Session) -> List[Comment]:
    statement = select(Comment).order_by(Comment.date.desc(), Comment.id.desc())
    with _statement(session, "list comments"):
        return list(session.exec(statement))


def list_for_post(session: Session, slug: str) -> List[Comment]:
    statement = (
        select(Comment)
        .where(Comment.post == slug)
        .order_by(Comment.date.desc(), Comment.id.desc())
    )
    with _statement(session, f"list comments for post {slug!r}"):
        return list(session.exec(statement))


def create(
    session: Session, *, name: str, text: str, post: str, parent_comment_id: Optional[int] = None
) -> Comment:
    comment = Comment(name=name, text=text, post=post, parent_comment_id=parent_comment_id)
    with _statement(session, "insert comment"):
        session.add(comment)
        session.commit()
        session.refresh(comment)
    return comment


def update(
    session: Session,
    comment_id: int,
    *,
    name: str,
    text: str,
    post: str,
    parent_comment_id: Optional[int],
    moderated: bool,
) -> Comment:
    """Replace every writable column of an existing comment."""
    with _statement(session, f"update comment {comment_id}"):
        comment = session.get(Comment, comment_id)
        if comment is None:
            raise CommentNotFound(f"No comment found with ID: {comment_id}")
        comment.name = name
        comment.text = text
        comment.post = post
        comment.parent_comment_id = parent_comment_id
        comment.moderated = moderated
        session.add(comment)
        session.commit()
        session.refresh(comment)
    return comment


def delete(session: Session, comment_id: int) -> bool:
    """Hard delete; returns False when there was nothing to delete."""
    with _statement(session, f"delete comment {comment_id}"):
        comment = session.get(Comment, comment_id)
        if comment is None:
            return False
        session.delete(comment)
        session.commit()
    return True

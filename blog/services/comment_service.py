from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Mapping, Optional

from sqlmodel import Session

from blog.errors import ValidationError
from blog.models.comment import (
    NAME_MAX_LENGTH,
    POST_MAX_LENGTH,
    TEXT_MAX_LENGTH,
    TEXT_MIN_LENGTH,
    Comment,
    CommentSubmission,
)
from blog.repositories import comments as comment_repo


logger = logging.getLogger(__name__)

_leading_int = re.compile(r"^\s*([+-]?\d+)")


def parse_parent_id(value: Any) -> Optional[int]:
    """Read a parent comment id leniently; anything unusable becomes None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            parsed = int(value)
        except (OverflowError, ValueError):
            return None
    elif isinstance(value, str):
        match = _leading_int.match(value)
        if match is None:
            return None
        parsed = int(match.group(1))
    else:
        return None
    return parsed or None


def coerce_moderated(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


def _field(payload: Mapping[str, Any], key: str, errors: List[str]) -> str:
    value = payload.get(key)
    if value is None:
        return ""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        errors.append(f"'{key}' must be a string.")
        return ""
    return str(value).strip()


def validate_submission(payload: Mapping[str, Any], *, with_moderation: bool = False) -> CommentSubmission:
    """Check a comment body before it reaches the database."""
    errors: List[str] = []
    name = _field(payload, "name", errors)
    text = _field(payload, "text", errors)
    post = _field(payload, "post", errors)

    if not name:
        errors.append("Name is required.")
    elif len(name) > NAME_MAX_LENGTH:
        errors.append(f"Name must be at most {NAME_MAX_LENGTH} characters.")

    if not text:
        errors.append("Comment text is required.")
    elif len(text) < TEXT_MIN_LENGTH:
        errors.append(f"Comment must be at least {TEXT_MIN_LENGTH} characters.")
    elif len(text) > TEXT_MAX_LENGTH:
        errors.append(f"Comment must be at most {TEXT_MAX_LENGTH} characters.")

    if not post:
        errors.append("Post is required.")
    elif len(post) > POST_MAX_LENGTH:
        errors.append(f"Post must be at most {POST_MAX_LENGTH} characters.")

    if errors:
        raise ValidationError(errors)

    return CommentSubmission(
        name=name,
        text=text,
        post=post,
        parent_comment_id=parse_parent_id(payload.get("parentCommentId")),
        moderated=coerce_moderated(payload.get("moderated")) if with_moderation else False,
    )


def list_comments(session: Session, slug: Optional[str] = None) -> List[Comment]:
    if slug is None:
        return comment_repo.list_all(session)
    return comment_repo.list_for_post(session, slug)


def add_comment(session: Session, payload: Mapping[str, Any]) -> Dict[str, str]:
    submission = validate_submission(payload)
    comment = comment_repo.create(
        session,
        name=submission.name,
        text=submission.text,
        post=submission.post,
        parent_comment_id=submission.parent_comment_id,
    )
    logger.info("Comment %s added to post %s", comment.id, comment.post)
    return {"status": "success", "message": "Comment added."}


def replace_comment(session: Session, comment_id: int, payload: Mapping[str, Any]) -> Dict[str, str]:
    submission = validate_submission(payload, with_moderation=True)
    comment_repo.update(
        session,
        comment_id,
        name=submission.name,
        text=submission.text,
        post=submission.post,
        parent_comment_id=submission.parent_comment_id,
        moderated=submission.moderated,
    )
    return {"status": "success", "message": f"Comment modified with ID: {comment_id}"}


def remove_comment(session: Session, comment_id: int) -> Dict[str, str]:
    if comment_repo.delete(session, comment_id):
        logger.info("Comment %s deleted", comment_id)
        return {"status": "success", "message": f"Comment deleted with ID: {comment_id}"}
    return {"status": "success", "message": f"No comment found with ID: {comment_id}"}

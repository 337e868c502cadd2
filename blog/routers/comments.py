from __future__ import annotations

from json import JSONDecodeError
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Request, status
from sqlmodel import Session

from blog.database import get_session
from blog.errors import ValidationError
from blog.models.comment import CommentRead
from blog.services import comment_service


router = APIRouter(prefix="/comments", tags=["comments"])


async def read_payload(request: Request) -> Dict[str, Any]:
    """Accept the comment body as JSON or as a submitted form."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}

    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        payload = await request.json()
    except (JSONDecodeError, UnicodeDecodeError) as exc:
        raise ValidationError(["Request body is not valid JSON."]) from exc
    if not isinstance(payload, dict):
        raise ValidationError(["Request body must be a JSON object."])
    return payload


@router.get("", response_model=List[CommentRead], name="list_comments")
def list_comments(session: Session = Depends(get_session)):
    return comment_service.list_comments(session)


@router.get("/{post}", response_model=List[CommentRead], name="list_post_comments")
def list_post_comments(post: str, session: Session = Depends(get_session)):
    return comment_service.list_comments(session, post)


@router.post("", status_code=status.HTTP_201_CREATED, name="create_comment")
def create_comment(
    payload: Dict[str, Any] = Depends(read_payload),
    session: Session = Depends(get_session),
) -> Dict[str, str]:
    return comment_service.add_comment(session, payload)


@router.put("/{comment_id}", name="update_comment")
def update_comment(
    comment_id: int,
    payload: Dict[str, Any] = Depends(read_payload),
    session: Session = Depends(get_session),
) -> Dict[str, str]:
    return comment_service.replace_comment(session, comment_id, payload)


@router.delete("/{comment_id}", name="delete_comment")
def delete_comment(comment_id: int, session: Session = Depends(get_session)) -> Dict[str, str]:
    return comment_service.remove_comment(session, comment_id)

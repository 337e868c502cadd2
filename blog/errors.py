from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union


class BlogError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code = 500
    default_message = "Internal server error."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.message}


class PostDirectoryError(BlogError, OSError):
    default_message = "Posts directory is not readable."


class ParseError(BlogError, ValueError):
    status_code = 422
    default_message = "Malformed post."

    def __init__(self, message: Optional[str] = None, source: Union[str, Path, None] = None):
        self.source = str(source) if source is not None else None
        if message and self.source:
            message = f"{self.source}: {message}"
        super().__init__(message)


class PostsNotReady(BlogError):
    status_code = 503
    default_message = "Posts are not loaded yet."


class PostNotFound(BlogError):
    status_code = 404
    default_message = "Post not found."


class DataError(BlogError):
    default_message = "The server couldn't process your request at this time. Please try again later."


class CommentNotFound(DataError):
    status_code = 404
    default_message = "Comment not found."


class ValidationError(BlogError, ValueError):
    status_code = 400
    default_message = "Invalid comment."

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__(" ".join(self.errors) or None)

    def to_dict(self) -> dict:
        return {"error": self.message, "errors": self.errors}

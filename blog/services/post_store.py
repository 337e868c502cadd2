from __future__ import annotations

import logging
import re
from datetime import date, datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import frontmatter
import yaml

from blog.errors import ParseError, PostDirectoryError, PostNotFound
from blog.models.post import Post
from blog.services import markdown


logger = logging.getLogger(__name__)

POST_SUFFIXES = {".md", ".markdown"}

_front_matter = frontmatter.YAMLHandler()
_slug_pattern = re.compile(r"[^a-z0-9]+")
_url_safe_slug = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
_truthy = {"true", "yes", "on", "1"}


class PostCatalog:
    """Read-only view over the posts loaded at startup."""

    def __init__(self, posts: Iterable[Post]):
        self._posts: Tuple[Post, ...] = tuple(posts)
        self._by_slug: Dict[str, Post] = {post.slug: post for post in self._posts}

    def all(self) -> Tuple[Post, ...]:
        return self._posts

    def get(self, slug: str) -> Post:
        post = self._by_slug.get(slug)
        if post is None:
            raise PostNotFound(f"No post with slug '{slug}'.")
        return post

    def tags(self) -> List[str]:
        """Unique tags in the order they first appear."""
        seen: Dict[str, None] = {}
        for post in self._posts:
            for tag in post.tags:
                seen.setdefault(tag, None)
        return list(seen)

    def search(self, text: Optional[str] = None, tags: Sequence[str] = ()) -> List[Post]:
        """Filter by tags (any of them matches), then by a case-insensitive title match."""
        matching: List[Post] = list(self._posts)
        wanted = {tag for tag in tags if tag}
        if wanted:
            matching = [post for post in matching if wanted.intersection(post.tags)]
        needle = (text or "").strip().lower()
        if needle:
            matching = [post for post in matching if needle in post.title.lower()]
        return matching


def load_posts(directory: Union[str, Path]) -> Tuple[Post, ...]:
    """Parse every markdown file in ``directory``.

    A file that fails to parse is logged and skipped, as is a file whose slug
    was already taken by an earlier one. Raises PostDirectoryError when the
    directory itself cannot be listed.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise PostDirectoryError(f"Unable to scan directory: {directory}")
    try:
        paths = sorted(
            path
            for path in directory.iterdir()
            if path.is_file() and not path.name.startswith(".") and path.suffix.lower() in POST_SUFFIXES
        )
    except OSError as exc:
        raise PostDirectoryError(f"Unable to scan directory: {directory} ({exc})") from exc

    posts: List[Post] = []
    seen: Dict[str, Path] = {}
    for path in paths:
        try:
            post = load_post(path)
        except ParseError as exc:
            logger.warning("Skipping post: %s", exc)
            continue

        if post.slug in seen:
            logger.warning("Skipping post %s: slug '%s' already used by %s", path, post.slug, seen[post.slug])
            continue
        seen[post.slug] = path
        posts.append(post)

    logger.info("Loaded %d posts from %s", len(posts), directory)
    return tuple(posts)


def load_post(path: Path) -> Post:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ParseError(f"unreadable file ({exc})", source=path) from exc
    return parse_post(text, source=path, fallback_slug=_slugify(path.stem), fallback_title=_title_from_path(path))


def parse_post(
    text: str,
    source: Union[str, Path, None] = None,
    *,
    fallback_slug: Optional[str] = None,
    fallback_title: Optional[str] = None,
) -> Post:
    meta, body = split_front_matter(text, source)

    title = str(meta.get("title") or fallback_title or "").strip()
    if not title:
        raise ParseError("missing title", source=source)

    slug = str(meta.get("slug") or fallback_slug or "").strip()
    if not _url_safe_slug.match(slug):
        raise ParseError(f"slug '{slug}' is not URL-safe", source=source)

    html, toc = markdown.render(body)
    return Post(
        title=title,
        date=_parse_date(meta.get("date"), source),
        slug=slug,
        body=body,
        draft=_parse_flag(meta.get("draft")),
        category=str(meta.get("category") or "").strip(),
        tags=_normalize_tags(meta.get("tags")),
        description=str(meta.get("description") or "").strip(),
        html=html,
        toc=toc,
    )


def split_front_matter(text: str, source: Union[str, Path, None] = None) -> Tuple[dict, str]:
    """Separate the ``---`` delimited YAML header from the markdown body."""
    text = text.strip()
    if not _front_matter.detect(text):
        raise ParseError("missing front-matter block", source=source)
    try:
        raw_meta, body = _front_matter.split(text)
    except ValueError as exc:
        raise ParseError("front-matter block is not closed", source=source) from exc
    try:
        meta = _front_matter.load(raw_meta)
    except (yaml.YAMLError, ValueError, TypeError) as exc:
        # SafeLoader raises ValueError for impossible timestamps such as 2020-13-45
        raise ParseError(f"invalid front-matter ({exc})", source=source) from exc
    if meta is None:
        meta = {}
    if not isinstance(meta, dict):
        raise ParseError("front-matter is not a mapping", source=source)
    return meta, body.strip()


def dump_post(post: Post) -> str:
    """Serialize a post back to the on-disk front-matter format."""
    document = frontmatter.Post(post.body, **post.meta())
    return frontmatter.dumps(document, sort_keys=False) + "\n"


def _parse_date(value, source) -> int:
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.year * 10000 + value.month * 100 + value.day
    if isinstance(value, str):
        text = value.strip()
        for fmt in ("%Y%m%d", "%Y-%m-%d", "%Y/%m/%d"):
            try:
                return _parse_date(datetime.strptime(text, fmt), source)
            except ValueError:
                continue
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return _parse_date(datetime.strptime(f"{value:08d}", "%Y%m%d"), source)
        except ValueError:
            pass
    raise ParseError(f"unrecognized date '{value}', expected YYYYMMDD", source=source)


def _parse_flag(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _truthy
    return bool(value)


def _title_from_path(path: Path) -> str:
    return path.stem.replace("-", " ").title()


def _slugify(value: str) -> str:
    normalized = value.strip().lower()
    normalized = _slug_pattern.sub("-", normalized)
    normalized = normalized.strip("-")
    return normalized or "post"


def _normalize_tags(value) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value.strip(),) if value.strip() else ()
    if isinstance(value, Iterable):
        tags: List[str] = []
        for item in value:
            if isinstance(item, (str, int, float)) and not isinstance(item, bool) and str(item).strip():
                tags.append(str(item).strip())
        return tuple(tags)
    return ()

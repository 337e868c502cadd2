from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Request

from blog.errors import PostsNotReady
from blog.services.post_store import PostCatalog


router = APIRouter(prefix="/api", tags=["posts"])


def get_catalog(request: Request) -> PostCatalog:
    catalog = getattr(request.app.state, "catalog", None)
    if catalog is None:
        raise PostsNotReady()
    return catalog


@router.get("/posts", name="list_posts")
def list_posts(catalog: PostCatalog = Depends(get_catalog)) -> List[Dict[str, Any]]:
    return [post.to_dict() for post in catalog.all()]


@router.get("/posts/search", name="search_posts")
def search_posts(
    q: Optional[str] = Query(None, description="Case-insensitive title match"),
    tag: List[str] = Query(default=[], description="Keep posts carrying any of these tags"),
    catalog: PostCatalog = Depends(get_catalog),
) -> List[Dict[str, Any]]:
    return [post.to_dict() for post in catalog.search(text=q, tags=tag)]


@router.get("/posts/{slug}", name="get_post")
def get_post(slug: str, catalog: PostCatalog = Depends(get_catalog)) -> Dict[str, Any]:
    return catalog.get(slug).to_dict()


@router.get("/tags", name="list_tags")
def list_tags(catalog: PostCatalog = Depends(get_catalog)) -> List[str]:
    return catalog.tags()

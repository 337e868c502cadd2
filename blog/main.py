from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from blog.config import Settings, load_settings
from blog.database import build_engine, init_db
from blog.errors import BlogError, PostDirectoryError
from blog.routers import comments, posts
from blog.services.post_store import PostCatalog, load_posts


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    engine = build_engine(settings.database_url)
    init_db(engine)
    app.state.engine = engine
    try:
        catalog = PostCatalog(load_posts(settings.posts_dir))
    except PostDirectoryError as exc:
        logger.error("Cannot start without posts: %s", exc)
        engine.dispose()
        raise
    # readiness: the catalog is installed before the first request is accepted
    app.state.catalog = catalog
    try:
        yield
    finally:
        app.state.catalog = None
        engine.dispose()


async def handle_blog_error(request: Request, exc: BlogError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


def _mount_client(app: FastAPI, settings: Settings) -> None:
    build_dir = settings.static_dir
    index_file = build_dir / "index.html"
    if not build_dir.is_dir():
        logger.warning("Client build %s not found; serving the API only", build_dir)
        return

    @app.get("/posts/{path:path}", include_in_schema=False)
    def client_route(path: str) -> FileResponse:
        return FileResponse(index_file)

    app.mount("/", StaticFiles(directory=build_dir, html=True), name="client")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()

    app = FastAPI(title="Blog API", lifespan=lifespan)
    app.state.settings = settings
    app.state.catalog = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(BlogError, handle_blog_error)

    app.include_router(posts.router)
    app.include_router(comments.router)

    @app.get("/health")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    if settings.serve_static:
        _mount_client(app, settings)

    return app


app = create_app()

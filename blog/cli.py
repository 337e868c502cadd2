from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

import uvicorn

from blog.config import Settings, load_settings
from blog.main import create_app


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve the blog API and client bundle.")
    parser.add_argument("--dev", action="store_true", help="Development mode: port 3001, no static client")
    parser.add_argument("--host", default=None, help="Interface to bind")
    parser.add_argument("--port", type=int, default=None, help="Port to listen on")
    parser.add_argument("--posts-dir", type=Path, default=None, help="Directory of markdown posts")
    parser.add_argument("--static-dir", type=Path, default=None, help="Pre-built client bundle")
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace, base: Optional[Settings] = None) -> Settings:
    """Command line flags win over BLOG_* environment variables."""
    base = base or load_settings()
    return base.with_overrides(
        dev=True if args.dev else None,
        host=args.host,
        port_override=args.port,
        posts_dir=args.posts_dir,
        static_dir=args.static_dir,
    )


def main(argv=None) -> None:
    settings = build_settings(parse_args(argv))
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info(
        "Blog server listening on port %d%s", settings.port, " (dev)" if settings.dev else ""
    )
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()

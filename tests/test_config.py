from pathlib import Path

from blog import cli
from blog.config import Settings, load_settings


def test_port_follows_dev_mode():
    assert Settings(dev=True).port == 3001
    assert Settings(dev=False).port == 80
    assert Settings(dev=True, port_override=8080).port == 8080
    assert Settings(dev=True).serve_static is False
    assert Settings().serve_static is True


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("BLOG_DEV", "yes")
    monkeypatch.setenv("BLOG_POSTS_DIR", str(tmp_path))
    monkeypatch.setenv("BLOG_DATABASE_URL", "postgresql://blog@localhost/blog")
    monkeypatch.setenv("BLOG_LOG_LEVEL", "debug")
    monkeypatch.delenv("BLOG_PORT", raising=False)

    settings = load_settings()
    assert settings.dev is True
    assert settings.port == 3001
    assert settings.posts_dir == tmp_path
    assert settings.database_url == "postgresql://blog@localhost/blog"
    assert settings.log_level == "DEBUG"


def test_cli_flags_override_settings():
    args = cli.parse_args(["--dev", "--posts-dir", "content", "--port", "5000"])
    settings = cli.build_settings(args, base=Settings(host="127.0.0.1"))
    assert settings.dev is True
    assert settings.port == 5000
    assert settings.posts_dir == Path("content")
    assert settings.host == "127.0.0.1"

    production = cli.build_settings(cli.parse_args([]), base=Settings())
    assert production.dev is False
    assert production.port == 80

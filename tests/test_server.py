import asyncio
import importlib
import sys
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

import logging_config  # noqa: E402
from config import Settings  # noqa: E402
from web_app.server import create_app  # noqa: E402


def _settings(root: Path, **overrides) -> Settings:
    return Settings(_env_file=None, upload_root=str(root), **overrides)


def test_health(tmp_path):
    with TestClient(create_app(_settings(tmp_path / "uploads"))) as client:
        resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_unknown_route_is_404(tmp_path):
    with TestClient(create_app(_settings(tmp_path / "uploads"))) as client:
        assert client.get("/nope").status_code == 404
        assert client.get("/uploads/missing.txt").status_code == 404


def test_startup_creates_upload_root(tmp_path):
    root = tmp_path / "nested" / "uploads"
    with TestClient(create_app(_settings(root))):
        assert root.is_dir()


def test_startup_fails_when_root_unusable(tmp_path):
    root = tmp_path / "uploads"
    root.write_text("not a directory", encoding="utf-8")
    with pytest.raises(RuntimeError):
        with TestClient(create_app(_settings(root))):
            pass


def test_static_serving_guesses_content_type(tmp_path):
    root = tmp_path / "uploads"
    (root / "Acme").mkdir(parents=True)
    (root / "Acme" / "note.txt").write_text("hello", encoding="utf-8")
    (tmp_path / "outside.txt").write_text("nope", encoding="utf-8")
    with TestClient(create_app(_settings(root))) as client:
        resp = client.get("/uploads/Acme/note.txt")
        escaped = client.get("/uploads/../outside.txt")
    assert resp.status_code == 200
    assert resp.text == "hello"
    assert resp.headers["content-type"].startswith("text/plain")
    assert escaped.status_code == 404


def test_cors_allows_any_origin_by_default(tmp_path):
    with TestClient(create_app(_settings(tmp_path / "uploads"))) as client:
        resp = client.get("/health", headers={"Origin": "http://frontend.example"})
    assert resp.headers["access-control-allow-origin"] == "*"


def test_cors_restricted_origin(tmp_path):
    settings = _settings(tmp_path / "uploads", cors_origins="http://allowed.example")
    with TestClient(create_app(settings)) as client:
        allowed = client.get("/health", headers={"Origin": "http://allowed.example"})
        denied = client.get("/health", headers={"Origin": "http://other.example"})
    assert allowed.headers["access-control-allow-origin"] == "http://allowed.example"
    assert "access-control-allow-origin" not in denied.headers


def test_concurrent_uploads_to_same_folder(tmp_path):
    root = tmp_path / "uploads"
    app = create_app(_settings(root))

    async def _run():
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            requests = [
                client.post(
                    "/upload",
                    data={"folderName": "Shared Folder"},
                    files={"files": (f"file{i}.txt", f"content {i}".encode())},
                )
                for i in range(10)
            ]
            return await asyncio.gather(*requests)

    responses = asyncio.run(_run())
    assert [r.status_code for r in responses] == [200] * 10
    folder = root / "Shared_Folder"
    assert sorted(p.name for p in folder.iterdir()) == sorted(f"file{i}.txt" for i in range(10))


def test_server_import_has_no_side_effects(tmp_path, monkeypatch):
    called = False

    def fake_setup_logging(*args, **kwargs):
        nonlocal called
        called = True

    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(logging_config, "setup_logging", fake_setup_logging)
    sys.modules.pop("web_app.server", None)
    importlib.import_module("web_app.server")

    assert not called
    assert not (tmp_path / "uploads").exists()

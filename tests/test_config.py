import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from config import NamingScheme, Settings  # noqa: E402


def test_defaults(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("PORT", "UPLOAD_ROOT", "NAMING_SCHEME", "MAX_FILES", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings()
    assert settings.port == 9000
    assert settings.upload_root == "uploads"
    assert settings.naming_scheme is NamingScheme.FOLDER
    assert settings.max_files == 100
    assert settings.max_file_size is None
    assert settings.allowed_origins == ["*"]


def test_load_from_dotenv(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("NAMING_SCHEME=hierarchy\nMAX_FILES=5\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("NAMING_SCHEME", raising=False)
    monkeypatch.delenv("MAX_FILES", raising=False)
    settings = Settings()
    assert settings.naming_scheme is NamingScheme.HIERARCHY
    assert settings.max_files == 5


def test_env_overrides_dotenv(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("LOG_LEVEL=DEBUG\nUPLOAD_ROOT=FromEnvFile\n", encoding="utf-8")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.delenv("UPLOAD_ROOT", raising=False)
    cfg = Settings(_env_file=env_file)
    assert cfg.log_level == "WARNING"
    assert cfg.upload_root == "FromEnvFile"


def test_cors_origins_split(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "http://a.example, http://b.example,")
    settings = Settings(_env_file=None)
    assert settings.allowed_origins == ["http://a.example", "http://b.example"]


def test_url_prefix_normalized():
    settings = Settings(_env_file=None, public_url_prefix="files/")
    assert settings.url_prefix == "/files"

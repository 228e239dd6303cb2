from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
import uvicorn

from config import Settings, config
from logger import configure_file_logging
from logging_config import setup_logging
from storage import StorageError, ensure_directory
from .routes import health, upload

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the upload application for ``settings`` (module config by default)."""
    if settings is None:
        settings = config
    app = FastAPI(title="fileshelf")
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(upload.UploadFailed, upload.upload_failed_handler)

    @app.on_event("startup")
    async def prepare_upload_root() -> None:
        """Create the upload root; the server must not start without it."""
        root = Path(settings.upload_root)
        try:
            ensure_directory(root)
        except StorageError as exc:
            logger.critical("Upload root %s is unusable: %s", root, exc)
            raise RuntimeError(f"Cannot create upload root {root}") from exc
        logger.info(
            "Uploads go to %s (naming scheme: %s)",
            root.resolve(),
            settings.naming_scheme.value,
        )

    # --------- Routes ----------
    app.include_router(health.router)
    app.include_router(upload.router)

    if settings.serve_uploads:
        app.mount(
            settings.url_prefix,
            StaticFiles(directory=settings.upload_root, check_dir=False),
            name="uploads",
        )
    return app


app = create_app()


def main() -> None:
    """Run the server with settings from the environment."""
    setup_logging(config.log_level, config.log_file)
    configure_file_logging()
    logger.info("Starting upload server on %s:%s", config.host, config.port)
    target = "web_app.server:app" if config.reload else app
    uvicorn.run(target, host=config.host, port=config.port, reload=config.reload)


if __name__ == "__main__":
    main()

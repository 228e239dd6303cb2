from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.datastructures import FormData, UploadFile
from starlette.exceptions import HTTPException
from starlette.requests import ClientDisconnect

from config import Settings
from models import StoredFile, UploadFailure, UploadResult
from naming import (
    PathOutsideRoot,
    build_destination,
    build_url,
    clean_filename,
    resolve_naming,
)
from storage import StorageError, ensure_directory, save_upload

router = APIRouter()

logger = logging.getLogger(__name__)

# Multipart field carrying the file parts
FILES_FIELD = "files"


class UploadFailed(Exception):
    """Abort an upload with ``status_code``.

    ``files`` lists what was already stored when a write fails partway
    through a request; it stays ``None`` for errors raised before any
    write.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        files: Optional[List[StoredFile]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.files = files

    def to_response(self) -> JSONResponse:
        extra = {}
        if self.files is not None:
            extra = {"count": len(self.files), "files": self.files}
        body = UploadFailure(message=self.message, **extra)
        return JSONResponse(status_code=self.status_code, content=body.to_json())


async def upload_failed_handler(request: Request, exc: UploadFailed) -> JSONResponse:
    return exc.to_response()


def _file_parts(form: FormData) -> list[UploadFile]:
    """File parts under ``files`` in body order.

    Plain strings and empty unnamed parts (a browser's blank file input)
    are skipped.
    """
    return [
        v
        for v in form.getlist(FILES_FIELD)
        if isinstance(v, UploadFile) and (v.filename or v.size)
    ]


async def store_form(form: FormData, settings: Settings) -> UploadResult:
    """Write every file part of ``form`` under the directory its naming fields select."""
    naming = resolve_naming(settings.naming_scheme, form)
    parts = _file_parts(form)
    if not parts:
        logger.warning("Upload rejected: no files in request")
        raise UploadFailed(400, "No files uploaded")

    safe_parts = [value.safe for _, value in naming]
    try:
        destination = build_destination(settings.upload_root, safe_parts)
        ensure_directory(destination)
    except (PathOutsideRoot, StorageError) as exc:
        logger.exception("Cannot prepare destination for %s", safe_parts)
        raise UploadFailed(500, str(exc)) from exc

    stored: list[StoredFile] = []
    for part in parts:
        saved_as = clean_filename(part.filename, part.content_type)
        target = destination / saved_as
        try:
            await save_upload(part, target, max_size=settings.max_file_size)
        except StorageError as exc:
            logger.error(
                "Upload aborted at %s after %d stored file(s): %s",
                saved_as,
                len(stored),
                exc,
            )
            raise UploadFailed(exc.status_code, str(exc), stored) from exc
        stored.append(
            StoredFile(
                original_name=part.filename or "",
                saved_as=saved_as,
                path=str(target),
            )
        )

    folder_url = None
    if settings.serve_uploads:
        folder_url = build_url(settings.url_prefix, safe_parts)
    logger.info("Stored %d file(s) in %s", len(stored), destination)
    return UploadResult(
        folder_path=str(destination),
        folder_url=folder_url,
        count=len(stored),
        files=stored,
        **{level.key: value for level, value in naming},
    )


@router.post(
    "/upload",
    response_model=UploadResult,
    responses={
        400: {"model": UploadFailure},
        413: {"model": UploadFailure},
        500: {"model": UploadFailure},
    },
)
async def upload_files(request: Request):
    """Store the uploaded files under the folder built from the naming fields."""
    settings: Settings = request.app.state.settings
    try:
        form = await request.form(max_files=settings.max_files)
    except HTTPException as exc:
        logger.warning("Malformed upload rejected: %s", exc.detail)
        raise UploadFailed(exc.status_code, str(exc.detail)) from exc
    except ClientDisconnect as exc:
        logger.warning("Client disconnected before the upload finished")
        raise UploadFailed(400, "Client disconnected") from exc

    try:
        result = await store_form(form, settings)
    finally:
        await form.close()
    return JSONResponse(content=result.to_json())

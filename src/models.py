from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class NamingValue(_CamelModel):
    raw: str
    safe: str


class StoredFile(_CamelModel):
    original_name: str
    saved_as: str
    path: str


class UploadResult(_CamelModel):
    """Summary of a completed upload.

    Naming values are stored as extra attributes under their response key
    (``folder`` or ``company``/``project``/``title``).
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    success: bool = True
    message: str = "Files uploaded successfully"
    folder_path: str
    folder_url: Optional[str] = None
    count: int = 0
    files: List[StoredFile] = Field(default_factory=list)


class UploadFailure(_CamelModel):
    success: bool = False
    message: str
    count: Optional[int] = None
    files: Optional[List[StoredFile]] = None


class HealthStatus(BaseModel):
    status: str = "ok"

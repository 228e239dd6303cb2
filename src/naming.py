from __future__ import annotations

import mimetypes
import re
from pathlib import Path
from typing import Mapping, NamedTuple, Optional

from config import NamingScheme
from models import NamingValue

UNSAFE_CHARS_PATTERN = re.compile(r"[^A-Za-z0-9_-]")


class NamingLevel(NamedTuple):
    field: str
    key: str
    default: str


NAMING_LEVELS: dict[NamingScheme, tuple[NamingLevel, ...]] = {
    NamingScheme.FOLDER: (NamingLevel("folderName", "folder", "default"),),
    NamingScheme.HIERARCHY: (
        NamingLevel("companyName", "company", "company_default"),
        NamingLevel("projectName", "project", "project_default"),
        NamingLevel("titleName", "title", "title_default"),
    ),
}


class PathOutsideRoot(ValueError):
    """Raised when a composed path escapes the upload root."""


def sanitize_segment(value: str, replacement: str = "_") -> str:
    """Replace every character outside ``[A-Za-z0-9_-]`` one for one."""
    return UNSAFE_CHARS_PATTERN.sub(replacement, value)


def resolve_value(value: Optional[str], default: str) -> NamingValue:
    """Build the raw/safe pair for one naming field.

    Blank or missing input takes ``default``.
    """
    raw = (value or "").strip() or default
    return NamingValue(raw=raw, safe=sanitize_segment(raw))


def resolve_naming(
    scheme: NamingScheme, form: Mapping[str, object]
) -> list[tuple[NamingLevel, NamingValue]]:
    """Resolve every level of ``scheme`` from submitted form fields.

    Non-string values (file parts sent under a naming field) count as
    missing.
    """
    resolved = []
    for level in NAMING_LEVELS[scheme]:
        value = form.get(level.field)
        if not isinstance(value, str):
            value = None
        resolved.append((level, resolve_value(value, level.default)))
    return resolved


def build_destination(root: str | Path, safe_parts: list[str]) -> Path:
    """Join ``safe_parts`` under ``root`` and make sure it stays inside."""
    base = Path(root).resolve()
    target = base.joinpath(*safe_parts).resolve()
    if target == base or not target.is_relative_to(base):
        raise PathOutsideRoot(f"{target} is outside {base}")
    return target


def build_url(prefix: str, safe_parts: list[str]) -> str:
    return "/".join([prefix.rstrip("/"), *safe_parts])


def clean_filename(name: Optional[str], content_type: Optional[str] = None) -> str:
    """Reduce a client-supplied file name to a bare name.

    Directory components (``/`` and ``\\``) and NUL characters are removed.
    When nothing usable is left, ``upload`` plus an extension guessed from
    ``content_type`` is returned.
    """
    name = (name or "").replace("\x00", "")
    name = re.split(r"[\\/]", name)[-1].strip()
    if name in {"", ".", ".."}:
        guessed_ext = mimetypes.guess_extension(content_type or "") or ""
        return f"upload{guessed_ext}"
    return name

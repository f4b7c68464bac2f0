"""Path mapping for files imported verbatim from the base template."""

from __future__ import annotations


def normalize_base_dir(base_dir: str | None) -> str:
    """Strip surrounding slashes; ``.`` means the repository root."""
    normalized = (base_dir or "").strip().strip("/")
    if normalized in (".", "./"):
        return ""
    return normalized


def compute_zip_rel(base_dir: str | None, rel_path: str | None) -> tuple[str, str]:
    """Return ``(url_path, zip_rel)`` for a file listed in an import group.

    ``url_path`` is where the file lives in the base template. ``zip_rel``
    is the path inside the destination folder; the caller prefixes the
    group's ``dest_dir``.
    """
    base = normalize_base_dir(base_dir)
    path = (rel_path or "").strip().lstrip("/")
    url_path = f"{base}/{path}" if base else path
    return url_path, path


def join_zip_path(*segments: str) -> str:
    """Join archive path segments, skipping empty and ``.`` segments."""
    cleaned = [segment.strip("/") for segment in segments if segment and segment.strip("/") not in ("", ".")]
    return "/".join(cleaned)

"""Assemble the customized template zip archive."""

from __future__ import annotations

import asyncio
import logging
import zipfile
from io import BytesIO
from pathlib import Path

import httpx

from template_customizer.exceptions import EmptyTemplateError
from template_customizer.http_utils import fetch_with_retries, join_location
from template_customizer.imports import compute_zip_rel, join_zip_path
from template_customizer.schemas import ImportGroup, LoadFilteredPartsResult

logger = logging.getLogger(__name__)

TEMPLATE_DIR = "template"
BLANK_TEMPLATE_DIR = "blank-template"


async def build_archive(
    loaded: LoadFilteredPartsResult,
    base_url: str,
    *,
    client: httpx.AsyncClient | None = None,
) -> bytes:
    """Build the zip archive holding both renderings of every kept part.

    Layout: ``template/<file>`` and ``blank-template/<file>`` for non-blank
    outputs, the README at the root of both trees, and the files of each
    manifest import group under ``<tree>/<dest_dir>/``.

    Raises:
        EmptyTemplateError: If no part is left after filtering.
        FetchError: If an imported file cannot be fetched.
    """
    if not loaded.filtered_parts:
        raise EmptyTemplateError("No parts left after applying label filters.")

    entries: dict[str, bytes] = {}
    for part in loaded.filtered_parts:
        if part.template_content.strip():
            entries[join_zip_path(TEMPLATE_DIR, part.file)] = part.template_content.encode("utf-8")
        if part.blank_content.strip():
            entries[join_zip_path(BLANK_TEMPLATE_DIR, part.file)] = part.blank_content.encode("utf-8")

    if loaded.readme and loaded.readme.content:
        readme = loaded.readme.content.encode("utf-8")
        entries[join_zip_path(TEMPLATE_DIR, loaded.readme.file)] = readme
        entries[join_zip_path(BLANK_TEMPLATE_DIR, loaded.readme.file)] = readme

    imported = await asyncio.gather(
        *(
            _fetch_import_group(base_url, group, BLANK_TEMPLATE_DIR, client=client)
            for group in loaded.import_groups
        ),
        *(
            _fetch_import_group(base_url, group, TEMPLATE_DIR, client=client)
            for group in loaded.template_import_groups
        ),
    )
    for group_entries in imported:
        entries.update(group_entries)

    buffer = BytesIO()
    with zipfile.ZipFile(buffer, mode="w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, data in entries.items():
            archive.writestr(name, data)
    return buffer.getvalue()


def write_archive(data: bytes, target: Path) -> Path:
    """Write archive bytes to ``target``, creating parent directories."""
    target = target.expanduser().resolve()
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(data)
    logger.info("Wrote %s (%d bytes)", target, len(data))
    return target


async def _fetch_import_group(
    base_url: str,
    group: ImportGroup,
    root: str,
    *,
    client: httpx.AsyncClient | None,
) -> dict[str, bytes]:
    entries: dict[str, bytes] = {}
    for file in group.files:
        url_path, zip_rel = compute_zip_rel(group.src_dir, file)
        content = await fetch_with_retries(
            join_location(base_url, url_path), client=client, return_bytes=True
        )
        if isinstance(content, str):
            content = content.encode("utf-8")
        entries[join_zip_path(root, group.dest_dir, zip_rel)] = content
    return entries

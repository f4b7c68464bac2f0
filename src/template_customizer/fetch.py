"""Fetch a base template: manifest, README and every part document."""

from __future__ import annotations

import asyncio
import logging
from contextlib import AsyncExitStack

import httpx

from template_customizer.config import (
    MANIFEST_FILENAME,
    README_CANDIDATES,
    TEMPLATE_CUSTOMIZER_FETCH_CONCURRENCY,
)
from template_customizer.exceptions import (
    DuplicateSectionIdError,
    FetchError,
    ManifestNotFoundError,
    PartFetchError,
    PartFetchFailure,
    ReadmeNotFoundError,
    ResourceNotFoundError,
)
from template_customizer.http_utils import create_client, fetch_with_retries, is_remote, join_location
from template_customizer.manifest import parse_manifest
from template_customizer.parser import iter_sections, parse_sections
from template_customizer.schemas import ManifestFetchResult, Part, PartRef, Readme, TemplateWithParts

logger = logging.getLogger(__name__)


async def fetch_template_manifest(
    base_url: str,
    *,
    client: httpx.AsyncClient | None = None,
) -> ManifestFetchResult:
    """Fetch and parse ``<base_url>/base-template-manifest.yaml``.

    Raises:
        ManifestNotFoundError: If the manifest does not exist.
        ManifestError: If the manifest is empty or malformed.
        FetchError: If a network error occurs.
    """
    target = join_location(base_url, MANIFEST_FILENAME)
    logger.debug("Fetching manifest %s", target)
    try:
        raw = await fetch_with_retries(target, client=client)
    except ResourceNotFoundError as exc:
        raise ManifestNotFoundError(target, 404) from exc
    text = _as_text(raw)
    return ManifestFetchResult(url=target, raw=text, data=parse_manifest(text, source=target))


async def fetch_readme(base_url: str, *, client: httpx.AsyncClient | None = None) -> Readme:
    """Return the first non-empty README candidate found at the template root.

    Raises:
        ReadmeNotFoundError: If no candidate exists.
    """
    for candidate in README_CANDIDATES:
        target = join_location(base_url, candidate)
        try:
            content = _as_text(await fetch_with_retries(target, client=client))
        except FetchError as exc:
            logger.debug("README candidate %s unavailable: %s", target, exc)
            continue
        if content.strip():
            return Readme(file=candidate, content=content)

    raise ReadmeNotFoundError(
        f"README (adoc/md) is required in the base template. Tried: {', '.join(README_CANDIDATES)}"
    )


async def fetch_template_and_parts(
    base_url: str,
    *,
    concurrency: int | None = None,
    client: httpx.AsyncClient | None = None,
) -> TemplateWithParts:
    """Fetch the manifest, the README and every part listed in the manifest.

    Parts are downloaded concurrently, at most ``concurrency`` at a time.
    Every download is allowed to finish before failures are reported, so the
    raised PartFetchError lists all of them.

    Raises:
        ManifestNotFoundError: If the manifest does not exist.
        ReadmeNotFoundError: If the template has no README.
        PartFetchError: If any part could not be fetched.
        DuplicateSectionIdError: If a section id is used more than once.
    """
    limit = max(1, concurrency or TEMPLATE_CUSTOMIZER_FETCH_CONCURRENCY)

    async with AsyncExitStack() as stack:
        if client is None and is_remote(base_url):
            client = await stack.enter_async_context(create_client())

        metadata = await fetch_template_manifest(base_url, client=client)
        readme = await fetch_readme(base_url, client=client)

        semaphore = asyncio.Semaphore(limit)
        outcomes = await asyncio.gather(
            *(
                _fetch_part(base_url, part, semaphore=semaphore, client=client)
                for part in metadata.data.parts
            )
        )

    failures = [outcome for outcome in outcomes if isinstance(outcome, PartFetchFailure)]
    if failures:
        raise PartFetchError(failures)
    parts = [outcome for outcome in outcomes if isinstance(outcome, Part)]

    duplicates = find_duplicate_section_ids(parts)
    if duplicates:
        raise DuplicateSectionIdError(duplicates)

    return TemplateWithParts(metadata=metadata, parts=parts, readme=readme)


def find_duplicate_section_ids(parts: list[Part]) -> dict[str, list[tuple[str, str]]]:
    """Return ``id -> [(file, title), ...]`` for every id used more than once."""
    locations: dict[str, list[tuple[str, str]]] = {}
    for part in parts:
        for section in iter_sections(part.sections):
            section_id = section.section_id
            if section_id:
                locations.setdefault(section_id, []).append((part.file, section.title))
    return {section_id: found for section_id, found in locations.items() if len(found) > 1}


async def _fetch_part(
    base_url: str,
    part: PartRef,
    *,
    semaphore: asyncio.Semaphore,
    client: httpx.AsyncClient | None,
) -> Part | PartFetchFailure:
    url = join_location(base_url, part.file)
    async with semaphore:
        logger.debug("Fetching part %s (%s)", part.name, url)
        try:
            content = _as_text(await fetch_with_retries(url, client=client))
        except ResourceNotFoundError as exc:
            return PartFetchFailure(name=part.name, file=part.file, url=url, status=404, message=str(exc))
        except FetchError as exc:
            return PartFetchFailure(name=part.name, file=part.file, url=url, message=str(exc))

    return Part(
        name=part.name,
        file=part.file,
        url=url,
        content=content,
        sections=parse_sections(content),
    )


def _as_text(result: str | bytes) -> str:
    if isinstance(result, bytes):
        return result.decode("utf-8")
    return result

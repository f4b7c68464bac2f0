"""Fetch base template resources over HTTP(S) or from the local filesystem."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Final
from urllib.parse import unquote, urlparse

import httpx

from template_customizer.config import (
    TEMPLATE_CUSTOMIZER_FETCH_BACKOFF_S,
    TEMPLATE_CUSTOMIZER_FETCH_MAX_RETRIES,
    TEMPLATE_CUSTOMIZER_FETCH_TIMEOUT_S,
    TEMPLATE_CUSTOMIZER_USER_AGENT,
)
from template_customizer.exceptions import FetchError, ResourceNotFoundError

RETRY_STATUS_CODES: Final[frozenset[int]] = frozenset({429, 500, 502, 503, 504})

_MAX_REDIRECTS: Final[int] = 5


def is_remote(location: str) -> bool:
    return urlparse(location).scheme in ("http", "https")


def join_location(base: str, relative: str) -> str:
    """Join a base URL or directory with a relative path using ``/``."""
    return f"{base.rstrip('/')}/{relative.lstrip('/')}"


def create_client(timeout_s: float | None = None) -> httpx.AsyncClient:
    """Create the shared client used for every request of a run."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout_s or TEMPLATE_CUSTOMIZER_FETCH_TIMEOUT_S),
        headers={"User-Agent": TEMPLATE_CUSTOMIZER_USER_AGENT},
        follow_redirects=True,
        max_redirects=_MAX_REDIRECTS,
    )


async def fetch_with_retries(
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    return_bytes: bool = False,
    on_404: type[Exception] | None = None,
    on_404_message: str | None = None,
) -> str | bytes:
    """Fetch content from a URL with retry logic for transient failures.

    ``file://`` URLs and plain paths are read from disk without retries.

    Args:
        url: The URL or local path to fetch.
        client: Optional httpx.AsyncClient for connection pooling. If not
            provided, a new client is created for this request.
        return_bytes: If True, return raw bytes instead of decoded text.
        on_404: Custom exception class to raise on 404. Defaults to
            ResourceNotFoundError.
        on_404_message: Custom error message for 404 responses. If None,
            a generic message is used.

    Returns:
        The fetched content as a string (default) or bytes (if return_bytes=True).

    Raises:
        ResourceNotFoundError (or custom on_404 exception): If the resource
            does not exist.
        FetchError: If the fetch fails after all retries or times out.
    """
    not_found_exc_class = on_404 or ResourceNotFoundError
    message = on_404_message or f"Resource not found at {url}"

    if not is_remote(url):
        return await _read_local(url, return_bytes=return_bytes, not_found=not_found_exc_class(message))

    last_exc: Exception | None = None

    async def do_fetch(http_client: httpx.AsyncClient) -> str | bytes:
        nonlocal last_exc

        for attempt in range(TEMPLATE_CUSTOMIZER_FETCH_MAX_RETRIES + 1):
            try:
                response = await http_client.get(url)

                if response.status_code == 404:
                    raise not_found_exc_class(message)

                if response.status_code in RETRY_STATUS_CODES:
                    last_exc = FetchError(f"HTTP {response.status_code} from {url}")
                else:
                    response.raise_for_status()
                    return response.content if return_bytes else response.text
            except httpx.TimeoutException as exc:
                last_exc = FetchError(f"Timed out fetching {url}")
                last_exc.__cause__ = exc
            except (httpx.RequestError, httpx.HTTPStatusError) as exc:
                last_exc = exc
            except not_found_exc_class:
                raise

            if attempt < TEMPLATE_CUSTOMIZER_FETCH_MAX_RETRIES:
                backoff = TEMPLATE_CUSTOMIZER_FETCH_BACKOFF_S * (2**attempt)
                await asyncio.sleep(backoff)

        raise FetchError(f"Failed to fetch {url}: {last_exc}")

    if client is not None:
        return await do_fetch(client)

    async with create_client() as new_client:
        return await do_fetch(new_client)


def local_path(location: str) -> Path:
    parsed = urlparse(location)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    return Path(location).expanduser()


async def _read_local(location: str, *, return_bytes: bool, not_found: Exception) -> str | bytes:
    path = local_path(location)
    if not path.is_file():
        raise not_found
    try:
        if return_bytes:
            return await asyncio.to_thread(path.read_bytes)
        return await asyncio.to_thread(path.read_text, encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise FetchError(f"Failed to decode {path}: {exc}") from exc
    except OSError as exc:
        raise FetchError(f"Failed to read {path}: {exc}") from exc

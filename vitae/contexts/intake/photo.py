"""
Photo Acquisition

Resolves the résumé photo from one of two competing sources:

1. Inline: a base64 payload, optionally wrapped as a data URI
   ("data:image/jpeg;base64,...")
2. Remote: an http(s) URL, including Google Drive share links which are
   rewritten to their direct-download form before fetching

The inline source always wins when it decodes. Remote fetches follow a
bounded number of redirects and any failure is reported as a soft error: the
pipeline continues with no photo and the caller decides whether that matters.
"""

import base64
import binascii
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import httpx

from vitae.contexts.intake.exceptions import PhotoDownloadError, TooManyRedirectsError
from vitae.contexts.intake.field_resolver import is_blank, resolve
from vitae.contexts.intake.logger import _log_debug, _log_warning, log_photo_resolution
from vitae.utils.text_processing import to_text

USER_AGENT = "Mozilla/5.0 (CV-Generator)"
DEFAULT_HEADERS = {"User-Agent": USER_AGENT, "Accept": "*/*"}

DATA_URI = re.compile(
    r"^data:(?P<media_type>[\w.+-]+/[\w.+-]+)?(?:;[^,;]*)*;base64,(?P<payload>.*)$",
    re.IGNORECASE | re.DOTALL,
)

# Google Drive share-link forms
DRIVE_FILE_PATH = re.compile(r"drive\.google\.com/file/d/([a-zA-Z0-9_-]+)")
DRIVE_OPEN = re.compile(r"drive\.google\.com/open\?(?:[^#]*&)?id=([a-zA-Z0-9_-]+)")
DRIVE_ID_PARAM = re.compile(r"[?&]id=([a-zA-Z0-9_-]+)")
DRIVE_HOST = re.compile(r"^(?:https?://)?(?:www\.)?(?:drive|docs)\.google\.com/", re.IGNORECASE)
DRIVE_DIRECT_DOWNLOAD = "https://drive.google.com/uc?export=download&id={file_id}"


@dataclass
class PhotoResolution:
    """
    Outcome of photo resolution.

    Attributes:
        data: Image bytes (None when no source produced an image)
        source: "inline" or "url" (None when data is None)
        error: Soft-failure description, if a supplied source could not be used
    """

    data: Optional[bytes] = None
    source: Optional[str] = None
    error: Optional[str] = None


def decode_inline(value: Any) -> Optional[bytes]:
    """
    Decode an inline base64 image, with or without a data URI header.

    Whitespace inside the payload and missing padding are tolerated, as are
    URL-safe alphabets. Never raises.

    Args:
        value: Raw base64 string or data URI

    Returns:
        Decoded bytes, or None for empty or undecodable input

    Examples:
        >>> decode_inline("data:image/png;base64,aGVsbG8=")
        b'hello'
        >>> decode_inline("not base64!") is None
        True
    """
    if is_blank(value) or not isinstance(value, (str, bytes)):
        return None
    text = value.decode("ascii", errors="ignore") if isinstance(value, bytes) else value
    text = text.strip()

    match = DATA_URI.match(text)
    if match:
        text = match.group("payload")

    payload = re.sub(r"\s+", "", text)
    if not payload:
        return None
    payload += "=" * (-len(payload) % 4)

    altchars = b"-_" if ("-" in payload or "_" in payload) else None
    try:
        data = base64.b64decode(payload, altchars=altchars, validate=True)
    except (binascii.Error, ValueError):
        return None
    return data or None


def normalize_share_url(url: Any) -> str:
    """
    Rewrite a Google Drive share link to its direct-download URL.

    Recognized forms:
    - https://drive.google.com/file/d/<id>/view?usp=sharing
    - https://drive.google.com/open?id=<id>
    - any drive.google.com / docs.google.com URL carrying ?id=<id> or &id=<id>

    Other URLs are returned unchanged (trimmed).

    Example:
        >>> normalize_share_url("https://drive.google.com/file/d/AbC_123/view")
        'https://drive.google.com/uc?export=download&id=AbC_123'
    """
    text = to_text(url).strip()
    if not text:
        return ""

    for pattern in (DRIVE_FILE_PATH, DRIVE_OPEN):
        match = pattern.search(text)
        if match:
            return DRIVE_DIRECT_DOWNLOAD.format(file_id=match.group(1))

    if DRIVE_HOST.match(text):
        match = DRIVE_ID_PARAM.search(text)
        if match:
            return DRIVE_DIRECT_DOWNLOAD.format(file_id=match.group(1))

    return text


async def _fetch(client: httpx.AsyncClient, url: str, remaining_hops: int) -> bytes:
    try:
        scheme = httpx.URL(url).scheme
    except httpx.InvalidURL as e:
        raise PhotoDownloadError(f"Invalid photo URL: {e}", url=url) from e
    if scheme not in ("http", "https"):
        raise PhotoDownloadError(f"Unsupported URL scheme '{scheme}'", url=url)

    try:
        response = await client.get(url, headers=DEFAULT_HEADERS, follow_redirects=False)
    except httpx.HTTPError as e:
        raise PhotoDownloadError(f"Request failed: {e}", url=url) from e

    code = response.status_code
    location = response.headers.get("location")
    if 300 <= code < 400 and location:
        if remaining_hops <= 0:
            raise TooManyRedirectsError("Too many redirects", url=url, status_code=code)
        target = str(response.url.join(location))
        _log_debug(f"HTTP {code} redirect -> {target}")
        return await _fetch(client, target, remaining_hops - 1)

    if code != 200:
        raise PhotoDownloadError("Could not download image", url=url, status_code=code)

    return response.content


async def fetch_bytes(
    url: str,
    *,
    client: Optional[httpx.AsyncClient] = None,
    max_redirects: int = 5,
    timeout: float = 30.0,
) -> bytes:
    """
    Download a URL into memory, following up to max_redirects redirects.

    Redirects are followed manually so the hop budget is explicit; relative
    Location headers are resolved against the redirecting URL.

    Args:
        url: http(s) URL to fetch
        client: Optional shared AsyncClient (a private one is created otherwise)
        max_redirects: Redirect hops allowed before giving up
        timeout: Client-side timeout in seconds for a private client

    Returns:
        Response body of the final 200 response

    Raises:
        TooManyRedirectsError: If the redirect chain exceeds max_redirects
        PhotoDownloadError: On a non-200 terminal response or transport error
    """
    if client is not None:
        return await _fetch(client, url, max_redirects)

    async with httpx.AsyncClient(follow_redirects=False, timeout=timeout) as private_client:
        return await _fetch(private_client, url, max_redirects)


async def resolve_photo(
    record: Mapping[str, Any],
    config,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> PhotoResolution:
    """
    Pick the photo for a canonical record: inline first, then URL, else none.

    Never raises; download failures end up in PhotoResolution.error.

    Args:
        record: Canonical submission record
        config: PipelineConfig (photo keys, redirect budget, timeout)
        client: Optional shared AsyncClient for the remote fetch

    Returns:
        PhotoResolution
    """
    resolution = PhotoResolution()

    inline_value = resolve(record, config.photo_inline_keys, None)
    if inline_value is not None:
        data = decode_inline(inline_value)
        if data:
            resolution = PhotoResolution(data=data, source="inline")
            log_photo_resolution(resolution)
            return resolution
        resolution.error = "Inline photo could not be decoded"
        _log_warning(f"{resolution.error}; trying URL source")

    url_value = resolve(record, config.photo_url_keys, None)
    if url_value is not None:
        url = to_text(url_value).strip()
        if DATA_URI.match(url):
            # Some form builders put the data URI in the URL field
            data = decode_inline(url)
            resolution = PhotoResolution(data=data, source="inline" if data else None)
            if not data:
                resolution.error = "Inline photo could not be decoded"
        else:
            target = normalize_share_url(url)
            try:
                data = await fetch_bytes(
                    target,
                    client=client,
                    max_redirects=config.max_redirects,
                    timeout=config.fetch_timeout_s,
                )
            except PhotoDownloadError as e:
                resolution = PhotoResolution(error=str(e))
            else:
                if data:
                    resolution = PhotoResolution(data=data, source="url")
                else:
                    resolution = PhotoResolution(error=f"Empty image body | URL: {target}")

    log_photo_resolution(resolution)
    return resolution

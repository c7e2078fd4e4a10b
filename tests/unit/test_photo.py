"""Unit tests for photo acquisition (inline decoding, share links, redirects)."""

import asyncio
import base64

import httpx
import pytest

from vitae.contexts.intake.exceptions import PhotoDownloadError, TooManyRedirectsError
from vitae.contexts.intake.photo import decode_inline, fetch_bytes, normalize_share_url, resolve_photo

IMAGE = b"\x89PNG\r\n\x1a\nfake-image-bytes"


def run_with_transport(handler, coroutine_factory):
    """Run an async call against a MockTransport-backed client."""

    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await coroutine_factory(client)

    return asyncio.run(_run())


def image_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, content=IMAGE)


def failing_handler(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"Unexpected request: {request.url}")


# decode_inline


@pytest.mark.unit
@pytest.mark.parametrize(
    "value",
    [
        "aGVsbG8=",
        "aGVsbG8",
        "aGVs\nbG8=",
        "data:image/png;base64,aGVsbG8=",
        "  DATA:image/jpeg;base64, aGVsbG8= ",
    ],
)
def test_decode_inline_variants(value):
    """Test base64 with or without header, padding and embedded whitespace."""
    assert decode_inline(value) == b"hello"


@pytest.mark.unit
def test_decode_inline_url_safe_alphabet():
    """Test that URL-safe base64 is accepted."""
    assert decode_inline(base64.urlsafe_b64encode(b"\xfb\xff\xfe").decode()) == b"\xfb\xff\xfe"


@pytest.mark.unit
@pytest.mark.parametrize("value", [None, "", "   ", "not base64!", "data:image/png;base64,", 42])
def test_decode_inline_rejects(value):
    """Test that empty or undecodable input returns None instead of raising."""
    assert decode_inline(value) is None


# normalize_share_url


@pytest.mark.unit
@pytest.mark.parametrize(
    "url",
    [
        "https://drive.google.com/file/d/AbC_123-x/view?usp=sharing",
        "https://drive.google.com/open?id=AbC_123-x",
        "https://drive.google.com/uc?id=AbC_123-x&export=view",
        "https://docs.google.com/uc?export=download&id=AbC_123-x",
    ],
)
def test_normalize_share_url_drive_forms(url):
    """Test that Drive share links become direct-download URLs."""
    assert normalize_share_url(url) == "https://drive.google.com/uc?export=download&id=AbC_123-x"


@pytest.mark.unit
def test_normalize_share_url_leaves_other_urls():
    """Test that non-Drive URLs pass through unchanged (trimmed)."""
    assert normalize_share_url(" https://example.com/photo.jpg?id=9 ") == "https://example.com/photo.jpg?id=9"
    assert normalize_share_url(None) == ""


# fetch_bytes


@pytest.mark.unit
def test_fetch_follows_redirect_chain():
    """Test that relative and absolute redirects are followed to the final 200."""
    seen = []

    def handler(request):
        seen.append(request.url.path)
        if request.url.path == "/r1":
            return httpx.Response(302, headers={"Location": "/r2"})
        if request.url.path == "/r2":
            return httpx.Response(301, headers={"Location": "https://cdn.example.com/r3"})
        if request.url.path == "/r3":
            return httpx.Response(307, headers={"Location": "img.png"})
        return httpx.Response(200, content=IMAGE)

    data = run_with_transport(handler, lambda client: fetch_bytes("https://example.com/r1", client=client))

    assert data == IMAGE
    assert seen == ["/r1", "/r2", "/r3", "/img.png"]


@pytest.mark.unit
def test_fetch_sends_user_agent():
    """Test that requests identify themselves with the generator user agent."""

    def handler(request):
        assert request.headers["User-Agent"] == "Mozilla/5.0 (CV-Generator)"
        return httpx.Response(200, content=IMAGE)

    assert run_with_transport(handler, lambda client: fetch_bytes("https://example.com/p", client=client)) == IMAGE


@pytest.mark.unit
def test_fetch_too_many_redirects():
    """Test that an endless redirect loop stops at the hop budget."""
    calls = []

    def handler(request):
        calls.append(request.url)
        return httpx.Response(302, headers={"Location": "/loop"})

    with pytest.raises(TooManyRedirectsError):
        run_with_transport(
            handler, lambda client: fetch_bytes("https://example.com/loop", client=client, max_redirects=2)
        )
    assert len(calls) == 3


@pytest.mark.unit
def test_fetch_non_200_status():
    """Test that a terminal non-200 response raises with the status code."""

    def handler(request):
        return httpx.Response(404)

    with pytest.raises(PhotoDownloadError) as exc_info:
        run_with_transport(handler, lambda client: fetch_bytes("https://example.com/p", client=client))

    assert exc_info.value.status_code == 404
    assert "HTTP 404" in str(exc_info.value)


@pytest.mark.unit
def test_fetch_transport_error():
    """Test that connection failures become PhotoDownloadError."""

    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(PhotoDownloadError, match="Request failed"):
        run_with_transport(handler, lambda client: fetch_bytes("https://example.com/p", client=client))


@pytest.mark.unit
def test_fetch_rejects_non_http_scheme():
    """Test that only http(s) URLs are fetched."""
    with pytest.raises(PhotoDownloadError, match="Unsupported URL scheme"):
        run_with_transport(failing_handler, lambda client: fetch_bytes("ftp://example.com/p", client=client))


# resolve_photo


@pytest.mark.unit
def test_inline_beats_url(config):
    """Test that a decodable inline photo wins and no request is made."""
    record = {"photo_base64": "aGVsbG8=", "photo_url": "https://example.com/p.jpg"}

    resolution = run_with_transport(failing_handler, lambda client: resolve_photo(record, config, client=client))

    assert resolution.data == b"hello"
    assert resolution.source == "inline"
    assert resolution.error is None


@pytest.mark.unit
def test_undecodable_inline_falls_back_to_url(config):
    """Test that a broken inline payload does not block the URL source."""
    record = {"photo_base64": "!!!", "photo_url": "https://example.com/p.jpg"}

    resolution = run_with_transport(image_handler, lambda client: resolve_photo(record, config, client=client))

    assert resolution.data == IMAGE
    assert resolution.source == "url"


@pytest.mark.unit
def test_drive_link_is_rewritten_before_fetch(config):
    """Test that a Drive share link is fetched through its direct-download URL."""

    def handler(request):
        assert request.url.host == "drive.google.com"
        assert request.url.path == "/uc"
        assert request.url.params["id"] == "AbC_123"
        assert request.url.params["export"] == "download"
        return httpx.Response(200, content=IMAGE)

    record = {"archivos_main": ["https://drive.google.com/file/d/AbC_123/view?usp=sharing"]}

    resolution = run_with_transport(handler, lambda client: resolve_photo(record, config, client=client))

    assert resolution.data == IMAGE
    assert resolution.source == "url"


@pytest.mark.unit
def test_data_uri_in_url_field(config):
    """Test that a data URI found in a URL field is decoded, not fetched."""
    record = {"photo": "data:image/png;base64,aGVsbG8="}

    resolution = run_with_transport(failing_handler, lambda client: resolve_photo(record, config, client=client))

    assert resolution.data == b"hello"
    assert resolution.source == "inline"


@pytest.mark.unit
def test_download_failure_is_soft(config):
    """Test that HTTP failures are reported in the resolution, not raised."""

    def handler(request):
        return httpx.Response(404)

    record = {"photo_url": "https://example.com/missing.jpg"}

    resolution = run_with_transport(handler, lambda client: resolve_photo(record, config, client=client))

    assert resolution.data is None
    assert resolution.source is None
    assert "HTTP 404" in resolution.error


@pytest.mark.unit
def test_no_photo_supplied(config):
    """Test that a record without photo fields resolves to nothing, without error."""
    resolution = run_with_transport(failing_handler, lambda client: resolve_photo({"name": "Ana"}, config, client=client))

    assert resolution.data is None
    assert resolution.error is None

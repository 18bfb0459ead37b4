"""HTTP fetcher for clinic source pages.

Failures come back as data on FetchResult rather than exceptions. There are
no automatic retries: one search cycle tries each source once.
"""

from typing import Optional

import httpx
from rich.console import Console

console = Console()

USER_AGENT = "Mozilla/5.0 (compatible; HockeyClinicsBot/1.0; youth hockey clinic aggregator)"

DEFAULT_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9,fr;q=0.8,sv;q=0.7,fi;q=0.6,de;q=0.5",
}

MAX_PAGE_BYTES = 2 * 1024 * 1024


class FetchError(Exception):
    """A source page could not be fetched. `reason` is a short error code."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{reason} ({url})")
        self.url = url
        self.reason = reason


class FetchResult:
    """Result from a page fetch with error details."""

    def __init__(
        self,
        url: str,
        html: Optional[str] = None,
        status: Optional[int] = None,
        error: Optional[str] = None,
        final_url: Optional[str] = None,
    ):
        self.url = url
        self.html = html
        self.status = status
        self.error = error  # "timeout", "connection", "too_large", "404", ...
        self.final_url = final_url or url

    @property
    def ok(self) -> bool:
        return self.html is not None and self.error is None

    def raise_for_error(self) -> str:
        """Return the HTML, or raise FetchError with the failure reason."""
        if not self.ok:
            raise FetchError(self.url, self.error or "empty")
        return self.html or ""

    def __repr__(self) -> str:
        return f"FetchResult({self.url!r}, status={self.status}, error={self.error!r})"


async def _read_capped(response: httpx.Response, max_bytes: int) -> Optional[bytes]:
    declared = response.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > max_bytes:
        return None

    chunks = []
    size = 0
    async for chunk in response.aiter_bytes():
        size += len(chunk)
        if size > max_bytes:
            return None
        chunks.append(chunk)
    return b"".join(chunks)


async def _fetch(
    client: httpx.AsyncClient,
    url: str,
    timeout: float,
    max_bytes: int,
    headers: dict[str, str],
) -> FetchResult:
    async with client.stream(
        "GET", url, headers=headers, timeout=timeout, follow_redirects=True
    ) as response:
        if response.status_code >= 400:
            return FetchResult(url, status=response.status_code, error=str(response.status_code))

        body = await _read_capped(response, max_bytes)
        if body is None:
            return FetchResult(url, status=response.status_code, error="too_large")

        html = body.decode(response.encoding or "utf-8", errors="replace")
        return FetchResult(
            url,
            html=html,
            status=response.status_code,
            final_url=str(response.url),
        )


async def fetch_html(
    url: str,
    timeout: float = 5.0,
    client: Optional[httpx.AsyncClient] = None,
    max_bytes: int = MAX_PAGE_BYTES,
    headers: Optional[dict[str, str]] = None,
) -> FetchResult:
    """Fetch a page. Returns result with error details instead of raising."""
    request_headers = {**DEFAULT_HEADERS, **(headers or {})}
    try:
        if client is not None:
            return await _fetch(client, url, timeout, max_bytes, request_headers)
        async with httpx.AsyncClient() as own_client:
            return await _fetch(own_client, url, timeout, max_bytes, request_headers)
    except httpx.TimeoutException:
        error = "timeout"
    except httpx.ConnectError:
        error = "connection"
    except httpx.HTTPError as e:
        error = type(e).__name__.lower()
    except httpx.InvalidURL:
        error = "invalid_url"
    except LookupError:
        # Unknown charset declared by the server
        error = "encoding"

    console.print(f"[dim]fetch failed for {url}: {error}[/dim]")
    return FetchResult(url, error=error)

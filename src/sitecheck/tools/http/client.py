"""Async HTTP client used to fetch crawled pages."""

import time
from dataclasses import dataclass

import httpx

DEFAULT_USER_AGENT = "sitecheck/0.1"


@dataclass
class HTTPResponse:
    """Represents an HTTP response."""

    url: str
    status_code: int
    headers: dict[str, str]
    body: str
    response_time: float
    content_type: str = ""

    @property
    def is_html(self) -> bool:
        return "html" in self.content_type.lower()


class HTTPClient:
    """Async HTTP client shared by every asset of a crawl."""

    def __init__(
        self,
        timeout: float = 15.0,
        follow_redirects: bool = True,
        verify_ssl: bool = True,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self.timeout = timeout
        self.follow_redirects = follow_redirects
        self.verify_ssl = verify_ssl
        self.user_agent = user_agent
        self.client: httpx.AsyncClient | None = None

    async def __aenter__(self):
        self.client = httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=self.follow_redirects,
            verify=self.verify_ssl,
            headers={"User-Agent": self.user_agent},
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.client:
            await self.client.aclose()
            self.client = None

    async def request(self, method: str, url: str) -> HTTPResponse:
        """Make an HTTP request."""
        if not self.client:
            raise RuntimeError("Client not initialized. Use async context manager.")

        start = time.time()
        response = await self.client.request(method=method, url=url)
        elapsed = time.time() - start

        return HTTPResponse(
            url=str(response.url),
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.text if method != "HEAD" else "",
            response_time=elapsed,
            content_type=response.headers.get("content-type", ""),
        )

    async def get(self, url: str) -> HTTPResponse:
        """Make a GET request."""
        return await self.request("GET", url)

    async def head(self, url: str) -> HTTPResponse:
        """Make a HEAD request."""
        return await self.request("HEAD", url)

import httpx
from httpx import Timeout

from feedrelay.config import get_settings


class HTTPClientError(Exception):
    """Raised when an upstream response is not a usable feed body."""


def build_http_client() -> httpx.AsyncClient:
    settings = get_settings()
    headers = {
        "User-Agent": settings.user_agent,
        "Accept": "application/rss+xml, application/atom+xml, application/xml;q=0.9, */*;q=0.8",
    }
    return httpx.AsyncClient(
        timeout=Timeout(settings.request_timeout_seconds),
        headers=headers,
        proxy=settings.http_proxy or None,
        follow_redirects=True,
    )


async def get_text(client: httpx.AsyncClient, url: str) -> str:
    response = await client.get(url)
    if not response.is_success:
        raise HTTPClientError(f"HTTP {response.status_code} from {url}")
    text = response.text
    if not text.strip():
        raise HTTPClientError(f"empty body from {url}")
    return text

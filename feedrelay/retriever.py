"""Strategy-ordered feed retrieval.

Browsers and some hosts refuse direct cross-origin reads of feed
documents, so a fetch goes through a fixed list of strategies: the URL
itself first, then two public raw-content proxies. The first strategy that
returns a non-blank 2xx body wins. Individual failures are only kept in a
diagnostic trace; callers see one aggregate :class:`ConnectionFailure`.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple
from urllib.parse import quote

import httpx

from feedrelay.errors import FeedRelayError
from feedrelay.http_clients import HTTPClientError, build_http_client, get_text
from feedrelay.logging_setup import get_logger
from feedrelay.schemas import FetchedDocument

logger = get_logger(component="retriever")

# Characters encodeURIComponent leaves alone.
_URI_COMPONENT_SAFE = "-_.!~*'()"


@dataclass(frozen=True)
class Strategy:
    name: str
    template: str

    def target(self, url: str) -> str:
        if self.template == "{url}":
            return url
        return self.template.format(url=quote(url, safe=_URI_COMPONENT_SAFE))


@dataclass(frozen=True)
class StrategyAttempt:
    strategy: str
    url: str
    reason: str


STRATEGIES: Tuple[Strategy, ...] = (
    Strategy("Direct", "{url}"),
    Strategy("AllOrigins", "https://api.allorigins.win/raw?url={url}"),
    Strategy("CodeTabs", "https://api.codetabs.com/v1/proxy?quest={url}"),
)


class ConnectionFailure(FeedRelayError):
    """Raised when every retrieval strategy failed."""

    def __init__(self, url: str, attempts: List[StrategyAttempt]):
        super().__init__("Connection failed across all strategies")
        self.url = url
        self.attempts = attempts


async def fetch_with_strategy(
    url: str,
    *,
    client: Optional[httpx.AsyncClient] = None,
    strategies: Tuple[Strategy, ...] = STRATEGIES,
) -> FetchedDocument:
    if client is None:
        async with build_http_client() as owned:
            return await _first_successful(owned, url, strategies)
    return await _first_successful(client, url, strategies)


async def _first_successful(
    client: httpx.AsyncClient, url: str, strategies: Tuple[Strategy, ...]
) -> FetchedDocument:
    attempts: List[StrategyAttempt] = []
    for strategy in strategies:
        target = strategy.target(url)
        try:
            text = await get_text(client, target)
        except (httpx.HTTPError, httpx.InvalidURL, HTTPClientError) as exc:
            attempt = StrategyAttempt(strategy=strategy.name, url=target, reason=str(exc) or type(exc).__name__)
            attempts.append(attempt)
            logger.debug("retriever.strategy_failed", url=url, strategy=strategy.name, reason=attempt.reason)
            continue
        logger.debug("retriever.strategy_ok", url=url, strategy=strategy.name, failed_before=len(attempts))
        return FetchedDocument(text=text, strategy=strategy.name)

    logger.warning("retriever.exhausted", url=url, strategies=[a.strategy for a in attempts])
    raise ConnectionFailure(url, attempts)

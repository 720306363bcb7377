from typing import Optional

import httpx

from feedrelay.errors import FeedRelayError
from feedrelay.extractors import rss
from feedrelay.logging_setup import get_logger
from feedrelay.retriever import fetch_with_strategy
from feedrelay.schemas import FeedContext, ResultBundle, SourceConfig

logger = get_logger(component="engine")


async def process(source: SourceConfig, *, client: Optional[httpx.AsyncClient] = None) -> ResultBundle:
    """Fetch and normalize one feed source.

    Never raises: every failure settles the returned bundle as ``error``
    with empty items and the initial metadata.
    """
    bundle = ResultBundle.waiting(source)
    log = logger.bind(url=source.url)
    try:
        fetched = await fetch_with_strategy(source.url, client=client)
        parsed = rss.parse(fetched.text, FeedContext.from_source(source))
    except FeedRelayError as exc:
        log.info("engine.failed", error=str(exc))
        return bundle.failed(str(exc))
    except Exception as exc:
        log.exception("engine.unexpected_error")
        return bundle.failed(str(exc) or type(exc).__name__)

    log.info("engine.completed", strategy=fetched.strategy, count=len(parsed.items))
    return bundle.succeeded(fetched.strategy, parsed)

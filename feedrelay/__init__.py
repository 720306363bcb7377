from feedrelay.engine import process
from feedrelay.errors import FeedRelayError
from feedrelay.extractors.rss import MalformedDocument, parse
from feedrelay.retriever import ConnectionFailure, fetch_with_strategy
from feedrelay.schemas import FeedContext, FeedItem, FeedMetadata, ResultBundle, SourceConfig

__all__ = [
    "ConnectionFailure",
    "FeedContext",
    "FeedItem",
    "FeedMetadata",
    "FeedRelayError",
    "MalformedDocument",
    "ResultBundle",
    "SourceConfig",
    "fetch_with_strategy",
    "parse",
    "process",
]

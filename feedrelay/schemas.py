from datetime import datetime, timezone
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from feedrelay.normalization import ensure_utc


def _isoformat_z(value: datetime) -> str:
    return ensure_utc(value).replace(microsecond=0).isoformat().replace("+00:00", "Z")


Timestamp = Annotated[datetime, PlainSerializer(_isoformat_z, return_type=str, when_used="json")]

BundleStatus = Literal["waiting", "success", "error"]


class APIModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class SourceConfig(APIModel):
    model_config = ConfigDict(frozen=True)

    url: str = Field(min_length=1)
    name: Optional[str] = None
    starred: bool = False


class FeedContext(APIModel):
    """What the normalizer needs to know about the source it is parsing."""

    id: str
    url: str
    name: Optional[str] = None
    starred: bool = False

    @classmethod
    def from_source(cls, source: SourceConfig) -> "FeedContext":
        return cls(id=source.url, url=source.url, name=source.name, starred=source.starred)


class FeedMetadata(APIModel):
    title: Optional[str] = None
    description: str = ""
    link: str = ""
    icon: str = ""


class FeedItem(APIModel):
    id: str
    title: str
    link: str
    date: Timestamp
    snippet: str
    image: Optional[str] = None
    source_id: str
    source_name: str
    source_starred: bool
    # False when ``id`` is a random token; such ids differ between parses
    # of the same document and must not be compared.
    stable_id: bool = True


class ParsedFeed(APIModel):
    items: List[FeedItem]
    feed_meta: FeedMetadata


class FetchedDocument(APIModel):
    text: str
    strategy: str


class ResultBundle(APIModel):
    id: str
    name: Optional[str] = None
    url: str
    starred: bool = False
    status: BundleStatus = "waiting"
    last_fetched: Timestamp
    strategy_used: Optional[str] = None
    items: List[FeedItem] = Field(default_factory=list)
    error: Optional[str] = None
    metadata: FeedMetadata

    @classmethod
    def waiting(cls, source: SourceConfig) -> "ResultBundle":
        return cls(
            id=source.url,
            name=source.name,
            url=source.url,
            starred=source.starred,
            last_fetched=datetime.now(timezone.utc),
            metadata=FeedMetadata(title=source.name),
        )

    def succeeded(self, strategy: str, parsed: ParsedFeed) -> "ResultBundle":
        self._ensure_waiting()
        metadata = self.metadata.model_copy(update=parsed.feed_meta.model_dump())
        return self.model_copy(
            update={
                "status": "success",
                "strategy_used": strategy,
                "items": list(parsed.items),
                "metadata": metadata,
            }
        )

    def failed(self, message: str) -> "ResultBundle":
        self._ensure_waiting()
        return self.model_copy(update={"status": "error", "error": message})

    def _ensure_waiting(self) -> None:
        if self.status != "waiting":
            raise ValueError(f"bundle {self.id} already settled as {self.status}")


class FeedFetchRequest(APIModel):
    sources: List[SourceConfig] = Field(min_length=1)


class FeedFetchResponse(APIModel):
    bundles: List[ResultBundle]


class HealthResponse(APIModel):
    schema_version: int = 1
    status: str
    time: Timestamp
    version: str
    strategies: List[str]
    request_timeout_seconds: Optional[float] = None

import asyncio
import json
from typing import List

from pydantic import ValidationError

from feedrelay.config import get_settings
from feedrelay.engine import process
from feedrelay.http_clients import build_http_client
from feedrelay.logging_setup import bind_request, get_logger
from feedrelay.schemas import FeedFetchRequest, FeedFetchResponse, ResultBundle, SourceConfig
from feedrelay.security import build_cors_headers, extract_correlation_id, validate_origin

settings = get_settings()
logger = get_logger(component="feed_fetch")


def _json_error(status: int, headers, message: str):
    headers["Content-Type"] = "application/json"
    return {"statusCode": status, "headers": headers, "body": json.dumps({"error": message})}


def handler(request):
    method = (request.get("method") or "POST").upper()
    headers = request.get("headers") or {}
    body = request.get("body") or ""

    origin = None
    try:
        origin = validate_origin(headers)
    except Exception as exc:
        return _json_error(403, build_cors_headers(None), str(exc))

    cors_headers = build_cors_headers(origin)

    if method == "OPTIONS":
        return {"statusCode": 204, "headers": cors_headers, "body": ""}

    if method != "POST":
        return _json_error(405, cors_headers, "method not allowed")

    correlation_id = extract_correlation_id(headers)
    log = bind_request(logger, correlation_id, "/api/feed_fetch")

    try:
        req = FeedFetchRequest.model_validate_json(body)
    except ValidationError as exc:
        cors_headers["Content-Type"] = "application/json"
        return {"statusCode": 422, "headers": cors_headers, "body": exc.json()}

    if len(req.sources) > settings.max_sources_per_request:
        return _json_error(
            422, cors_headers, f"at most {settings.max_sources_per_request} sources per request"
        )

    log.info("feed_fetch.received", sources=[source.url for source in req.sources])
    bundles = asyncio.run(collect_bundles(req.sources))
    response = FeedFetchResponse(bundles=bundles)
    log.info(
        "feed_fetch.completed",
        count=len(bundles),
        failed=sum(1 for bundle in bundles if bundle.status == "error"),
    )
    cors_headers["Content-Type"] = "application/json"
    return {"statusCode": 200, "headers": cors_headers, "body": response.model_dump_json(by_alias=True)}


async def collect_bundles(sources: List[SourceConfig]) -> List[ResultBundle]:
    async with build_http_client() as client:
        return list(await asyncio.gather(*(process(source, client=client) for source in sources)))

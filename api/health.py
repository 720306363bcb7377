import json
import os
from datetime import datetime, timezone

from feedrelay.config import get_settings
from feedrelay.logging_setup import bind_request, get_logger
from feedrelay.retriever import STRATEGIES
from feedrelay.schemas import HealthResponse
from feedrelay.security import build_cors_headers, extract_correlation_id, validate_origin

logger = get_logger(component="health")


def handler(request):
    """Report the retrieval strategies in use and the configured timeout."""
    headers = request.get("headers") or {}
    try:
        cors_headers = build_cors_headers(validate_origin(headers))
    except Exception as exc:
        return {
            "statusCode": 403,
            "headers": build_cors_headers(None),
            "body": json.dumps({"error": str(exc)}),
        }

    if (request.get("method") or "GET").upper() == "OPTIONS":
        return {"statusCode": 204, "headers": cors_headers, "body": ""}

    log = bind_request(logger, extract_correlation_id(headers), "/api/health")
    response = HealthResponse(
        status="ok",
        time=datetime.now(timezone.utc),
        version=os.environ.get("VERCEL_GIT_COMMIT_SHA", "dev"),
        strategies=[strategy.name for strategy in STRATEGIES],
        request_timeout_seconds=get_settings().request_timeout_seconds,
    )
    log.info("health.ok", strategies=response.strategies, timeout=response.request_timeout_seconds)
    cors_headers["Content-Type"] = "application/json"
    return {"statusCode": 200, "headers": cors_headers, "body": response.model_dump_json(by_alias=True)}

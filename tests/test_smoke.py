import json

import httpx

from api import feed_fetch, health

from conftest import route_by_host


def test_health_handler():
    request = {"method": "GET", "headers": {}}
    response = health.handler(request)
    payload = json.loads(response["body"])
    assert response["statusCode"] == 200
    assert payload["status"] == "ok"
    assert payload["time"].endswith("Z")
    assert payload["strategies"] == ["Direct", "AllOrigins", "CodeTabs"]
    assert payload["requestTimeoutSeconds"] is None


def test_health_rejects_unknown_origin():
    response = health.handler({"method": "GET", "headers": {"Origin": "https://evil.example"}})
    assert response["statusCode"] == 403


def test_feed_fetch_handler(monkeypatch, sample_rss_xml, sample_atom_xml):
    direct = route_by_host({"www.example.com": httpx.Response(200, text=sample_rss_xml)})

    def answer(request):
        if request.url.host == "api.allorigins.win" and "atom.example.org" in request.url.params["url"]:
            return httpx.Response(200, text=sample_atom_xml)
        return direct(request)

    transport = httpx.MockTransport(answer)
    monkeypatch.setattr(feed_fetch, "build_http_client", lambda: httpx.AsyncClient(transport=transport))

    body = json.dumps(
        {
            "sources": [
                {"url": "https://www.example.com/feed.xml", "name": "Loading...", "starred": True},
                {"url": "https://atom.example.org/feed", "name": "Atom"},
                {"url": "https://down.example.net/rss"},
            ]
        }
    )
    request = {
        "method": "POST",
        "headers": {"Origin": "https://reader.example.com", "X-Correlation-Id": "abc"},
        "body": body,
    }
    response = feed_fetch.handler(request)
    assert response["statusCode"] == 200
    assert response["headers"]["Access-Control-Allow-Origin"] == "https://reader.example.com"

    bundles = json.loads(response["body"])["bundles"]
    assert [bundle["status"] for bundle in bundles] == ["success", "success", "error"]
    assert bundles[0]["strategyUsed"] == "Direct"
    assert bundles[0]["metadata"]["title"] == "Example Site"
    # the atom host only answers through the first proxy
    assert bundles[1]["strategyUsed"] == "AllOrigins"
    assert bundles[1]["metadata"]["title"] == "Test Atom Feed | Updates"
    assert bundles[2]["items"] == []
    assert bundles[2]["error"] == "Connection failed across all strategies"


def test_feed_fetch_validation_error():
    request = {"method": "POST", "headers": {}, "body": json.dumps({"sources": []})}
    response = feed_fetch.handler(request)
    assert response["statusCode"] == 422


def test_feed_fetch_method_not_allowed():
    response = feed_fetch.handler({"method": "GET", "headers": {}})
    assert response["statusCode"] == 405


def test_feed_fetch_preflight():
    response = feed_fetch.handler({"method": "OPTIONS", "headers": {}})
    assert response["statusCode"] == 204
    assert response["body"] == ""


def test_origin_header_lookup_ignores_case():
    response = health.handler({"method": "GET", "headers": {"ORIGIN": "https://evil.example"}})
    assert response["statusCode"] == 403

    response = health.handler({"method": "OPTIONS", "headers": {"origin": "https://reader.example.com"}})
    assert response["statusCode"] == 204
    assert response["headers"]["Access-Control-Allow-Origin"] == "https://reader.example.com"
    assert response["headers"]["Vary"] == "Origin"

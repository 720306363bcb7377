"""Shared fixtures for feedrelay tests."""

import os
from typing import Callable, Dict, List

import httpx
import pytest

os.environ.setdefault("ALLOWED_ORIGINS", "https://reader.example.com")

SAMPLE_RSS_XML = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/"
     xmlns:media="http://search.yahoo.com/mrss/" xmlns:atom="http://www.w3.org/2005/Atom">
  <channel>
    <title>Example Site: Daily News</title>
    <atom:link href="https://www.example.com/feed.xml" rel="self" type="application/rss+xml"/>
    <link>https://www.example.com/</link>
    <description>Everything that happened today</description>
    <item>
      <title>First Article</title>
      <link>
        https://www.example.com/article-1
      </link>
      <pubDate>Fri, 13 Feb 2026 10:00:00 GMT</pubDate>
      <description><![CDATA[<p>Hello <b>world</b>, again.</p>]]></description>
    </item>
    <item>
      <title>Second Article</title>
      <link>https://www.example.com/article-2</link>
      <pubDate>Fri, 13 Feb 2026 09:00:00 EST</pubDate>
      <description>Plain description</description>
      <content:encoded><![CDATA[<p>Full <i>body</i></p><img src="https://cdn.example.com/inline.png">]]></content:encoded>
      <enclosure url="https://cdn.example.com/cover.jpg" type="image/jpeg" length="1234"/>
    </item>
    <item>
      <title>Third Article</title>
      <link>https://www.example.com/article-3</link>
      <description><![CDATA[Photo <img src="https://cdn.example.com/photo.png"/> caption]]></description>
      <media:content url="https://cdn.example.com/media.jpg" medium="image"/>
    </item>
  </channel>
</rss>"""

SAMPLE_ATOM_XML = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Test Atom Feed | Updates</title>
  <subtitle>A test Atom feed</subtitle>
  <link href="https://atom.example.org/feed" rel="self"/>
  <link href="https://atom.example.org/" rel="alternate"/>
  <entry>
    <title>Atom Entry 1</title>
    <link href="https://atom.example.org/entry-1"/>
    <id>urn:uuid:entry-1</id>
    <summary>Summary of entry 1</summary>
    <updated>2026-02-13T10:00:00Z</updated>
  </entry>
  <entry>
    <title>Undated Entry</title>
    <link href="https://atom.example.org/entry-2"/>
    <content type="html">&lt;p&gt;Body of entry 2&lt;/p&gt;&lt;img src="https://atom.example.org/2.png"&gt;</content>
  </entry>
  <entry>
    <title></title>
    <summary>No link here</summary>
    <published>not-a-date</published>
  </entry>
</feed>"""

SAMPLE_MALFORMED_XML = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Malformed Feed</title>
    <item>
      <title>Bad Item</title>
      <!-- Missing closing tags intentionally -->
"""

SAMPLE_NOT_A_FEED_XML = """<?xml version="1.0" encoding="UTF-8"?>
<html>
  <body>This is not a feed</body>
</html>"""


Handler = Callable[[httpx.Request], httpx.Response]


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every requested URL."""

    def __init__(self, handler: Handler):
        self.requested: List[str] = []

        def recording(request: httpx.Request) -> httpx.Response:
            self.requested.append(str(request.url))
            return handler(request)

        super().__init__(recording)


def route_by_host(responses: Dict[str, object]) -> Handler:
    """Answer by request host; exceptions in ``responses`` are raised."""

    def handler(request: httpx.Request) -> httpx.Response:
        outcome = responses.get(request.url.host, httpx.Response(404))
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    return handler


@pytest.fixture
def make_client():
    def factory(handler: Handler):
        transport = RecordingTransport(handler)
        return httpx.AsyncClient(transport=transport), transport

    return factory


@pytest.fixture
def sample_rss_xml():
    return SAMPLE_RSS_XML


@pytest.fixture
def sample_atom_xml():
    return SAMPLE_ATOM_XML


@pytest.fixture
def sample_malformed_xml():
    return SAMPLE_MALFORMED_XML


@pytest.fixture
def sample_not_a_feed_xml():
    return SAMPLE_NOT_A_FEED_XML

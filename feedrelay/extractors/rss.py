"""Normalize RSS 2.0 / RSS 1.0 / Atom documents into one item shape."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from lxml import etree

from feedrelay.errors import FeedRelayError
from feedrelay.extractors import selectors as sel
from feedrelay.extractors.html import extract_fragment
from feedrelay.normalization import bare_hostname, hostname, parse_timestamp, shorten_title
from feedrelay.schemas import FeedContext, FeedItem, FeedMetadata, ParsedFeed

PLACEHOLDER_NAME = "Loading..."
FAVICON_TEMPLATE = "https://www.google.com/s2/favicons?domain={host}&sz=64"
UNTITLED = "Untitled"
UNDATED_AGE = timedelta(days=30)
CONTENT_ENCODED = "{http://purl.org/rss/1.0/modules/content/}encoded"

FEED_ROOTS = frozenset({"rss", "feed", "RDF"})

_XML_PARSER = etree.XMLParser(
    encoding="utf-8",
    resolve_entities=False,
    no_network=True,
    recover=False,
    remove_blank_text=False,
)


class MalformedDocument(FeedRelayError):
    """Raised when the fetched body is not a well-formed feed document."""


def parse(raw_text: str, context: FeedContext, *, now: Optional[datetime] = None) -> ParsedFeed:
    root = _parse_xml(raw_text)
    now = now or datetime.now(timezone.utc)

    title = _resolve_title(root, context)
    feed_meta = FeedMetadata(
        title=title,
        description=_feed_description(root),
        link=_feed_link(root),
        icon=FAVICON_TEMPLATE.format(host=hostname(context.url)),
    )
    items = [
        _to_item(entry, context, title, now)
        for entry in root.iter()
        if sel.matches(entry, "item") or sel.matches(entry, "entry")
    ]
    return ParsedFeed(items=items, feed_meta=feed_meta)


def _parse_xml(raw_text: str) -> etree._Element:
    try:
        root = etree.fromstring(raw_text.lstrip("\ufeff \t\r\n").encode("utf-8"), parser=_XML_PARSER)
    except etree.XMLSyntaxError as exc:
        raise MalformedDocument("Invalid XML format") from exc
    if etree.QName(root).localname not in FEED_ROOTS:
        raise MalformedDocument(f"Unexpected document root <{etree.QName(root).localname}>")
    return root


def _first_child_text(root: etree._Element, *paths) -> str:
    for parent, child in paths:
        for node in sel.child_path(root, parent, child):
            return sel.text_content(node)
    return ""


def _resolve_title(root: etree._Element, context: FeedContext) -> str:
    extracted = _first_child_text(root, ("channel", "title"), ("feed", "title"))
    if extracted and (context.name == PLACEHOLDER_NAME or not context.name):
        return shorten_title(extracted)
    return extracted or bare_hostname(context.url)


def _feed_description(root: etree._Element) -> str:
    return _first_child_text(root, ("channel", "description"), ("feed", "subtitle"))


def _feed_link(root: etree._Element) -> str:
    for node in sel.child_path(root, "feed", "link"):
        if node.get("rel") == "alternate" and node.get("href"):
            return node.get("href")
    for node in sel.child_path(root, "channel", "link"):
        value = sel.text_content(node)
        if value:
            return value
    return ""


def _entry_link(entry: etree._Element) -> str:
    return sel.first_non_empty(
        entry,
        lambda el: sel.text(el, "link"),
        lambda el: sel.attribute(sel.first(el, "link"), "href"),
    ).strip()


def _raw_content(entry: etree._Element) -> str:
    return sel.first_non_empty(
        entry,
        lambda el: sel.text(el, CONTENT_ENCODED),
        lambda el: sel.text(el, "content:encoded"),
        lambda el: sel.text(el, "description"),
        lambda el: sel.text(el, "summary"),
        lambda el: sel.text(el, "content"),
    )


def _enclosure_image(entry: etree._Element) -> str:
    for node in sel.descendants(entry, "enclosure"):
        if (node.get("type") or "").startswith("image"):
            return sel.attribute(node, "url")
    return ""


def _media_image(entry: etree._Element) -> str:
    # media:content and Atom content share the local name "content"
    return sel.attribute(sel.first(entry, "content"), "url")


def _entry_date(entry: etree._Element, now: datetime) -> datetime:
    raw = sel.first_non_empty(
        entry,
        lambda el: sel.text(el, "pubDate"),
        lambda el: sel.text(el, "published"),
        lambda el: sel.text(el, "updated"),
    )
    if not raw:
        return now - UNDATED_AGE
    return parse_timestamp(raw) or now


def _to_item(entry: etree._Element, context: FeedContext, feed_title: str, now: datetime) -> FeedItem:
    link = _entry_link(entry)
    fragment = extract_fragment(_raw_content(entry))
    image = sel.first_non_empty(entry, _enclosure_image, _media_image) or fragment.image
    return FeedItem(
        id=link or _unstable_id(),
        title=sel.text(entry, "title").strip() or UNTITLED,
        link=link,
        date=_entry_date(entry, now),
        snippet=fragment.text,
        image=image or None,
        source_id=context.id,
        source_name=feed_title,
        source_starred=context.starred,
        stable_id=bool(link),
    )


def _unstable_id() -> str:
    return uuid.uuid4().hex[:9]

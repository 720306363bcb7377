"""Lookups over a parsed feed document that work for both RSS and Atom.

A plain name (``"title"``) matches that local name in any namespace, a
prefixed one (``"content:encoded"``) matches the qualified name exactly and
a Clark name (``"{uri}encoded"``) matches namespace URI and local name.
Descendant lookups walk in document order.
"""

from typing import Callable, Iterator, Optional

from lxml import etree

Extractor = Callable[[etree._Element], str]


def _qualified(node: etree._Element) -> str:
    local = etree.QName(node).localname
    return f"{node.prefix}:{local}" if node.prefix else local


def matches(node: etree._Element, name: str) -> bool:
    if not isinstance(node.tag, str):
        return False
    if name.startswith("{"):
        return node.tag == name
    if ":" in name:
        return _qualified(node) == name
    return etree.QName(node).localname == name


def descendants(node: etree._Element, *names: str) -> Iterator[etree._Element]:
    for el in node.iterdescendants():
        if any(matches(el, name) for name in names):
            yield el


def children(node: etree._Element, name: str) -> Iterator[etree._Element]:
    for el in node:
        if matches(el, name):
            yield el


def first(node: etree._Element, *names: str) -> Optional[etree._Element]:
    return next(descendants(node, *names), None)


def text_content(node: Optional[etree._Element]) -> str:
    if node is None:
        return ""
    return etree.tostring(node, method="text", encoding="unicode", with_tail=False)


def text(node: etree._Element, name: str) -> str:
    """Text of the first descendant called ``name``, or ``""``."""
    return text_content(first(node, name))


def attribute(node: Optional[etree._Element], attr: str) -> str:
    if node is None:
        return ""
    return node.get(attr) or ""


def first_non_empty(node: etree._Element, *extractors: Extractor) -> str:
    for extractor in extractors:
        value = extractor(node)
        if value:
            return value
    return ""


def child_path(root: etree._Element, parent: str, child: str) -> Iterator[etree._Element]:
    """Every ``parent > child`` pair under ``root`` (root included)."""
    for candidate in (root, *descendants(root, parent)):
        if matches(candidate, parent):
            yield from children(candidate, child)

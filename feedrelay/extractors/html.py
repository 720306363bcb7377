from typing import NamedTuple, Optional

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

# html.parser is strict about some declarations; lxml recovers from them.
_PARSERS = ("html.parser", "lxml")


class Fragment(NamedTuple):
    text: str
    image: Optional[str]


def extract_fragment(raw: str) -> Fragment:
    """Reduce an HTML fragment to its visible text and first image source.

    Markup is dropped and text keeps document order. ``image`` is the
    ``src`` of the first ``<img>`` in the fragment, or ``None``. Markup no
    parser accepts yields an empty fragment.
    """
    if not raw:
        return Fragment("", None)
    for features in _PARSERS:
        try:
            soup = BeautifulSoup(raw, features)
        except (AssertionError, ParserRejectedMarkup):
            continue
        return Fragment(soup.get_text().strip(), first_image(soup))
    return Fragment("", None)


def first_image(soup: BeautifulSoup) -> Optional[str]:
    img = soup.find("img")
    if img is None:
        return None
    return img.get("src") or None

"""A flat stream of tag events pulled from raw registry text.

This is not a general XML parser. It only splits the text into start, end,
self-closing and text events; making sense of them is the walker's job.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Union

from .errors import GrammarError


@dataclass(frozen=True)
class StartTag:
    name: str
    attrs: str = ""


@dataclass(frozen=True)
class EndTag:
    name: str


@dataclass(frozen=True)
class EmptyTag:
    name: str
    attrs: str = ""


@dataclass(frozen=True)
class Text:
    text: str


Event = Union[StartTag, EndTag, EmptyTag, Text]

_NAME = r"[A-Za-z_][\w.:-]*"
_TOKEN_RE = re.compile(
    r"(?P<comment><!--.*?-->)"
    r"|(?P<pi><\?.*?\?>)"
    r"|(?P<doctype><!DOCTYPE[^>]*>)"
    rf"|</(?P<end>{_NAME})\s*>"
    # attribute text is kept raw and lexed later by TagAttributes
    rf'|<(?P<tag>{_NAME})(?=[\s/>])(?P<attrs>(?:[^>"]|"[^"]*")*?)\s*(?P<empty>/?)>'
    r"|(?P<text>[^<]+)",
    re.DOTALL,
)


def iter_events(xml_text: str) -> Iterator[Event]:
    """Tokenize ``xml_text`` lazily.

    Comments, processing instructions and whitespace-only text are dropped.
    """
    pos = 0
    while pos < len(xml_text):
        match = _TOKEN_RE.match(xml_text, pos)
        if match is None:
            raise GrammarError(f"unrecognized markup at offset {pos}", xml_text[pos : pos + 40])
        pos = match.end()

        if match.group("end"):
            yield EndTag(match.group("end"))
        elif match.group("tag"):
            attrs = match.group("attrs").strip()
            if match.group("empty"):
                yield EmptyTag(match.group("tag"), attrs)
            else:
                yield StartTag(match.group("tag"), attrs)
        elif match.group("text") is not None:
            text = match.group("text")
            if text.strip():
                yield Text(text)


def next_event(events: Iterator[Event]) -> Event:
    try:
        return next(events)
    except StopIteration:
        raise GrammarError("unexpected end of document") from None


def grab_element_text(events: Iterator[Event], name: str) -> str:
    """Read the body of a ``<name>text</name>`` element whose start tag was just consumed."""
    event = next_event(events)
    if not isinstance(event, Text):
        raise GrammarError(f"expected text inside <{name}>", event)
    closing = next_event(events)
    if closing != EndTag(name):
        raise GrammarError(f"expected </{name}>", closing)
    return event.text


def skip_to_close(events: Iterator[Event], name: str) -> None:
    """Discard everything up to and including ``</name>``."""
    closing = EndTag(name)
    while next_event(events) != closing:
        pass

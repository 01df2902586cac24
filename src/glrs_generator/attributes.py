"""Splitting a raw tag attribute list into key/value pairs."""

import re
from collections.abc import Iterator

from .errors import AttributeSyntaxError, MissingAttributeError, UnknownAttributeError

# Values run to the next double quote; gl.xml never escapes quotes in values.
_PAIR_RE = re.compile(r'\s*([^\s="]+)="([^"]*)"')
_TRAILING_SPACE_RE = re.compile(r"\s*$")


class TagAttributes:
    """The attributes of one tag, in source order.

    Iterating yields ``(key, value)`` tuples. Nothing is lexed until the
    object is iterated, and every iteration starts again from the beginning.
    Values are returned exactly as written, entities included.
    """

    def __init__(self, raw: str) -> None:
        self.raw = raw

    def __iter__(self) -> Iterator[tuple[str, str]]:
        pos = 0
        while not _TRAILING_SPACE_RE.match(self.raw, pos):
            match = _PAIR_RE.match(self.raw, pos)
            if match is None:
                raise AttributeSyntaxError(self.raw, pos)
            yield match.group(1), match.group(2)
            pos = match.end()

    def __repr__(self) -> str:
        return f"TagAttributes({self.raw!r})"

    def to_dict(self, tag: str, known: frozenset[str]) -> dict[str, str]:
        """Collect the pairs, rejecting any key outside ``known``."""
        values = {}
        for key, value in self:
            if key not in known:
                raise UnknownAttributeError(tag, key)
            values[key] = value
        return values


def require(values: dict[str, str], tag: str, key: str) -> str:
    """Fetch a mandatory, non-empty attribute from ``to_dict`` output."""
    value = values.get(key, "")
    if not value:
        raise MissingAttributeError(tag, key)
    return value

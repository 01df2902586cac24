"""Rebuilding C declaration text from mixed text and element events."""

import re

from .errors import GrammarError

_ENTITIES = {"&lt;": "<", "&gt;": ">", "&amp;": "&", "&quot;": '"'}
_ENTITY_RE = re.compile(r"&[^;&]*;?")
_LEADING_SPACE_RE = re.compile(r"^\s+")
_TRAILING_SPACE_RE = re.compile(r"\s+$")


def revert_xml_encoding(text: str) -> str:
    """Undo the XML escapes gl.xml uses. Any other ``&`` sequence is an error."""

    def _replace(match: re.Match) -> str:
        entity = match.group(0)
        if entity not in _ENTITIES:
            raise GrammarError("unknown character entity", entity)
        return _ENTITIES[entity]

    return _ENTITY_RE.sub(_replace, text)


class DeclarationText:
    """Accumulates the declaration carried by a ``<type>``, ``<proto>`` or ``<param>``.

    Raw text nodes are kept verbatim, except that a whitespace run touching a
    nested ``<name>`` or ``<ptype>`` element collapses to one space. An
    element glued directly to an identifier gets a single separating space,
    so ``<ptype>GLenum</ptype><name>glGetError</name>`` reads
    ``GLenum glGetError`` while ``const <ptype>GLubyte</ptype> *<name>glGetString</name>``
    stays ``const GLubyte *glGetString``.
    """

    def __init__(self) -> None:
        self._text = ""
        self._after_element = False

    def add_text(self, text: str) -> None:
        if self._after_element:
            text = _LEADING_SPACE_RE.sub(" ", text)
        self._text += text
        self._after_element = False

    def add_element(self, text: str) -> None:
        self._text = _TRAILING_SPACE_RE.sub(" ", self._text)
        if self._text and (self._text[-1].isalnum() or self._text[-1] == "_"):
            self._text += " "
        self._text += text
        self._after_element = True

    def finish(self) -> str:
        return revert_xml_encoding(self._text.strip())

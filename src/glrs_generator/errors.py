"""Exceptions raised while walking gl.xml or translating its declarations.

Every error here aborts the whole run: there is no partial registry and no
skip-and-continue.
"""

from typing import Optional


class RegistryError(Exception):
    """Base class for everything the generator refuses to accept."""


class GrammarError(RegistryError):
    """An event did not match any alternative expected at this position."""

    def __init__(self, message: str, event: Optional[object] = None):
        if event is not None:
            message = f"{message}: {event!r}"
        super().__init__(message)
        self.event = event


class AttributeViolation(RegistryError):
    """Base class for problems with a tag's attribute list."""


class AttributeSyntaxError(AttributeViolation):
    """The raw attribute text is not a sequence of key="value" pairs."""

    def __init__(self, raw: str, position: int):
        super().__init__(f"malformed attributes at offset {position}: {raw!r}")
        self.raw = raw
        self.position = position


class UnknownAttributeError(AttributeViolation):
    def __init__(self, tag: str, key: str):
        super().__init__(f"unknown attribute {key!r} on <{tag}>")
        self.tag = tag
        self.key = key


class MissingAttributeError(AttributeViolation):
    def __init__(self, tag: str, key: str):
        super().__init__(f"<{tag}> is missing required attribute {key!r}")
        self.tag = tag
        self.key = key


class AttributeValueError(AttributeViolation):
    def __init__(self, tag: str, key: str, value: str):
        super().__init__(f"illegal value {value!r} for {key!r} on <{tag}>")
        self.tag = tag
        self.key = key
        self.value = value


class TranslationError(RegistryError):
    """A C declaration is outside the known vocabulary."""

    kind = "declaration"

    def __init__(self, text: str):
        super().__init__(f"unknown {self.kind}: {text!r}")
        self.text = text


class UnknownTypeError(TranslationError):
    kind = "type"


class UnknownFunctionPointerError(TranslationError):
    kind = "function pointer"


class UnknownConditionalTypedefError(TranslationError):
    kind = "conditional typedef"

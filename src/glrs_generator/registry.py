"""OpenGL registry parsing and code generation."""

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Optional

from .builders import (
    build_command,
    build_empty_extension,
    build_enums,
    build_extension,
    build_feature,
    build_type,
)
from .codegen import render_enum, render_type
from .errors import AttributeValueError, GrammarError
from .events import EmptyTag, EndTag, Event, StartTag, iter_events, next_event, skip_to_close
from .types import (
    ApiGroup,
    GLCommand,
    GLEnum,
    GLExtension,
    GLFeature,
    GLType,
    ReqRem,
)

logger = logging.getLogger(__name__)

HEADER = [
    "// AUTOGENERATED. DO NOT EDIT.",
    "// Generated by glrs-generator",
    "",
]

# Sections that carry nothing we bind to.
_SKIPPED_SECTIONS = ("comment", "groups", "kinds")


def _parse_version(version: str) -> tuple[int, ...]:
    try:
        return tuple(map(int, version.split(".")))
    except ValueError:
        raise AttributeValueError("feature", "number", version) from None


class GLRegistry:
    """Everything gathered from one gl.xml, in document order."""

    def __init__(
        self,
        types: Iterable[GLType] = (),
        enums: Iterable[GLEnum] = (),
        commands: Iterable[GLCommand] = (),
        features: Iterable[GLFeature] = (),
        extensions: Iterable[GLExtension] = (),
    ) -> None:
        self.types = tuple(types)
        self.enums = tuple(enums)
        self.commands = tuple(commands)
        self.features = tuple(features)
        self.extensions = tuple(extensions)

    def __repr__(self) -> str:
        return (
            f"GLRegistry(types={len(self.types)}, enums={len(self.enums)}, "
            f"commands={len(self.commands)}, features={len(self.features)}, "
            f"extensions={len(self.extensions)})"
        )

    @classmethod
    def from_events(cls, events: Iterator[Event]) -> "GLRegistry":
        """Walk the events following ``<registry>`` up to and including ``</registry>``."""
        types: list[GLType] = []
        enums: list[GLEnum] = []
        commands: list[GLCommand] = []
        features: list[GLFeature] = []
        extensions: list[GLExtension] = []

        while True:
            event = next_event(events)
            if event == EndTag("registry"):
                break
            if isinstance(event, StartTag) and event.name in _SKIPPED_SECTIONS and not event.attrs:
                skip_to_close(events, event.name)
            elif event == StartTag("types"):
                _parse_types(events, types)
            elif isinstance(event, StartTag) and event.name == "enums":
                enums.extend(build_enums(events, event.attrs))
            elif isinstance(event, EmptyTag) and event.name == "enums":
                # same as an open/close pair with nothing inside
                continue
            elif event == StartTag("commands", 'namespace="GL"'):
                _parse_commands(events, commands)
            elif isinstance(event, StartTag) and event.name == "feature":
                features.append(build_feature(events, event.attrs))
            elif event == StartTag("extensions"):
                _parse_extensions(events, extensions)
            else:
                raise GrammarError("unexpected <registry> content", event)

        registry = cls(types, enums, commands, features, extensions)
        logger.debug("Parsed %r", registry)
        return registry

    @classmethod
    def from_xml(cls, xml_text: str) -> "GLRegistry":
        """Parse a whole gl.xml document."""
        events = iter_events(xml_text)
        first = next_event(events)
        if first != StartTag("registry"):
            raise GrammarError("document does not start with <registry>", first)
        return cls.from_events(events)

    def features_for(self, api: ApiGroup) -> list[GLFeature]:
        """Features of one API group, in document order."""
        return [feature for feature in self.features if feature.api == api]

    def extensions_for(self, api: ApiGroup) -> list[GLExtension]:
        """Extensions whose supported list names the API group."""
        return [ext for ext in self.extensions if ext.supports(api)]

    def get_requirements_for_version(
        self,
        api: ApiGroup,
        target_version: str,
        profile: Optional[str] = None,
        extensions: Iterable[str] = (),
    ) -> set[ReqRem]:
        """Everything ``api`` at ``target_version`` provides.

        Features are applied in version order, each adding its requirements
        and then subtracting its removals.
        """
        target = _parse_version(target_version)
        available: set[ReqRem] = set()

        for feature in sorted(self.features_for(api), key=lambda f: _parse_version(f.number)):
            if _parse_version(feature.number) > target:
                continue
            for req in feature.required:
                if req.profile in (None, profile) and req.api in (None, api):
                    available.add(req.adjustment)
            for rem in feature.removed:
                if rem.profile in (None, profile):
                    available.discard(rem.adjustment)

        wanted = set(extensions)
        for ext in self.extensions:
            if ext.name not in wanted:
                continue
            for req in ext.required:
                if req.profile in (None, profile) and req.api in (None, api):
                    available.add(req.adjustment)

        return available

    def render_types(self, api: ApiGroup) -> list[str]:
        """Rust declarations for every type that applies to the API group."""
        return [render_type(t) for t in self.types if t.api in (None, api)]

    def render_enums(self, api: ApiGroup, names: Optional[set[str]] = None) -> list[str]:
        rendered = []
        for gl_enum in self.enums:
            if names is not None and gl_enum.name not in names:
                continue
            text = render_enum(gl_enum, api)
            if text is not None:
                rendered.append(text)
        return rendered

    def generate_types_file(self, output_path: Path, api: ApiGroup) -> None:
        """Generate gl_types.rs file."""
        content = HEADER + [
            "#![allow(non_camel_case_types)]",
            "",
            "use core::ffi::*;",
            "",
        ]
        content.extend(self.render_types(api))
        output_path.write_text("\n".join(content) + "\n")

    def generate_enums_file(
        self, output_path: Path, api: ApiGroup, names: Optional[set[str]] = None
    ) -> None:
        """Generate gl_enums.rs file."""
        content = HEADER + [
            "use super::gl_types::*;",
            "",
        ]
        content.extend(self.render_enums(api, names))
        output_path.write_text("\n".join(content) + "\n")


def _parse_types(events: Iterator[Event], types: list[GLType]) -> None:
    while True:
        event = next_event(events)
        if event == EndTag("types"):
            return
        if isinstance(event, StartTag) and event.name == "type":
            gl_type = build_type(events, event.attrs)
            if gl_type is not None:
                types.append(gl_type)
        else:
            raise GrammarError("unexpected <types> content", event)


def _parse_commands(events: Iterator[Event], commands: list[GLCommand]) -> None:
    while True:
        event = next_event(events)
        if event == EndTag("commands"):
            return
        if isinstance(event, StartTag) and event.name == "command":
            commands.append(build_command(events, event.attrs))
        else:
            raise GrammarError("unexpected <commands> content", event)


def _parse_extensions(events: Iterator[Event], extensions: list[GLExtension]) -> None:
    while True:
        event = next_event(events)
        if event == EndTag("extensions"):
            return
        if isinstance(event, StartTag) and event.name == "extension":
            extensions.append(build_extension(events, event.attrs))
        elif isinstance(event, EmptyTag) and event.name == "extension":
            extensions.append(build_empty_extension(event.attrs))
        else:
            raise GrammarError("unexpected <extensions> content", event)


def load_gl_registry(xml_path: Path) -> GLRegistry:
    """Load and parse the OpenGL registry XML."""
    return GLRegistry.from_xml(Path(xml_path).read_text(encoding="utf-8"))

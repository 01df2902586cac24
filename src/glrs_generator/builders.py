"""Builders that consume one gl.xml section each from the event stream.

Every builder is entered right after its opening tag has been consumed and
returns right after its closing tag. Anything it does not expect is an error.
"""

from collections.abc import Iterator
from typing import Optional

from .attributes import TagAttributes, require
from .errors import AttributeValueError, GrammarError
from .events import EmptyTag, EndTag, Event, StartTag, Text, grab_element_text, next_event
from .text import DeclarationText
from .types import (
    ApiGroup,
    GLCommand,
    GLEnum,
    GLExtension,
    GLFeature,
    GLIfDef,
    GLParam,
    GLRemoval,
    GLRequirement,
    GLStruct,
    GLType,
    GLTypedef,
    ReqKind,
    ReqRem,
)

_TYPE_ATTRS = frozenset({"name", "requires", "api", "comment"})
_ENUMS_ATTRS = frozenset({"namespace", "group", "comment", "vendor", "start", "end", "type"})
_ENUM_ATTRS = frozenset({"name", "value", "group", "alias", "api", "comment", "type"})
_COMMAND_ATTRS = frozenset({"comment"})
_PROTO_ATTRS = frozenset({"group", "kind"})
_PARAM_ATTRS = frozenset({"group", "len", "kind", "class"})
_FEATURE_ATTRS = frozenset({"api", "name", "number"})
_EXTENSION_ATTRS = frozenset({"name", "supported", "comment"})
_EMPTY_EXTENSION_ATTRS = frozenset({"name", "supported"})
_REQUIRE_ATTRS = frozenset({"comment", "profile", "api"})
_REMOVE_ATTRS = frozenset({"comment", "profile"})
_ENTRY_ATTRS = frozenset({"name", "comment"})
_NAME_ONLY = frozenset({"name"})

_REQ_KINDS = {kind.value: kind for kind in ReqKind}


def _optional_api(values: dict[str, str], tag: str) -> Optional[ApiGroup]:
    if "api" not in values:
        return None
    return ApiGroup.parse(values["api"], tag)


def build_type(events: Iterator[Event], attrs: str) -> Optional[GLType]:
    """Build one ``<type>`` entry. ``#include`` lines produce nothing."""
    values = TagAttributes(attrs).to_dict("type", _TYPE_ATTRS)
    decl = DeclarationText()
    while True:
        event = next_event(events)
        if event == EndTag("type"):
            break
        if event == StartTag("name"):
            decl.add_element(grab_element_text(events, "name"))
        elif isinstance(event, Text):
            decl.add_text(event.text)
        elif event == EmptyTag("apientry"):
            continue
        else:
            raise GrammarError("unexpected <type> content", event)

    text = decl.finish()
    api = _optional_api(values, "type")
    if text.startswith("#include"):
        return None
    if text.startswith("typedef"):
        shape = GLTypedef
    elif text.startswith("struct"):
        shape = GLStruct
    elif text.startswith("#ifdef"):
        shape = GLIfDef
    else:
        raise GrammarError("unknown type declaration", text)
    if shape is not GLIfDef and not text.endswith(";"):
        raise GrammarError("type declaration is missing its ';'", text)
    return shape(text=text, api=api)


def build_enum(attrs: str, is_bitmask: bool) -> GLEnum:
    """Build one constant from a self-closing ``<enum>`` tag."""
    values = TagAttributes(attrs).to_dict("enum", _ENUM_ATTRS)
    return GLEnum(
        name=require(values, "enum", "name"),
        value=require(values, "enum", "value"),
        group=values.get("group"),
        alias_of=values.get("alias"),
        api=_optional_api(values, "enum"),
        is_bitmask=is_bitmask,
    )


def build_enums(events: Iterator[Event], attrs: str) -> list[GLEnum]:
    """Build the entries of one ``<enums>`` block."""
    values = TagAttributes(attrs).to_dict("enums", _ENUMS_ATTRS)
    if values.get("namespace", "GL") != "GL":
        raise AttributeValueError("enums", "namespace", values["namespace"])
    block_type = values.get("type")
    if block_type is not None and block_type != "bitmask":
        raise AttributeValueError("enums", "type", block_type)
    is_bitmask = block_type == "bitmask"

    entries = []
    while True:
        event = next_event(events)
        if event == EndTag("enums"):
            return entries
        if isinstance(event, EmptyTag) and event.name == "unused":
            continue
        if isinstance(event, EmptyTag) and event.name == "enum":
            entries.append(build_enum(event.attrs, is_bitmask))
        else:
            raise GrammarError("unexpected <enums> content", event)


def build_param(events: Iterator[Event], attrs: str) -> GLParam:
    """Read a ``<param>`` body up to its closing tag."""
    values = TagAttributes(attrs).to_dict("param", _PARAM_ATTRS)
    decl = DeclarationText()
    while True:
        event = next_event(events)
        if event == EndTag("param"):
            break
        if event == StartTag("ptype"):
            decl.add_element(grab_element_text(events, "ptype"))
        elif event == StartTag("name"):
            decl.add_element(grab_element_text(events, "name"))
        elif isinstance(event, Text):
            decl.add_text(event.text)
        else:
            raise GrammarError("unexpected <param> content", event)
    return GLParam(text=decl.finish(), group=values.get("group"), len=values.get("len"))


def _name_attr(attrs: str, tag: str) -> str:
    return require(TagAttributes(attrs).to_dict(tag, _NAME_ONLY), tag, "name")


def build_command(events: Iterator[Event], attrs: str) -> GLCommand:
    """Read a ``<command>``: its proto, params and the glx, alias and vecequiv children."""
    TagAttributes(attrs).to_dict("command", _COMMAND_ATTRS)
    name = ""
    proto = ""
    proto_group = None
    params = []
    glx_attrs = None
    alias_of = None
    vec_equivalent = None

    while True:
        event = next_event(events)
        if event == EndTag("command"):
            break
        if isinstance(event, StartTag) and event.name == "proto":
            proto_group = TagAttributes(event.attrs).to_dict("proto", _PROTO_ATTRS).get("group")
            decl = DeclarationText()
            while True:
                inner = next_event(events)
                if inner == EndTag("proto"):
                    break
                if inner == StartTag("name"):
                    name = grab_element_text(events, "name")
                    decl.add_element(name)
                elif inner == StartTag("ptype"):
                    decl.add_element(grab_element_text(events, "ptype"))
                elif isinstance(inner, Text):
                    decl.add_text(inner.text)
                else:
                    raise GrammarError("unexpected <proto> content", inner)
            proto = decl.finish()
        elif isinstance(event, StartTag) and event.name == "param":
            params.append(build_param(events, event.attrs))
        elif isinstance(event, EmptyTag) and event.name == "glx":
            glx_attrs = event.attrs
        elif isinstance(event, EmptyTag) and event.name == "alias":
            alias_of = _name_attr(event.attrs, "alias")
        elif isinstance(event, EmptyTag) and event.name == "vecequiv":
            vec_equivalent = _name_attr(event.attrs, "vecequiv")
        else:
            raise GrammarError("unexpected <command> content", event)

    if not name:
        raise GrammarError("command has no <proto> name", proto)
    return GLCommand(
        name=name,
        proto=proto,
        params=tuple(params),
        proto_group=proto_group,
        glx_attrs=glx_attrs,
        alias_of=alias_of,
        vec_equivalent=vec_equivalent,
    )


def _gather_adjustments(events: Iterator[Event], block: str) -> list[ReqRem]:
    """Collect the ``<type/>``, ``<enum/>`` and ``<command/>`` entries of a require/remove block."""
    adjustments = []
    while True:
        event = next_event(events)
        if event == EndTag(block):
            return adjustments
        if not (isinstance(event, EmptyTag) and event.name in _REQ_KINDS):
            raise GrammarError(f"unexpected <{block}> content", event)
        values = TagAttributes(event.attrs).to_dict(event.name, _ENTRY_ATTRS)
        name = require(values, event.name, "name")
        adjustments.append(ReqRem(_REQ_KINDS[event.name], name))


def _build_require(events: Iterator[Event], attrs: str) -> list[GLRequirement]:
    values = TagAttributes(attrs).to_dict("require", _REQUIRE_ATTRS)
    profile = values.get("profile")
    api = _optional_api(values, "require")
    return [
        GLRequirement(adjustment=adjustment, profile=profile, api=api)
        for adjustment in _gather_adjustments(events, "require")
    ]


def _build_remove(events: Iterator[Event], attrs: str) -> list[GLRemoval]:
    values = TagAttributes(attrs).to_dict("remove", _REMOVE_ATTRS)
    profile = values.get("profile")
    return [
        GLRemoval(adjustment=adjustment, profile=profile)
        for adjustment in _gather_adjustments(events, "remove")
    ]


def build_feature(events: Iterator[Event], attrs: str) -> GLFeature:
    """Read a ``<feature>`` and its require and remove blocks."""
    values = TagAttributes(attrs).to_dict("feature", _FEATURE_ATTRS)
    api = ApiGroup.parse(values["api"], "feature") if "api" in values else ApiGroup.GL
    required: list[GLRequirement] = []
    removed: list[GLRemoval] = []

    while True:
        event = next_event(events)
        if event == EndTag("feature"):
            break
        if isinstance(event, StartTag) and event.name == "require":
            required.extend(_build_require(events, event.attrs))
        elif isinstance(event, EmptyTag) and event.name == "require":
            continue
        elif isinstance(event, StartTag) and event.name == "remove":
            removed.extend(_build_remove(events, event.attrs))
        else:
            raise GrammarError("unexpected <feature> content", event)

    return GLFeature(
        name=values.get("name", ""),
        number=require(values, "feature", "number"),
        api=api,
        required=tuple(required),
        removed=tuple(removed),
    )


def build_extension(events: Iterator[Event], attrs: str) -> GLExtension:
    """Read an ``<extension>`` and its require blocks."""
    values = TagAttributes(attrs).to_dict("extension", _EXTENSION_ATTRS)
    required: list[GLRequirement] = []

    while True:
        event = next_event(events)
        if event == EndTag("extension"):
            break
        if isinstance(event, StartTag) and event.name == "require":
            required.extend(_build_require(events, event.attrs))
        else:
            raise GrammarError("unexpected <extension> content", event)

    return GLExtension(
        name=require(values, "extension", "name"),
        supported=values.get("supported", ""),
        required=tuple(required),
    )


def build_empty_extension(attrs: str) -> GLExtension:
    """A self-closing ``<extension/>`` that requires nothing."""
    values = TagAttributes(attrs).to_dict("extension", _EMPTY_EXTENSION_ATTRS)
    return GLExtension(
        name=require(values, "extension", "name"),
        supported=values.get("supported", ""),
    )

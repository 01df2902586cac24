"""Translating gl.xml declarations into Rust source.

The translation is a closed-world mapping over the vocabulary gl.xml
actually uses. Declarations outside these tables raise TranslationError
instead of being guessed at.
"""

import re
from dataclasses import dataclass
from typing import Optional

from .errors import (
    UnknownConditionalTypedefError,
    UnknownFunctionPointerError,
    UnknownTypeError,
)
from .types import ApiGroup, GLEnum, GLIfDef, GLStruct, GLType, GLTypedef

# C spelling (everything between "typedef" and the new name) to Rust type
C_TO_RUST = {
    "unsigned int": "c_uint",
    "unsigned char": "c_uchar",
    "unsigned short": "c_ushort",
    "int": "c_int",
    "char": "c_char",
    "double": "c_double",
    "void": "c_void",
    "void *": "*mut c_void",
    "khronos_int8_t": "i8",
    "khronos_uint8_t": "u8",
    "khronos_int16_t": "i16",
    "khronos_uint16_t": "u16",
    "khronos_int32_t": "i32",
    "khronos_uint32_t": "u32",
    "khronos_int64_t": "i64",
    "khronos_uint64_t": "u64",
    "khronos_float_t": "c_float",
    "khronos_intptr_t": "isize",
    "khronos_ssize_t": "isize",
    "GLintptr": "GLintptr",
}


@dataclass(frozen=True)
class FnPointer:
    """Rust rendering of one known C function pointer typedef."""

    name: str
    params: tuple[str, ...] = ()
    is_unsafe: bool = False

    def render(self) -> str:
        qualifier = "unsafe " if self.is_unsafe else ""
        params = ", ".join(self.params)
        return f'pub type {self.name} = Option<{qualifier}extern "system" fn({params})>;'


_DEBUG_PARAMS = (
    "source: GLenum",
    "gltype: GLenum",
    "id: GLuint",
    "severity: GLenum",
    "length: GLsizei",
    "message: *const GLchar",
    "userParam: *mut c_void",
)
_DEBUG_C_PARAMS = (
    "(GLenum source,GLenum type,GLuint id,GLenum severity,GLsizei length,"
    "const GLchar *message,const void *userParam);"
)

# Matched against the whole reconstructed declaration.
FN_POINTER_TYPEDEFS = {
    f"typedef void (* GLDEBUGPROC){_DEBUG_C_PARAMS}": FnPointer(
        "GLDEBUGPROC", _DEBUG_PARAMS, is_unsafe=True
    ),
    f"typedef void (* GLDEBUGPROCARB){_DEBUG_C_PARAMS}": FnPointer(
        "GLDEBUGPROCARB", _DEBUG_PARAMS
    ),
    f"typedef void (* GLDEBUGPROCKHR){_DEBUG_C_PARAMS}": FnPointer(
        "GLDEBUGPROCKHR", _DEBUG_PARAMS
    ),
    "typedef void (* GLDEBUGPROCAMD)(GLuint id,GLenum category,GLenum severity,"
    "GLsizei length,const GLchar *message,void *userParam);": FnPointer(
        "GLDEBUGPROCAMD",
        (
            "id: GLuint",
            "category: GLenum",
            "severity: GLenum",
            "length: GLsizei",
            "message: *const GLchar",
            "userParam: *mut c_void",
        ),
    ),
    "typedef void (* GLVULKANPROCNV)(void);": FnPointer("GLVULKANPROCNV"),
}

_PUNCT_SPACE_RE = re.compile(r"\s*([(),*;])\s*")


def _signature_key(text: str) -> str:
    """Spell a C declaration with no whitespace around punctuation."""
    return _PUNCT_SPACE_RE.sub(r"\1", " ".join(text.split()))


# gl.xml spaces "(*NAME)" differently between typedefs, so match on the key
_FN_POINTERS_BY_KEY = {_signature_key(c): fn for c, fn in FN_POINTER_TYPEDEFS.items()}


@dataclass(frozen=True)
class ConditionalAlias:
    """A type alias whose target depends on the platform."""

    name: str
    alternatives: tuple[tuple[str, str], ...]  # (cfg predicate, rust type)

    def render(self) -> str:
        return "\n".join(
            f"#[cfg({predicate})]\npub type {self.name} = {target};"
            for predicate, target in self.alternatives
        )


_APPLE = 'any(target_os = "macos", target_os = "ios")'

# Keys use "\n" line endings; "\r\n" in the source is normalized before lookup.
CONDITIONAL_TYPEDEFS = {
    "#ifdef __APPLE__\ntypedef void *GLhandleARB;\n#else\n"
    "typedef unsigned int GLhandleARB;\n#endif": ConditionalAlias(
        "GLhandleARB",
        ((_APPLE, "*mut c_void"), (f"not({_APPLE})", "c_uint")),
    ),
}


def rust_string(text: str) -> str:
    """Quote ``text`` as a Rust string literal."""
    escaped = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\r", "\\r")
        .replace("\n", "\\n")
    )
    return f'"{escaped}"'


def _doc_attr(doc: str) -> str:
    return f"#[doc = {rust_string(doc)}]"


def _render_typedef(text: str) -> str:
    words = text[:-1].replace("*", " * ").split()
    if len(words) < 3 or words[0] != "typedef":
        raise UnknownTypeError(text)
    new = words[-1]
    old = " ".join(words[1:-1])

    if "(" in text:
        try:
            return _FN_POINTERS_BY_KEY[_signature_key(text)].render()
        except KeyError:
            raise UnknownFunctionPointerError(text) from None
    if old in C_TO_RUST:
        return f"pub type {new} = {C_TO_RUST[old]};"
    if len(words) == 5 and words[1] == "struct" and words[3] == "*":
        struct = words[2]
        return f"pub struct {struct} {{ _priv: u8 }}\npub type {new} = *mut {struct};"
    raise UnknownTypeError(text)


def _render_struct(text: str) -> str:
    words = text[:-1].split()
    if len(words) != 2 or words[0] != "struct":
        raise UnknownTypeError(text)
    return f"pub struct {words[1]} {{ _priv: u8 }}"


def _render_ifdef(text: str) -> str:
    try:
        return CONDITIONAL_TYPEDEFS[text.replace("\r\n", "\n")].render()
    except KeyError:
        raise UnknownConditionalTypedefError(text) from None


def render_type(gl_type: GLType) -> str:
    """Translate one type entry into Rust, with the C text as its doc."""
    if isinstance(gl_type, GLTypedef):
        body = _render_typedef(gl_type.text)
    elif isinstance(gl_type, GLStruct):
        body = _render_struct(gl_type.text)
    elif isinstance(gl_type, GLIfDef):
        body = _render_ifdef(gl_type.text)
    else:
        raise UnknownTypeError(gl_type.text)
    c_text = gl_type.text.replace("\r\n", "\n")
    return f"{_doc_attr(f'`{c_text}`')}\n{body}"


def enum_rust_type(gl_enum: GLEnum) -> str:
    if gl_enum.value == "0xFFFFFFFFFFFFFFFF":
        return "u64"
    if gl_enum.is_bitmask:
        return "GLbitfield"
    return "GLenum"


def render_enum(gl_enum: GLEnum, api: ApiGroup) -> Optional[str]:
    """Render one constant for ``api``, or None when it belongs to another API group."""
    if gl_enum.api is not None and gl_enum.api != api:
        return None

    ty = enum_rust_type(gl_enum)
    value = gl_enum.value
    if value.startswith("-"):
        value = f"{value} as {ty}"

    doc = f"`{gl_enum.name}: {ty} = {gl_enum.value}`"
    groups = gl_enum.groups
    if groups:
        plural = "s" if len(groups) > 1 else ""
        doc += f"\n* **Group{plural}:** {', '.join(groups)}"
    if gl_enum.alias_of:
        doc += f"\n* **Alias Of:** `{gl_enum.alias_of}`"

    return f"{_doc_attr(doc)}\npub const {gl_enum.name}: {ty} = {value};"

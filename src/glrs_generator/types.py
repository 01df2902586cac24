"""Data types for OpenGL registry parsing."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import AttributeValueError


class ApiGroup(Enum):
    """The broad API families a single gl.xml can target."""

    GL = "gl"
    GLES1 = "gles1"
    GLES2 = "gles2"  # also covers GLES 3.x
    GLSC2 = "glsc2"

    @classmethod
    def parse(cls, value: str, tag: str = "api") -> "ApiGroup":
        try:
            return cls(value)
        except ValueError:
            raise AttributeValueError(tag, "api", value) from None


@dataclass(frozen=True)
class GLType:
    """A type declaration, stored as the reconstructed C text."""

    text: str  # "typedef unsigned int GLenum;"
    api: Optional[ApiGroup] = None


@dataclass(frozen=True)
class GLTypedef(GLType):
    """``typedef <old> <new>;``"""


@dataclass(frozen=True)
class GLStruct(GLType):
    """``struct <name>;``, an opaque forward declaration."""


@dataclass(frozen=True)
class GLIfDef(GLType):
    """A typedef wrapped in preprocessor conditionals."""


@dataclass(frozen=True)
class GLEnum:
    """Represents an OpenGL enum constant."""

    name: str  # "GL_COLOR_BUFFER_BIT"
    value: str  # "0x00004000", kept exactly as written in gl.xml
    group: Optional[str] = None  # "ClearBufferMask,AttribMask"
    alias_of: Optional[str] = None
    # GL_ACTIVE_PROGRAM_EXT has a different value per API group
    api: Optional[ApiGroup] = None
    is_bitmask: bool = False

    @property
    def groups(self) -> list[str]:
        return self.group.split(",") if self.group else []


@dataclass(frozen=True)
class GLParam:
    """Represents a function parameter."""

    text: str  # "const GLuint *ids"
    group: Optional[str] = None
    len: Optional[str] = None  # "count", names the parameter holding the length


@dataclass(frozen=True)
class GLCommand:
    """Represents an OpenGL function/command."""

    name: str  # "glClear"
    proto: str  # "void glClear"
    params: tuple[GLParam, ...] = ()
    proto_group: Optional[str] = None
    glx_attrs: Optional[str] = None
    alias_of: Optional[str] = None
    # the pointer-taking variant, e.g. glColor3f -> glColor3fv
    vec_equivalent: Optional[str] = None


class ReqKind(Enum):
    TYPE = "type"
    ENUM = "enum"
    COMMAND = "command"


@dataclass(frozen=True)
class ReqRem:
    """A named type, enum or command being added or removed."""

    kind: ReqKind
    name: str


@dataclass(frozen=True)
class GLRequirement:
    adjustment: ReqRem
    profile: Optional[str] = None  # "core" / "compatibility"
    api: Optional[ApiGroup] = None


@dataclass(frozen=True)
class GLRemoval:
    adjustment: ReqRem
    profile: Optional[str] = None


@dataclass(frozen=True)
class GLFeature:
    """One version of one API group.

    Requirements and removals are relative to the previous feature of the
    same API group and must be applied cumulatively in version order.
    """

    name: str  # "GL_VERSION_4_6"
    number: str  # "4.6"
    api: ApiGroup = ApiGroup.GL
    required: tuple[GLRequirement, ...] = ()
    removed: tuple[GLRemoval, ...] = ()


@dataclass(frozen=True)
class GLExtension:
    """A vendor extension layered on top of a feature."""

    name: str  # "GL_ARB_debug_output"
    supported: str = ""  # "gl|glcore"
    required: tuple[GLRequirement, ...] = ()

    def supports(self, api: ApiGroup) -> bool:
        return api.value in self.supported.split("|")

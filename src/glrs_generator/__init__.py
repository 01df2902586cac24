"""glrs-generator - Rust binding generator for the OpenGL registry."""

__version__ = "0.1.0"

from .errors import GrammarError, RegistryError, TranslationError
from .registry import GLRegistry, load_gl_registry
from .types import ApiGroup, GLCommand, GLEnum, GLExtension, GLFeature, GLParam, GLType

__all__ = [
    "GLRegistry",
    "load_gl_registry",
    "ApiGroup",
    "GLType",
    "GLEnum",
    "GLParam",
    "GLCommand",
    "GLFeature",
    "GLExtension",
    "RegistryError",
    "GrammarError",
    "TranslationError",
]

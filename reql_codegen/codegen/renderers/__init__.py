"""
Renderer families.

Each module renders one family of artifacts from typed metadata.
"""

from .ast import AstSubclassRenderer, SUPERCLASS_OVERRIDES, superclass_for
from .enums import OptionEnumRenderer, ProtoEnumRenderer
from .exceptions import ExceptionRenderer
from .options import GlobalOptionsRenderer, OPTION_TYPE_MAP

__all__ = [
    "AstSubclassRenderer",
    "ExceptionRenderer",
    "GlobalOptionsRenderer",
    "OptionEnumRenderer",
    "ProtoEnumRenderer",
    "OPTION_TYPE_MAP",
    "SUPERCLASS_OVERRIDES",
    "superclass_for",
]

"""
Core code generation components.

Provides base classes and utilities used by all renderer families.
"""

from .generator import (
    Diagnostic,
    GeneratedArtifact,
    GenerationResult,
    GeneratorError,
    OutputCategory,
    RenderError,
    RenderRequest,
    Renderer,
)
from .naming import (
    CSHARP_RESERVED_WORDS,
    NameSanitizer,
    create_csharp_sanitizer,
    option_enum_name,
    sanitize,
    to_canonical_name,
)
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Renderer interface and value objects
    "Renderer",
    "RenderRequest",
    "GeneratedArtifact",
    "GenerationResult",
    "Diagnostic",
    "OutputCategory",
    "GeneratorError",
    "RenderError",
    # Naming utilities
    "CSHARP_RESERVED_WORDS",
    "NameSanitizer",
    "create_csharp_sanitizer",
    "option_enum_name",
    "sanitize",
    "to_canonical_name",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]

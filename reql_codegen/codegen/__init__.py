"""
Driver source generation.

Renders C# driver sources from RethinkDB protocol metadata.
"""

from .core.config import GeneratorConfig, ConfigError, load_config
from .core.generator import GenerationResult, GeneratorError, RenderError
from .core.templates import TemplateError
from .orchestrator import CodeGenerator, FAMILY_ORDER
from .output import FileSystemWriter, MemoryWriter
from .registry import (
    RegistryError,
    TemplateKind,
    TemplateRegistry,
    create_default_registry,
)


def generate_all(config=None, store=None, writer=None) -> GenerationResult:
    """
    Regenerate the whole output tree.

    Args:
        config: GeneratorConfig, dict of overrides, or None for defaults
        store: Preloaded MetadataStore; loaded from the config when omitted
        writer: Output writer; the filesystem by default

    Returns:
        GenerationResult covering every family
    """
    if not isinstance(config, GeneratorConfig):
        config = load_config(custom_config=config)
    return CodeGenerator(config, store=store, writer=writer).generate_all()


__all__ = [
    "CodeGenerator",
    "FAMILY_ORDER",
    "GenerationResult",
    "GeneratorConfig",
    "GeneratorError",
    "RenderError",
    "TemplateError",
    "ConfigError",
    "RegistryError",
    "TemplateKind",
    "TemplateRegistry",
    "create_default_registry",
    "FileSystemWriter",
    "MemoryWriter",
    "generate_all",
    "load_config",
]

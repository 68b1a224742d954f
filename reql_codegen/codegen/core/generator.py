"""
Base renderer interface for all artifact families.

Defines the value objects passed through a generation run and the
contract every renderer family implements.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, List, Mapping, Optional

from ...logging_config import get_logger
from .config import GeneratorConfig
from .naming import to_canonical_name
from .templates import TemplateEngine, TemplateError, create_template_engine

logger = get_logger(__name__)


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class RenderError(GeneratorError):
    """A single entity could not be rendered."""

    def __init__(self, entity_key: str, message: str):
        super().__init__(f"Failed to render '{entity_key}': {message}")
        self.entity_key = entity_key


class OutputCategory(Enum):
    """Logical output directories."""

    PROTO = "proto"
    AST = "ast"
    MODEL = "model"
    ROOT = "root"


@dataclass(frozen=True)
class RenderRequest:
    """What to render: entity, template kind and an immutable payload."""

    entity_key: str
    kind: Any
    payload: Mapping[str, Any]

    @classmethod
    def create(cls, entity_key: str, kind: Any, **payload) -> "RenderRequest":
        return cls(entity_key, kind, MappingProxyType(dict(payload)))


@dataclass(frozen=True)
class GeneratedArtifact:
    """One generated output file."""

    category: OutputCategory
    file_name: str
    content: str
    entity_key: str = ""
    template_name: str = ""

    @property
    def key(self):
        """(category, file name): unique within a run."""
        return (self.category, self.file_name)

    def path(self, config: GeneratorConfig) -> Path:
        return config.category_dir(self.category) / self.file_name


@dataclass(frozen=True)
class Diagnostic:
    """Informational message collected during a run."""

    level: str
    message: str
    entity: Optional[str] = None


@dataclass
class GenerationResult:
    """Container for one family's artifacts and diagnostics."""

    family: str
    artifacts: List[GeneratedArtifact] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    collisions: List[GeneratedArtifact] = field(default_factory=list)

    @property
    def file_names(self) -> List[str]:
        return [artifact.file_name for artifact in self.artifacts]

    def extend(self, other: "GenerationResult"):
        self.artifacts.extend(other.artifacts)
        self.diagnostics.extend(other.diagnostics)
        self.collisions.extend(other.collisions)


class Renderer(ABC):
    """Abstract base class for all renderer families."""

    #: Output category of every artifact this renderer produces
    category: OutputCategory

    def __init__(
        self,
        config: GeneratorConfig,
        registry,
        template_engine: Optional[TemplateEngine] = None,
    ):
        """
        Args:
            config: Run configuration
            registry: TemplateRegistry used to pick templates
            template_engine: Engine rendering the resolved templates
        """
        self.config = config
        self.registry = registry
        self.template_engine = template_engine or create_template_engine()
        self.diagnostics: List[Diagnostic] = []

    @property
    @abstractmethod
    def family(self) -> str:
        """Name of the renderer family, e.g. ``'proto-enums'``."""
        pass

    @abstractmethod
    def render(self, *args, **kwargs) -> List[GeneratedArtifact]:
        """Render every entity of the family."""
        pass

    def note(self, message: str, entity: Optional[str] = None, level: str = "info"):
        """Record a diagnostic and log it."""
        self.diagnostics.append(Diagnostic(level, message, entity))
        getattr(logger, level)(message)

    def base_context(self) -> dict:
        """Values every template may use."""
        return {"namespace": self.config.namespace}

    def render_request(self, request: RenderRequest, specialize: bool = True) -> GeneratedArtifact:
        """Resolve the template for a request and render it."""
        if specialize:
            handle = self.registry.resolve(request.kind, request.entity_key)
        else:
            handle = self.registry.generic(request.kind)

        if handle.specialized:
            self.note(
                f"Using special template: {handle.template_name}",
                request.entity_key,
                level="debug",
            )

        context = self.base_context()
        context.update(request.payload)
        try:
            text = self.template_engine.render_template(handle.template_name, context)
        except TemplateError as e:
            raise RenderError(request.entity_key, str(e)) from e

        return self.make_artifact(request.entity_key, text, handle.template_name)

    def make_artifact(self, entity_name: str, text: str, template_name: str = "") -> GeneratedArtifact:
        """Name the output file after the entity's canonical name."""
        file_name = f"{to_canonical_name(entity_name)}{self.config.file_extension}"
        return GeneratedArtifact(
            category=self.category,
            file_name=file_name,
            content=text,
            entity_key=entity_name,
            template_name=template_name,
        )

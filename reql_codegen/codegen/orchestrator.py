"""
Generation orchestrator.

Drives the renderer families over a metadata store and hands the
resulting artifacts to an output writer.
"""

from typing import Callable, Dict, List, Optional, Set, Tuple

from ..logging_config import get_logger
from ..metadata import MetadataStore
from .core.config import GeneratorConfig, unsafe_output_dir_reason
from .core.generator import (
    Diagnostic,
    GeneratedArtifact,
    GenerationResult,
    GeneratorError,
    OutputCategory,
    Renderer,
)
from .core.naming import NameSanitizer
from .core.templates import TemplateEngine, create_template_engine
from .output import FileSystemWriter, OutputWriter
from .registry import TemplateRegistry, create_default_registry
from .renderers import (
    AstSubclassRenderer,
    ExceptionRenderer,
    GlobalOptionsRenderer,
    OptionEnumRenderer,
    ProtoEnumRenderer,
)

logger = get_logger(__name__)

# Order used by generate_all
FAMILY_ORDER = (
    "proto-enums",
    "ast",
    "global-options",
    "exceptions",
    "optarg-enums",
)


class CodeGenerator:
    """Runs renderer families and writes their artifacts."""

    def __init__(
        self,
        config: GeneratorConfig,
        store: Optional[MetadataStore] = None,
        registry: Optional[TemplateRegistry] = None,
        writer: Optional[OutputWriter] = None,
        template_engine: Optional[TemplateEngine] = None,
    ):
        """
        Args:
            config: Run configuration
            store: Metadata; loaded from config.metadata_url or
                config.metadata_dir on first use when omitted
            registry: Template registry; the packaged one by default
            writer: Output writer; the filesystem by default
            template_engine: Engine for the packaged templates by default
        """
        self.config = config
        self._store = store
        self.registry = registry or create_default_registry()
        self.writer = writer or FileSystemWriter()
        self.template_engine = template_engine or create_template_engine()
        self._seen: Optional[Set[Tuple[OutputCategory, str]]] = None

    @property
    def store(self) -> MetadataStore:
        if self._store is None:
            if self.config.metadata_url:
                self._store = MetadataStore.from_url(self.config.metadata_url)
            else:
                self._store = MetadataStore.from_directory(self.config.metadata_dir)
        return self._store

    @property
    def families(self) -> Dict[str, Callable[[], GenerationResult]]:
        return {
            "proto-enums": self.render_proto_enums,
            "ast": self.render_ast_subclasses,
            "global-options": self.render_global_options,
            "exceptions": self.render_exceptions,
            "optarg-enums": self.render_optarg_enums,
        }

    def run(self, family: str) -> GenerationResult:
        """Run one family by name, or everything for ``'all'``."""
        if family == "all":
            return self.generate_all()
        try:
            return self.families[family]()
        except KeyError:
            raise ValueError(
                f"Unknown renderer family: {family}. "
                f"Available: all, {', '.join(FAMILY_ORDER)}"
            ) from None

    # Directory management

    def clean(self):
        """Remove the whole output tree, unless it holds more than generated code."""
        reason = unsafe_output_dir_reason(self.config)
        if reason:
            raise GeneratorError(f"Refusing to clean: {reason}")
        self.writer.clean(self.config.output_dir)

    def ensure_directories(self):
        for directory in self.config.all_output_dirs():
            self.writer.ensure_dir(directory)

    # Full run

    def generate_all(self) -> GenerationResult:
        """
        Regenerate everything from scratch.

        The output tree is cleared first. The first fatal error aborts the
        run and propagates to the caller.
        """
        self.clean()
        self.ensure_directories()

        result = GenerationResult(family="all")
        self._seen = set()
        try:
            for family in FAMILY_ORDER:
                result.extend(self.families[family]())
        finally:
            self._seen = None

        logger.info(
            f"Generated {len(result.artifacts)} artifacts "
            f"({len(result.collisions)} path collisions)"
        )
        return result

    # Families

    def render_proto_enums(self) -> GenerationResult:
        renderer = self._renderer(ProtoEnumRenderer)
        return self._emit(renderer, renderer.render(self.store.proto_enums()))

    def render_ast_subclasses(self) -> GenerationResult:
        terms = self.store.get_term_table()
        aliased = NameSanitizer(self.config.reserved_words).annotate_terms(terms)

        renderer = self._renderer(AstSubclassRenderer)
        result = self._emit(renderer, renderer.render(terms))
        result.diagnostics[:0] = [
            Diagnostic(
                "info",
                f"Alias for {identifier} will be {terms[identifier].sharp_alias}",
                identifier,
            )
            for identifier in aliased
        ]
        return result

    def render_global_options(self) -> GenerationResult:
        renderer = self._renderer(GlobalOptionsRenderer)
        return self._emit(renderer, renderer.render(self.store.global_options()))

    def render_exceptions(self) -> GenerationResult:
        renderer = self._renderer(ExceptionRenderer)
        tree = self.store.exception_hierarchy()
        return self._emit(
            renderer, renderer.render(tree, self.config.root_exception_superclass)
        )

    def render_optarg_enums(self) -> GenerationResult:
        renderer = self._renderer(OptionEnumRenderer)
        return self._emit(renderer, renderer.render(self.store.option_enums()))

    # Helpers

    def _renderer(self, renderer_class) -> Renderer:
        return renderer_class(self.config, self.registry, self.template_engine)

    def _emit(self, renderer: Renderer, artifacts: List[GeneratedArtifact]) -> GenerationResult:
        """Write artifacts, recording any repeated output path."""
        seen = self._seen if self._seen is not None else set()
        result = GenerationResult(family=renderer.family)
        result.diagnostics.extend(renderer.diagnostics)

        self.writer.ensure_dir(self.config.category_dir(renderer.category))
        for artifact in artifacts:
            if artifact.key in seen:
                message = (
                    f"Output path collision: {artifact.path(self.config)} "
                    f"written again by '{artifact.entity_key}'"
                )
                logger.warning(message)
                result.diagnostics.append(Diagnostic("warning", message, artifact.entity_key))
                result.collisions.append(artifact)
            seen.add(artifact.key)

            self.writer.write_file(artifact.path(self.config), artifact.content)
            result.artifacts.append(artifact)

        logger.info(f"{renderer.family}: wrote {len(artifacts)} artifacts")
        return result

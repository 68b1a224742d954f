"""
Template registry for generic and entity-specific templates.

Every artifact kind has one generic template. Individual entities may
register a specialized template under their canonical name, which then
replaces the generic one for that entity only.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .core.naming import to_canonical_name


class RegistryError(Exception):
    """Exception raised for registry-related errors."""

    pass


class TemplateKind(Enum):
    """Artifact kinds with their own generic template."""

    ENUM = "enum"
    ENUM_STRING = "enum_string"
    AST_SUBCLASS = "ast_subclass"
    GLOBAL_OPTIONS = "global_options"
    EXCEPTION = "exception"


@dataclass(frozen=True)
class TemplateHandle:
    """A resolved template."""

    kind: TemplateKind
    template_name: str
    specialized: bool = False


class TemplateRegistry:
    """Registry mapping (kind, canonical entity name) to templates."""

    def __init__(self):
        """Initialize empty registry."""
        self._generic: Dict[TemplateKind, str] = {}
        self._specialized: Dict[Tuple[TemplateKind, str], str] = {}
        self._cache: Dict[Tuple[TemplateKind, str], TemplateHandle] = {}

    def register_generic(self, kind: TemplateKind, template_name: str, replace: bool = False):
        """
        Register the generic template for a kind.

        Raises:
            RegistryError: If a generic template is already registered and
                replace is False
        """
        if kind in self._generic and not replace:
            raise RegistryError(
                f"Generic template for {kind.value} already registered: "
                f"{self._generic[kind]}"
            )
        self._generic[kind] = template_name
        self._cache.clear()

    def register(
        self,
        kind: TemplateKind,
        entity_name: str,
        template_name: str,
        replace: bool = False,
    ):
        """
        Register a specialized template for one entity.

        Args:
            kind: Artifact kind the specialization applies to
            entity_name: Entity name; stored under its canonical form
            template_name: Template to use for that entity
            replace: If True, replace an existing registration

        Raises:
            RegistryError: If the entity already has a different template
        """
        key = (kind, to_canonical_name(entity_name))
        existing = self._specialized.get(key)
        if existing is not None and existing != template_name and not replace:
            raise RegistryError(
                f"'{key[1]}' already has a {kind.value} template: {existing}"
            )
        self._specialized[key] = template_name
        self._cache.clear()

    def unregister(self, kind: TemplateKind, entity_name: str):
        """Remove a specialization, if present."""
        self._specialized.pop((kind, to_canonical_name(entity_name)), None)
        self._cache.clear()

    def generic(self, kind: TemplateKind) -> TemplateHandle:
        """Generic template for a kind."""
        if kind not in self._generic:
            raise RegistryError(f"No generic template registered for {kind.value}")
        return TemplateHandle(kind, self._generic[kind], specialized=False)

    def resolve(self, kind: TemplateKind, entity_name: str) -> TemplateHandle:
        """
        Pick the template for an entity.

        Returns the specialization registered under the entity's canonical
        name, or the generic template for the kind.
        """
        key = (kind, to_canonical_name(entity_name))
        if key in self._cache:
            return self._cache[key]

        template_name = self._specialized.get(key)
        if template_name is not None:
            handle = TemplateHandle(kind, template_name, specialized=True)
        else:
            handle = self.generic(kind)

        self._cache[key] = handle
        return handle

    def is_specialized(self, kind: TemplateKind, entity_name: str) -> bool:
        return (kind, to_canonical_name(entity_name)) in self._specialized

    def list_specializations(self, kind: Optional[TemplateKind] = None) -> List[str]:
        """Canonical names with a specialization, optionally for one kind."""
        return sorted(
            name for (k, name) in self._specialized if kind is None or k == kind
        )


# Generic template per kind
GENERIC_TEMPLATES = {
    TemplateKind.ENUM: "enum.cs.j2",
    TemplateKind.ENUM_STRING: "enum_string.cs.j2",
    TemplateKind.AST_SUBCLASS: "ast_subclass.cs.j2",
    TemplateKind.GLOBAL_OPTIONS: "global_options.cs.j2",
    TemplateKind.EXCEPTION: "exception.cs.j2",
}

# Entity-specific templates shipped with the package
BUILTIN_SPECIALIZATIONS = (
    (TemplateKind.AST_SUBCLASS, "MakeObj", "specialized/make_obj.cs.j2"),
    (TemplateKind.AST_SUBCLASS, "Funcall", "specialized/funcall.cs.j2"),
    (TemplateKind.ENUM, "Version", "specialized/version.cs.j2"),
)


def create_default_registry() -> TemplateRegistry:
    """
    Build the registry with the packaged templates.

    This is the single source of truth for which entities have
    specialized templates.
    """
    registry = TemplateRegistry()
    for kind, template_name in GENERIC_TEMPLATES.items():
        registry.register_generic(kind, template_name)
    for kind, entity_name, template_name in BUILTIN_SPECIALIZATIONS:
        registry.register(kind, entity_name, template_name)
    return registry

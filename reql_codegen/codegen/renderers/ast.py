"""
AST subclass renderer.

Every non-deprecated term becomes one class in the Ast directory. Two
synthetic classes, ``ReqlQuery`` and ``TopLevel``, are always rendered
first because the generated term classes derive from them.
"""

from typing import Any, Dict, List, Optional

from ...metadata import TermDefinition, TermTable
from ..core.generator import GeneratedArtifact, OutputCategory, Renderer, RenderRequest
from ..core.naming import to_canonical_name
from ..registry import TemplateKind

AST_BASE_CLASS = "ReqlAst"
DEFAULT_SUPERCLASS = "ReqlQuery"

# Compared case-insensitively against the class or term name
SUPERCLASS_OVERRIDES = {
    "db": AST_BASE_CLASS,
    "reqlquery": AST_BASE_CLASS,
    "toplevel": AST_BASE_CLASS,
}

# (class name, include-in tag) for the classes rendered before any term
SYNTHETIC_CLASSES = (
    ("ReqlQuery", "T_EXPR"),
    ("TopLevel", "T_TOP_LEVEL"),
)


def superclass_for(name: str) -> str:
    """Explicit override for the special names, else the default."""
    return SUPERCLASS_OVERRIDES.get(name.lower(), DEFAULT_SUPERCLASS)


class AstSubclassRenderer(Renderer):
    """Renders one class per term."""

    category = OutputCategory.AST

    @property
    def family(self) -> str:
        return "ast"

    def render(self, terms: TermTable) -> List[GeneratedArtifact]:
        """
        Render the synthetic classes, then every non-deprecated term.

        The term table must already carry aliases for reserved words.
        """
        self.diagnostics = []
        meta = {identifier: term.to_context() for identifier, term in terms.items()}

        artifacts = [
            self.render_class(
                term=None,
                class_name=class_name,
                superclass=superclass_for(class_name),
                include_in=include_in,
                meta=meta,
            )
            for class_name, include_in in SYNTHETIC_CLASSES
        ]

        for identifier, term in terms.items():
            if term.deprecated:
                self.note(f"Deprecated: {identifier}", identifier)
                continue

            artifacts.append(
                self.render_class(
                    term=term,
                    class_name=to_canonical_name(identifier.lower()),
                    superclass=superclass_for(identifier),
                    include_in=identifier.lower(),
                    meta=meta,
                )
            )

        return artifacts

    def render_class(
        self,
        term: Optional[TermDefinition],
        class_name: str,
        superclass: str,
        include_in: str,
        meta: Dict[str, Dict[str, Any]],
    ) -> GeneratedArtifact:
        request = RenderRequest.create(
            class_name,
            TemplateKind.AST_SUBCLASS,
            term_type=term.identifier if term else None,
            class_name=class_name,
            superclass=superclass,
            include_in=include_in,
            alias=term.sharp_alias if term else None,
            term=meta.get(term.identifier) if term else None,
            meta=meta,
        )
        return self.render_request(request)

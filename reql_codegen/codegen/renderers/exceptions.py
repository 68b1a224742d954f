"""Exception hierarchy renderer."""

from typing import List, Optional

from ...metadata import ExceptionNode
from ..core.generator import GeneratedArtifact, OutputCategory, Renderer, RenderRequest
from ..registry import TemplateKind

DEFAULT_ROOT_SUPERCLASS = "Exception"


class ExceptionRenderer(Renderer):
    """Renders one exception class per hierarchy node into the output root."""

    category = OutputCategory.ROOT

    @property
    def family(self) -> str:
        return "exceptions"

    def render(
        self, tree: ExceptionNode, root_superclass: Optional[str] = None
    ) -> List[GeneratedArtifact]:
        """
        Walk the tree depth-first, siblings in stored order.

        The hierarchy is a tree by construction; cycles are not checked.
        """
        self.diagnostics = []
        root_superclass = root_superclass or self.config.root_exception_superclass
        artifacts: List[GeneratedArtifact] = []
        self._render_children(tree, root_superclass, artifacts)
        return artifacts

    def _render_children(
        self, node: ExceptionNode, superclass: str, artifacts: List[GeneratedArtifact]
    ):
        for child in node.children:
            artifacts.append(self.render_exception(child.name, superclass))
            self._render_children(child, child.name, artifacts)

    def render_exception(self, class_name: str, superclass: str) -> GeneratedArtifact:
        request = RenderRequest.create(
            class_name,
            TemplateKind.EXCEPTION,
            class_name=class_name,
            superclass=superclass,
        )
        return self.render_request(request)

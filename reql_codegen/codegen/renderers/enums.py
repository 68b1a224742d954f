"""
Enum renderers.

Protocol enums come from ``proto.json`` and carry explicit values; option
enums come from ``optarg_enums`` in ``global_info.json`` and are flat lists
of wire strings.
"""

from typing import Any, Dict, List

from ...metadata import EnumMember, EnumSpec
from ..core.generator import GeneratedArtifact, OutputCategory, Renderer, RenderRequest
from ..core.naming import create_csharp_sanitizer
from ..registry import TemplateKind


def _member_context(member: EnumMember) -> Dict[str, Any]:
    """Integers become explicit values; anything else is kept as a comment."""
    has_value = isinstance(member.value, int) and not isinstance(member.value, bool)
    return {
        "name": member.name,
        "value": member.value,
        "has_value": has_value,
    }


class ProtoEnumRenderer(Renderer):
    """Renders protocol enums into the Proto directory."""

    category = OutputCategory.PROTO

    @property
    def family(self) -> str:
        return "proto-enums"

    def render(self, enums: List[EnumSpec]) -> List[GeneratedArtifact]:
        self.diagnostics = []
        return [self.render_enum(spec) for spec in enums]

    def render_enum(self, spec: EnumSpec) -> GeneratedArtifact:
        request = RenderRequest.create(
            spec.name,
            TemplateKind.ENUM,
            enum_name=spec.name,
            members=[_member_context(member) for member in spec.members],
        )
        return self.render_request(request)


class OptionEnumRenderer(Renderer):
    """Renders optarg enums (string-valued) into the Model directory."""

    category = OutputCategory.MODEL

    @property
    def family(self) -> str:
        return "optarg-enums"

    def render(self, enums: List[EnumSpec]) -> List[GeneratedArtifact]:
        self.diagnostics = []
        return [self.render_enum(spec) for spec in enums]

    def render_enum(self, spec: EnumSpec) -> GeneratedArtifact:
        sanitizer = create_csharp_sanitizer(self.config.reserved_words)
        members = [
            {
                "name": sanitizer.sanitize_name(member.name),
                "value": member.value,
            }
            for member in spec.members
        ]
        request = RenderRequest.create(
            spec.name,
            TemplateKind.ENUM_STRING,
            enum_name=spec.name,
            members=members,
        )
        return self.render_request(request)

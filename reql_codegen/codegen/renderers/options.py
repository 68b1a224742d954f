"""Global options renderer: one ``GlobalOptions`` class for all optargs."""

from typing import Dict, List

from ..core.generator import GeneratedArtifact, OutputCategory, Renderer, RenderRequest
from ..core.naming import create_csharp_sanitizer
from ..registry import TemplateKind

GLOBAL_OPTIONS_NAME = "GlobalOptions"

# Type descriptors used in global_optargs -> C# property types
OPTION_TYPE_MAP = {
    "bool": "bool?",
    "boolean": "bool?",
    "int": "int?",
    "integer": "int?",
    "number": "double?",
    "float": "double?",
    "double": "double?",
    "string": "string",
    "str": "string",
    "object": "object",
    "array": "object[]",
    "T_BOOL": "bool?",
    "T_NUM": "double?",
    "T_STR": "string",
    "T_OBJECT": "object",
    "T_ARRAY": "object[]",
    "T_DB": "Db",
}
FALLBACK_OPTION_TYPE = "object"


class GlobalOptionsRenderer(Renderer):
    """Renders the single GlobalOptions artifact into the Model directory."""

    category = OutputCategory.MODEL

    @property
    def family(self) -> str:
        return "global-options"

    def render(self, options: Dict[str, str]) -> List[GeneratedArtifact]:
        self.diagnostics = []
        sanitizer = create_csharp_sanitizer(self.config.reserved_words)

        entries = []
        for key, descriptor in options.items():
            csharp_type = OPTION_TYPE_MAP.get(descriptor)
            if csharp_type is None:
                csharp_type = FALLBACK_OPTION_TYPE
                self.note(
                    f"Unknown type '{descriptor}' for optarg {key}, using {FALLBACK_OPTION_TYPE}",
                    key,
                    level="warning",
                )
            entries.append(
                {
                    "key": key,
                    "property": sanitizer.sanitize_name(key),
                    "descriptor": descriptor,
                    "type": csharp_type,
                }
            )

        request = RenderRequest.create(
            GLOBAL_OPTIONS_NAME,
            TemplateKind.GLOBAL_OPTIONS,
            class_name=GLOBAL_OPTIONS_NAME,
            options=entries,
        )
        return [self.render_request(request, specialize=False)]

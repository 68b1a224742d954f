"""
Typed access to the driver metadata documents.

The generator reads three JSON documents:

- ``proto.json``: the wire protocol, holding the protocol enums,
- ``term_info.json``: one entry per query term,
- ``global_info.json``: global optargs, optarg enums and the exception
  hierarchy.

Each renderer family asks for its slice through a typed accessor, which
validates the shape of that slice before anything is rendered.
"""

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .logging_config import get_logger
from .utils import load_metadata_document

logger = get_logger(__name__)


PROTOCOL_FILE = "proto.json"
TERM_INFO_FILE = "term_info.json"
GLOBAL_INFO_FILE = "global_info.json"

# (enum name, dotted path into proto.json), rendered in this order
PROTO_ENUM_PATHS: Tuple[Tuple[str, str], ...] = (
    ("Version", "VersionDummy.Version"),
    ("Protocol", "VersionDummy.Protocol"),
    ("QueryType", "Query.QueryType"),
    ("FrameType", "Frame.FrameType"),
    ("ResponseType", "Response.ResponseType"),
    ("ResponseNote", "Response.ResponseNote"),
    ("ErrorType", "Response.ErrorType"),
    ("DatumType", "Datum.DatumType"),
    ("TermType", "Term.TermType"),
)

GLOBAL_OPTARGS_KEY = "global_optargs"
OPTARG_ENUMS_KEY = "optarg_enums"
EXCEPTION_HIERARCHY_KEY = "exception_hierarchy"


class MetadataError(Exception):
    """Raised when a metadata key is missing or has the wrong shape."""

    pass


@dataclass
class TermDefinition:
    """One entry of ``term_info.json``."""

    identifier: str
    deprecated: bool = False
    sharp_alias: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, identifier: str, raw: Any) -> "TermDefinition":
        """Build a term from its raw JSON object; null is malformed."""
        if not isinstance(raw, dict):
            raise MetadataError(
                f"Term '{identifier}' must be an object, got {type(raw).__name__}"
            )

        extra = dict(raw)
        deprecated = extra.pop("deprecated", False)
        if deprecated is None:
            deprecated = False
        if not isinstance(deprecated, bool):
            raise MetadataError(
                f"Term '{identifier}' has non-boolean 'deprecated': {deprecated!r}"
            )

        sharp_alias = extra.pop("sharp_alias", None)
        return cls(
            identifier=identifier,
            deprecated=deprecated,
            sharp_alias=sharp_alias,
            extra=extra,
        )

    def to_context(self) -> Dict[str, Any]:
        """Plain dict view handed to templates."""
        context = copy.deepcopy(self.extra)
        context["identifier"] = self.identifier
        context["deprecated"] = self.deprecated
        if self.sharp_alias is not None:
            context["sharp_alias"] = self.sharp_alias
        return context


TermTable = Dict[str, TermDefinition]


@dataclass(frozen=True)
class EnumMember:
    """A single symbolic name and its value."""

    name: str
    value: Any


@dataclass(frozen=True)
class EnumSpec:
    """An enum to generate: protocol enums carry values, option enums do not."""

    name: str
    members: Tuple[EnumMember, ...]
    string_valued: bool = False

    @classmethod
    def from_mapping(cls, name: str, mapping: Dict[str, Any]) -> "EnumSpec":
        """Protocol enum; member order follows the mapping."""
        members = tuple(EnumMember(key, value) for key, value in mapping.items())
        return cls(name=name, members=members)

    @classmethod
    def from_values(cls, name: str, values: List[str]) -> "EnumSpec":
        """String enum from a flat ordered sequence of names."""
        members = tuple(EnumMember(value, value) for value in values)
        return cls(name=name, members=members, string_valued=True)

    @property
    def member_names(self) -> List[str]:
        return [member.name for member in self.members]


@dataclass
class ExceptionNode:
    """Node of the exception hierarchy; the root has no name."""

    name: Optional[str]
    children: List["ExceptionNode"] = field(default_factory=list)

    @classmethod
    def from_json(cls, mapping: Any, name: Optional[str] = None) -> "ExceptionNode":
        """Build the tree from nested objects, keeping key order."""
        if not isinstance(mapping, dict):
            label = name or "<root>"
            raise MetadataError(
                f"Exception '{label}' must map to an object, got {type(mapping).__name__}"
            )
        children = [cls.from_json(value, key) for key, value in mapping.items()]
        return cls(name=name, children=children)

    @property
    def is_root(self) -> bool:
        return self.name is None

    def walk(self):
        """Yield ``(node, parent_name)`` depth-first, excluding the root."""
        for child in self.children:
            yield child, self.name
            yield from child.walk()


def lookup(document: Any, path: str, source: str = "metadata") -> Any:
    """
    Resolve a dotted path inside a JSON document.

    Integer segments index into lists. Raises MetadataError with the full
    path when a segment is missing or the value is not a container.
    """
    current = document
    walked = []
    for segment in path.split("."):
        walked.append(segment)
        if isinstance(current, dict):
            if segment not in current:
                raise MetadataError(
                    f"Missing key '{'.'.join(walked)}' in {source}"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as e:
                raise MetadataError(
                    f"Invalid index '{'.'.join(walked)}' in {source}"
                ) from e
        else:
            raise MetadataError(
                f"Cannot descend into '{'.'.join(walked[:-1])}' in {source}: "
                f"{type(current).__name__} is not a container"
            )
    return current


class MetadataStore:
    """Read-only view over the three loaded metadata documents."""

    def __init__(
        self,
        protocol: Dict[str, Any],
        term_info: Dict[str, Any],
        global_info: Dict[str, Any],
    ):
        self.protocol = protocol
        self.term_info = term_info
        self.global_info = global_info

    @classmethod
    def from_directory(cls, directory: str | Path) -> "MetadataStore":
        """Load ``proto.json``, ``term_info.json`` and ``global_info.json``."""
        directory = Path(directory)
        logger.debug(f"Loading metadata from {directory}")
        return cls(
            protocol=load_metadata_document(PROTOCOL_FILE, directory=directory),
            term_info=load_metadata_document(TERM_INFO_FILE, directory=directory),
            global_info=load_metadata_document(GLOBAL_INFO_FILE, directory=directory),
        )

    @classmethod
    def from_url(cls, base_url: str, timeout: int = 30) -> "MetadataStore":
        """Fetch the three documents from a remote base URL."""
        logger.debug(f"Loading metadata from {base_url}")
        return cls(
            protocol=load_metadata_document(
                PROTOCOL_FILE, base_url=base_url, timeout=timeout
            ),
            term_info=load_metadata_document(
                TERM_INFO_FILE, base_url=base_url, timeout=timeout
            ),
            global_info=load_metadata_document(
                GLOBAL_INFO_FILE, base_url=base_url, timeout=timeout
            ),
        )

    # Raw lookups

    def get_enum(self, path: str, name: Optional[str] = None) -> EnumSpec:
        """Protocol enum at a dotted path; name defaults to the last segment."""
        value = lookup(self.protocol, path, PROTOCOL_FILE)
        if not isinstance(value, dict):
            raise MetadataError(
                f"Enum '{path}' in {PROTOCOL_FILE} must be an object, "
                f"got {type(value).__name__}"
            )
        return EnumSpec.from_mapping(name or path.rsplit(".", 1)[-1], value)

    def get_term_table(self) -> TermTable:
        """A fresh, independently mutable term table."""
        if not isinstance(self.term_info, dict):
            raise MetadataError(f"{TERM_INFO_FILE} must contain an object")
        return {
            identifier: TermDefinition.from_json(identifier, raw)
            for identifier, raw in self.term_info.items()
        }

    def get_global(self, key: str) -> Any:
        return lookup(self.global_info, key, GLOBAL_INFO_FILE)

    # Typed slices, one per renderer family

    def proto_enums(self) -> List[EnumSpec]:
        return [self.get_enum(path, name) for name, path in PROTO_ENUM_PATHS]

    def global_options(self) -> Dict[str, str]:
        options = self.get_global(GLOBAL_OPTARGS_KEY)
        if not isinstance(options, dict):
            raise MetadataError(f"'{GLOBAL_OPTARGS_KEY}' must be an object")
        for key, descriptor in options.items():
            if not isinstance(descriptor, str):
                raise MetadataError(
                    f"Global optarg '{key}' must have a string type descriptor, "
                    f"got {descriptor!r}"
                )
        return dict(options)

    def exception_hierarchy(self) -> ExceptionNode:
        return ExceptionNode.from_json(self.get_global(EXCEPTION_HIERARCHY_KEY))

    def option_enums(self) -> List[EnumSpec]:
        """Optarg enums keyed by option (e.g. ``"--format"``)."""
        from .codegen.core.naming import option_enum_name

        raw = self.get_global(OPTARG_ENUMS_KEY)
        if not isinstance(raw, dict):
            raise MetadataError(f"'{OPTARG_ENUMS_KEY}' must be an object")

        enums = []
        for key, values in raw.items():
            if not isinstance(values, list) or not all(
                isinstance(value, str) for value in values
            ):
                raise MetadataError(
                    f"Optarg enum '{key}' must be a list of strings, got {values!r}"
                )
            if len(key) <= 2:
                raise MetadataError(f"Optarg enum key '{key}' is too short")
            enums.append(EnumSpec.from_values(option_enum_name(key), values))
        return enums

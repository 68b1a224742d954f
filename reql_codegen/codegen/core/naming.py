"""
Naming rules for generated C# identifiers.

Handles PascalCase conversion, reserved-word conflicts in the target language,
and the canonical names used for file naming and template lookup.
"""

import re
from typing import Dict, Iterable, List, Optional, Set

from ...logging_config import get_logger

logger = get_logger(__name__)


# C# keywords; a term colliding with one of these gets an alias
CSHARP_RESERVED_WORDS = {
    "abstract", "as", "base", "bool", "break", "byte", "case", "catch", "char",
    "checked", "class", "const", "continue", "decimal", "default", "delegate",
    "do", "double", "else", "enum", "event", "explicit", "extern", "false",
    "finally", "fixed", "float", "for", "foreach", "goto", "if", "implicit",
    "in", "int", "interface", "internal", "is", "lock", "long", "namespace",
    "new", "null", "object", "operator", "out", "override", "params", "private",
    "protected", "public", "readonly", "ref", "return", "sbyte", "sealed", "short",
    "sizeof", "stackalloc", "static", "string", "struct", "switch", "this", "throw",
    "true", "try", "typeof", "uint", "ulong", "unchecked", "unsafe", "ushort",
    "using", "virtual", "volatile", "void", "while",
}

ALIAS_SUFFIX = "_"

_CANONICAL_RE = re.compile(r"(?:^|_| +)(.)")


def to_canonical_name(value: str) -> str:
    """
    Title-case an identifier the way file names and specializations expect.

    The first character and every character after an underscore or a run
    of spaces is upper-cased and the separators are dropped. Everything
    else is left untouched: ``make_obj`` -> ``MakeObj``,
    ``ReqlQuery`` -> ``ReqlQuery``.
    """
    return _CANONICAL_RE.sub(lambda match: match.group(1).upper(), str(value))


def option_enum_name(key: str) -> str:
    """``--read_mode`` -> ``ReadMode``."""
    return to_canonical_name(key[2:].lower())


def to_snake_case(name: str) -> str:
    """Convert to snake_case."""
    # Replace hyphens with underscores
    name = name.replace('-', '_')

    # Insert underscore before uppercase letters
    name = re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', name)

    # Convert to lowercase and clean up multiple underscores
    name = name.lower()
    name = re.sub(r'_+', '_', name)

    return name.strip('_')


def to_pascal_case(name: str) -> str:
    """Convert to PascalCase."""
    snake = to_snake_case(name)
    parts = snake.split('_')

    return ''.join(part.capitalize() for part in parts if part)


class NameSanitizer:
    """Resolves collisions between metadata names and reserved words."""

    def __init__(self, reserved_words: Optional[Iterable[str]] = None):
        """
        Args:
            reserved_words: Reserved words of the target language, compared
                case-insensitively
        """
        self.reserved_words: Set[str] = {
            word.lower() for word in (reserved_words or ())
        }
        self._name_cache: Dict[str, str] = {}
        self._used_names: Set[str] = set()

    def is_reserved(self, name: str) -> bool:
        return name.lower() in self.reserved_words

    def alias_for(self, name: str) -> str:
        """The alias a reserved identifier is renamed to."""
        return name.lower() + ALIAS_SUFFIX

    def annotate_terms(self, terms) -> List[str]:
        """
        Give every reserved-word term a ``sharp_alias``, in place.

        Args:
            terms: Term table (identifier -> TermDefinition)

        Returns:
            Identifiers that received an alias, in table order
        """
        aliased = []
        for identifier, term in terms.items():
            if self.is_reserved(identifier):
                term.sharp_alias = self.alias_for(identifier)
                logger.info(f"Alias for {identifier} will be {term.sharp_alias}")
                aliased.append(identifier)
        return aliased

    def sanitize_name(self, name: str) -> str:
        """
        Turn an arbitrary metadata string into a PascalCase C# identifier.

        C# keywords are all lowercase, so a PascalCase result never clashes
        with one. Names the sanitizer already produced since the last
        ``reset_used_names`` get a numeric suffix; repeated calls with the
        same input return the same identifier.
        """
        if name not in self._name_cache:
            identifier = to_pascal_case(_identifier_chars(name))
            if identifier[0].isdigit():
                identifier = f"_{identifier}"
            identifier = self._unique(identifier)
            self._used_names.add(identifier)
            self._name_cache[name] = identifier
        return self._name_cache[name]

    def _unique(self, identifier: str) -> str:
        candidate, counter = identifier, 1
        while candidate in self._used_names:
            candidate = f"{identifier}{counter}"
            counter += 1
        return candidate

    def reset_used_names(self):
        """Forget every identifier produced so far."""
        self._used_names.clear()
        self._name_cache.clear()


def _identifier_chars(name: str) -> str:
    """Replace characters C# does not allow; never returns an empty string."""
    cleaned = re.sub(r"[^A-Za-z0-9_-]", "_", name).strip("_-")
    return cleaned or "value"


def create_csharp_sanitizer(extra_reserved: Optional[Iterable[str]] = None) -> NameSanitizer:
    """Create a name sanitizer configured for C#."""
    return NameSanitizer(CSHARP_RESERVED_WORDS | set(extra_reserved or ()))


def sanitize(terms, reserved_words: Iterable[str]) -> List[str]:
    """Annotate reserved-word terms of a term table with their alias."""
    return NameSanitizer(reserved_words).annotate_terms(terms)

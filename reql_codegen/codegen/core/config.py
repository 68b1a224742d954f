"""
Generator settings.

A run is configured by a GeneratorConfig, built from defaults, an optional
JSON settings file and environment overrides.
"""

import json
import os
import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Union

from .naming import CSHARP_RESERVED_WORDS

CONFIG_ENV_VAR = "REQL_CODEGEN_CONFIG"
METADATA_DIR_ENV_VAR = "REQL_CODEGEN_METADATA_DIR"
OUTPUT_DIR_ENV_VAR = "REQL_CODEGEN_OUTPUT_DIR"
DEFAULT_CONFIG_FILE = "codegen.json"

# Dotted C# identifiers, e.g. RethinkDb.Driver
NAMESPACE_RE = re.compile(r"[A-Za-z_]\w*(\.[A-Za-z_]\w*)*")


class ConfigError(Exception):
    """Settings could not be loaded or are invalid."""

    pass


@dataclass
class GeneratorConfig:
    """Settings for one generation run."""

    # Input settings
    metadata_dir: Path = Path("./Metadata")
    metadata_url: Optional[str] = None

    # Output layout
    output_dir: Path = Path("./Generated")
    proto_dir: str = "Proto"
    ast_dir: str = "Ast"
    model_dir: str = "Model"
    file_extension: str = ".cs"

    # Generated code settings
    namespace: str = "RethinkDb.Driver"
    root_exception_superclass: str = "Exception"
    reserved_words: Set[str] = field(
        default_factory=lambda: set(CSHARP_RESERVED_WORDS)
    )

    # Custom settings (unknown keys from config files)
    custom: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.metadata_dir = Path(self.metadata_dir)
        self.output_dir = Path(self.output_dir)
        self.reserved_words = {word.lower() for word in self.reserved_words}

    def category_dir(self, category) -> Path:
        """Directory for an OutputCategory (or its value)."""
        value = getattr(category, "value", category)
        subdirs = {
            "proto": self.proto_dir,
            "ast": self.ast_dir,
            "model": self.model_dir,
            "root": None,
        }
        if value not in subdirs:
            raise ConfigError(f"Unknown output category: {category}")
        subdir = subdirs[value]
        return self.output_dir / subdir if subdir else self.output_dir

    def all_output_dirs(self) -> List[Path]:
        """Output root followed by the category subdirectories."""
        return [
            self.output_dir,
            self.output_dir / self.proto_dir,
            self.output_dir / self.ast_dir,
            self.output_dir / self.model_dir,
        ]


class ConfigManager:
    """Merges defaults, a JSON settings file and explicit overrides."""

    def __init__(self, defaults: Optional[Dict[str, Any]] = None):
        self._defaults: Dict[str, Any] = dict(defaults or {})

    def get_config(self, custom_config: Optional[Dict[str, Any]] = None,
                   config_file: Optional[Union[str, Path]] = None) -> GeneratorConfig:
        """
        Build a GeneratorConfig.

        Precedence, lowest first: manager defaults, the settings file,
        ``custom_config``.
        """
        merged = dict(self._defaults)
        if config_file:
            merged.update(self._read_settings(Path(config_file)))
        merged.update(custom_config or {})
        return self._dict_to_config(merged)

    def _read_settings(self, path: Path) -> Dict[str, Any]:
        if not path.is_file():
            raise ConfigError(f"Configuration file not found: {path}")
        if path.suffix.lower() != ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            settings = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read configuration file {path}: {e}") from e

        if not isinstance(settings, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")
        return settings

    def _dict_to_config(self, settings: Dict[str, Any]) -> GeneratorConfig:
        """Known keys become fields; everything else lands in ``custom``."""
        known = {f.name for f in fields(GeneratorConfig)}
        kwargs = {key: value for key, value in settings.items() if key in known}
        extra = {key: value for key, value in settings.items() if key not in known}

        if "reserved_words" in kwargs:
            if not isinstance(kwargs["reserved_words"], (list, set, tuple)):
                raise ConfigError("reserved_words must be a list of strings")
            kwargs["reserved_words"] = set(kwargs["reserved_words"])

        if extra:
            kwargs["custom"] = {**kwargs.get("custom", {}), **extra}

        try:
            return GeneratorConfig(**kwargs)
        except (TypeError, AttributeError) as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    def save_config(self, config: GeneratorConfig, output_path: Union[str, Path]):
        """Write a config back as JSON; ``custom`` keys go at the top level."""
        settings: Dict[str, Any] = {}
        for f in fields(GeneratorConfig):
            if f.name == "custom":
                continue
            value = getattr(config, f.name)
            if isinstance(value, Path):
                value = str(value)
            elif isinstance(value, set):
                value = sorted(value)
            settings[f.name] = value
        settings.update(config.custom)

        path = Path(output_path)
        try:
            path.write_text(json.dumps(settings, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {e}") from e

    def validate_config(self, config: GeneratorConfig) -> List[str]:
        """Problems worth a warning; an empty list means the config is fine."""
        problems = []

        if not config.file_extension.startswith("."):
            problems.append(f"file_extension should start with '.': {config.file_extension}")

        if not NAMESPACE_RE.fullmatch(config.namespace):
            problems.append(f"Invalid namespace: {config.namespace}")

        subdirs = [config.proto_dir, config.ast_dir, config.model_dir]
        if len(set(subdirs)) != len(subdirs):
            problems.append(f"Output subdirectories must be distinct: {subdirs}")

        reason = unsafe_output_dir_reason(config)
        if reason:
            problems.append(reason)

        return problems


def unsafe_output_dir_reason(config: GeneratorConfig,
                             cwd: Optional[Path] = None) -> Optional[str]:
    """
    Why wiping ``output_dir`` would destroy more than generated code.

    Returns None when the output tree is safe to clean. The working
    directory (or one of its parents) and a tree holding the local
    metadata are not.
    """
    output_dir = config.output_dir.resolve()
    cwd = Path(cwd).resolve() if cwd else Path.cwd().resolve()

    if output_dir == cwd or output_dir in cwd.parents:
        return f"output_dir {output_dir} contains the working directory"

    if config.metadata_url is None:
        metadata_dir = config.metadata_dir.resolve()
        if metadata_dir == output_dir or output_dir in metadata_dir.parents:
            return f"output_dir {output_dir} contains metadata_dir {metadata_dir}"

    return None


_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Process-wide ConfigManager."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(custom_config: Optional[Dict[str, Any]] = None,
                config_file: Optional[Union[str, Path]] = None) -> GeneratorConfig:
    """Shortcut for ``get_config_manager().get_config(...)``."""
    return get_config_manager().get_config(custom_config, config_file)


def discover_config(cwd: Optional[Path] = None,
                    environ: Optional[Dict[str, str]] = None) -> GeneratorConfig:
    """
    Locate configuration for a CLI run.

    ``$REQL_CODEGEN_CONFIG`` wins, then ``codegen.json`` in the working
    directory, then defaults. The metadata and output directory variables
    override whatever the file says.
    """
    environ = os.environ if environ is None else environ
    cwd = Path(cwd) if cwd else Path.cwd()

    config_file = environ.get(CONFIG_ENV_VAR)
    if not config_file and (cwd / DEFAULT_CONFIG_FILE).exists():
        config_file = cwd / DEFAULT_CONFIG_FILE

    overrides: Dict[str, Any] = {}
    if environ.get(METADATA_DIR_ENV_VAR):
        overrides["metadata_dir"] = Path(environ[METADATA_DIR_ENV_VAR])
    if environ.get(OUTPUT_DIR_ENV_VAR):
        overrides["output_dir"] = Path(environ[OUTPUT_DIR_ENV_VAR])

    return load_config(custom_config=overrides, config_file=config_file)

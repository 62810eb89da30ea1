"""
Generator configuration.

A configuration is assembled in three layers: per-language defaults, an
optional JSON file, then explicit overrides. Keys that are not fields of
GeneratorConfig are language settings and end up in ``custom``.
"""

import copy
import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

PathLike = Union[str, Path]


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


@dataclass
class GeneratorConfig:
    """Base configuration for code generators."""

    # Emit a visibility modifier on declarations
    public: bool = True

    # One output buffer per top-level declaration instead of a single stream
    split_files: bool = False

    # Replaces the generated header comment when set
    leading_comments: Optional[List[str]] = None

    # Emit descriptions as doc comments
    add_comments: bool = True

    line_ending: str = "\n"

    # Language-specific settings
    custom: Dict[str, Any] = field(default_factory=dict)


LANGUAGE_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "zig": {
        "custom": {
            "int_type": "i64",
            "float_type": "f64",
            "string_type": "[]u8",
            "any_type": "std.json.Value",
        },
    },
}

_BOOL_FIELDS = ("public", "split_files", "add_comments")


def read_config_file(config_path: PathLike) -> Dict[str, Any]:
    """
    Read a JSON configuration file.

    Raises:
        ConfigError: If the file is missing, not a .json file, or does not
            hold a JSON object
    """
    path = Path(config_path)

    if not path.is_file():
        raise ConfigError(f"Configuration file not found: {path}")
    if path.suffix.lower() != ".json":
        raise ConfigError(f"Configuration file must be JSON: {path}")

    try:
        settings = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

    if not isinstance(settings, dict):
        raise ConfigError(f"Configuration file must contain a JSON object: {path}")
    return settings


def apply_settings(target: Dict[str, Any], settings: Dict[str, Any]) -> None:
    """Layer ``settings`` onto ``target``; a nested ``custom`` dict merges key by key."""
    known = {f.name for f in fields(GeneratorConfig)}
    for key, value in settings.items():
        if key == "custom" and isinstance(value, dict):
            target["custom"].update(value)
        elif key in known:
            target[key] = value
        else:
            target["custom"][key] = value


class ConfigManager:
    """Builds GeneratorConfig instances from defaults, files and overrides."""

    def __init__(self, defaults: Optional[Dict[str, Dict[str, Any]]] = None):
        self._defaults = copy.deepcopy(LANGUAGE_DEFAULTS if defaults is None else defaults)

    def list_languages(self) -> List[str]:
        return list(self._defaults)

    def get_config(
        self,
        language: str = "zig",
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[PathLike] = None,
    ) -> GeneratorConfig:
        """
        Merged configuration for a language.

        Args:
            language: Target language name
            custom_config: Overrides applied last
            config_file: JSON file applied between defaults and overrides

        Raises:
            ConfigError: If the file cannot be read or a generic setting is invalid
        """
        settings: Dict[str, Any] = {"custom": {}}
        apply_settings(settings, copy.deepcopy(self._defaults.get(language.lower(), {})))
        if config_file:
            apply_settings(settings, read_config_file(config_file))
        if custom_config:
            apply_settings(settings, custom_config)
        config = GeneratorConfig(**settings)
        problems = self.validate_config(config)
        if problems:
            raise ConfigError(f"Invalid {language} configuration: {'; '.join(problems)}")
        return config

    def save_config(self, config: GeneratorConfig, output_path: PathLike):
        """Write a configuration as flat JSON that get_config reads back."""
        settings = asdict(config)
        settings.update(settings.pop("custom"))

        try:
            Path(output_path).write_text(
                json.dumps(settings, indent=2, ensure_ascii=False), encoding="utf-8"
            )
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {output_path}: {e}") from e

    def validate_config(self, config: GeneratorConfig) -> List[str]:
        """Problems with the generic settings, as warning strings."""
        warnings = []

        if config.line_ending not in ("\n", "\r\n"):
            warnings.append(f"Invalid line_ending: {config.line_ending!r}")

        comments = config.leading_comments
        if comments is not None and (
            not isinstance(comments, list) or not all(isinstance(line, str) for line in comments)
        ):
            warnings.append("leading_comments must be a list of strings")

        warnings.extend(
            f"{name} must be a boolean"
            for name in _BOOL_FIELDS
            if not isinstance(getattr(config, name), bool)
        )
        return warnings


_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    language: str = "zig",
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[PathLike] = None,
) -> GeneratorConfig:
    """Shortcut for ``get_config_manager().get_config(...)``."""
    return get_config_manager().get_config(language, custom_config, config_file)


# Example configuration file for reference
EXAMPLE_ZIG_CONFIG = {
    "public": True,
    "split_files": False,
    "leading_comments": ["Generated from api.json"],
    "string_type": "[]const u8",
    "int_type": "i64",
}

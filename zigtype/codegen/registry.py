"""
Registry of target-language backends.

Maps language names and aliases to backend factories and builds ready
CodeGenerator instances from any supported form of configuration.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from ..logging_config import get_logger
from .core.backend import LanguageBackend
from .core.config import GeneratorConfig, load_config
from .core.generator import CodeGenerator

logger = get_logger(__name__)

BackendFactory = Callable[[GeneratorConfig], LanguageBackend]
ConfigSource = Union[GeneratorConfig, Dict[str, Any], str, Path, None]


class RegistryError(Exception):
    """Exception raised for registry-related errors."""

    pass


@dataclass
class Registration:
    language: str
    factory: BackendFactory
    aliases: List[str] = field(default_factory=list)


def resolve_config(language: str, config: ConfigSource) -> GeneratorConfig:
    """Turn a config object, override dict, file path or None into a GeneratorConfig."""
    if isinstance(config, GeneratorConfig):
        return config
    if isinstance(config, (str, Path)):
        return load_config(language, config_file=config)
    if isinstance(config, dict) or config is None:
        return load_config(language, custom_config=config)
    raise RegistryError(f"Invalid config type: {type(config).__name__}")


class GeneratorRegistry:
    """Language name -> backend factory, with case-insensitive aliases."""

    def __init__(self):
        self._registrations: Dict[str, Registration] = {}
        self._aliases: Dict[str, str] = {}

    def register(
        self,
        language: str,
        backend_factory: BackendFactory,
        aliases: Optional[List[str]] = None,
        replace: bool = False,
    ):
        """
        Register a backend factory.

        An existing registration is kept unless ``replace`` is set.

        Raises:
            RegistryError: If the factory is not callable or an alias is taken
        """
        if not callable(backend_factory):
            raise RegistryError("Backend factory must be callable")

        key = language.lower()
        if key in self._registrations and not replace:
            return

        alias_keys = [alias.lower() for alias in aliases or [] if alias.lower() != key]
        if not replace:
            for alias in alias_keys:
                if alias in self._registrations:
                    raise RegistryError(f"Alias '{alias}' conflicts with a registered language")
                if self._aliases.get(alias, key) != key:
                    raise RegistryError(f"Alias '{alias}' already points to '{self._aliases[alias]}'")

        self._registrations[key] = Registration(key, backend_factory, alias_keys)
        for alias in alias_keys:
            self._aliases[alias] = key
        logger.debug("Registered %s backend (aliases: %s)", key, ", ".join(alias_keys) or "none")

    def unregister(self, language: str):
        registration = self._registrations.pop(language.lower(), None)
        if registration is not None:
            for alias in registration.aliases:
                self._aliases.pop(alias, None)

    def resolve_language(self, language: str) -> str:
        """
        Primary name for a language name or alias.

        Raises:
            RegistryError: If the language is not registered
        """
        key = language.lower()
        key = self._aliases.get(key, key)
        if key not in self._registrations:
            raise RegistryError(
                f"No generator registered for language: {language}. "
                f"Available: {', '.join(self.list_languages())}"
            )
        return key

    def is_supported(self, language: str) -> bool:
        key = language.lower()
        return key in self._registrations or key in self._aliases

    def list_languages(self) -> List[str]:
        return sorted(self._registrations)

    def get_aliases_for_language(self, language: str) -> List[str]:
        registration = self._registrations.get(language.lower())
        return sorted(registration.aliases) if registration else []

    def create_generator(self, language: str, config: ConfigSource = None) -> CodeGenerator:
        """
        Build a generator for a language.

        Args:
            language: Language name or alias
            config: GeneratorConfig, override dict, JSON file path, or None
                for the language defaults

        Raises:
            RegistryError: If the language is unknown or the backend rejects
                the configuration
        """
        registration = self._registrations[self.resolve_language(language)]
        try:
            backend = registration.factory(resolve_config(registration.language, config))
        except RegistryError:
            raise
        except Exception as e:
            raise RegistryError(f"Failed to create {language} generator: {e}") from e
        return CodeGenerator(backend)

    def get_language_info(self, language: str) -> Dict[str, Any]:
        """Describe a registered language using its default backend."""
        registration = self._registrations[self.resolve_language(language)]
        backend = registration.factory(load_config(registration.language))

        return {
            "name": backend.language_name,
            "display_name": backend.display_name,
            "class": type(backend).__name__,
            "module": type(backend).__module__,
            "file_extension": backend.file_extension,
            "aliases": sorted(registration.aliases),
            "keyword_count": len(backend.forbidden_words),
        }


_global_registry: Optional[GeneratorRegistry] = None


def get_registry() -> GeneratorRegistry:
    """Global registry with the built-in backends, created on first use."""
    global _global_registry
    if _global_registry is None:
        _global_registry = GeneratorRegistry()
        _register_builtin_backends(_global_registry)
    return _global_registry


def _register_builtin_backends(registry: GeneratorRegistry):
    from .languages.zig import ZigBackend

    registry.register(ZigBackend.language_name, ZigBackend, aliases=list(ZigBackend.aliases))


def register_generator(
    language: str,
    backend_factory: BackendFactory,
    aliases: Optional[List[str]] = None,
):
    get_registry().register(language, backend_factory, aliases)


def get_generator(language: str, config: ConfigSource = None) -> CodeGenerator:
    """Generator for a language from the global registry."""
    return get_registry().create_generator(language, config)


def list_supported_languages() -> List[str]:
    return get_registry().list_languages()


def is_language_supported(language: str) -> bool:
    return get_registry().is_supported(language)


def get_language_info(language: str) -> Dict[str, Any]:
    return get_registry().get_language_info(language)


def list_all_language_info() -> Dict[str, Dict[str, Any]]:
    return {language: get_language_info(language) for language in list_supported_languages()}

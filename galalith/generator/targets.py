"""Lookup of generator facades by language name."""

from .cpp import CppGenerator
from .emitter import Generator
from .errors import ConfigurationError
from .typescript import TypeScriptGenerator

GENERATORS: dict[str, type[Generator]] = {
    "cpp": CppGenerator,
    "typescript": TypeScriptGenerator,
}


def languages() -> list[str]:
    """Return the supported target language names."""
    return list(GENERATORS)


def generator_for(language: str) -> Generator:
    """Return a fresh, uninitialized generator for a target language."""
    try:
        return GENERATORS[language]()
    except KeyError:
        raise ConfigurationError(f"Unknown language: {language}") from None

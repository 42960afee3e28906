"""Errors raised while building registries and generating protocol code."""


class GeneratorError(RuntimeError):
    """Base class for all code generation failures."""


class ConfigurationError(GeneratorError):
    """Raised when a target backend cannot handle a schema type."""


class TemplateError(GeneratorError):
    """Raised when a template asset is missing or its slots do not match."""


class RegistryError(GeneratorError):
    """Raised when a registry definition cannot be turned into descriptors."""


class DependencyCycleError(RegistryError):
    """Raised when nested messages reference each other in a cycle."""

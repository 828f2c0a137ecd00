"""Exceptions raised by the generator.

Type data never raises: unknown signatures map to ``any``. Only conditions that
make a whole output class impossible end up here.
"""


class GeneratorError(Exception):
    """Base class for fatal generation errors."""


class TemplateMissingError(GeneratorError):
    """The service template could not be found."""

    def __init__(self, template: str):
        self.template = template
        super().__init__(f"Template not found: {template}")


class TemplateRenderError(GeneratorError):
    """The service template is invalid or failed while rendering."""

    def __init__(self, template: str, detail: str):
        self.template = template
        super().__init__(f"Template error in {template}: {detail}")


class DependencyCycleError(GeneratorError):
    """Some types could not be ordered after their base types."""

    def __init__(self, unresolved: list[str]):
        self.unresolved = unresolved
        super().__init__(f"Unresolved type dependencies: {', '.join(unresolved)}")


class ConfigError(GeneratorError):
    """The project config file exists but cannot be used."""

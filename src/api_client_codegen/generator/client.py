"""Client generator: type declarations plus service modules from one description."""

from pydantic import BaseModel

from api_client_codegen.config import GeneratorConfig
from api_client_codegen.description.base import ApiDescriptionModel

from .declarations import TypeEmission, TypeGraphEmitter
from .render import TemplateRenderer
from .services import ServiceGenerator


class GenerationResult(BaseModel):
    """In-memory artifacts, keyed by file name relative to their output directory."""

    types: dict[str, str] = {}
    services: dict[str, str] = {}
    diagnostics: list[str] = []


class ClientGenerator:
    """Runs the type emitter and the service generator over a description."""

    def __init__(self, config: GeneratorConfig | None = None, renderer: TemplateRenderer | None = None):
        self.config = config or GeneratorConfig()
        self.renderer = renderer

    def generate_types(self, model: ApiDescriptionModel) -> TypeEmission:
        return TypeGraphEmitter(self.config).emit(model.types)

    def generate_services(self, model: ApiDescriptionModel) -> tuple[dict[str, str], list[str]]:
        """Returns ({filename: source}, diagnostics)."""
        services = ServiceGenerator(self.config, renderer=self.renderer)
        files = services.generate(model.apis, model.types)
        return files, services.diagnostics

    def generate(self, model: ApiDescriptionModel) -> GenerationResult:
        emission = self.generate_types(model)
        services, diagnostics = self.generate_services(model)
        return GenerationResult(
            types=emission.files,
            services=services,
            diagnostics=emission.diagnostics + diagnostics,
        )

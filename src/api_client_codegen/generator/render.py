"""Render models and the jinja2 renderer for service modules.

The renderer does no resolution of its own: everything the template prints is
computed beforehand into the models below. ``StrictUndefined`` makes a template
that references a field the models do not have fail with TemplateRenderError.
"""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError, TemplateNotFound
from pydantic import BaseModel

from api_client_codegen.errors import TemplateMissingError, TemplateRenderError

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"
DEFAULT_TEMPLATE = "api_service.ts.j2"


class ParameterRenderModel(BaseModel):
    """One parameter of a client function."""

    name: str  # JS identifier
    wire_name: str  # name sent to the server
    ts_type: str
    optional: bool
    source: str  # route / query / body / payload / header
    doc: str = ""
    default: str | None = None


class EndpointRenderModel(BaseModel):
    """One client function."""

    name: str
    param_list: str  # "id: number, filter?: string"
    parameters: list[ParameterRenderModel]
    return_type: str
    path: str  # as declared, e.g. api/widgets/{id}
    url: str  # JS expression, e.g. `/api/widgets/${id}`
    http_method: str  # lower-case verb
    data_shape: list[str]  # ["params: { filter }", "data: input"]
    doc_lines: list[str]


class ServiceRenderModel(BaseModel):
    """Everything one service module is rendered from."""

    service_name: str
    import_lines: list[str]
    request_function: str
    endpoints: list[EndpointRenderModel]


class TemplateRenderer:
    """Loads the service template once and renders models through it."""

    def __init__(self, template_path: Path | None = None):
        if template_path is None:
            directory, name = TEMPLATES_DIR, DEFAULT_TEMPLATE
        else:
            directory, name = template_path.parent, template_path.name

        self.env = Environment(
            loader=FileSystemLoader(str(directory)),
            undefined=StrictUndefined,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.template_name = str(directory / name)
        try:
            self.template = self.env.get_template(name)
        except TemplateNotFound as e:
            raise TemplateMissingError(self.template_name) from e
        except TemplateError as e:
            raise TemplateRenderError(self.template_name, str(e)) from e

    def render(self, model: ServiceRenderModel) -> str:
        try:
            return self.template.render(service=model)
        except TemplateError as e:
            raise TemplateRenderError(self.template_name, str(e)) from e

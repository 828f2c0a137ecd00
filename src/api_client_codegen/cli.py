"""CLI entry point for api-client-codegen."""

from fnmatch import fnmatch
from pathlib import Path

import click

from api_client_codegen.config import ProjectConfig, load_config
from api_client_codegen.description.base import ApiDescription, ApiDescriptionModel
from api_client_codegen.description.loader import load_description
from api_client_codegen.errors import GeneratorError
from api_client_codegen.generator.client import ClientGenerator
from api_client_codegen.generator.declarations import TypeGraphEmitter


def _load_model(doc_path: Path) -> ApiDescriptionModel:
    """Load the description document or stop with a readable error."""
    result = load_description(doc_path)
    if not result.ok:
        raise click.ClickException(f"Cannot load {doc_path} ({result.error_kind.value}): {result.message}")
    return result.model


def _filter_apis(apis: list[ApiDescription], patterns: tuple[str, ...]) -> list[ApiDescription]:
    """Keep endpoints whose controller, path or 'VERB path' matches any glob pattern."""
    if not patterns:
        return apis
    selected = []
    for api in apis:
        path = "/" + api.path.lstrip("/")
        candidates = (api.controller, path, f"{(api.http_method or 'GET').upper()} {path}")
        if any(fnmatch(c, p) for c in candidates for p in patterns):
            selected.append(api)
    return selected


def _build_config(
    config_path: Path | None,
    output_dir: Path | None,
    types_dir: Path | None,
    namespace_prefix: str | None,
    unwrap: tuple[str, ...],
    structural: bool,
    no_comments: bool,
) -> ProjectConfig:
    try:
        config = load_config(config_path)
    except GeneratorError as e:
        raise click.ClickException(str(e)) from e

    overrides = {}
    if output_dir is not None:
        overrides["output_dir"] = output_dir
    if types_dir is not None:
        overrides["types_dir"] = types_dir
    if namespace_prefix is not None:
        overrides["namespace_prefix"] = namespace_prefix
    if unwrap:
        overrides["unwrap_generic_types"] = config.unwrap_generic_types | set(unwrap)
    if structural:
        overrides["use_interface"] = False
    if no_comments:
        overrides["generate_comments"] = False
    return config.model_copy(update=overrides)


def _write_files(directory: Path, files: dict[str, str], label: str) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    for filename, content in files.items():
        file_path = directory / filename
        file_path.write_text(content, encoding="utf-8")
        click.echo(f"[{label}] Generated: {file_path}")


def _report(diagnostics: list[str]) -> None:
    for message in diagnostics:
        click.echo(f"warning: {message}", err=True)


def _apply(func, options):
    for option in reversed(options):
        func = option(func)
    return func


def common_options(func):
    """Description, config file and namespace scope, accepted by every generating command."""
    return _apply(func, [
        click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path)),
        click.option("-c", "--config", "config_path", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Config file (YAML or JSON). Defaults apply when missing."),
        click.option("--namespace-prefix", default=None, help="Only types under this namespace are generated."),
        click.option("--no-comments", is_flag=True, help="Do not emit doc comments."),
    ])


def type_options(func):
    """Options that only affect type declarations."""
    return _apply(func, [
        click.option("--types-dir", type=click.Path(file_okay=False, path_type=Path), default=None, help="Directory for type declarations."),
        click.option("--structural", is_flag=True, help="Emit `export type` aliases instead of interfaces."),
    ])


def service_options(func):
    """Options that only affect service modules."""
    return _apply(func, [
        click.option("--output-dir", type=click.Path(file_okay=False, path_type=Path), default=None, help="Directory for service modules."),
        click.option("--unwrap", multiple=True, help="Wrapper type name to unwrap in return types (repeatable)."),
        click.option("--only", multiple=True, help="Controller, path or 'VERB path' glob to generate (repeatable)."),
    ])


@click.group()
def main():
    """API Client Codegen: generate typed TypeScript clients from API descriptions."""
    pass


@main.command()
@common_options
@type_options
@service_options
def generate(doc_path, config_path, namespace_prefix, no_comments, types_dir, structural, output_dir, unwrap, only):
    """Generate type declarations and service modules."""
    config = _build_config(config_path, output_dir, types_dir, namespace_prefix, unwrap, structural, no_comments)
    click.echo(f"Loading {doc_path}...")
    model = _load_model(doc_path)
    model = model.model_copy(update={"apis": _filter_apis(model.apis, only)})
    click.echo(f"Found {len(model.apis)} endpoints and {len(model.types)} types.")

    try:
        result = ClientGenerator(config).generate(model)
    except GeneratorError as e:
        raise click.ClickException(str(e)) from e

    _write_files(config.types_dir, result.types, "Type")
    _write_files(config.output_dir, result.services, "API")
    _report(result.diagnostics)
    click.echo(f"Done! Generated {len(result.types)} type files and {len(result.services)} service files.")


@main.command()
@common_options
@type_options
def types(doc_path, config_path, namespace_prefix, no_comments, types_dir, structural):
    """Generate type declarations only."""
    config = _build_config(config_path, None, types_dir, namespace_prefix, (), structural, no_comments)
    model = _load_model(doc_path)

    try:
        emission = ClientGenerator(config).generate_types(model)
    except GeneratorError as e:
        raise click.ClickException(str(e)) from e

    _write_files(config.types_dir, emission.files, "Type")
    _report(emission.diagnostics)
    click.echo(f"Generated {len(emission.names)} types in {config.types_dir}")


@main.command()
@common_options
@service_options
def services(doc_path, config_path, namespace_prefix, no_comments, output_dir, unwrap, only):
    """Generate service modules only."""
    config = _build_config(config_path, output_dir, None, namespace_prefix, unwrap, False, no_comments)
    model = _load_model(doc_path)
    model = model.model_copy(update={"apis": _filter_apis(model.apis, only)})

    try:
        files, diagnostics = ClientGenerator(config).generate_services(model)
    except GeneratorError as e:
        raise click.ClickException(str(e)) from e

    _write_files(config.output_dir, files, "API")
    _report(diagnostics)
    click.echo(f"Generated {len(files)} services in {config.output_dir}")


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-c", "--config", "config_path", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Config file (YAML or JSON).")
@click.option("--namespace-prefix", default=None, help="Namespace used to decide which types are in scope.")
def inspect(doc_path, config_path, namespace_prefix):
    """Summarize a description document without writing anything."""
    config = _build_config(config_path, None, None, namespace_prefix, (), False, False)
    model = _load_model(doc_path)

    controllers = {api.controller for api in model.apis}
    emitter = TypeGraphEmitter(config)
    in_scope = [key for key, described in model.types.items() if emitter.in_scope(described)]
    click.echo(f"Controllers: {len(controllers)}")
    click.echo(f"Endpoints: {len(model.apis)}")
    click.echo(f"Types: {len(model.types)} ({len(in_scope)} in scope)")

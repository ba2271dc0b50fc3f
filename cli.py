import click
import os
import sys
import yaml
from pathlib import Path

from plugin_matrix.logger_setup import set_console_level
from plugin_matrix.parameters import (
    KNOWN_PARAMETERS, PARAMS_FILE_ENV_VAR, ParameterSource, parse_parameter_overrides,
)
from plugin_matrix.project_generator import OUTPUT_FORMATS, generate_project, render_project


def load_parameters(params_file, param: tuple) -> ParameterSource:
    """File parameters (or $PLUGIN_MATRIX_PARAMS) with -p KEY=VALUE overrides on top."""
    if params_file is None and os.environ.get(PARAMS_FILE_ENV_VAR):
        params_file = Path(os.environ[PARAMS_FILE_ENV_VAR])
    source = ParameterSource.from_yaml(params_file) if params_file else ParameterSource()
    return source.merged(parse_parameter_overrides(param))


def run_generation(params_file, param: tuple, project_id=None):
    try:
        return generate_project(load_parameters(params_file, param), project_id=project_id)
    # ConfigurationError is a ValueError; parameter parsing raises plain ValueError.
    except (ValueError, yaml.YAMLError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


params_file_option = click.option("--params-file", "-f", type=click.Path(exists=True, dir_okay=False, path_type=Path),
                                  help=f"YAML file of parameters (defaults to ${PARAMS_FILE_ENV_VAR}).")
param_option = click.option("--param", "-p", multiple=True, help="Parameter override (e.g., KEY=VALUE)")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
def cli(verbose: bool):
    """plugin-matrix: generates CI build settings for a plugin from parameters."""
    if verbose:
        set_console_level('DEBUG')

@cli.command("generate")
@params_file_option
@param_option
@click.option("--format", "fmt", type=click.Choice(OUTPUT_FORMATS), default="yaml", show_default=True)
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Write to a file instead of stdout.")
@click.option("--project-id", default=None, help="Absolute id of the parent project.")
def generate(params_file, param: tuple, fmt: str, output, project_id):
    """Generates the settings project and prints it."""
    project = run_generation(params_file, param, project_id)
    rendered = render_project(project, fmt)
    if output:
        output.write_text(rendered, encoding="utf-8")
        click.echo(f"Wrote {len(project.build_types_order)} builds to {output}")
    else:
        click.echo(rendered, nl=False)

@cli.command("list-builds")
@params_file_option
@param_option
def list_builds(params_file, param: tuple):
    """Lists the generated builds in execution order."""
    project = run_generation(params_file, param)
    click.echo("Generated builds:")
    for build in project.build_types_order:
        click.echo(f"- {build.id}: {build.name}")
        if build.artifact_rules:
            click.echo(f"  Artifacts: {build.artifact_rules}")
        for p in build.effective_parameters():
            click.echo(f"  {p.name} = {p.value}")
        for requirement in build.requirements:
            click.echo(f"  Requires: {requirement.describe()}")

@cli.command("parameters")
def parameters():
    """Lists the supported parameters and their defaults."""
    click.echo(f"{'Name':<25} {'Default':<28} Description")
    click.echo("-" * 100)
    for name, default, description in KNOWN_PARAMETERS:
        click.echo(f"{name:<25} {default if default is not None else '-':<28} {description}")

if __name__ == '__main__':
    cli()

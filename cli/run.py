from __future__ import annotations

import logging
from pathlib import Path

import typer

from common.regions_schema import region_labels
from common.utilities import setup_logger
from engine.bootstrap import check_dependencies
from engine.errors import (
    ConfigError,
    DataLoadError,
    MissingDependencyError,
    MissingReferenceYearsError,
    UnknownRegionError,
)
from engine.settings import load_settings
from engine.spatial_units import SPATIAL_UNIT_BY_REGION

LOGGER = logging.getLogger(__name__)

EXIT_CONFIG = 1
EXIT_DATA = 2
EXIT_REGION = 3
EXIT_ANALYSIS = 4


app = typer.Typer(
    help='Run the herring spatial analysis for the selected stock assessment regions.',
    invoke_without_command=True,
)


def _parse_regions_option(value: str | None) -> list[str] | None:
    """Split the ``--regions`` option into region codes; ``None`` keeps the config value."""

    if value is None:
        return None
    return [token.strip() for token in value.split(',') if token.strip()]


def _execute_main(
    config: Path | None,
    regions: str | None,
    out: Path | None,
    analysis: str | None,
    make_gif: bool | None,
    debug: bool,
) -> None:
    """Load settings, run every region and report where the snapshot went."""

    overrides = {
        'regions': _parse_regions_option(regions),
        'output_dir': out,
        'analysis': analysis,
        'make_gif': make_gif,
        'debug': True if debug else None,
    }

    try:
        check_dependencies()
        settings = load_settings(config, overrides)
    except ConfigError as exc:
        typer.secho(f'Failed to load configuration: {exc}', err=True, fg=typer.colors.RED)
        raise typer.Exit(EXIT_CONFIG)
    except MissingDependencyError as exc:
        typer.secho(str(exc), err=True, fg=typer.colors.RED)
        raise typer.Exit(EXIT_CONFIG)

    log_file = setup_logger(settings.output_dir, debug=settings.debug)
    LOGGER.debug('Settings from %s: %s', settings.config_path or 'defaults', settings)
    for key in settings.ignored_keys:
        LOGGER.warning('Ignoring unknown configuration key: %s', key)

    # Imported after the dependency check; the run loop needs pandas and numpy.
    from engine.run_loop import run_pipeline

    try:
        result = run_pipeline(settings)
    except (ConfigError, MissingDependencyError) as exc:
        typer.secho(f'Invalid analysis configuration: {exc}', err=True, fg=typer.colors.RED)
        raise typer.Exit(EXIT_CONFIG)
    except DataLoadError as exc:
        typer.secho(f'Failed to load {exc.table} table: {exc}', err=True, fg=typer.colors.RED)
        raise typer.Exit(EXIT_DATA)
    except (MissingReferenceYearsError, UnknownRegionError) as exc:
        typer.secho(f'Region {exc.region_code} failed: {exc}', err=True, fg=typer.colors.RED)
        raise typer.Exit(EXIT_REGION)
    except Exception as exc:
        typer.secho(f'Spatial analysis failed: {exc}', err=True, fg=typer.colors.RED)
        typer.secho(f'See {log_file} for details.', err=True, fg=typer.colors.YELLOW)
        raise typer.Exit(EXIT_ANALYSIS)

    typer.secho(
        f'Saved workspace snapshot to {result.snapshot_path.resolve()} '
        f'({result.elapsed_seconds:.2f} s)',
        fg=typer.colors.GREEN,
    )


@app.callback()
def _default_entrypoint(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None,
        '--config',
        '-c',
        help='Path to the TOML configuration file (defaults to run_config.toml).',
    ),
    regions: str | None = typer.Option(
        None,
        '--regions',
        '-r',
        help='Comma separated region codes, e.g. "CC" or "HG,SoG".',
    ),
    out: Path | None = typer.Option(
        None,
        '--out',
        '-o',
        help='Directory for the workspace snapshot and run.log.',
    ),
    analysis: str | None = typer.Option(
        None,
        '--analysis',
        help='Analysis entrypoint ("dry-run" or "package.module:callable").',
    ),
    make_gif: bool | None = typer.Option(
        None,
        '--make-gif/--no-make-gif',
        help='Ask the analysis to render animated output (slow).',
    ),
    debug: bool = typer.Option(False, '--debug', help='Set logging level to DEBUG.'),
) -> None:
    """Execute the run when no explicit subcommand is provided."""

    if ctx.invoked_subcommand is None:
        _execute_main(config, regions, out, analysis, make_gif, debug)


@app.command('list-regions')
def list_regions(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None,
        '--config',
        '-c',
        help='Path to the TOML configuration file (defaults to the top-level --config).',
    ),
) -> None:
    """Print the region cross-walk and the reference years and spatial units a run would use."""

    if config is None and ctx.parent is not None:
        config = ctx.parent.params.get('config')
    try:
        check_dependencies()
        settings = load_settings(config)
    except ConfigError as exc:
        typer.secho(f'Failed to load configuration: {exc}', err=True, fg=typer.colors.RED)
        raise typer.Exit(EXIT_CONFIG)
    except MissingDependencyError as exc:
        typer.secho(str(exc), err=True, fg=typer.colors.RED)
        raise typer.Exit(EXIT_CONFIG)

    from engine.data_loaders.reference_tables import (
        crosswalk_records,
        load_reference_years,
        load_region_crosswalk,
    )

    try:
        reference_years = load_reference_years(settings.parameters.reference_years_path)
        crosswalk = load_region_crosswalk()
    except DataLoadError as exc:
        typer.secho(str(exc), err=True, fg=typer.colors.RED)
        raise typer.Exit(EXIT_DATA)

    for group, labels in region_labels(crosswalk_records(crosswalk)).items():
        typer.secho(f'{group.title()} regions:', bold=True)
        for label in labels:
            typer.echo(f'  {label}')

    typer.secho('Reference years and spatial units:', bold=True)
    for row in reference_years.itertuples(index=False):
        unit = SPATIAL_UNIT_BY_REGION.get(row.SAR)
        typer.echo(f'  {row.SAR:<5} {row.Start}-{row.End}  {unit.value if unit else "-"}')


if __name__ == '__main__':
    app()

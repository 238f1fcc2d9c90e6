"""Click command behind the ``kubeawait`` script."""

from __future__ import annotations

import asyncio
from pathlib import Path

import click

from kubeawait import __version__
from kubeawait.app import WaitRequest, run
from kubeawait.config import load_config, validate_log_level
from kubeawait.errors import KubeAwaitError
from kubeawait.models.resources import ResourceFilterCriteria
from kubeawait.observability.logging import get_logger, setup_logging

_SEARCH_HELP = "Can be used to narrow down search results when discovering available resources."


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="kubeawait")
@click.argument("kind")
@click.argument("name")
@click.option("--namespace", help="Namespace where the resource lives. Ignored for cluster-wide resources.")
@click.option("--group", help=f"Resource group. {_SEARCH_HELP}")
@click.option("--group-version", help=f"Resource group version. {_SEARCH_HELP}")
@click.option("--api-version", help=f"Resource apiVersion. {_SEARCH_HELP}")
@click.option("--plural", help=f"Resource plural name. {_SEARCH_HELP}")
@click.option(
    "-t",
    "--timeout",
    type=click.IntRange(min=0),
    help="Timeout for watching resource state (seconds).",
)
@click.option(
    "-f",
    "--file",
    "filter_file",
    type=click.Path(dir_okay=False, allow_dash=True, path_type=Path),
    help="Path to YAML file containing resource state filter. Omit or pass '-' to read from standard input.",
)
@click.option("--log-level", help="Override KUBEAWAIT_LOG_LEVEL (debug, info, warning, error).")
def cli(
    kind: str,
    name: str,
    namespace: str | None,
    group: str | None,
    group_version: str | None,
    api_version: str | None,
    plural: str | None,
    timeout: int | None,
    filter_file: Path | None,
    log_level: str | None,
) -> None:
    """Wait until resource NAME of type KIND matches a state filter.

    KIND is in PascalCase, e.g. `Deployment` or `ReplicaSet`. The matching
    state is printed as YAML.
    """
    try:
        config = load_config()
        if log_level:
            config.log.level = validate_log_level(log_level)
    except KubeAwaitError as exc:
        raise click.ClickException(str(exc)) from exc

    setup_logging(config.log.level, config.log.format)

    request = WaitRequest(
        criteria=ResourceFilterCriteria(
            kind=kind,
            group=group,
            version=group_version,
            api_version=api_version,
            plural=plural,
        ),
        name=name,
        namespace=namespace,
        timeout=timeout,
        filter_path=filter_file,
    )

    try:
        output = asyncio.run(run(request, config))
    except KubeAwaitError as exc:
        get_logger("cli").debug("run_failed", error_type=type(exc).__name__)
        raise click.ClickException(str(exc)) from exc

    click.echo(output, nl=False)

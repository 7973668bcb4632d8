"""CLI entry point for lazy-release."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from pathlib import Path

import click

from lazy_release.config import CliOverrides, resolve_config
from lazy_release.errors import ConfigError, InfoDisplayed, ReleaseError
from lazy_release.pipeline import run_release
from lazy_release.shell import fatal
from lazy_release.versions import VersionKind

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INFO = 2


@click.command(
    name="lazy-release",
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(package_name="lazy-release")
@click.argument(
    "version_kind",
    type=click.Choice([k.value for k in VersionKind], case_sensitive=False),
)
@click.option(
    "-s",
    "--start-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Start directory for the search of the pyproject.toml "
    "(default: current working directory).",
)
@click.option("--no-publish", is_flag=True, help="Don't publish the package.")
@click.option("--no-push", is_flag=True, help="Don't push commits and tags.")
@click.option("-v", "--verbose", is_flag=True, help="Print every command run.")
def cli(
    version_kind: str,
    start_dir: Path | None,
    no_publish: bool,
    no_push: bool,
    verbose: bool,
) -> CliOverrides:
    """Make a release of a Python project.

    VERSION_KIND selects which part of the version gets incremented
    (major, minor, patch), or "current" to release the version as is.
    """
    return CliOverrides(
        version_kind=VersionKind(version_kind.lower()),
        start_dir=start_dir,
        no_publish=no_publish,
        no_push=no_push,
        verbose=verbose,
    )


def parse_args(argv: Sequence[str]) -> CliOverrides:
    """Parse the command line.

    Raises:
        InfoDisplayed: If --help or --version was shown.
        ConfigError: If the arguments are invalid.
    """
    try:
        with cli.make_context("lazy-release", list(argv)) as ctx:
            return cli.invoke(ctx)
    except click.exceptions.Exit as exc:
        raise InfoDisplayed(exc.exit_code) from exc
    except click.ClickException as exc:
        msg = exc.format_message()
        if isinstance(exc, click.UsageError) and exc.ctx is not None:
            msg = f"{exc.ctx.get_usage()}\n\n{msg}"
        raise ConfigError(msg) from exc


def main(argv: Sequence[str] | None = None) -> int:
    """Run lazy-release and return the process exit code.

    0 on success, 1 on error, 2 if help or version text was displayed.
    """
    args = sys.argv[1:] if argv is None else argv
    try:
        overrides = parse_args(args)
        config = resolve_config(overrides)
        run_release(config)
    except InfoDisplayed:
        return EXIT_INFO
    except ReleaseError as exc:
        fatal(str(exc))
        return EXIT_ERROR
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

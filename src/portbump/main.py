"""CLI entrypoint for portbump."""

import logging
import sys

import rich_click as click

from portbump import __version__
from portbump.config import DEFAULT_PORTS_ROOT
from portbump.controllers import PROG_NAME, BumpCliController, BumpCommand, OutputLine

click.rich_click.USE_MARKDOWN = True
BUMP_CONTROLLER = BumpCliController()


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(
    __version__,
    "-V",
    "--version",
    prog_name=PROG_NAME,
    message="%(prog)s %(version)s",
)
@click.option("-q", "--quiet", is_flag=True, default=False, help="Be quiet.")
@click.option(
    "-R",
    "--ports-root",
    "ports_root",
    metavar="PATH",
    default=None,
    help=f"Ports tree root (default: $PORTSDIR or {DEFAULT_PORTS_ROOT}).",
)
@click.option(
    "-j",
    "--jobs",
    type=click.IntRange(min=1),
    default=None,
    help="Max Makefiles processed at once (default: number of CPUs).",
)
@click.option(
    "--fail-on-error",
    is_flag=True,
    default=False,
    help="Exit with status 1 when any origin failed.",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log progress to stderr.")
@click.argument("origins", nargs=-1, metavar="[category/port]...")
def portbump(  # noqa: PLR0913
    quiet: bool,
    ports_root: str | None,
    jobs: int | None,
    fail_on_error: bool,
    verbose: bool,
    origins: tuple[str, ...],
) -> None:
    """Bump port revisions.

    Increments `PORTREVISION` in the Makefile of each given port origin, or
    adds `PORTREVISION=1` after `DISTVERSION`/`PORTVERSION` when the port has
    none yet.

    Alternatively, pipe a space separated origin list (e.g. from
    `portgrep -1`) to the standard input.
    """

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        report = BUMP_CONTROLLER.run(
            BumpCommand(
                origins=origins,
                ports_root=ports_root,
                quiet=quiet or None,
                jobs=jobs,
                fail_on_error=fail_on_error or None,
                stdin=None if origins else click.get_text_stream("stdin"),
            ),
            emit=_emit_line,
        )
    except ValueError as error:
        raise click.ClickException(str(error)) from error
    if not report.success:
        sys.exit(1)


def _emit_line(line: OutputLine) -> None:
    click.echo(line.text, err=line.is_error)


if __name__ == "__main__":  # pragma: no cover
    portbump()

"""``basescript`` command line entry point."""

from __future__ import annotations

import json
import logging
import subprocess
import sys

import click

from basescript.compiler import ScriptCompiler, generate_ir, parse_script
from basescript.errors import SchemaViolation

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _read_ir(path: str):
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as exc:
        raise click.ClickException(f"cannot read {path}: {exc}") from exc
    try:
        return generate_ir(parse_script(text))
    except SchemaViolation as exc:
        raise click.ClickException(f"invalid script {path}: {exc}") from exc


@click.group()
def main():
    """Compile BaseScript browser-automation scripts into Python programs."""


@main.command(name="compile")
@click.argument("input_path", metavar="INPUT", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", default="output.py", show_default=True, help="Where to write the program.")
@click.option("--run", "run_program", is_flag=True, help="Run the program after compiling it.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def compile_command(input_path, output, run_program, verbose):
    """Compile INPUT (.bs or .yaml) into a runnable program."""
    _setup_logging(verbose)
    ir = _read_ir(input_path)
    try:
        program = ScriptCompiler().compile(ir, output_path=output)
    except OSError as exc:
        raise click.ClickException(f"cannot write {output}: {exc}") from exc

    click.echo(f"Compiled {input_path} → {output} ({program.backend.value}, {program.step_count} steps)")
    for warning in program.warnings:
        click.echo(f"warning: {warning}", err=True)

    if run_program:
        logger.debug("Running %s with %s", output, sys.executable)
        result = subprocess.run([sys.executable, output])
        sys.exit(result.returncode)


@main.command(name="ir")
@click.argument("input_path", metavar="INPUT", type=click.Path(exists=True, dir_okay=False))
def show_ir(input_path):
    """Print the intermediate representation of INPUT."""
    commands = _read_ir(input_path)
    width = max(len(command.name) for command in commands)
    click.echo(f"{'#':>3}  {'command':<{width}}  value")
    for index, command in enumerate(commands):
        click.echo(f"{index:>3}  {command.name:<{width}}  {json.dumps(command.value, default=str)}")


if __name__ == "__main__":
    main()

from __future__ import annotations

import logging
import runpy
from pathlib import Path

import typer

from microtest.config import ColorMode

app = typer.Typer(name="microtest", help="Run inline unit tests declared in a script")

logger = logging.getLogger("microtest.cli")


@app.command()
def run(
    script: str = typer.Argument(help="Path to the Python script declaring tests"),
    config: str | None = typer.Option(
        None, "--config", "-c", help="Path to a microtest YAML config"
    ),
    color: ColorMode | None = typer.Option(
        None, "--color", help="Colorize the report: auto, always or never"
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Exit with status 1 when any test failed"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output to stderr"
    ),
    log_file: str | None = typer.Option(None, help="Append debug output to this file"),
):
    """Execute a script and report the tests it runs."""
    import yaml

    from microtest.config import SessionConfig, load_config
    from microtest.reporting.console import ConsoleReporter, use_reporter
    from microtest.verbose import setup_logger

    script_path = Path(script)
    if not script_path.exists():
        typer.echo(f"Error: script not found: {script}", err=True)
        raise typer.Exit(1)

    if config is not None:
        config_path = Path(config)
        if not config_path.exists():
            typer.echo(f"Error: config file not found: {config}", err=True)
            raise typer.Exit(1)
        try:
            session = load_config(config_path)
        except (ValueError, yaml.YAMLError) as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)
    else:
        session = SessionConfig()

    # Command line options take precedence over the config file and go
    # through the same validators
    overrides: dict[str, object] = {}
    if color is not None:
        overrides["color"] = color
    if strict:
        overrides["strict"] = True
    if verbose:
        overrides["verbose"] = True
    if log_file is not None:
        overrides["log_file"] = log_file
    if overrides:
        try:
            session = SessionConfig.model_validate(
                {**session.model_dump(), **overrides}
            )
        except ValueError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)

    setup_logger(
        debug_file=Path(session.log_file) if session.log_file else None,
        verbose=session.verbose,
    )
    logger.debug(f"Running script {script_path} with {session.model_dump()}")

    reporter = ConsoleReporter(color=session.color)
    with use_reporter(reporter):
        runpy.run_path(str(script_path), run_name="__main__")

    typer.echo(f"{reporter.passed} passed, {reporter.failed} failed")
    logger.debug(f"Script {script_path} finished: {reporter.total} test(s) run")

    if session.strict and reporter.failed > 0:
        raise typer.Exit(1)


@app.command()
def init(
    dir: str = typer.Option(
        "microtest", "--dir", help="Directory to write the example files into"
    ),
):
    """Write an example test script and config."""
    project_dir = Path(dir)
    project_dir.mkdir(parents=True, exist_ok=True)

    example = project_dir / "test_example.py"
    if example.exists():
        typer.echo(f"test_example.py already exists in {dir}, skipping.")
        return

    example.write_text('''\
from microtest import Test, check

Test("Addition").run(lambda: check(1 + 2 == 3))

Test("Repeated").time().repeat(5).run(lambda: check(sum(range(100)) == 4950))
''')

    config = project_dir / "microtest.yaml"
    if not config.exists():
        config.write_text("""\
color: auto
strict: true
log_file: debug.log
""")

    typer.echo(f"Initialized microtest example in {dir}:")
    typer.echo("  test_example.py  - example inline tests")
    typer.echo("  microtest.yaml   - example config")
    typer.echo(f"Try: microtest run {example} --config {config}")

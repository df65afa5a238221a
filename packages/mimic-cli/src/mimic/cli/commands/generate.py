from dataclasses import replace
from typing import List, Optional

import typer

from mimic.cli.factories import get_project_root, make_runner
from mimic.common import L, bus
from mimic.config import BACKENDS, load_config_from_path
from mimic.spec import ConfigError, ErrorPolicy, GenerationAbortedError


def generate_command(
    scan_paths: Optional[List[str]] = typer.Option(
        None, "--scan-path", "-s", help="File or directory with annotated protocols."
    ),
    mock_files: Optional[List[str]] = typer.Option(
        None, "--mock-file", "-m", help="Previously generated mocks to pass through."
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Where to write the mocks (stdout if omitted)."
    ),
    backend: Optional[str] = typer.Option(
        None, "--backend", "-b", help=f"Parser backend: {' | '.join(BACKENDS)}."
    ),
    concurrency: Optional[int] = typer.Option(
        None, "--concurrency", "-j", help="Files parsed at once; 0 is sequential."
    ),
    annotation: Optional[str] = typer.Option(
        None, "--annotation", help="Doc comment marker that selects protocols."
    ),
    header: Optional[str] = typer.Option(
        None, "--header", help="Text placed at the top of the output."
    ),
    on_error: ErrorPolicy = typer.Option(
        ErrorPolicy.ABORT,
        "--on-error",
        case_sensitive=False,
        help="Abort on the first unparsable file, or skip it and carry on.",
    ),
):
    root_path = get_project_root()
    try:
        config = load_config_from_path(root_path)
    except ConfigError as e:
        bus.error(L.error.config.invalid, error=str(e))
        raise typer.Exit(code=1)

    overrides = {
        "scan_paths": scan_paths,
        "mock_files": mock_files,
        "output": output,
        "backend": backend,
        "max_concurrency": concurrency,
        "annotation": annotation,
        "header": header,
    }
    config = replace(config, **{k: v for k, v in overrides.items() if v})
    if concurrency == 0:
        config = replace(config, max_concurrency=0)
    if config.backend not in BACKENDS:
        bus.error(L.error.backend.unknown, backend=config.backend)
        raise typer.Exit(code=1)

    runner = make_runner(root_path, config, on_error)
    try:
        content = runner.run()
    except GenerationAbortedError as e:
        bus.error(L.error.parse.aborted, count=len(e.failures))
        raise typer.Exit(code=1)

    if content and not config.output:
        bus.debug(L.generate.stdout)
        typer.echo(content, nl=False)

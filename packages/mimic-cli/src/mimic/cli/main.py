import typer

from mimic.common import L, bus, mimic_catalog as catalog
from .rendering import CliRenderer
from .commands.generate import generate_command

app = typer.Typer(
    name="mimic",
    help=catalog.get(L.cli.app.description),
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help=catalog.get(L.cli.option.verbose.help)
    ),
):
    # The CLI is the composition root; it decides which renderer the bus uses.
    bus.set_renderer(CliRenderer(verbose=verbose))


app.command(name="generate", help=catalog.get(L.cli.command.generate.help))(
    generate_command
)


if __name__ == "__main__":
    app()

from typing import Annotated

import typer

from wrsr_mt.cli.building import building_app
from wrsr_mt.cli.ini import ini_app
from wrsr_mt.cli.install import install
from wrsr_mt.cli.nmf import nmf_app
from wrsr_mt.cli.output import configure_logging
from wrsr_mt.cli.validate import validate
from wrsr_mt.settings import Settings

app = typer.Typer(
    name="wrsr-mt",
    help="Mod tools for Workers & Resources: Soviet Republic buildings.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def root(
    ctx: typer.Context,
    stock: Annotated[str | None, typer.Option(help="Game media directory (default: $WRSR_PATH_STOCK).")] = None,
    workshop: Annotated[
        str | None, typer.Option(help="Workshop content directory (default: $WRSR_PATH_WORKSHOP).")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug details.")] = False,
) -> None:
    configure_logging(verbose)
    ctx.obj = Settings.from_env(path_stock=stock, path_workshop=workshop)


app.add_typer(ini_app, name="ini")
app.add_typer(nmf_app, name="nmf")
app.add_typer(building_app, name="building")
app.command("validate")(validate)
app.command("install")(install)


def main() -> None:
    app()

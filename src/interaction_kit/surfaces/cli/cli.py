import typer

from .commands.discord import register_discord_commands
from .commands.utils import get_kit_version
from .commands.utils import raise_exit as _raise_exit

app = typer.Typer(add_completion=False)
discord_app = typer.Typer(add_completion=False)


def _version_callback(value: bool) -> None:
    if not value:
        return
    typer.echo(f"interaction-kit {get_kit_version()}")
    raise typer.Exit(code=0)


@app.callback()
def _root(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    # `--version` is handled eagerly via `_version_callback`.
    return


def main() -> None:
    """Entrypoint for CLI execution."""
    app()


app.add_typer(discord_app, name="discord")
register_discord_commands(discord_app, raise_exit=_raise_exit)

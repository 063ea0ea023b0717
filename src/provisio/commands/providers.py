from rich.console import Console
from rich.table import Table
from typer import Argument, BadParameter, Context, Option

from provisio.client import Client
from provisio.config.provider import ProviderType, parse_provider_type
from provisio.errors import ProvisioError
from provisio.tools.typer import fail

from . import app


def parse_type_option(value: str) -> ProviderType:
    try:
        return parse_provider_type(value)
    except ValueError as exc:
        raise BadParameter(str(exc))


@app.command()
def providers(ctx: Context) -> None:
    """
    List the providers known from the configuration.
    """

    table = Table()
    table.add_column("Name", justify="right", style="cyan", no_wrap=True)
    table.add_column("Type", no_wrap=True)
    table.add_column("URL", overflow="fold")

    for provider in Client(ctx.obj).get_providers_config():
        table.add_row(provider.name, provider.type.value, provider.url)

    Console().print(table)


@app.command()
def versions(
    ctx: Context,
    provider: str = Argument(..., help="The name of the provider."),
    type: str = Option(
        "infrastructure", "--type", "-t", help="The provider type (core, bootstrap, control-plane, infrastructure)."
    ),
) -> None:
    """
    List the versions available in the repository of a provider, newest first.
    """

    try:
        versions = Client(ctx.obj).get_provider_versions(provider, parse_type_option(type))
    except ProvisioError as exc:
        raise fail(exc)

    for version in versions:
        print(version)

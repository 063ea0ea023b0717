from typer import Argument, Context, Option
import yaml

from provisio.client import Client, ComponentsOptions
from provisio.errors import ProvisioError
from provisio.tools.typer import fail

from . import app
from .providers import parse_type_option


@app.command()
def components(
    ctx: Context,
    provider: str = Argument(..., help="The provider to render, in the form `name[:version]`."),
    type: str = Option(
        "infrastructure", "--type", "-t", help="The provider type (core, bootstrap, control-plane, infrastructure)."
    ),
    target_namespace: str = Option(
        "", help="The namespace to install the components in. Defaults to the namespace defined by the provider."
    ),
    watching_namespace: str = Option("", help="The namespace the provider should watch. Defaults to all namespaces."),
    skip_variables: bool = Option(False, help="Keep placeholders of variables that have no value instead of failing."),
) -> None:
    """
    Render the components of a provider.
    """

    options = ComponentsOptions(
        target_namespace=target_namespace,
        watching_namespace=watching_namespace,
        skip_variables=skip_variables,
    )

    try:
        result = Client(ctx.obj).get_provider_components(provider, parse_type_option(type), options)
    except ProvisioError as exc:
        raise fail(exc)

    for manifest in result.objects:
        print("---")
        print(yaml.safe_dump(manifest))

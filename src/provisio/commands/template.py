from typer import Argument, Context, Option
import yaml

from provisio.client import ClusterTemplateOptions, Client
from provisio.errors import ProvisioError
from provisio.tools.typer import fail

from . import app


@app.command()
def template(
    ctx: Context,
    cluster_name: str = Argument("", help="The name of the workload cluster."),
    infrastructure: str = Option(
        ..., "--infrastructure", "-i", help="The infrastructure provider to read the template from (`name[:version]`)."
    ),
    flavor: str = Option("", help="The template variant to use, e.g. `dev` for `cluster-template-dev.yaml`."),
    target_namespace: str = Option("", "--target-namespace", "-n", help="The namespace for the cluster objects."),
    kubernetes_version: str = Option("", help="The Kubernetes version of the workload cluster."),
    control_plane_machine_count: int = Option(1, help="The number of control plane machines."),
    worker_machine_count: int = Option(0, help="The number of worker machines."),
    list_variables: bool = Option(False, help="Only list the variables used by the template."),
) -> None:
    """
    Render a workload cluster template of an infrastructure provider.
    """

    options = ClusterTemplateOptions(
        provider=infrastructure,
        flavor=flavor,
        cluster_name=cluster_name,
        target_namespace=target_namespace,
        kubernetes_version=kubernetes_version,
        control_plane_machine_count=control_plane_machine_count,
        worker_machine_count=worker_machine_count,
        list_variables_only=list_variables,
    )

    try:
        result = Client(ctx.obj).get_cluster_template(options)
    except ProvisioError as exc:
        raise fail(exc)

    if list_variables:
        for name in result.variables:
            print(name)
        return

    for manifest in result.objects:
        print("---")
        print(yaml.safe_dump(manifest))

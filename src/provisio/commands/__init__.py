"""
Provisio fetches the components and cluster templates of Cluster API providers from their release repositories and
renders them with the variables from your environment and configuration.
"""

from enum import Enum
from pathlib import Path
import sys

from loguru import logger
from typer import Context, Option

from provisio.config import Config
from provisio.errors import ProvisioError
from provisio.tools.typer import fail, new_typer

app = new_typer(help=__doc__)


class LogLevel(str, Enum):
    TRACE = "trace"
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@app.callback()
def _callback(
    ctx: Context,
    log_level: LogLevel = Option(LogLevel.INFO, "--log-level", "-l", help="The log level to use."),
    config_file: Path = Option(
        None,
        "--config",
        "-c",
        envvar="PROVISIO_CONFIG",
        help="The configuration file to use. If not set, `provisio.yaml` is searched in the current directory, its "
        "parents and the configuration home (`~/.provisio`).",
    ),
) -> None:
    logger.remove()
    logger.add(sys.stderr, level=log_level.name)

    try:
        ctx.obj = Config.load(config_file)
    except ProvisioError as exc:
        raise fail(exc)


from . import components  # noqa: F401,E402
from . import providers  # noqa: F401,E402
from . import template  # noqa: F401,E402

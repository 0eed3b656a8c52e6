import importlib.metadata
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from structlog.typing import FilteringBoundLogger

from .config import (
    DEFAULT_HOST,
    DEFAULT_LOG_PATH,
    DEFAULT_PORT,
    ServerConfig,
    default_videos_dir,
)
from .error import ListenError, LogFileError
from .http_server.server import StreamingHTTPServer
from .logger import LOG_LEVELS, get_logger, open_log_file
from .views import create_route_table

try:
    VERSION = importlib.metadata.version("gogostream")
except importlib.metadata.PackageNotFoundError:
    VERSION = "unknown"


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=VERSION, package_name="gogostream", prog_name="gogostream")
@click.option(
    "-p",
    "--port",
    type=click.IntRange(0, 65535),
    default=DEFAULT_PORT,
    show_default=True,
    envvar="GOGOSTREAM_PORT",
    help="Serving port",
)
@click.option(
    "-d",
    "--videos-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    envvar="GOGOSTREAM_VIDEOS_DIR",
    help="Videos root directory [default: home directory]. Not read by any route yet",
)
@click.option(
    "-l",
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_LOG_PATH,
    show_default=True,
    envvar="GOGOSTREAM_LOG_PATH",
    help="Logging path",
)
@click.option(
    "--host",
    default=DEFAULT_HOST,
    show_default=True,
    envvar="GOGOSTREAM_HOST",
    help="Address to listen on",
)
@click.option(
    "--log-level",
    type=click.Choice(list(LOG_LEVELS)),
    default="info",
    show_default=True,
    envvar="GOGOSTREAM_LOG_LEVEL",
    help=(
        "Minimum level of the logged messages. warning and error also turn off "
        "the startup line and the access log"
    ),
)
def gogostream(
    port: int,
    videos_dir: Path | None,
    log_path: Path,
    host: str,
    log_level: str,
):
    """Stream videos over HTTP."""
    try:
        config = ServerConfig(
            host=host,
            port=port,
            videos_dir=videos_dir if videos_dir is not None else default_videos_dir(),
            log_path=log_path,
            log_level=log_level,
        )
    except ValidationError as e:
        raise click.UsageError(str(e))

    try:
        log_file = open_log_file(config.log_path)
    except LogFileError as e:
        raise click.ClickException(str(e))

    with log_file:
        logger = get_logger(log_file, level=config.log_level)
        logger.bind(module=__name__).info(
            "starting gogostream",
            version=VERSION,
            address=config.address,
            videos_dir=str(config.videos_dir),
        )
        sys.exit(_serve(config, logger))


def _serve(config: ServerConfig, logger: FilteringBoundLogger) -> int:
    """Runs the server until it's interrupted. Returns the process exit code."""
    logger = logger.bind(module=__name__)
    server = StreamingHTTPServer(
        host=config.host,
        port=config.port,
        route_table=create_route_table(logger),
        logger=logger,
    )
    try:
        server.start()
    except ListenError as e:
        logger.error("listener failed to start", address=e.address, error=str(e))
        return 1
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        logger.error("listener stopped with error", exc_info=e)
        return 1
    finally:
        server.stop()
    return 0


if __name__ == "__main__":
    gogostream()

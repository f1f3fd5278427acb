"""Uvicorn server runner."""

import copy
from typing import Any

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from haven.app import App
from haven.config import Config
from haven.web.server import create_fastapi_app


def build_log_config(debug: bool) -> dict[str, Any]:
    """Uvicorn logging config with compact formats; access lines include the client address."""
    log_config = copy.deepcopy(LOGGING_CONFIG)
    log_config["formatters"]["access"]["fmt"] = '%(asctime)s - %(client_addr)s "%(request_line)s" %(status_code)s'
    log_config["formatters"]["default"]["fmt"] = "%(asctime)s - %(levelname)s - %(message)s"
    level = "DEBUG" if debug else "INFO"
    for logger in log_config["loggers"].values():
        logger["level"] = level
    return log_config


def run_server(app: App, config: Config) -> None:
    fastapi_app = create_fastapi_app(app, config)
    uvicorn.run(
        fastapi_app,
        host=config.host,
        port=config.port,
        log_config=build_log_config(config.debug),
        access_log=True,
    )

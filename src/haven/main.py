"""Entry point of the ``haven`` console script."""

import structlog

from haven.app import App
from haven.config import Config
from haven.logging import setup_logging
from haven.web.runner import run_server


def main() -> None:
    config = Config()  # type: ignore[call-arg]
    setup_logging(config.debug)
    structlog.get_logger(__name__).info(
        "starting_server",
        host=config.host,
        port=config.port,
        debug=config.debug,
        admin_seeding=config.admin_password is not None,
        git_commit_hash=config.git_commit_hash,
    )
    run_server(App(config), config)


if __name__ == "__main__":
    main()

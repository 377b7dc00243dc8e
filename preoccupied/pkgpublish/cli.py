"""
Command-line entry point for the pkgpublish pipeline step.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""

import asyncio
import logging
import os
import sys
from typing import Mapping, Optional

from .config import PublishConfig, load_config
from .exceptions import PublishError
from .publish import publish
from .registry import RegistryClient


logger = logging.getLogger(__name__)


def log_level(name: str) -> int:
    """
    Resolve a logging level name, falling back to INFO when unknown.
    """

    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


async def run(config: PublishConfig) -> None:
    async with RegistryClient(config.api_url, config.api_user, config.api_password) as client:
        await publish(config, client)


def main(environ: Optional[Mapping[str, str]] = None) -> int:
    """
    Run a complete publish and return the process exit status.
    """

    if environ is None:
        environ = os.environ

    logging.basicConfig(level=log_level(environ.get('LOG_LEVEL', 'INFO')),
                        format='%(message)s')

    try:
        config = load_config(environ)
        asyncio.run(run(config))
    except PublishError as e:
        logger.error(str(e))
        return 1

    return 0


def console_main() -> None:
    sys.exit(main())


# The end.

#!/usr/bin/env python3

"""
Jellyfin Exporter for Prometheus

Metrics are collected when Prometheus scrapes /metrics, never on a timer.
"""

import logging
import sys
from typing import Optional, Sequence

from prometheus_client import REGISTRY

from . import __version__
from .client import JellyfinClient
from .collector import JellyfinCollector
from .config import LOG_FORMAT, configure_logging, load_config
from .errors import ApiError, ConfigError
from .server import make_app, serve


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main function to run the exporter."""
    try:
        config = load_config(argv)
    except ConfigError as e:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, stream=sys.stderr)
        logging.getLogger('jellyfin_exporter').error(f"parse flags: {e}")
        return 1

    logger = configure_logging(config.log_level)
    logger.info(f"jellyfin-exporter version {__version__}")

    client = JellyfinClient(config.host, config.api_key,
                            logger=logger.getChild('client'))
    collector = JellyfinCollector(client, namespace=config.namespace,
                                  logger=logger.getChild('collector'))
    REGISTRY.register(collector)

    # Check that the host responds; the exporter starts either way
    try:
        info = client.system_info()
    except ApiError as e:
        logger.warning(f"failed to get jellyfin version: {e}")
    else:
        logger.info(f"jellyfin version {info.version}")

    app = make_app(REGISTRY, logger=logger.getChild('server'))
    logger.info(f"serving metrics at {config.listen}")

    try:
        serve(config.listen, app)
    except ConfigError as e:
        logger.error(f"listen: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt received, exiting")
    finally:
        client.close()
    return 0


if __name__ == '__main__':
    sys.exit(main())

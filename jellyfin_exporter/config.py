"""
Exporter configuration.

Every option can be given as a command-line flag or an environment
variable; a flag overrides the environment.
"""

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from . import __version__
from .descriptors import DEFAULT_NAMESPACE
from .errors import ConfigError

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

LOG_LEVELS = {
    'trace': logging.DEBUG,
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warn': logging.WARNING,
    'warning': logging.WARNING,
    'error': logging.ERROR,
    'fatal': logging.CRITICAL,
    'critical': logging.CRITICAL,
}

logger = logging.getLogger('jellyfin_exporter')


@dataclass(frozen=True)
class ExporterConfig:
    host: str
    api_key: str
    log_level: str = 'info'
    namespace: str = DEFAULT_NAMESPACE
    listen: str = ':9453'


def build_parser(environ: Mapping[str, str]) -> argparse.ArgumentParser:
    # -h belongs to --host, so help is only available as --help
    parser = argparse.ArgumentParser(
        prog='jellyfin-exporter',
        description=f"Jellyfin Exporter (version {__version__})",
        add_help=False,
    )
    group = parser.add_argument_group('Options')
    group.add_argument('--log-level', default=environ.get('LOG_LEVEL', 'info'),
                       help='log verbosity level (trace, debug, info, warn, error, fatal) [$LOG_LEVEL]')
    group.add_argument('--namespace', default=environ.get('METRIC_NAMESPACE', DEFAULT_NAMESPACE),
                       help='metric name prefix [$METRIC_NAMESPACE]')
    group.add_argument('-l', '--listen', default=environ.get('LISTEN', ':9453'),
                       help='host:port to listen on [$LISTEN]')
    group.add_argument('-h', '--host', default=environ.get('HOST'),
                       help='jellyfin host to export metrics for [$HOST]')
    group.add_argument('-u', '--apikey', dest='api_key', default=environ.get('API_KEY'),
                       help='jellyfin apikey for auth [$API_KEY]')
    group.add_argument('--version', action='version', version=__version__)
    group.add_argument('--help', action='help', help='show this help message and exit')
    return parser


def load_config(argv: Optional[Sequence[str]] = None,
                environ: Optional[Mapping[str, str]] = None) -> ExporterConfig:
    """Parse flags and environment variables into an ExporterConfig.

    Raises ConfigError when the host or the API key is missing.
    """
    if environ is None:
        environ = os.environ
    args = build_parser(environ).parse_args(argv)

    missing = []
    if not args.host:
        missing.append('--host/HOST')
    if not args.api_key:
        missing.append('--apikey/API_KEY')
    if missing:
        raise ConfigError(f"the required option(s) {', '.join(missing)} were not specified")

    return ExporterConfig(
        host=args.host,
        api_key=args.api_key,
        log_level=args.log_level,
        namespace=args.namespace,
        listen=args.listen,
    )


def configure_logging(level_name: str = 'info') -> logging.Logger:
    """Configure root logging on stderr and return the exporter logger.

    An unknown level name is reported and the level stays at info.
    """
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, stream=sys.stderr)

    level = LOG_LEVELS.get(level_name.strip().lower())
    if level is None:
        logger.warning(f"invalid log level {level_name!r}, using info")
        level = logging.INFO
    logging.getLogger().setLevel(level)
    logger.setLevel(level)
    return logger

"""
HTTP endpoints of the exporter.

/metrics renders the registry in the Prometheus text format, running every
registered collector for that request. A collector failure turns that one
response into a 500; the server keeps serving the next request.
/_health always answers OK.
"""

import logging
from typing import Optional, Tuple
from wsgiref.simple_server import WSGIRequestHandler, make_server

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest
from prometheus_client.exposition import ThreadingWSGIServer

from .errors import ConfigError, ScrapeError

TEXT_PLAIN = 'text/plain; charset=utf-8'


def make_app(registry: CollectorRegistry, logger: Optional[logging.Logger] = None):
    """Build the WSGI application serving /metrics and /_health."""
    logger = logger or logging.getLogger(__name__)

    def respond(start_response, status: str, content_type: str, body: bytes):
        start_response(status, [('Content-Type', content_type),
                                ('Content-Length', str(len(body)))])
        return [body]

    def app(environ, start_response):
        method = environ.get('REQUEST_METHOD', 'GET')
        path = environ.get('PATH_INFO', '/')

        if path == '/metrics':
            logger.info(f"{method} {path} remote={environ.get('REMOTE_ADDR', '')}")
            try:
                output = generate_latest(registry)
            except ScrapeError as e:
                logger.error(f"Error during metrics collection: {e}")
                return respond(start_response, '500 Internal Server Error', TEXT_PLAIN,
                               f"{e}\n".encode('utf-8'))
            except Exception as e:
                logger.exception(f"Unexpected error during metrics collection: {e}")
                return respond(start_response, '500 Internal Server Error', TEXT_PLAIN,
                               b"internal error during metrics collection\n")
            return respond(start_response, '200 OK', CONTENT_TYPE_LATEST, output)

        if path == '/_health':
            logger.info("Healthcheck status ok")
            return respond(start_response, '200 OK', TEXT_PLAIN, b'OK')

        return respond(start_response, '404 Not Found', TEXT_PLAIN, b'404 page not found\n')

    return app


class _LoggingHandler(WSGIRequestHandler):
    """Send wsgiref's access log to the debug log instead of stderr."""

    def log_message(self, format, *args):
        logging.getLogger(__name__).debug(format % args)


def parse_listen(listen: str) -> Tuple[str, int]:
    """Split a ``host:port`` address; an empty host means all interfaces."""
    host, sep, port = listen.rpartition(':')
    if not sep:
        raise ConfigError(f"listen address {listen!r} has no port")
    host = host.strip('[]') or '0.0.0.0'
    try:
        port_number = int(port)
    except ValueError:
        raise ConfigError(f"listen address {listen!r} has an invalid port") from None
    if not 0 <= port_number <= 65535:
        raise ConfigError(f"listen address {listen!r} has an invalid port")
    return host, port_number


def serve(listen: str, app) -> None:
    """Serve ``app`` on ``listen`` until interrupted, one thread per request."""
    host, port = parse_listen(listen)
    httpd = make_server(host, port, app, ThreadingWSGIServer, handler_class=_LoggingHandler)
    try:
        httpd.serve_forever()
    finally:
        httpd.server_close()

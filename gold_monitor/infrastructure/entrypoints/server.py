"""
Process entry point: plain HTTP and/or HTTPS listeners for the same app.

  - PORT > 0            -> plain HTTP on PORT
  - TLS key + cert load -> HTTPS on HTTPS_PORT (default 3443)

Both listeners run in one event loop. With neither configured the process
logs a warning and exits.

Run:
    gold-monitor
    python -m gold_monitor.infrastructure.entrypoints.server
"""

import asyncio
import logging
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI

from gold_monitor.infrastructure.config.settings import Settings, load_env
from gold_monitor.infrastructure.config.tls import TLSConfig, load_tls_config
from gold_monitor.infrastructure.entrypoints.fastapi_app import create_app
from gold_monitor.infrastructure.observability.logging_config import configure_logging

logger = logging.getLogger(__name__)


def build_servers(
    app: FastAPI,
    settings: Settings,
    tls: Optional[TLSConfig],
) -> list[uvicorn.Server]:
    servers: list[uvicorn.Server] = []

    if settings.http_port:
        servers.append(
            uvicorn.Server(
                uvicorn.Config(app, host=settings.host, port=settings.http_port, log_config=None)
            )
        )
        logger.info("HTTP server listening on http://%s:%d", settings.host, settings.http_port)
    else:
        logger.info("HTTP server disabled (set PORT to enable plain HTTP).")

    if tls is not None:
        servers.append(
            uvicorn.Server(
                uvicorn.Config(
                    app,
                    host=settings.host,
                    port=settings.https_port,
                    log_config=None,
                    **tls.uvicorn_kwargs(),
                )
            )
        )
        logger.info("HTTPS server listening on https://%s:%d", settings.host, settings.https_port)
    else:
        logger.info("HTTPS server not started. Provide TLS_KEY_FILE and TLS_CERT_FILE to enable TLS.")

    return servers


async def serve(servers: list[uvicorn.Server]) -> None:
    await asyncio.gather(*(server.serve() for server in servers))


def main() -> int:
    load_env()
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    logger.debug("Settings: %s", settings.masked())

    app = create_app(settings)
    servers = build_servers(app, settings, load_tls_config(settings))
    if not servers:
        logger.warning("No HTTP or HTTPS listener is active. Configure TLS or set PORT.")
        return 1

    asyncio.run(serve(servers))
    return 0


if __name__ == "__main__":
    sys.exit(main())

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(debug: bool = False) -> None:
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("game_relay").setLevel(level)
    # uvicorn logs every websocket handshake on the access logger
    logging.getLogger("uvicorn.access").setLevel(logging.INFO if debug else logging.WARNING)

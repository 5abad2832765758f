import logging

import uvicorn

from game_relay.core.config import settings

logger = logging.getLogger("game_relay")


def main() -> None:
    from game_relay.main import app

    logger.info("Starting relay on %s:%s", settings.host, settings.port)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        ws_ping_interval=settings.websocket_ping_interval,
        ws_ping_timeout=settings.websocket_ping_interval * 2,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()

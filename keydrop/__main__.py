import logging
import sys

import uvicorn

from keydrop.config import get_settings
from keydrop.errors import ConfigError
from keydrop.main import create_app

logger = logging.getLogger("keydrop")


def main():
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    try:
        app = create_app(settings)
    except ConfigError as exc:
        # refuse to bind the listener with a bad key table
        logger.critical("Startup aborted: %s", exc)
        sys.exit(1)
    logger.info("Application starting on port %s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()

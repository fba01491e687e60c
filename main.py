import sys

import uvicorn

from sheetscan import create_app, logger
from sheetscan.config import Config
from sheetscan.exceptions import StartupError


def main():
    config = Config()
    try:
        app = create_app(config)
    except StartupError as e:
        logger.error(f"ERROR: {e}")
        logger.error("Create a .env file and add: GEMINI_API_KEY=your_api_key")
        sys.exit(1)

    logger.info(
        f"Starting FastAPI application on host={config.HOST}, port={config.PORT}, debug={config.DEBUG}")
    logger.info(f"URL: http://localhost:{config.PORT}")
    uvicorn.run(
        app,
        host=config.HOST,
        port=config.PORT,
        log_level="debug" if config.DEBUG else "info",
    )


if __name__ == "__main__":
    main()

import uvicorn
from loguru import logger

from hospital.api.app import create_app
from hospital.config import AppConfig


def main() -> None:
    config = AppConfig()
    logger.info(
        "Starting hospital management service on http://{}:{}",
        config.server.host,
        config.server.port,
    )
    uvicorn.run(
        create_app(config),
        host=config.server.host,
        port=config.server.port,
        log_level=config.server.log_level,
    )


if __name__ == "__main__":
    main()

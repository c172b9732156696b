# pawsclinic/__main__.py
import uvicorn

from pawsclinic.core.config import get_settings
from pawsclinic.main import app, logger


def main() -> None:
    settings = get_settings()
    logger.info("server_listening", url=f"http://{settings.HOST}:{settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    main()

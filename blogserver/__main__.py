"""Run the blog server: python -m blogserver"""

import uvicorn

from blogserver.config import get_settings


def main() -> None:
    settings = get_settings()
    # uvicorn turns SIGINT/SIGTERM into a graceful drain followed by lifespan shutdown
    uvicorn.run(
        "blogserver.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()

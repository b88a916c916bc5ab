import uvicorn

from oopsask.core.app import create_app
from oopsask.core.config import get_settings

app = create_app()


def run() -> None:
    """Serve the translation API (`oopsask-api`)."""
    settings = get_settings()
    uvicorn.run(
        "oopsask.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()

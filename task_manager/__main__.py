"""Run the API server with uvicorn."""

import uvicorn

from task_manager.config import get_settings
from task_manager.main import create_app


def main() -> None:
    """Start the server on the configured host and port."""
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()

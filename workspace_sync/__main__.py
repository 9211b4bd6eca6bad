import uvicorn

from workspace_sync.config import get_settings
from workspace_sync.infrastructure.observability.logging import setup_logging
from workspace_sync.application.api.api_server import create_default_app


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format, settings.service_name)
    uvicorn.run(create_default_app(settings), host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    main()

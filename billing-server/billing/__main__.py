import uvicorn

from billing.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "billing.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.server.reload,
        log_config=None,
    )


if __name__ == "__main__":
    main()

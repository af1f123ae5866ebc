import uvicorn

from coda.config import Settings


def main() -> None:
    settings = Settings()
    uvicorn.run(
        "coda.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.python_log_level.lower(),
    )


if __name__ == "__main__":
    main()

"""Run the API server: `python -m auditchain.api`."""

import uvicorn

from auditchain.api.dependencies import get_settings


def main() -> None:
    """Serve the app on the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        "auditchain.api.app:app",
        host=settings.api.host,
        port=settings.api.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

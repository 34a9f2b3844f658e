"""Run the catalogue service: `python -m catalogue`."""

import uvicorn

from catalogue.config import settings


def main() -> None:
    uvicorn.run(
        "catalogue.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

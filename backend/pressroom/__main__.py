"""Run the API with uvicorn on the fixed listening port."""

import uvicorn

from pressroom.config import LISTEN_PORT, settings


def main() -> None:
    uvicorn.run(
        "pressroom.main:app",
        host=settings.backend_host,
        port=LISTEN_PORT,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

"""Run the API with uvicorn: `python -m happy_thoughts` (honours HOST/PORT settings)."""

import uvicorn

from happy_thoughts.config import settings


def main() -> None:
    uvicorn.run(
        "happy_thoughts.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

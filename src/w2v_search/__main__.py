"""
Run the query service with Uvicorn: ``python -m w2v_search``.
"""

import uvicorn

from .config import settings


def main() -> None:
    uvicorn.run(
        "w2v_search.main:app",
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    main()

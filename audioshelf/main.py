"""Entry: start the API server (set AUDIOSHELF_API_RELOAD=1 for development)."""
import logging
import uvicorn

from audioshelf.config import API_HOST, API_PORT, API_RELOAD


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(name)s: %(message)s")
    logging.getLogger(__name__).info("Serving on %s:%d (reload=%s)", API_HOST, API_PORT, API_RELOAD)
    uvicorn.run(
        "audioshelf.api.app:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_RELOAD,
    )


if __name__ == "__main__":
    main()

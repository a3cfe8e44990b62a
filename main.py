# main.py

from uvicorn import run

from inkwell.configs import settings


def main() -> None:
    # View counts and online visitors live in process memory unless Redis is on; keep one worker.
    run(
        "inkwell.main:app",
        host="127.0.0.1",
        port=8000,
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower(),
        workers=1,
    )


if __name__ == "__main__":
    main()

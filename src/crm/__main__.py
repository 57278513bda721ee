import uvicorn

from . import config


def main() -> None:
    uvicorn.run("crm.main:app", host=config.APP_HOST, port=config.APP_PORT, log_level=config.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()

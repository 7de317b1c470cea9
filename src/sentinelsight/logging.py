import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Libraries that are too chatty at INFO for a request-heavy API.
QUIET_LOGGERS = ("sqlalchemy.engine", "multipart", "httpx")


def configure_logging(level: str = "INFO", sql_echo: bool = False) -> None:
    """
    Configure root logging for the SentinelSight server and CLI.

    ``level`` is a level name such as "INFO"; unknown names fall back to INFO.
    With ``sql_echo`` the SQLAlchemy engine logs every statement.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
    logging.getLogger().setLevel(numeric_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if sql_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)

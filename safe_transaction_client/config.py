"""
Settings for the client, read from environment variables
"""

import logging.config
from pathlib import Path

import environ

ROOT_DIR = Path(__file__).resolve(strict=True).parent.parent

env = environ.Env()

READ_DOT_ENV_FILE = env.bool("READ_DOT_ENV_FILE", default=False)
DOT_ENV_FILE = env("DOT_ENV_FILE", default=None)
if READ_DOT_ENV_FILE or DOT_ENV_FILE:
    DOT_ENV_FILE = DOT_ENV_FILE or ".env"
    # OS environment variables take precedence over variables from .env
    env.read_env(str(ROOT_DIR / DOT_ENV_FILE))

# SAFE TRANSACTION SERVICE
# ------------------------------------------------------------------------------
# Custom service url, if not provided it's taken from the known services for the chain id
SAFE_TRANSACTION_SERVICE_URL = env("SAFE_TRANSACTION_SERVICE_URL", default=None)
SAFE_TRANSACTION_SERVICE_CHAIN_ID = env.int(
    "SAFE_TRANSACTION_SERVICE_CHAIN_ID", default=1
)
SAFE_TRANSACTION_SERVICE_REQUEST_TIMEOUT = env.int(
    "SAFE_TRANSACTION_SERVICE_REQUEST_TIMEOUT", default=10
)
SAFE_TRANSACTION_SERVICE_POOL_CONNECTIONS = env.int(
    "SAFE_TRANSACTION_SERVICE_POOL_CONNECTIONS", default=10
)
SAFE_TRANSACTION_SERVICE_POOL_MAXSIZE = env.int(
    "SAFE_TRANSACTION_SERVICE_POOL_MAXSIZE", default=100
)

# LOGGING
# ------------------------------------------------------------------------------
LOG_LEVEL = env("LOG_LEVEL", default="INFO")
LOG_FORMAT = env("LOG_FORMAT", default="verbose")  # `verbose` or `json`

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "short": {"format": "%(asctime)s %(message)s"},
        "verbose": {
            "format": "%(asctime)s [%(levelname)s] [%(processName)s] %(message)s"
        },
        "json": {
            "()": "safe_transaction_client.loggers.custom_logger.SafeJsonFormatter"
        },
    },
    "handlers": {
        "console": {
            "level": "DEBUG",
            "class": "logging.StreamHandler",
            "formatter": "json" if LOG_FORMAT == "json" else "verbose",
        },
    },
    "loggers": {
        "safe_transaction_client": {
            "level": LOG_LEVEL,
            "handlers": ["console"],
            "propagate": False,
        },
        "urllib3": {
            "level": "WARNING",
        },
        "web3.providers": {
            "level": "WARNING",
        },
    },
}


def configure_logging(logging_config: dict | None = None) -> None:
    logging.config.dictConfig(logging_config or LOGGING)

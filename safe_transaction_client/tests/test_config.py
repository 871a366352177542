import copy
import logging.config
from unittest import TestCase, mock

from .. import config


class TestConfig(TestCase):
    def test_defaults(self):
        self.assertEqual(config.SAFE_TRANSACTION_SERVICE_REQUEST_TIMEOUT, 10)
        self.assertEqual(config.SAFE_TRANSACTION_SERVICE_POOL_CONNECTIONS, 10)
        self.assertEqual(config.SAFE_TRANSACTION_SERVICE_POOL_MAXSIZE, 100)
        self.assertIn(config.LOG_FORMAT, ("verbose", "json"))

    def test_configure_logging(self):
        with mock.patch.object(logging.config, "dictConfig") as dict_config_mock:
            config.configure_logging()
            dict_config_mock.assert_called_once_with(config.LOGGING)

            custom_config = {"version": 1}
            config.configure_logging(custom_config)
            dict_config_mock.assert_called_with(custom_config)

    def test_json_formatter_is_importable(self):
        self.assertEqual(
            config.LOGGING["formatters"]["json"]["()"],
            "safe_transaction_client.loggers.custom_logger.SafeJsonFormatter",
        )
        logging.config.dictConfig(
            {
                "version": 1,
                "disable_existing_loggers": False,
                "formatters": copy.deepcopy(config.LOGGING["formatters"]),
                "handlers": {},
            }
        )

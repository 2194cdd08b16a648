import logging
import json
import os
from pathlib import Path
import threading


ROOT_LOGGER_NAME = "inventory"


class SingletonLogger:
    """
    Configures the "inventory" logger tree exactly once per process.

    Named loggers handed out by get_logger() are children of the root
    logger, so they share its handlers.
    """
    _instance = None
    _lock = threading.Lock()
    _root = None

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(SingletonLogger, cls).__new__(cls)
        return cls._instance

    def get_logger(self, name: str = ROOT_LOGGER_NAME) -> logging.Logger:
        """
        Get a logger under the configured "inventory" tree.

        Args:
            name (str): Dotted logger name; names outside the tree are nested under it

        Returns:
            logging.Logger: The named logger
        """
        if self._root is None:
            with self._lock:
                if self._root is None:
                    self._root = self._create_root_logger()

        if name == ROOT_LOGGER_NAME:
            return self._root
        if not name.startswith(ROOT_LOGGER_NAME + "."):
            name = f"{ROOT_LOGGER_NAME}.{name}"
        return logging.getLogger(name)

    def _create_root_logger(self) -> logging.Logger:
        """
        Create the root logger with file and console handlers.

        LOG_LEVEL sets the console level, LOG_DIR the directory for the
        inventory.log / errors.log files (set LOG_DIR to an empty string to
        disable file output).
        """
        logger = logging.getLogger(ROOT_LOGGER_NAME)
        logger.setLevel(logging.DEBUG)
        logger.propagate = False
        logger.handlers.clear()

        formatter = JsonFormatter({
            "timestamp": "asctime",
            "level": "levelname",
            "logger": "name",
            "function": "funcName",
            "line": "lineno",
            "message": "message"
        })

        level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)
        logs_dir = os.environ.get("LOG_DIR", "logs")

        if logs_dir:
            logs_path = Path(logs_dir)
            logs_path.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(logs_path / "inventory.log", mode='a', encoding='utf-8')
            file_handler.setLevel(logging.INFO)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

            error_file_handler = logging.FileHandler(logs_path / "errors.log", mode='a', encoding='utf-8')
            error_file_handler.setLevel(logging.ERROR)
            error_file_handler.setFormatter(formatter)
            logger.addHandler(error_file_handler)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        return logger


class JsonFormatter(logging.Formatter):
    """
    Formatter that emits one JSON object per record.

    @param dict fmt_dict: output key -> LogRecord attribute. Defaults to {"message": "message"}.
    @param str time_format: time.strftime() format string used for asctime.
    """
    def __init__(self, fmt_dict: dict = None, time_format: str = "%Y-%m-%dT%H:%M:%S", msec_format: str = "%s.%03dZ"):
        super().__init__()
        self.fmt_dict = fmt_dict if fmt_dict is not None else {"message": "message"}
        self.default_time_format = time_format
        self.default_msec_format = msec_format

    def usesTime(self) -> bool:
        return "asctime" in self.fmt_dict.values()

    def formatMessage(self, record) -> dict:
        return {key: record.__dict__[attr] for key, attr in self.fmt_dict.items()}

    def format(self, record) -> str:
        record.message = record.getMessage()
        if self.usesTime():
            record.asctime = self.formatTime(record, self.datefmt)

        message_dict = self.formatMessage(record)

        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            message_dict["exc_info"] = record.exc_text
        if record.stack_info:
            message_dict["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(message_dict, default=str)


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger under the singleton "inventory" tree.

    Args:
        name (str): Dotted logger name, e.g. "inventory.services.entity"

    Returns:
        logging.Logger: The named logger
    """
    return SingletonLogger().get_logger(name)

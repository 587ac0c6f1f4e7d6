# reelpay/infrastructure/logging/log_manager.py
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Dict, Any, Optional, Union


DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class LogManager:
    """
    Centralized logging configuration manager.

    Loggers are named by layer (``domain.machine``, ``infrastructure.rng``,
    ``application.simulation``...) so whole layers can be tuned from config.
    """
    def __init__(self):
        self.root_logger = logging.getLogger()
        self.loggers: Dict[str, logging.Logger] = {}
        self.handlers: Dict[str, logging.Handler] = {}
        self.initialized = False

    def initialize(self, config: Dict[str, Any], force: bool = False):
        """
        Initialize logging from a configuration dictionary.

        Args:
            config: Logging configuration (level, format, console, file, loggers)
            force: Reconfigure even if already initialized
        """
        if self.initialized and not force:
            return
        if force:
            self.shutdown()

        log_level = self._get_log_level(config.get('level', 'INFO'))
        formatter = logging.Formatter(
            config.get('format', DEFAULT_FORMAT),
            config.get('date_format', DEFAULT_DATE_FORMAT)
        )

        self.root_logger.setLevel(log_level)
        for handler in list(self.root_logger.handlers):
            self.root_logger.removeHandler(handler)

        if config.get('console', True):
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(self._get_log_level(config.get('console_level', log_level)))
            console_handler.setFormatter(formatter)
            self.root_logger.addHandler(console_handler)
            self.handlers['console'] = console_handler

        file_config = config.get('file', {})
        if file_config.get('enabled', False):
            file_path = file_config.get('path', 'logs/reelpay.log')
            log_dir = os.path.dirname(file_path)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)

            file_handler = RotatingFileHandler(
                file_path,
                maxBytes=file_config.get('max_bytes', 10 * 1024 * 1024),
                backupCount=file_config.get('backup_count', 5)
            )
            file_handler.setLevel(self._get_log_level(file_config.get('level', log_level)))
            file_handler.setFormatter(formatter)
            self.root_logger.addHandler(file_handler)
            self.handlers['file'] = file_handler

        # Parents before children so a child's level is the one that sticks
        logger_configs = config.get('loggers', {})
        for logger_name in sorted(logger_configs, key=lambda name: len(name.split('.'))):
            logger_config = logger_configs[logger_name] or {}
            logger = logging.getLogger(logger_name)
            logger.setLevel(self._get_log_level(logger_config.get('level', log_level)))
            logger.propagate = logger_config.get('propagate', True)
            self.loggers[logger_name] = logger

            self.root_logger.debug(
                f"Configured logger '{logger_name}' with level={logging.getLevelName(logger.level)}, "
                f"propagate={logger.propagate}"
            )

        self.root_logger.debug("Logging system initialized")
        self.initialized = True

    def shutdown(self):
        """Detach every handler this manager installed and reset configured loggers."""
        for handler in self.handlers.values():
            self.root_logger.removeHandler(handler)
            handler.close()
        for logger in self.loggers.values():
            logger.setLevel(logging.NOTSET)
            logger.propagate = True
        self.handlers.clear()
        self.loggers.clear()
        self.initialized = False

    @staticmethod
    def _get_log_level(level_name: Union[str, int]) -> int:
        """
        Convert a log level name to its numeric value.

        Unknown names fall back to INFO.
        """
        if isinstance(level_name, int):
            return level_name
        level = logging.getLevelName(str(level_name).upper())
        return level if isinstance(level, int) else logging.INFO


# Singleton instance
log_manager = LogManager()


def initialize_logging(config: Optional[Dict[str, Any]] = None, verbose: bool = False) -> LogManager:
    """
    Initialize the logging system from a machine's ``logging`` block.

    Args:
        config: Logging configuration; defaults to INFO on the console
        verbose: Force DEBUG on the console

    Returns:
        The shared LogManager
    """
    default_config = {
        'level': 'INFO',
        'console': True,
        'console_level': 'INFO',
        'file': {'enabled': False},
        'loggers': {
            'domain.machine': {'level': 'INFO'},
            'infrastructure': {'level': 'WARNING'},
        }
    }

    config = dict(config) if config else default_config
    if verbose:
        config['level'] = 'DEBUG'
        config['console_level'] = 'DEBUG'
        config['loggers'] = {}

    log_manager.initialize(config, force=True)
    return log_manager

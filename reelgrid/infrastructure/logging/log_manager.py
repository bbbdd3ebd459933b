# reelgrid/infrastructure/logging/log_manager.py
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Dict, Any, Optional, Union


DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Layer loggers used when no ``logging:`` section is given. Per-round engine
# and session chatter stays quiet, the runner and reports keep INFO.
DEFAULT_LOGGERS = {
    'domain.machine': {'level': 'WARNING'},
    'domain.session': {'level': 'WARNING'},
    'domain.events': {'level': 'WARNING'},
    'application.simulation': {'level': 'INFO'},
    'application.analysis': {'level': 'INFO'},
    'infrastructure.config': {'level': 'WARNING'},
    'infrastructure.rng': {'level': 'WARNING'},
}


class LogManager:
    """
    Centralized logging configuration manager.

    Owns the root handlers (console and rotating file) and the levels of the
    per-layer loggers named in the config's ``loggers`` mapping.
    """
    def __init__(self):
        self.root_logger = logging.getLogger()
        self.loggers = {}  # name -> logger
        self.handlers = {}  # name -> handler
        self.initialized = False

    def initialize(self, config: Dict[str, Any], force: bool = False):
        """
        Initialize logging system based on configuration.

        Args:
            config: Logging configuration dictionary
            force: Reconfigure even if already initialized
        """
        if self.initialized and not force:
            return

        log_level = self._get_log_level(config.get('level', 'INFO'))
        formatter = logging.Formatter(
            config.get('format', DEFAULT_LOG_FORMAT),
            config.get('date_format', DEFAULT_DATE_FORMAT)
        )

        self.root_logger.setLevel(log_level)
        self._remove_handlers()

        if config.get('console', True):
            level = self._get_log_level(config.get('console_level', log_level))
            self._add_handler('console', logging.StreamHandler(sys.stdout), level, formatter)

        file_config = config.get('file') or {}
        if file_config.get('enabled', False):
            self._add_handler('file', self._build_file_handler(file_config),
                              self._get_log_level(file_config.get('level', log_level)), formatter)

        self._configure_loggers(config.get('loggers') or {}, log_level)

        self.root_logger.debug("Logging system initialized")
        self.initialized = True

    def get_logger(self, name: str) -> logging.Logger:
        """Return a logger, remembering it alongside the configured ones."""
        if name not in self.loggers:
            self.loggers[name] = logging.getLogger(name)
        return self.loggers[name]

    def _remove_handlers(self):
        for handler in list(self.root_logger.handlers):
            self.root_logger.removeHandler(handler)
            handler.close()
        self.handlers = {}

    def _add_handler(self, name: str, handler: logging.Handler, level: int, formatter: logging.Formatter):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        self.root_logger.addHandler(handler)
        self.handlers[name] = handler

    def _build_file_handler(self, file_config: Dict[str, Any]) -> RotatingFileHandler:
        file_path = file_config.get('path', 'logs/reelgrid.log')

        log_dir = os.path.dirname(file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        return RotatingFileHandler(
            file_path,
            maxBytes=file_config.get('max_bytes', 10 * 1024 * 1024),  # 10 MB
            backupCount=file_config.get('backup_count', 5),
            encoding='utf-8'
        )

    def _configure_loggers(self, loggers_config: Dict[str, Any], default_level: int):
        # Parents before children so a child's level is not overwritten
        for logger_name in sorted(loggers_config, key=lambda x: len(x.split('.'))):
            logger_config = loggers_config[logger_name] or {}
            logger = self.get_logger(logger_name)
            logger.setLevel(self._get_log_level(logger_config.get('level', default_level)))
            logger.propagate = logger_config.get('propagate', True)

            self.root_logger.debug(
                f"Configured logger '{logger_name}' with "
                f"level={logging.getLevelName(logger.level)}, propagate={logger.propagate}"
            )

    def _get_log_level(self, level_name: Union[str, int]) -> int:
        """
        Convert a log level name to its numeric value. Unknown names map to INFO.
        """
        if isinstance(level_name, int):
            return level_name

        level_map = {
            'CRITICAL': logging.CRITICAL,
            'FATAL': logging.FATAL,
            'ERROR': logging.ERROR,
            'WARNING': logging.WARNING,
            'WARN': logging.WARN,
            'INFO': logging.INFO,
            'DEBUG': logging.DEBUG,
            'NOTSET': logging.NOTSET
        }

        return level_map.get(str(level_name).upper(), logging.INFO)


# Singleton instance
log_manager = LogManager()


def initialize_logging(config: Optional[Dict[str, Any]] = None, force: bool = False) -> LogManager:
    """
    Initialize the logging system from a ``logging:`` config section, or from
    console-only defaults when none is given.
    """
    if config is None:
        config = {
            'level': 'INFO',
            'console': True,
            'loggers': DEFAULT_LOGGERS
        }

    log_manager.initialize(config, force=force)
    return log_manager

import logging
import logging.config
from pathlib import Path
from typing import Optional

import yaml

from ..config.settings import get_settings

SERVICE_LOGGER = "snippet_board"


def apply_debug_level(logger_name: str = SERVICE_LOGGER) -> None:
    """Lower the service logger and the handlers attached to it to DEBUG."""
    service_logger = logging.getLogger(logger_name)
    service_logger.setLevel(logging.DEBUG)
    for handler in service_logger.handlers:
        handler.setLevel(logging.DEBUG)


def setup_logging(config_path: Optional[Path] = None, debug: Optional[bool] = None) -> None:
    """
    Set up logging configuration from a YAML file.

    Args:
        config_path (Path): Path to the logging configuration YAML file.
            Defaults to the LOGGING_CONFIG_PATH setting.
        debug (bool): Log the service at DEBUG regardless of the file's levels.
            Defaults to the DEBUG setting.
    """
    settings = get_settings()
    if config_path is None:
        config_path = Path(settings.LOGGING_CONFIG_PATH)
    if debug is None:
        debug = settings.DEBUG

    if config_path.exists():
        try:
            with open(config_path, "rt") as f:
                log_config = yaml.safe_load(f.read())
            logging.config.dictConfig(log_config)
            logging.getLogger(__name__).info(f"Logging configured from {config_path}")
        except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
            logging.basicConfig(level=logging.INFO)
            logging.error(f"Error loading logging configuration from {config_path}: {e}. Using basicConfig.")
    else:
        logging.basicConfig(level=logging.INFO)
        logging.warning(f"Logging configuration file not found at {config_path}. Using basicConfig.")

    if debug:
        apply_debug_level()
        logging.getLogger(__name__).debug("DEBUG enabled; service logger lowered to DEBUG")

# utils.py
"""
Run-level helpers for the lightning application: logging setup and
loading `config.json`. Nothing here knows about bolts or rendering.
"""
import logging
import logging.handlers
import json
import os
from typing import Dict, Any, List

DEFAULT_LOG_FILE = 'logs/lightning.log'
DEFAULT_LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
LOG_MAX_BYTES = 1024 * 1024
LOG_BACKUP_COUNT = 5

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs: the run config; only its optional "logging" section is read
#     ("level", "format", "log_file").
#   - Side Effects: Replaces the root logger's handlers with one console
#     handler and one rotating file handler. Creates the log directory.
#     An unknown level name falls back to INFO with a warning.
#
# load_config(path: str) -> Dict[str, Any]:
#   - Outputs: the parsed top-level JSON object.
#   - Errors: FileNotFoundError and json.JSONDecodeError are logged and
#     re-raised; a non-object document raises ValueError.


def _build_handlers(log_file_path: str, formatter: logging.Formatter) -> List[logging.Handler]:
    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    handlers = [
        logging.StreamHandler(),
        logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT
        ),
    ]
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Routes the root logger to the console and to a rotating log file.
    """
    log_config = config.get('logging', {})
    level_name = str(log_config.get('level', 'INFO')).upper()
    log_file_path = log_config.get('log_file', DEFAULT_LOG_FILE)
    formatter = logging.Formatter(log_config.get('format', DEFAULT_LOG_FORMAT))

    level = logging.getLevelName(level_name)
    unknown_level = not isinstance(level, int)
    if unknown_level:
        level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    for handler in _build_handlers(log_file_path, formatter):
        root.addHandler(handler)

    if unknown_level:
        logging.warning(f"Unknown log level {level_name!r}; using INFO.")
    logging.info(f"Logging to console and {log_file_path} at {logging.getLevelName(level)}.")


def load_config(path: str) -> Dict[str, Any]:
    """Reads the JSON run configuration at `path`."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError as e:
        logging.error(f"Invalid JSON in {path}: {e}")
        raise

    if not isinstance(config, dict):
        logging.error(f"Configuration in {path} is a {type(config).__name__}, not an object.")
        raise ValueError(f"Configuration in {path} must be a JSON object.")

    logging.info(f"Configuration loaded ({', '.join(sorted(config)) or 'empty'}).")
    return config

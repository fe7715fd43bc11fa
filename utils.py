# utils.py
"""
Utility functions for the network background.

This module provides helper functions, such as logging setup and config
loading, that are used across the application but do not belong to the
simulation or the rendering.
"""
import logging
import logging.handlers
import json
import os
from typing import Dict, Any

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary containing a "logging" key with "level",
#       "format", and "log_file" sub-keys. "log_file" may be null to log
#       to the console only.
#   - Outputs: None
#   - Side Effects: Configures the root Python logger. Creates a log
#     directory if it doesn't exist. Sets up a console handler and a
#     rotating file handler.
#
# load_config(path: str) -> Dict[str, Any]:
#   - Outputs: The parsed JSON object.
#   - Side Effects: Logs and re-raises FileNotFoundError and
#     json.JSONDecodeError. Raises ValueError if the top level is not an
#     object.

def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the logging system from a configuration dictionary.

    Sets up logging to the console and, unless disabled, a rotating file.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')
    log_file_path = log_config.get('log_file', 'logs/network_background.log')

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file_path:
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        # Rotates when the log reaches 1MB, keeps 5 backup logs.
        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=1024*1024, backupCount=5
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}.")
    logging.debug(f"Log file path: {log_file_path}")

def load_config(path: str) -> Dict[str, Any]:
    """Loads a JSON configuration file."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise

    if not isinstance(config, dict):
        logging.error(f"Configuration in {path} must be a JSON object.")
        raise ValueError(f"Configuration in {path} must be a JSON object.")

    logging.info("Configuration loaded successfully.")
    return config

"""
Reusable logging, console output and settings for all parts of the project.

Functions:
    setup_logging      - Configure and return the root logger.
    set_print_logger   - Set the logger for print_and_log and print_error.
    print_and_log      - Print (rich) and log an info message.
    print_error        - Print (rich) and log an error message.
    load_settings      - Build the application settings as a Box.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any, Optional

import yaml
from box import Box
from rich import print as rich_print
from rich.markup import escape

APP_NAME = "rescat"

# Module-level variable to hold the logger for print_and_log and print_error
_print_logger: Optional[logging.Logger] = None

DEFAULT_SETTINGS: dict[str, Any] = {
    "app_name": APP_NAME,
    "loglevel": "INFO",
    "logfile": None,
    "catalog": None,
    "host": "127.0.0.1",
    "port": 8000,
}

# environment variable -> settings key
ENV_OVERRIDES = {
    "RESCAT_LOGLEVEL": "loglevel",
    "RESCAT_LOGFILE": "logfile",
    "RESCAT_CATALOG": "catalog",
    "RESCAT_HOST": "host",
    "RESCAT_PORT": "port",
}


def setup_logging(app_name: str = APP_NAME, daemon: bool = False, loglevel: int | str = logging.INFO, logfile: Optional[str] = None) -> logging.Logger:
    """
    Set up logging for the application.
    - If daemon=True, logs to syslog (Linux only), falling back to stderr.
    - Otherwise, logs to a file in ~/.<app_name>/log.txt or to a custom logfile.
    Returns the configured logger.
    """
    logger = logging.getLogger()
    logger.setLevel(loglevel)
    handler: logging.Handler
    if daemon:
        formatter = logging.Formatter(f'%(asctime)s %(levelname)s %(process)d [{app_name}] %(message)s')
        try:
            handler = logging.handlers.SysLogHandler(address='/dev/log')
        except OSError as e:
            print(f"Failed to set up SysLogHandler: {e}", file=sys.stderr)
            handler = logging.StreamHandler()
    else:
        formatter = logging.Formatter('%(asctime)s %(levelname)s %(process)d %(name)s %(message)s')
        if logfile is None:
            log_dir = os.path.expanduser(f"~/.{app_name}")
            os.makedirs(log_dir, exist_ok=True)
            logfile = os.path.join(log_dir, "log.txt")
        handler = logging.FileHandler(logfile)

    # Remove any existing handlers
    for h in logger.handlers[:]:
        logger.removeHandler(h)

    handler.setFormatter(formatter)
    logger.addHandler(handler)
    set_print_logger(logger)
    logger.debug(f"Logger initialized for {app_name}")
    return logger


def set_print_logger(logger: logging.Logger):
    """
    Set the logger to be used by print_and_log and print_error.
    Called by setup_logging.
    """
    global _print_logger
    _print_logger = logger


def print_and_log(message: str, markup: bool = False, **kwargs):
    """
    Print to console (via rich) and log as info.
    Plain messages are escaped so that names like "[x]" survive rich markup.
    """
    rich_print(message if markup else escape(message), **kwargs)
    if _print_logger is not None:
        _print_logger.info(message)


def print_error(message: str, **kwargs):
    """
    Print and log an error message (stderr and error level), using the logger set by set_print_logger.
    """
    rich_print(f'[bold red]{escape(message)}[/bold red]', file=sys.stderr, **kwargs)
    if _print_logger is not None:
        _print_logger.error(message)


def load_settings(path: str | Path | None = None, environ: Optional[dict[str, str]] = None) -> Box:
    """
    Build settings from defaults, an optional YAML file and environment variables.

    The YAML file is ``path``, else ``$RESCAT_CONFIG``, else ``~/.rescat/config.yaml``
    when it exists. Environment variables win over the file.
    """
    env = os.environ if environ is None else environ
    settings = Box(DEFAULT_SETTINGS)

    if path is None:
        path = env.get("RESCAT_CONFIG") or os.path.expanduser(f"~/.{APP_NAME}/config.yaml")
        explicit = "RESCAT_CONFIG" in env
    else:
        explicit = True
    config_file = Path(path)
    if config_file.exists():
        payload = yaml.safe_load(config_file.read_text(encoding="utf-8")) or {}
        if not isinstance(payload, dict):
            raise ValueError(f"Settings file must hold a mapping: {config_file}")
        unknown = set(payload) - set(DEFAULT_SETTINGS)
        if unknown:
            raise ValueError(f"Unknown settings in {config_file}: {', '.join(sorted(unknown))}")
        settings.merge_update(payload)
    elif explicit:
        raise FileNotFoundError(f"Settings file not found: {config_file}")

    for var, key in ENV_OVERRIDES.items():
        if env.get(var):
            settings[key] = env[var]
    settings.port = int(settings.port)
    settings.loglevel = str(settings.loglevel).upper()
    return settings

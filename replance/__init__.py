"""Replance bootstrap.

Parse the command line, load settings, setup logging, and finally run an
interactive session against the requested endpoint.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from . import session
from .cli import parse_args, show_help
from .config import get_config, Settings
from .prompt import EditorInitError
from .transport import ConnectionFailed

__version__ = "0.1.0"

def _configure_logging(settings: Settings) -> None:
    formatter = logging.Formatter(
        '%(asctime)s %(name)s %(levelname)s : %(message)s',
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    logger = logging.getLogger(__name__)
    logger.setLevel(settings.log_level)
    if logger.handlers:
        return

    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_path)
        fh.setFormatter(formatter)
        logger.addHandler(fh)

    if settings.env != "prod":
        sh = logging.StreamHandler(sys.stderr)
        sh.setFormatter(formatter)
        logger.addHandler(sh)

def run(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point for the rnc command.

    Startup failures print one sentence and return; a failed write to the
    remote propagates.
    """
    try:
        settings = get_config()
    except ValidationError as e:
        print(f"Invalid configuration: {e}")
        return

    config = parse_args(argv, json_default=settings.json_mode)
    if config is None:
        show_help()
        return

    _configure_logging(settings)
    log = logging.getLogger(__name__)
    log.info("Connecting to %s (json=%s) in %s environment", config.endpoint, config.json_mode, settings.env)

    try:
        session.start(config, settings)
    except ConnectionFailed as e:
        log.debug("%s", e)
        print("Couldn't connect")
    except EditorInitError as e:
        log.debug("%s", e)
        print("Couldn't create repl")

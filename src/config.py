"""
Config - Environment-driven setup for the process logger.

Reads settings from the environment (and a .env file, if present):
1. PROCLOG_DESTINATION: "-"/"stdout", "stderr", or a file path (default: stdout)
2. PROCLOG_RUN_PHASE: initial run phase (default: preprocess)
3. LOG_LEVEL: level for stdlib records bridged into the process logger (default: INFO)
"""

import os
import logging
from dataclasses import dataclass

from dotenv import load_dotenv

import log_utils
import run_phase
from run_phase import RunPhase
from destination import resolve_destination
from log_handler import PhaseLogHandler

logger = logging.getLogger(__name__)

DEFAULT_DESTINATION = "-"
DEFAULT_RUN_PHASE = RunPhase.PREPROCESS
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(name)s %(levelname)s: %(message)s"


@dataclass
class LogConfig:
    destination: str = DEFAULT_DESTINATION
    run_phase: RunPhase = DEFAULT_RUN_PHASE
    log_level: str = DEFAULT_LOG_LEVEL


def load_config(dotenv_path: str = None) -> LogConfig:
    """Build a LogConfig from the environment, falling back to defaults on bad values."""
    load_dotenv(dotenv_path)

    destination = os.getenv("PROCLOG_DESTINATION", DEFAULT_DESTINATION).strip() or DEFAULT_DESTINATION

    phase_name = os.getenv("PROCLOG_RUN_PHASE", DEFAULT_RUN_PHASE.value)
    try:
        phase = run_phase.parse_phase(phase_name)
    except ValueError as e:
        logger.warning(f"{e}; using {DEFAULT_RUN_PHASE}")
        phase = DEFAULT_RUN_PHASE

    # Validate LOG_LEVEL
    log_level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    if not isinstance(logging.getLevelName(log_level), int):
        logger.warning(f"Unknown LOG_LEVEL {log_level!r}; using {DEFAULT_LOG_LEVEL}")
        log_level = DEFAULT_LOG_LEVEL

    return LogConfig(destination=destination, run_phase=phase, log_level=log_level)


def setup_logging(config: LogConfig = None, process_logger: log_utils.ProcessLogger = None):
    """Apply a LogConfig: destination, initial phase, and the stdlib bridge.

    Returns the configured process logger.
    """
    if config is None:
        config = load_config()
    if process_logger is None:
        process_logger = log_utils.default_logger

    previous = process_logger.destination
    process_logger.set_destination(resolve_destination(config.destination))
    # Only closes streams the old destination opened itself
    if previous is not process_logger.destination:
        previous.close()
    run_phase.set_run_phase(config.run_phase)

    logging.basicConfig(
        level=config.log_level,
        format=LOG_FORMAT,
        handlers=[PhaseLogHandler(process_logger)],
        force=True,
    )
    logger.debug(f"Logging to {process_logger.get_destination_name()}")
    return process_logger

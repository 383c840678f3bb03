import logging
import sys

from ipnis.infrastructure.configuration import ClientConfiguration, LoggingLevel


def setup_logging(config: ClientConfiguration | None = None):
    """
    Configure the application's root logger.

    Sets the log level from `config.log_level` (WARNING when no configuration is given), uses the format "timestamp - logger name - level - message" for records, and attaches a StreamHandler that writes logs to stdout. LoggingLevel.OFF disables logging output entirely.
    """
    config = config if config is not None else ClientConfiguration.default()
    logging.basicConfig(
        level=config.log_level.logging_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout)
        ],
        force=True,
    )
    logging.disable(logging.CRITICAL if config.log_level is LoggingLevel.OFF else logging.NOTSET)

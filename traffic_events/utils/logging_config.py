"""Logging configuration for the application."""

import logging
import os
import sys

def setup_logging():
    """Configure logging for the application."""
    root_logger = logging.getLogger()

    # Configure once, even when the app module is imported repeatedly
    if getattr(root_logger, '_traffic_events_configured', False):
        return

    # Create a formatter
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Create a console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)

    # Configure the root logger
    level = os.environ.get('LOG_LEVEL', 'INFO').upper()
    root_logger.setLevel(getattr(logging, level, logging.INFO))
    root_logger.addHandler(console_handler)
    root_logger._traffic_events_configured = True

    # Set higher log levels for noisy components
    logging.getLogger('httpcore').setLevel(logging.WARNING)
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('openai').setLevel(logging.WARNING)
    logging.getLogger('aiosqlite').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)

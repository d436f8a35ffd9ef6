import os
import sys
import logging
from rich.console import Console
from rich.logging import RichHandler

# Diagnostics go to stderr so snippet output on stdout stays clean
console = Console(stderr=True)

def is_debug_mode() -> bool:
    """Check if debug mode is enabled via environment variable."""
    return os.environ.get('SNIPPETSTORE_DEBUG', '0').lower() in ('1', 'true', 'yes')

def setup_logging(level=logging.WARNING):
    """Set up logging with rich formatting."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="%H:%M:%S",
        force=True
    )

    rich_handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True
    )

    # Replace whatever basicConfig installed with our rich handler
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.addHandler(rich_handler)

def rich_log(level: str, message: str):
    """Log a message under the caller's module logger, tagged with its source location."""
    frame = sys._getframe(1)

    logger = logging.getLogger(frame.f_globals.get('__name__', 'root'))

    filename = frame.f_code.co_filename
    lineno = frame.f_lineno

    log_func = getattr(logger, level.lower())
    log_func(f"{message} ({os.path.basename(filename)}:{lineno})")

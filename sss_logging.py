"""
Logging helpers.

Library modules only create their own ``logging.getLogger(__name__)``;
handlers are installed here by the command line and the Streamlit app.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level="INFO"):
    """
    Install a single stream handler on the root logger.

    Args:
        level: Level name ("DEBUG", "INFO", ...) or numeric level

    Returns:
        The root logger
    """
    if isinstance(level, str):
        numeric = logging.getLevelName(level.upper())
        if not isinstance(numeric, int):
            raise ValueError(f"Unknown log level: {level}")
        level = numeric

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_pixel_sss", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._pixel_sss = True
    root.addHandler(handler)
    root.setLevel(level)
    return root

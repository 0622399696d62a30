import logging
import sys

_HANDLER_NAME = "taskmanager"


def setup_logging(level: str | int = logging.INFO) -> None:
    """Attach the application's stderr handler to the root logger.

    Safe to call more than once: a previously installed handler is replaced,
    handlers installed by others (pytest, uvicorn) are left alone.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    for h in list(root.handlers):
        if h.get_name() == _HANDLER_NAME:
            root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)

    # uvicorn.access duplicates what the routers already log
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

import logging


def get_logger(name: str, logger: logging.Logger | None = None):
    return logger if logger is not None else logging.getLogger(name)

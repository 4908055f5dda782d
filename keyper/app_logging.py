import logging
from pythonjsonlogger import jsonlogger


def setup_logger(level: int = logging.INFO) -> None:
    logger = logging.getLogger()
    logger.setLevel(level)
    # create_app may run more than once per process (tests, reloads).
    for handler in logger.handlers:
        if isinstance(handler.formatter, jsonlogger.JsonFormatter):
            return
    logHandler = logging.StreamHandler()
    formatter = jsonlogger.JsonFormatter('%(asctime)s %(levelname)s %(name)s %(message)s',
                                         rename_fields={'levelname': 'level', 'asctime': 'timestamp'})
    logHandler.setFormatter(formatter)
    logger.addHandler(logHandler)

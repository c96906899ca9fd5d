import logging

from goesctl.progress import ProgressReporter

# third party loggers that are too chatty at the default level
DEFAULT_SUPPRESSIONS = {"warning": ["urllib3", "requests"]}


def setup_logging(
    log_level: str,
    reporter_cls: type[ProgressReporter] | None = None,
    suppressions: dict[str, list[str]] | None = None,
) -> None:
    """Configure the root logger, using the reporter's format and handlers when given.

    Args:
        log_level (str): level name, e.g. DEBUG, INFO, WARNING.
        reporter_cls (type[ProgressReporter] | None, optional): reporter to get the config from. Defaults to None.
        suppressions (dict[str, list[str]] | None, optional): logger names to cap, by level.
            Defaults to None (`DEFAULT_SUPPRESSIONS`).

    Raises:
        ValueError: if `log_level` or one of the suppression levels is not a logging level.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Invalid log level: '{log_level}'")

    config = (reporter_cls or ProgressReporter).logging_config()
    logging.basicConfig(level=level, format=config.format, handlers=config.handlers, force=True)

    for level_name, loggers in (suppressions or DEFAULT_SUPPRESSIONS).items():
        suppress_level = logging.getLevelName(level_name.upper())
        if not isinstance(suppress_level, int):
            raise ValueError(f"Invalid suppression level: '{level_name}'")
        for logger_name in loggers:
            logging.getLogger(logger_name).setLevel(suppress_level)

"""
Structured JSON logging for asset-pipeline

Every pipeline module logs through the "asset_pipeline" logger hierarchy;
setup_logger attaches a python-json-logger handler to its root so module
loggers (logging.getLogger(__name__)) inherit the structured output.
"""
import logging
import sys
import time

from pythonjsonlogger import jsonlogger

ROOT_LOGGER_NAME = "asset_pipeline"

JSON_FIELDS = "%(timestamp)s %(level)s %(logger)s %(module)s %(function)s %(message)s"
TEXT_FIELDS = "%(asctime)s [%(levelname)s] %(name)s (%(module)s:%(funcName)s) %(message)s"


class PipelineJsonFormatter(jsonlogger.JsonFormatter):
    """
    Emits one JSON object per record with stable source-location keys
    """

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)
        if not log_record.get("timestamp"):
            log_record["timestamp"] = self.formatTime(record, self.datefmt)
        log_record.update(
            level=record.levelname,
            logger=record.name,
            module=record.module,
            function=record.funcName,
        )


def _build_formatter(format_type: str) -> logging.Formatter:
    if format_type == "json":
        return PipelineJsonFormatter(fmt=JSON_FIELDS, datefmt="%Y-%m-%dT%H:%M:%S")
    return logging.Formatter(fmt=TEXT_FIELDS, datefmt="%Y-%m-%d %H:%M:%S")


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    level: str = "INFO",
    format_type: str = "json",
) -> logging.Logger:
    """
    Configure a logger writing to stdout

    Calling this again for the same name replaces the previous handler.

    Args:
        name: Logger name
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL; unknown names fall back to INFO
        format_type: "json" for structured output, anything else for plain text

    Returns:
        The configured logger
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(_build_formatter(format_type))

    logger = logging.getLogger(name)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(log_level)
    logger.propagate = False
    return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Return a logger nested under the "asset_pipeline" hierarchy."""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


class log_operation:
    """
    Context manager timing an operation and logging its outcome

    Usage:
        with log_operation("TRANSFORM phase", logger=logger, job_id=job.id):
            ...

    Exceptions are logged with their type and message, then re-raised.
    """

    def __init__(self, operation_name: str, logger: logging.Logger | None = None, **extra_fields):
        self.operation_name = operation_name
        self.logger = logger or get_logger()
        self.extra_fields = extra_fields
        self.start_time: float | None = None
        self.duration: float | None = None

    def _fields(self, **outcome) -> dict:
        fields = {"operation": self.operation_name, **outcome}
        fields.update(self.extra_fields)
        return fields

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.info(f"Starting: {self.operation_name}", extra=self._fields())
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = time.perf_counter() - self.start_time
        elapsed = round(self.duration, 3)

        if exc_type is None:
            self.logger.info(
                f"Completed: {self.operation_name}",
                extra=self._fields(duration_seconds=elapsed, status="success"),
            )
            return False

        self.logger.error(
            f"Failed: {self.operation_name}",
            extra=self._fields(
                duration_seconds=elapsed,
                status="error",
                error_type=exc_type.__name__,
                error_message=str(exc_val),
            ),
            exc_info=(exc_type, exc_val, exc_tb),
        )
        return False

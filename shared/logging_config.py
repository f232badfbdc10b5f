"""Centralized logging configuration with correlation ID support."""

import logging
import os
import sys
from contextvars import ContextVar
from pythonjsonlogger import jsonlogger

correlation_id_var: ContextVar[str] = ContextVar('correlation_id', default='')
preview_node_var: ContextVar[str] = ContextVar('preview_node_id', default='')


class PreviewContextFilter(logging.Filter):
    """Adds correlation_id and the node under preview to all log records"""

    def filter(self, record):
        record.correlation_id = correlation_id_var.get('')
        record.preview_node_id = preview_node_var.get('')
        return True


def setup_logging(service_name: str, level: str = None) -> None:
    """Sets up JSON logging on stdout; level falls back to LOG_LEVEL, then INFO"""
    logger = logging.getLogger()
    logger.setLevel((level or os.getenv("LOG_LEVEL", "INFO")).upper())
    logger.handlers = []

    json_handler = logging.StreamHandler(sys.stdout)
    formatter = jsonlogger.JsonFormatter(
        '%(asctime)s %(name)s %(levelname)s %(correlation_id)s %(preview_node_id)s %(message)s',
        rename_fields={
            'asctime': 'timestamp',
            'name': 'logger',
            'levelname': 'level',
        }
    )

    json_handler.setFormatter(formatter)
    json_handler.addFilter(PreviewContextFilter())
    logger.addHandler(json_handler)
    logging.info(f"{service_name} logging configured", extra={"log_level": logging.getLevelName(logger.level)})


def set_correlation_id(correlation_id: str) -> None:
    correlation_id_var.set(correlation_id)


def set_preview_node(node_id: str) -> None:
    preview_node_var.set(node_id)

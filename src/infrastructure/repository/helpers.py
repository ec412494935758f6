"""Shared repository operation helpers."""

import logging

logger = logging.getLogger(__name__)


def audit_log(operation: str, resource: str, resource_id: str) -> None:
    """Log write operations for audit trail."""
    logger.info("AUDIT %s %s id=%s", operation, resource, resource_id)

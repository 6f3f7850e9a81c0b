"""
Structured operational logging for catalog record edits.
"""

import logging
from typing import Any, Dict, List, Optional


class StructuredLogger:
    """Structured logger for policy decisions, record mutations and store failures."""

    def __init__(self, name: str = "catalog"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None, level: int = logging.INFO):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        self.logger.log(level, message)

    def log_policy_decision(self, kind: str, record_id: int, actor_id: int, role: str, allowed: bool, reason: Optional[str] = None):
        """Log the outcome of an ownership policy evaluation."""
        details = {
            "kind": kind,
            "record_id": record_id,
            "actor_id": actor_id,
            "role": role
        }
        if reason:
            details["reason"] = reason

        self.log_operation("policy.decide", "allow" if allowed else "deny", details)

    def log_mutation(self, kind: str, record_id: int, actor_id: int, fields: List[str], status: str = "success"):
        """Log a persisted (or rejected) record mutation."""
        details = {
            "kind": kind,
            "record_id": record_id,
            "actor_id": actor_id,
            "fields": sorted(fields)
        }
        level = logging.INFO if status == "success" else logging.WARNING
        self.log_operation(f"{kind}.edit", status, details, level)

    def log_store_error(self, operation: str, error: Exception, details: Dict[str, Any] = None):
        """Log a record store failure."""
        log_details = {"error": str(error)[:200]}
        if details:
            log_details.update(details)

        self.log_operation(f"store.{operation}", "failed", log_details, logging.ERROR)

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)

# Global logger instance
logger = StructuredLogger()


# Payload sanitization utility
def sanitize_payload(payload: Any, reveal_sensitive: bool = False, sensitive_fields: List[str] = None) -> Any:
    """Sanitize payloads for log details."""
    if sensitive_fields is None:
        sensitive_fields = ['content', 'token', 'api_token', 'password']

    if isinstance(payload, dict):
        sanitized = {}
        for k, v in payload.items():
            if reveal_sensitive or k not in sensitive_fields:
                sanitized[k] = sanitize_payload(v, reveal_sensitive, sensitive_fields)
            else:
                sanitized[k] = "[REDACTED]"
        return sanitized
    elif isinstance(payload, str):
        # Truncate long strings
        return payload[:100] + "..." if len(payload) > 100 else payload
    elif isinstance(payload, list):
        return [sanitize_payload(item, reveal_sensitive, sensitive_fields) for item in payload]
    else:
        return payload

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class ServiceError(Exception):
    """Consistent service-layer exception with HTTP-friendly metadata."""

    status_code: int
    code: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:  # pragma: no cover - convenience for logging
        return f"{self.status_code} {self.code}: {self.message} | {self.details}"

    def to_payload(self) -> Dict[str, Any]:
        return {"error": {"code": self.code, "message": self.message, "details": self.details}}


class InputValidationError(ServiceError):
    def __init__(self, message: str, details: Dict[str, Any] | None = None):
        super().__init__(400, "VALIDATION_ERROR", message, details or {})


class NotFoundError(ServiceError):
    def __init__(self, message: str, details: Dict[str, Any] | None = None):
        super().__init__(404, "NOT_FOUND", message, details or {})


class NotificationError(ServiceError):
    def __init__(self, message: str = "Failed to send message.", details: Dict[str, Any] | None = None):
        super().__init__(502, "SEND_FAILED", message, details or {})


class UpstreamUnavailable(Exception):
    """Store or LLM call failed. Always recovered by the caller."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"{source} unavailable: {reason}")
        self.source = source
        self.reason = reason

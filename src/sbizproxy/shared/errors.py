"""
Error kinds surfaced by the proxy.

Each error knows its HTTP status and renders a JSON body with
``success: false`` and a human-readable ``error`` field.
"""

from typing import Any, Dict, List, Optional


class ProxyError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_body(self) -> Dict[str, Any]:
        return {"success": False, "error": self.message}


class ValidationError(ProxyError):
    """Missing or invalid request parameter, or unknown routing key."""

    status_code = 400

    def __init__(self, message: str, field: str, available: Optional[List[str]] = None):
        super().__init__(message)
        self.field = field
        self.available = available

    def to_body(self) -> Dict[str, Any]:
        body = super().to_body()
        body["field"] = self.field
        if self.available is not None:
            body["available"] = list(self.available)
        return body


class CredentialMissing(ProxyError):
    status_code = 400

    def __init__(self, name: Optional[str], available: List[str]):
        super().__init__(f"Unknown apiName: {name}")
        self.name = name
        self.available = available

    def to_body(self) -> Dict[str, Any]:
        body = super().to_body()
        body["available"] = list(self.available)
        return body


class ConfigurationError(ProxyError):
    """A shared upstream key is not configured for this process."""


class UpstreamTransportError(ProxyError):
    """Connection refused, DNS failure or timeout."""


class UpstreamHTTPError(ProxyError):
    def __init__(self, status: int, detail: Any):
        super().__init__(f"Upstream error: {status}")
        self.status_code = status
        self.detail = detail

    def to_body(self) -> Dict[str, Any]:
        body = super().to_body()
        body["status"] = self.status_code
        body["detail"] = self.detail
        return body

"""
Error taxonomy for the transaction ledger.

ValidationError and PersistenceError are recovered per request by the
exception handlers registered in ``app.main``; StartupError is fatal.
"""
from typing import Any, Dict, Iterable


class TransactionServiceError(Exception):
    """Base class for all service errors"""


class ValidationError(TransactionServiceError):
    """Inbound transaction payload is malformed or incomplete"""

    @classmethod
    def from_errors(cls, errors: Iterable[Dict[str, Any]]) -> "ValidationError":
        """Build a single message from pydantic/FastAPI error entries."""
        messages = []
        for error in errors:
            msg = error.get("msg", "invalid value")
            if error.get("type") == "json_invalid":
                # loc holds a character offset, not a field
                messages.append(f"Request body: {msg}")
                continue
            loc = [str(part) for part in error.get("loc", ()) if part != "body"]
            if loc:
                messages.append(f"Field '{'.'.join(loc)}': {msg}")
            else:
                messages.append(f"Request body: {msg}")
        return cls("; ".join(messages) or "Invalid request body")


class PersistenceError(TransactionServiceError):
    """Schema, insert, query or row mapping failure"""


class StartupError(TransactionServiceError):
    """Service cannot start: missing configuration or unreachable database"""

import json
import traceback

class ColdNewsError(Exception):
    """Base exception for coldnews"""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

class ValidationError(ColdNewsError):
    """Input validation errors"""
    pass

class ProviderError(ColdNewsError):
    """External provider errors (transport, status, payload shape)"""
    pass

class UnknownError(ColdNewsError):
    """Unexpected errors"""
    pass

def format_error(e: Exception) -> str:
    """Format exception as the JSON error envelope."""

    if not isinstance(e, ColdNewsError):
        e = UnknownError(str(e), {
            "traceback": traceback.format_exc().splitlines()
        })

    error_type = e.__class__.__name__
    message = e.message
    details = e.details

    payload = {
        "ok": False,
        "error": {
            "type": error_type,
            "message": message,
            "details": details
        },
        "meta": {
            "version": 1
        }
    }

    return json.dumps(payload, indent=2, ensure_ascii=False)

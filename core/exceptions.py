"""Errors raised by the GHL client and the account registry."""


class GHLApiError(Exception):
    """Non-2xx response from the GHL REST API."""

    def __init__(self, status_code: int, reason: str, body: str):
        self.status_code = status_code
        self.reason = reason
        self.body = body
        super().__init__(f"GHL API Error {status_code}: {reason} - {body}")


class AccountNotFoundError(LookupError):
    """No registered sub-account matches the requested location id or name."""

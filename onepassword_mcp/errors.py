"""Custom exception classes for the 1Password MCP server."""


class OnePasswordMcpError(Exception):
    """Base class for all custom exceptions in this package."""

    pass


class InvalidArgument(OnePasswordMcpError, ValueError):
    """Raised when an argument falls outside its declared range."""

    pass


class MissingTokenError(OnePasswordMcpError):
    """Raised when no service account token is configured."""

    def __init__(self) -> None:
        super().__init__(
            "Service account token is required. Provide it via --service-account-token or OP_SERVICE_ACCOUNT_TOKEN."
        )


class MissingCapabilityError(OnePasswordMcpError):
    """
    Raised when the installed onepassword SDK client does not expose a
    method this server needs.
    """

    def __init__(self, capability: str):
        self.capability = capability
        super().__init__(f"Your onepassword-sdk version does not support {capability}.")


class FieldNotFoundError(OnePasswordMcpError):
    """Raised when an item has no field matching the requested key."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Field '{key}' not found on item.")

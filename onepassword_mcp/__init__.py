"""Expose a 1Password account to AI agents over MCP."""
from .settings import SERVER_NAME, SERVER_VERSION

__version__ = SERVER_VERSION
__all__ = ["SERVER_NAME", "SERVER_VERSION", "__version__"]

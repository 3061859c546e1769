import json
import logging
import re
from typing import Any, Dict, List

from .account import AccountProvider
from .settings import Settings

logger = logging.getLogger("onepassword_mcp.response")

CONFIG_URI = "1password://config"
VAULTS_URI = "1password://vaults"
VAULT_ITEMS_TEMPLATE = "1password://vaults/{vaultId}/items"
_VAULT_ITEMS_RE = re.compile(r"^1password://vaults/([^/]+)/items$")

RESOURCES: List[Dict[str, Any]] = [
    {
        "uri": CONFIG_URI,
        "name": "server-config",
        "description": "Current 1Password MCP server configuration (non-secret values only).",
        "mimeType": "application/json",
    },
    {
        "uri": VAULTS_URI,
        "name": "vault-list",
        "description": "List of all 1Password vaults accessible to the service account.",
        "mimeType": "application/json",
    },
]

RESOURCE_TEMPLATES: List[Dict[str, Any]] = [
    {
        "uriTemplate": VAULT_ITEMS_TEMPLATE,
        "name": "vault-items",
        "description": "List of items within a specific 1Password vault (metadata only, no secrets).",
        "mimeType": "application/json",
    },
]


def _contents(uri: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    return {"contents": [{"uri": uri, "mimeType": "application/json", "text": json.dumps(payload, indent=2)}]}


async def read_resource(uri: str, provider: AccountProvider, settings: Settings) -> Dict[str, Any]:
    """Read one resource. Unknown URIs raise ValueError; backend failures become ``{"error": ...}``."""
    if not isinstance(uri, str):
        raise ValueError("resource uri must be a string")
    if uri == CONFIG_URI:
        return _contents(uri, settings.public_view())
    if uri == VAULTS_URI:
        try:
            account = await provider.get()
            vaults = await account.list_vaults()
            return _contents(uri, {"vaults": [v.model_dump(by_alias=True) for v in vaults]})
        except Exception as exc:
            logger.error("resource_failed", extra={"extra": {"uri": uri, "error": str(exc)}})
            return _contents(uri, {"error": str(exc)})
    m = _VAULT_ITEMS_RE.match(uri)
    if m:
        vault_id = m.group(1)
        logger.debug("resource_read", extra={"extra": {"uri": uri, "vault_id": vault_id}})
        try:
            account = await provider.get()
            items = await account.list_items(vault_id)
            return _contents(uri, {
                "vaultId": vault_id,
                "items": [i.model_dump(by_alias=True) for i in items],
                "count": len(items),
            })
        except Exception as exc:
            logger.error("resource_failed", extra={"extra": {"uri": uri, "error": str(exc)}})
            return _contents(uri, {"error": str(exc)})
    raise ValueError(f"unsupported resource URI: {uri}")

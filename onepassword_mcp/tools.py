"""MCP tools: vault/item operations over the account adapter, plus password generation."""
import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Type

from pydantic import BaseModel, ValidationError

from .account import AccountProvider
from .models import (
    ItemLookupArgs,
    ItemRefArgs,
    MemorableArgs,
    PasswordCreateArgs,
    PasswordGenerateArgs,
    PasswordReadArgs,
    PasswordUpdateArgs,
    Principal,
)
from .passwords import build_charset, generate_memorable_password, generate_password

logger = logging.getLogger("onepassword_mcp.response")


class _NoArgs(BaseModel):
    model_config = {"extra": "forbid"}


def json_result(data: Any) -> Dict[str, Any]:
    return {"content": [{"type": "text", "text": json.dumps(data, indent=2)}]}


def error_result(error: BaseException) -> Dict[str, Any]:
    if isinstance(error, ValidationError):
        message = "; ".join(
            f"{'.'.join(str(p) for p in e['loc']) or 'arguments'}: {e['msg']}" for e in error.errors()
        )
    else:
        message = str(error)
    return {"content": [{"type": "text", "text": f"Error: {message}"}], "isError": True}


async def vault_list(provider: AccountProvider, args: _NoArgs) -> Dict[str, Any]:
    account = await provider.get()
    vaults = await account.list_vaults()
    return {"vaults": [v.model_dump(by_alias=True) for v in vaults]}


async def item_lookup(provider: AccountProvider, args: ItemLookupArgs) -> Dict[str, Any]:
    account = await provider.get()
    items = await account.list_items(args.vault_id)
    if args.query:
        q = args.query.lower()
        items = [i for i in items if i.title and q in i.title.lower()]
    if args.limit is not None:
        items = items[: args.limit]
    return {"items": [i.model_dump(by_alias=True) for i in items], "count": len(items)}


async def item_delete(provider: AccountProvider, args: ItemRefArgs) -> Dict[str, Any]:
    account = await provider.get()
    await account.delete_item(args.vault_id, args.item_id)
    return {"deleted": True, "vaultId": args.vault_id, "itemId": args.item_id}


async def password_create(provider: AccountProvider, args: PasswordCreateArgs) -> Dict[str, Any]:
    account = await provider.get()
    item = await account.create_password_item(
        vault_id=args.vault_id,
        title=args.title,
        password=args.password,
        username=args.username,
        category=args.category,
        tags=args.tags,
        notes=args.notes,
        url=args.url,
    )
    category = getattr(item, "category", None)
    out = {
        "id": item.id,
        "title": item.title,
        "vaultId": getattr(item, "vault_id", None) or args.vault_id,
        "category": getattr(category, "value", category),
    }
    if args.return_secret:
        out["password"] = args.password
    return out


async def password_read(provider: AccountProvider, args: PasswordReadArgs) -> Dict[str, Any]:
    account = await provider.get()
    if args.secret_reference:
        value = await account.resolve(args.secret_reference)
        if not args.reveal:
            return {"resolved": True}
        return {"value": value}
    item, field = await account.read_field(args.vault_id, args.item_id, args.field)
    if not args.reveal:
        return {
            "id": item.id,
            "title": item.title,
            "field": field.id or field.title,
            "fieldType": field.field_type,
        }
    if not isinstance(field.value, str):
        raise ValueError("Field value is not a string and cannot be returned.")
    return {"value": field.value}


async def password_update(provider: AccountProvider, args: PasswordUpdateArgs) -> Dict[str, Any]:
    account = await provider.get()
    updated = await account.update_field(args.vault_id, args.item_id, args.field, args.new_password)
    out = {
        "id": updated.id,
        "title": updated.title,
        "vaultId": getattr(updated, "vault_id", None) or args.vault_id,
    }
    if args.return_secret:
        out["password"] = args.new_password
    return out


async def password_generate(provider: AccountProvider, args: PasswordGenerateArgs) -> Dict[str, Any]:
    charset = build_charset(
        include_uppercase=args.include_uppercase,
        include_numbers=args.include_numbers,
        include_symbols=args.include_symbols,
    )
    return {"password": generate_password(args.length, charset)}


async def password_generate_memorable(provider: AccountProvider, args: MemorableArgs) -> Dict[str, Any]:
    return {
        "password": generate_memorable_password(
            word_count=args.word_count,
            separator=args.separator,
            include_number=args.include_number,
            include_symbol=args.include_symbol,
            capitalize=args.capitalize,
        )
    }


@dataclass(frozen=True)
class Tool:
    description: str
    args_model: Type[BaseModel]
    handler: Callable[[AccountProvider, Any], Awaitable[Dict[str, Any]]]
    scope: Optional[str] = None
    # argument names safe to log verbatim
    log_fields: tuple = ()

    def schema(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "inputSchema": self.args_model.model_json_schema(by_alias=True),
        }


TOOLS: Dict[str, Tool] = {
    "vault_list": Tool(
        "List all 1Password vaults accessible to the service account. Returns vault IDs, names, descriptions, and types.",
        _NoArgs, vault_list, scope="list",
    ),
    "item_lookup": Tool(
        "Search for items within a 1Password vault by title substring. Returns item IDs, titles, categories, and vault IDs.",
        ItemLookupArgs, item_lookup, scope="list", log_fields=("vault_id", "limit"),
    ),
    "item_delete": Tool(
        "Permanently delete an item from a 1Password vault. This action cannot be undone.",
        ItemRefArgs, item_delete, scope="delete", log_fields=("vault_id", "item_id"),
    ),
    "password_create": Tool(
        "Create a new password/login item in a 1Password vault with optional username, URL, tags, and notes.",
        PasswordCreateArgs, password_create, scope="write", log_fields=("vault_id", "title", "category"),
    ),
    "password_read": Tool(
        "Retrieve a secret from 1Password using either a secret reference (op://vault/item/field) or vault ID + item ID. "
        "Supports field selection and optional value reveal.",
        PasswordReadArgs, password_read, scope="read", log_fields=("vault_id", "item_id", "field", "reveal"),
    ),
    "password_update": Tool(
        "Update (rotate) a password or concealed field on an existing 1Password item. "
        "If the target field does not exist, it will be created.",
        PasswordUpdateArgs, password_update, scope="write", log_fields=("vault_id", "item_id", "field"),
    ),
    "password_generate": Tool(
        "Generate a cryptographically secure random password with configurable length and character types. "
        "Uses rejection sampling for unbiased randomness.",
        PasswordGenerateArgs, password_generate,
        log_fields=("length", "include_symbols", "include_numbers", "include_uppercase"),
    ),
    "password_generate_memorable": Tool(
        "Generate a memorable passphrase from random dictionary words with optional number and symbol suffixes. "
        "Uses a ~500-word curated list for good entropy.",
        MemorableArgs, password_generate_memorable,
        log_fields=("word_count", "separator", "include_number", "include_symbol", "capitalize"),
    ),
}


async def call_tool(name: str, arguments: Dict[str, Any], p: Principal, provider: AccountProvider) -> Dict[str, Any]:
    """Run one tool and wrap the outcome in the MCP result envelope.

    Unknown tool names and missing scopes raise; everything else becomes an
    ``isError`` result.
    """
    tool = TOOLS.get(name) if isinstance(name, str) else None
    if tool is None:
        raise KeyError(name)
    if tool.scope and tool.scope not in p.scopes:
        raise PermissionError(f"missing scopes: ['{tool.scope}']")
    try:
        args = tool.args_model.model_validate(arguments or {})
        logger.debug(
            "tool_call",
            extra={"extra": {"tool": name, "subject": p.subject, **{k: getattr(args, k) for k in tool.log_fields}}},
        )
        return json_result(await tool.handler(provider, args))
    except Exception as exc:
        result = error_result(exc)
        # the formatted message never echoes argument values
        logger.error("tool_failed", extra={"extra": {"tool": name, "subject": p.subject, "error": result["content"][0]["text"]}})
        return result

"""
1Password account adapter.

Wraps the official ``onepassword-sdk`` client behind a fixed method set.
Which SDK methods exist is decided once, when the adapter is built, so the
tool handlers never probe the client themselves.
"""
import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Tuple

from .errors import FieldNotFoundError, MissingCapabilityError, MissingTokenError
from .models import FieldMatch, FieldRecord, Found, ItemSummary, NotFound, VaultSummary
from .settings import Settings, settings as default_settings

logger = logging.getLogger("onepassword_mcp.account")

# capability -> (SDK namespace, acceptable method names in order of preference)
REQUIRED_CAPABILITIES: Dict[str, Tuple[str, Tuple[str, ...]]] = {
    "listing vaults": ("vaults", ("list", "list_all")),
    "listing items": ("items", ("list", "list_all")),
    "getting items": ("items", ("get",)),
    "creating items": ("items", ("create",)),
    "updating items": ("items", ("put",)),
    "deleting items": ("items", ("delete",)),
    "resolving secrets": ("secrets", ("resolve",)),
}


def find_field(fields: Iterable[Any], key: str) -> FieldMatch:
    """Return the first field whose id, title or label equals ``key`` (case-insensitive)."""
    wanted = key.lower()
    for index, raw in enumerate(fields):
        record = FieldRecord.from_sdk(raw)
        for candidate in (record.id, record.title, record.label):
            if isinstance(candidate, str) and candidate.lower() == wanted:
                return Found(index=index, field=record)
    return NotFound(key=wanted)


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


async def _collect(result: Any) -> List[Any]:
    # Newer SDKs return lists from coroutines; older list_all returns an async iterator.
    if inspect.isawaitable(result):
        result = await result
    if result is None:
        return []
    if hasattr(result, "__aiter__"):
        return [entry async for entry in result]
    return list(result)


def _concealed_field(key: str, value: str) -> Any:
    from onepassword.types import ItemField, ItemFieldType

    return ItemField(id=key, title=key, field_type=ItemFieldType.CONCEALED, value=value)


def _create_params(
    vault_id: str,
    title: str,
    password: str,
    username: Optional[str],
    category: str,
    tags: Optional[List[str]],
    notes: Optional[str],
    url: Optional[str],
) -> Any:
    from onepassword.types import (
        AutofillBehavior,
        ItemCategory,
        ItemCreateParams,
        ItemField,
        ItemFieldType,
        Website,
    )

    fields = []
    if username:
        fields.append(ItemField(id="username", title="username", field_type=ItemFieldType.TEXT, value=username))
    fields.append(ItemField(id="password", title="password", field_type=ItemFieldType.CONCEALED, value=password))
    websites = None
    if url:
        websites = [Website(url=url, label="website", autofill_behavior=AutofillBehavior.ANYWHEREONWEBSITE)]
    return ItemCreateParams(
        title=title,
        category=ItemCategory.PASSWORD if category == "Password" else ItemCategory.LOGIN,
        vault_id=vault_id,
        fields=fields,
        tags=tags,
        notes=notes,
        websites=websites,
    )


class OnePasswordAccount:
    """Typed facade over an authenticated SDK client."""

    def __init__(self, client: Any):
        self._client = client
        self._methods: Dict[str, Callable[..., Any]] = {}
        for capability, (namespace, names) in REQUIRED_CAPABILITIES.items():
            target = getattr(client, namespace, None)
            method = None
            for name in names:
                method = getattr(target, name, None)
                if callable(method):
                    break
                method = None
            if method is None:
                raise MissingCapabilityError(capability)
            self._methods[capability] = method

    async def list_vaults(self) -> List[VaultSummary]:
        vaults = await _collect(self._methods["listing vaults"]())
        return [
            VaultSummary(
                id=v.id,
                name=getattr(v, "name", None) or getattr(v, "title", None),
                description=getattr(v, "description", None),
                type=_enum_value(getattr(v, "vault_type", None) or getattr(v, "type", None)),
            )
            for v in vaults
        ]

    async def list_items(self, vault_id: str) -> List[ItemSummary]:
        items = await _collect(self._methods["listing items"](vault_id))
        return [
            ItemSummary(
                id=i.id,
                title=getattr(i, "title", None),
                category=_enum_value(getattr(i, "category", None)),
                vault_id=getattr(i, "vault_id", None) or vault_id,
            )
            for i in items
        ]

    async def get_item(self, vault_id: str, item_id: str) -> Any:
        return await self._methods["getting items"](vault_id, item_id)

    async def read_field(self, vault_id: str, item_id: str, key: str) -> Tuple[Any, FieldRecord]:
        item = await self.get_item(vault_id, item_id)
        match = find_field(getattr(item, "fields", None) or [], key)
        if isinstance(match, NotFound):
            raise FieldNotFoundError(match.key)
        return item, match.field

    async def create_password_item(
        self,
        vault_id: str,
        title: str,
        password: str,
        username: Optional[str] = None,
        category: str = "Login",
        tags: Optional[List[str]] = None,
        notes: Optional[str] = None,
        url: Optional[str] = None,
    ) -> Any:
        params = _create_params(vault_id, title, password, username, category, tags, notes, url)
        return await self._methods["creating items"](params)

    async def update_field(self, vault_id: str, item_id: str, key: str, value: str) -> Any:
        """Set ``key`` on the item, appending a concealed field when no field matches."""
        item = await self.get_item(vault_id, item_id)
        fields = list(getattr(item, "fields", None) or [])
        match = find_field(fields, key)
        if isinstance(match, Found):
            target = fields[match.index]
            if isinstance(target, dict):
                target["value"] = value
            else:
                target.value = value
        else:
            fields.append(_concealed_field(match.key, value))
        item.fields = fields
        return await self._methods["updating items"](item)

    async def delete_item(self, vault_id: str, item_id: str) -> None:
        await self._methods["deleting items"](vault_id, item_id)

    async def resolve(self, reference: str) -> str:
        return await self._methods["resolving secrets"](reference)


async def authenticate(token: str, integration_name: str, integration_version: str) -> Any:
    from onepassword.client import Client

    return await Client.authenticate(
        auth=token,
        integration_name=integration_name,
        integration_version=integration_version,
    )


ClientFactory = Callable[[str, str, str], Awaitable[Any]]


class AccountProvider:
    """Authenticates lazily, once, and hands out the shared account adapter."""

    def __init__(self, settings: Optional[Settings] = None, factory: Optional[ClientFactory] = None):
        self.settings = settings or default_settings
        self._factory = factory or authenticate
        self._account: Optional[OnePasswordAccount] = None
        self._lock = asyncio.Lock()

    async def get(self) -> OnePasswordAccount:
        if self._account is not None:
            return self._account
        async with self._lock:
            if self._account is None:
                token = self.settings.OP_SERVICE_ACCOUNT_TOKEN
                if not token:
                    logger.error("missing_token")
                    raise MissingTokenError()
                logger.debug(
                    "client_init",
                    extra={"extra": {"integration_name": self.settings.OP_INTEGRATION_NAME}},
                )
                client = await self._factory(
                    token,
                    self.settings.OP_INTEGRATION_NAME,
                    self.settings.OP_INTEGRATION_VERSION,
                )
                self._account = OnePasswordAccount(client)
        return self._account

    def reset(self) -> None:
        """Drop the cached account so the next call re-authenticates (test hook)."""
        self._account = None

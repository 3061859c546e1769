from typing import Annotated, Any, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

ALL_SCOPES = ["read", "write", "delete", "list"]


class Principal(BaseModel):
    subject: str
    scopes: List[str] = Field(default_factory=list)


class _CamelModel(BaseModel):
    """Accepts and emits the camelCase names MCP clients use."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


# Summaries returned to clients

class VaultSummary(_CamelModel):
    id: str
    name: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None


class ItemSummary(_CamelModel):
    id: str
    title: Optional[str] = None
    category: Optional[str] = None
    vault_id: str


# Item fields

class FieldRecord(BaseModel):
    """The subset of an SDK item field this server reads."""

    id: Optional[str] = None
    title: Optional[str] = None
    label: Optional[str] = None
    field_type: Optional[str] = None
    value: Any = None

    @classmethod
    def from_sdk(cls, field: Any) -> "FieldRecord":
        if isinstance(field, dict):
            get = field.get
        else:
            def get(name, default=None):
                return getattr(field, name, default)
        field_type = get("field_type") or get("fieldType") or get("type")
        return cls(
            id=get("id"),
            title=get("title"),
            label=get("label"),
            field_type=str(getattr(field_type, "value", field_type)) if field_type is not None else None,
            value=get("value"),
        )


class Found(BaseModel):
    kind: Literal["found"] = "found"
    index: int
    field: FieldRecord


class NotFound(BaseModel):
    kind: Literal["not_found"] = "not_found"
    key: str


FieldMatch = Union[Found, NotFound]


# Tool arguments

class PasswordGenerateArgs(_CamelModel):
    length: int = Field(20, ge=8, le=128)
    include_symbols: bool = True
    include_numbers: bool = True
    include_uppercase: bool = True


class MemorableArgs(_CamelModel):
    word_count: int = Field(3, ge=2, le=10)
    separator: str = Field("-", max_length=5)
    include_number: bool = True
    include_symbol: bool = True
    capitalize: bool = True


class VaultScopedArgs(_CamelModel):
    vault_id: str = Field(..., min_length=1)


class ItemLookupArgs(VaultScopedArgs):
    query: Optional[str] = None
    limit: Optional[int] = Field(None, gt=0, le=200)


class ItemRefArgs(VaultScopedArgs):
    item_id: str = Field(..., min_length=1)


class PasswordCreateArgs(VaultScopedArgs):
    title: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    username: Optional[str] = None
    category: Literal["Login", "Password"] = "Login"
    tags: Optional[List[Annotated[str, Field(min_length=1)]]] = None
    notes: Optional[str] = None
    url: Optional[str] = Field(None, pattern=r"^[a-zA-Z][a-zA-Z0-9+.-]*://\S+$")
    return_secret: bool = False


class PasswordReadArgs(_CamelModel):
    secret_reference: Optional[str] = None
    vault_id: Optional[str] = None
    item_id: Optional[str] = None
    field: str = "password"
    reveal: bool = True

    @model_validator(mode="after")
    def ensure_target(self) -> "PasswordReadArgs":
        if not self.secret_reference and not (self.vault_id and self.item_id):
            raise ValueError("Provide secretReference or both vaultId and itemId.")
        return self


class PasswordUpdateArgs(ItemRefArgs):
    new_password: str = Field(..., min_length=1)
    field: str = "password"
    return_secret: bool = False

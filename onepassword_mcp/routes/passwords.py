import logging
from fastapi import Depends, Request
from .utils import Router as APIRouter
from ..models import MemorableArgs, PasswordGenerateArgs, Principal
from ..passwords import build_charset, generate_memorable_password, generate_password
from ..security import get_principal, require_scopes

router = APIRouter(tags=["passwords"])
_log = logging.getLogger("onepassword_mcp.response")


@router.post("/passwords/generate")
async def generate(body: PasswordGenerateArgs, p: Principal = Depends(get_principal)):
    charset = build_charset(
        include_uppercase=body.include_uppercase,
        include_numbers=body.include_numbers,
        include_symbols=body.include_symbols,
    )
    password = generate_password(body.length, charset)
    _log.info("password_generate", extra={"extra": {"subject": p.subject, "length": body.length}})
    return {"password": password}


@router.post("/passwords/memorable")
async def memorable(body: MemorableArgs, p: Principal = Depends(get_principal)):
    password = generate_memorable_password(
        word_count=body.word_count,
        separator=body.separator,
        include_number=body.include_number,
        include_symbol=body.include_symbol,
        capitalize=body.capitalize,
    )
    _log.info("password_generate_memorable", extra={"extra": {"subject": p.subject, "word_count": body.word_count}})
    return {"password": password}


@router.get("/vaults")
async def list_vaults(request: Request, p: Principal = Depends(require_scopes(["list"]))):
    account = await request.app.state.provider.get()
    vaults = await account.list_vaults()
    _log.info("vault_list", extra={"extra": {"subject": p.subject, "count": len(vaults)}})
    return {"vaults": [v.model_dump(by_alias=True) for v in vaults]}


@router.get("/vaults/{vault_id}/items")
async def list_items(vault_id: str, request: Request, p: Principal = Depends(require_scopes(["list"]))):
    account = await request.app.state.provider.get()
    items = await account.list_items(vault_id)
    _log.info("item_list", extra={"extra": {"subject": p.subject, "vault_id": vault_id, "count": len(items)}})
    return {"vaultId": vault_id, "items": [i.model_dump(by_alias=True) for i in items], "count": len(items)}

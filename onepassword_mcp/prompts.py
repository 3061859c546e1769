from typing import Any, Dict, List, Optional


def _arg(name: str, description: str) -> Dict[str, Any]:
    return {"name": name, "description": description, "required": False}


PROMPTS: List[Dict[str, Any]] = [
    {
        "name": "generate-secure-password",
        "description": "Guide through generating a secure password with specific requirements",
        "arguments": [
            _arg("purpose", "What the password is for (e.g., 'database', 'API key', 'user account')."),
            _arg("style", "Password style: 'random' for maximum entropy or 'memorable' for a passphrase. Defaults to 'random'."),
        ],
    },
    {
        "name": "credential-rotation",
        "description": "Step-by-step workflow for rotating a credential stored in 1Password",
        "arguments": [
            _arg("vaultId", "Vault ID containing the credential to rotate."),
            _arg("itemId", "Item ID of the credential to rotate."),
        ],
    },
    {
        "name": "vault-audit",
        "description": "Audit the contents of a 1Password vault, listing all items with categories and metadata",
        "arguments": [_arg("vaultId", "Vault ID to audit. If omitted, all vaults will be listed first.")],
    },
    {
        "name": "secret-reference-helper",
        "description": "Help construct an op://vault/item/field secret reference from vault and item names",
        "arguments": [
            _arg("vaultName", "Name of the vault (partial match is OK)."),
            _arg("itemName", "Name of the item to reference (partial match is OK)."),
        ],
    },
]

_DESCRIPTIONS = {p["name"]: p["description"] for p in PROMPTS}


def _numbered(steps: List[str]) -> List[str]:
    return [f"{i}. {step}" for i, step in enumerate(steps, start=1)]


def _generate_secure_password(purpose: Optional[str] = None, style: Optional[str] = None) -> List[str]:
    memorable = style == "memorable"
    if style not in (None, "random", "memorable"):
        raise ValueError("style must be 'random' or 'memorable'")
    purpose_text = f' for "{purpose}"' if purpose else ""
    return [
        f"I need to generate a secure password{purpose_text}.",
        "",
        f"Please help me create a {'memorable passphrase' if memorable else 'strong random password'} with these steps:",
        "",
        f"1. Use the `password_generate{'_memorable' if memorable else ''}` tool to create the password.",
        "   - Use at least 4 words for good entropy." if memorable
        else "   - Use at least 20 characters with uppercase, numbers, and symbols.",
        "2. If I want to store it, use `vault_list` to show available vaults.",
        "3. Then use `password_create` to save it securely in 1Password.",
        "4. Provide the `op://` secret reference so I can use it in my configuration.",
        "",
        "Important: Do NOT display the raw password in your response unless I explicitly ask. "
        "Instead, confirm it was generated and stored, and provide the secret reference.",
    ]


def _credential_rotation(vaultId: Optional[str] = None, itemId: Optional[str] = None) -> List[str]:
    has_target = bool(vaultId and itemId)
    steps = [] if has_target else ["Use `vault_list` to show my vaults, then `item_lookup` to find the item."]
    steps += [
        "Use `password_read` to verify access to the current credential (with `reveal: false` for safety).",
        "Use `password_generate` to create a new strong password.",
        "Use `password_update` to save the new password to 1Password.",
        "Confirm the rotation was successful and provide the updated `op://` reference.",
    ]
    return [
        "I need to rotate a credential in 1Password.",
        "",
        f"Target: vault `{vaultId}`, item `{itemId}`." if has_target
        else "I haven't specified which credential yet. Please help me find it.",
        "",
        "Follow this rotation workflow:",
        "",
        *_numbered(steps),
        "",
        "Important: After rotation, remind me to update the password wherever it's used (services, configs, etc.).",
    ]


def _vault_audit(vaultId: Optional[str] = None) -> List[str]:
    steps = [] if vaultId else ["Use `vault_list` to show all accessible vaults and ask which one to audit."]
    steps += [
        "Use `item_lookup` to list all items in the vault (no query filter, high limit).",
        "Summarize the findings:\n"
        "   - Total number of items\n"
        "   - Breakdown by category (Login, Password, etc.)\n"
        "   - List of all item titles (but NOT passwords)",
        "Flag any concerns:\n"
        "   - Items without a category\n"
        "   - Duplicate-looking titles\n"
        "   - Any items that look like they could be consolidated",
    ]
    target = f" (vault ID: `{vaultId}`)" if vaultId else ""
    return [
        f"I want to audit my 1Password vault{target}.",
        "",
        "Please perform the following:",
        "",
        *_numbered(steps),
        "",
        "Do NOT reveal any secret values during the audit.",
    ]


def _secret_reference_helper(vaultName: Optional[str] = None, itemName: Optional[str] = None) -> List[str]:
    vault_match = f' matching "{vaultName}"' if vaultName else ""
    item_query = f' and query "{itemName}"' if itemName else ""
    return [
        "I need to construct a 1Password secret reference (`op://vault/item/field`).",
        "",
        f'Vault name: "{vaultName}"' if vaultName else "I'm not sure which vault to use.",
        f'Item name: "{itemName}"' if itemName else "I'm not sure which item to reference.",
        "",
        "Steps:",
        f"1. Use `vault_list` to find the vault{vault_match}.",
        f"2. Use `item_lookup` with the vault ID{item_query} to find the item.",
        "3. Use `password_read` with `reveal: false` to inspect available fields.",
        "4. Construct the `op://vault-name/item-name/field` reference and present it.",
        "",
        "The final reference should be ready to paste into my configuration files.",
    ]


_BUILDERS = {
    "generate-secure-password": _generate_secure_password,
    "credential-rotation": _credential_rotation,
    "vault-audit": _vault_audit,
    "secret-reference-helper": _secret_reference_helper,
}


def get_prompt(name: str, arguments: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    builder = _BUILDERS.get(name)
    if builder is None:
        raise KeyError(name)
    try:
        lines = builder(**(arguments or {}))
    except TypeError as exc:
        raise ValueError(f"invalid arguments for prompt {name}: {exc}") from exc
    return {
        "description": _DESCRIPTIONS[name],
        "messages": [{"role": "user", "content": {"type": "text", "text": "\n".join(lines)}}],
    }

"""In-memory stand-in shaped like ``onepassword.client.Client`` for tests."""
import types


def _acall(value=None, *, raises=None, record=None):
    async def fn(*args):
        if record is not None:
            record.append(args)
        if raises is not None:
            raise raises
        return value(*args) if callable(value) else value
    return fn


def vault(id, title, description=None):
    return types.SimpleNamespace(id=id, title=title, description=description, vault_type="USER_CREATED")


def item_overview(id, title, vault_id="v1", category="Login"):
    return types.SimpleNamespace(id=id, title=title, vault_id=vault_id, category=category)


def full_item(fields, id="i1", title="GitHub", vault_id="v1"):
    return types.SimpleNamespace(id=id, title=title, vault_id=vault_id, category="Login", fields=fields)


def field(id, title, value, field_type="Concealed", label=None):
    return types.SimpleNamespace(id=id, title=title, value=value, field_type=field_type, label=label)


def make_fake_sdk(vaults=None, items=None, item=None, resolved="s3cret", list_error=None):
    store = {"created": [], "put": [], "deleted": [], "resolved": []}

    async def create(params):
        store["created"].append(params)
        return types.SimpleNamespace(id="new-item", title=params.title, vault_id=params.vault_id, category=params.category)

    async def put(updated):
        store["put"].append(updated)
        return updated

    def _items_in(vault_id):
        return [i for i in (items or []) if i.vault_id == vault_id]

    client = types.SimpleNamespace(
        vaults=types.SimpleNamespace(list=_acall(vaults or [], raises=list_error)),
        items=types.SimpleNamespace(
            list=_acall(_items_in, raises=list_error),
            get=_acall(lambda vault_id, item_id: item),
            create=create,
            put=put,
            delete=_acall(None, record=store["deleted"]),
        ),
        secrets=types.SimpleNamespace(resolve=_acall(lambda ref: resolved, record=store["resolved"])),
    )
    client.store = store
    return client


def default_sdk(**overrides):
    kwargs = dict(
        vaults=[vault("v1", "Personal", "My vault"), vault("v2", "Shared")],
        items=[
            item_overview("i1", "GitHub Token"),
            item_overview("i2", "AWS Key", category="Password"),
            item_overview("i3", "GitHub SSH"),
            item_overview("i9", "Other vault item", vault_id="v2"),
        ],
        item=full_item([field("username", "username", "octocat", "Text"), field("password", "password", "hunter2")]),
    )
    kwargs.update(overrides)
    return make_fake_sdk(**kwargs)

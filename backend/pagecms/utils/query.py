from flask import request

TRUTHY = {"1", "true", "yes", "on"}
FALSY = {"0", "false", "no", "off"}


def query_flag(name, default=False):
    """Boolean query parameter; anything unrecognised falls back to `default`."""
    raw = request.args.get(name)
    if raw is None:
        return default

    raw = raw.strip().lower()
    if raw in TRUTHY:
        return True
    if raw in FALSY:
        return False
    return default


def scope_args(data=None):
    """entity_id from the query string, falling back to the JSON body."""
    entity_id = request.args.get("entity_id")
    if not entity_id and isinstance(data, dict):
        entity_id = data.get("entity_id")
    return entity_id or None

from datetime import datetime, timezone
from dateutil.parser import parse
from pagecms.domain.invariants.exceptions import ConflictError, ValidationError


def normalize_ts(ts):
    """
    Ensure datetime is timezone-aware.
    Defaults to UTC if naive.
    """
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def parse_client_ts(raw):
    """Accepts a datetime, an ISO-8601 string or an HTTP date."""
    if raw is None or isinstance(raw, datetime):
        return raw
    try:
        return parse(raw)
    except (ValueError, OverflowError) as exc:
        raise ValidationError(f"Invalid timestamp: {raw}") from exc


def enforce_optimistic_lock(entity, client_ts):
    """
    Raises ConflictError if the entity has been modified after client_ts.
    A missing client_ts means no lock was requested.
    """
    client_ts = parse_client_ts(client_ts)
    if client_ts is None or entity.updated_at is None:
        return

    server_ts = normalize_ts(entity.updated_at)

    if server_ts > normalize_ts(client_ts):
        raise ConflictError(
            "Conflict detected. Section has been modified since "
            f"{normalize_ts(client_ts).isoformat()}."
        )

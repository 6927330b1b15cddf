from flask import g, has_request_context
from pagecms.extensions import db
from pagecms.models.audit_log import AuditLog
from typing import Optional

def log_action(
    *,
    action: str,
    entity_type: str,
    entity_id: Optional[str],
    payload: dict | None = None,
    actor_id: Optional[str] = None,
):
    """Stage an audit entry in the current session; the caller commits."""
    if actor_id is None and has_request_context():
        actor_id = g.get("actor_id")

    log = AuditLog()
    log.actor_id = actor_id
    log.action = action
    log.entity_type = entity_type
    log.entity_id = entity_id
    log.payload = payload or {}

    db.session.add(log)

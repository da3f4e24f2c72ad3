import json
from flask import g, request, current_app, has_request_context
from sqlalchemy.exc import SQLAlchemyError
from models import db
from models.audit_log import AuditLog

def log_event(action: str, profile_id=None, entity=None, entity_id=None, metadata=None, tenant_id=None):
    ip = None
    user_agent = ""
    if has_request_context():
        ip = request.headers.get("X-Forwarded-For", request.remote_addr)
        user_agent = request.headers.get("User-Agent", "")
        profile = getattr(g, "profile", None)
        if tenant_id is None and profile is not None:
            tenant_id = profile.tenant_id

    row = AuditLog(
        tenant_id=tenant_id,
        profile_id=profile_id,
        action=action,
        entity=entity,
        entity_id=str(entity_id) if entity_id is not None else None,
        ip=ip,
        user_agent=user_agent[:255] if user_agent else None,
        metadata_json=json.dumps(metadata) if metadata else None
    )
    db.session.add(row)
    try:
        db.session.commit()
    except SQLAlchemyError:
        # the audit trail must never fail the request it describes
        db.session.rollback()
        current_app.logger.exception("Failed to write audit event %s", action)

from flask import Blueprint, request, jsonify, g
from sqlalchemy.exc import IntegrityError

from models import db
from models.audit_log import AuditLog
from models.profile import Profile, ADMIN, PROVIDER_TYPES
from models.service import Service
from models.tenant import Tenant
from security.rbac import require_roles
from services.booking import slots_for_day
from services.auctions import list_auctions, auction_details
from utils.audit import log_event
from utils.auth_context import login_required
from utils.parsing import parse_iso, parse_cents
from utils.tenancy import get_tenant_or_404, normalize_slug, is_valid_slug

tenant_bp = Blueprint("tenant", __name__, url_prefix="/tenants")

TENANT_FIELDS = ("description", "address", "phone", "email", "website", "logo_url")


def _require_same_tenant(tenant):
    if g.profile.tenant_id != tenant.id:
        return jsonify(error="Forbidden"), 403
    return None


# ---------- OWNERS: create a business ----------
@tenant_bp.post("")
@login_required
def create_tenant():
    data = request.get_json(silent=True) or {}
    name = (data.get("name") or "").strip()
    slug = normalize_slug(data.get("slug") or name.replace(" ", "-"))

    if not name:
        return jsonify(error="Business name required"), 400
    if not is_valid_slug(slug):
        return jsonify(error="slug may only contain lowercase letters, digits and dashes"), 400

    profile = g.profile
    if profile is not None and profile.tenant_id is not None:
        return jsonify(error="Profile already belongs to a business"), 409
    if Tenant.query.filter_by(slug=slug).first():
        return jsonify(error="Business URL already taken"), 409

    tenant = Tenant(name=name, slug=slug, opening_hours=data.get("opening_hours") or {})
    for field in TENANT_FIELDS:
        value = data.get(field)
        if isinstance(value, str) and value.strip():
            setattr(tenant, field, value.strip())
    db.session.add(tenant)
    db.session.flush()

    if profile is None:
        profile = Profile(
            user_id=g.auth_user_id,
            first_name=(data.get("first_name") or "").strip() or None,
            last_name=(data.get("last_name") or "").strip() or None,
        )
        db.session.add(profile)
    profile.tenant_id = tenant.id
    profile.user_type = ADMIN

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify(error="Business URL already taken"), 409

    log_event("TENANT_CREATE", profile_id=profile.id, entity="tenant", entity_id=tenant.id, tenant_id=tenant.id)
    return jsonify(tenant=tenant.to_dict(), profile=profile.to_dict()), 201


@tenant_bp.get("/<slug>")
def get_tenant(slug: str):
    tenant = get_tenant_or_404(slug)
    return jsonify(tenant.to_dict()), 200


# ---------- catalogue ----------
@tenant_bp.get("/<slug>/services")
def list_services(slug: str):
    tenant = get_tenant_or_404(slug)
    q = Service.query.filter_by(tenant_id=tenant.id)
    service_type = request.args.get("service_type")
    if service_type:
        q = q.filter_by(service_type=service_type)
    services = q.order_by(Service.name.asc()).all()
    return jsonify([s.to_dict() for s in services]), 200


@tenant_bp.get("/<slug>/services/<int:service_id>")
def get_service(slug: str, service_id: int):
    tenant = get_tenant_or_404(slug)
    service = Service.query.get(service_id)
    if not service or service.tenant_id != tenant.id:
        return jsonify(error="Service not found"), 404

    if service.provider_id:
        providers = Profile.query.filter_by(id=service.provider_id).all()
    else:
        providers = (
            Profile.query
            .filter(Profile.tenant_id == tenant.id, Profile.user_type.in_(PROVIDER_TYPES))
            .all()
        )
    return jsonify(service=service.to_dict(), providers=[p.to_dict() for p in providers]), 200


@tenant_bp.post("/<slug>/services")
@require_roles(*PROVIDER_TYPES)
def create_service(slug: str):
    tenant = get_tenant_or_404(slug)
    failure = _require_same_tenant(tenant)
    if failure:
        return failure

    data = request.get_json(silent=True) or {}
    name = (data.get("name") or "").strip()
    base_price = parse_cents(data.get("base_price"))
    duration = data.get("duration")

    if not name:
        return jsonify(error="Service name required"), 400
    if base_price is None or base_price < 0:
        return jsonify(error="base_price must be a non-negative amount in cents"), 400
    if duration is not None and (not isinstance(duration, int) or duration <= 0):
        return jsonify(error="duration must be a positive number of minutes"), 400

    provider_id = g.profile.id if g.profile.is_provider else data.get("provider_id")
    if provider_id is not None:
        provider = Profile.query.get(provider_id)
        if not provider or provider.tenant_id != tenant.id or not provider.is_provider:
            return jsonify(error="Provider not found"), 404

    service = Service(
        tenant_id=tenant.id,
        provider_id=provider_id,
        name=name,
        description=(data.get("description") or "").strip() or None,
        duration=duration,
        base_price=base_price,
        service_type=(data.get("service_type") or "").strip() or None,
        image_url=(data.get("image_url") or "").strip() or None,
    )
    db.session.add(service)
    db.session.commit()

    log_event("SERVICE_CREATE", profile_id=g.profile.id, entity="service", entity_id=service.id)
    return jsonify(service.to_dict()), 201


# ---------- staff ----------
@tenant_bp.get("/<slug>/staff")
def list_staff(slug: str):
    tenant = get_tenant_or_404(slug)
    staff = (
        Profile.query
        .filter(Profile.tenant_id == tenant.id, Profile.user_type.in_(PROVIDER_TYPES))
        .order_by(Profile.first_name.asc())
        .all()
    )
    return jsonify([p.to_dict() for p in staff]), 200


@tenant_bp.post("/<slug>/staff")
@require_roles(ADMIN)
def add_staff(slug: str):
    tenant = get_tenant_or_404(slug)
    failure = _require_same_tenant(tenant)
    if failure:
        return failure

    data = request.get_json(silent=True) or {}
    user_id = (data.get("user_id") or "").strip()
    user_type = (data.get("user_type") or "").strip()
    if not user_id:
        return jsonify(error="user_id required"), 400
    if user_type not in PROVIDER_TYPES:
        return jsonify(error=f"user_type must be one of {', '.join(PROVIDER_TYPES)}"), 400

    profile = Profile.query.filter_by(user_id=user_id).first()
    if profile and profile.tenant_id not in (None, tenant.id):
        return jsonify(error="Profile belongs to another business"), 409

    created = profile is None
    if created:
        profile = Profile(user_id=user_id)
        db.session.add(profile)
    profile.tenant_id = tenant.id
    profile.user_type = user_type
    for field in ("first_name", "last_name", "bio", "instagram_handle", "avatar_url"):
        value = data.get(field)
        if isinstance(value, str) and value.strip():
            setattr(profile, field, value.strip())
    db.session.commit()

    log_event("STAFF_ADD", profile_id=g.profile.id, entity="profile", entity_id=profile.id)
    return jsonify(profile.to_dict()), 201 if created else 200


# ---------- slots & auctions by business ----------
@tenant_bp.get("/<slug>/slots")
def list_slots(slug: str):
    # optional filters: service_id, provider_id, date (YYYY-MM-DD)
    tenant = get_tenant_or_404(slug)
    date_str = request.args.get("date")
    if not date_str:
        return jsonify(error="date is required. Use YYYY-MM-DD"), 400
    try:
        day = parse_iso(date_str)
    except ValueError:
        return jsonify(error="Invalid date. Use YYYY-MM-DD"), 400

    slots = slots_for_day(
        tenant.id,
        day,
        service_id=request.args.get("service_id", type=int),
        provider_id=request.args.get("provider_id", type=int),
    )
    return jsonify([s.to_dict() for s in slots]), 200


@tenant_bp.get("/<slug>/auctions")
def list_tenant_auctions(slug: str):
    tenant = get_tenant_or_404(slug)
    auctions = list_auctions(tenant_id=tenant.id, status=request.args.get("status"))
    return jsonify([auction_details(a) for a in auctions]), 200


# ---------- ADMIN: audit trail ----------
@tenant_bp.get("/<slug>/audit-logs")
@require_roles(ADMIN)
def list_audit_logs(slug: str):
    tenant = get_tenant_or_404(slug)
    failure = _require_same_tenant(tenant)
    if failure:
        return failure

    limit = request.args.get("limit", type=int) or 200
    limit = max(1, min(limit, 500))

    q = AuditLog.query.filter(AuditLog.tenant_id == tenant.id)
    action = request.args.get("action")
    if action:
        q = q.filter(AuditLog.action == action)
    profile_id = request.args.get("profile_id", type=int)
    if profile_id is not None:
        q = q.filter(AuditLog.profile_id == profile_id)

    rows = q.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc()).limit(limit).all()
    return jsonify([r.to_dict() for r in rows]), 200

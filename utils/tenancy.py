import re

from models.tenant import Tenant
from services.errors import NotFound

SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

def normalize_slug(value: str) -> str:
    return (value or "").strip().lower()

def is_valid_slug(value: str) -> bool:
    return bool(SLUG_RE.match(value or "")) and len(value) <= 80

def get_tenant_or_404(slug: str) -> Tenant:
    tenant = Tenant.query.filter_by(slug=normalize_slug(slug)).first()
    if not tenant:
        raise NotFound("Business not found")
    return tenant

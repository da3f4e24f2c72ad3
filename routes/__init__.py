from .health import health_bp
from .tenants import tenant_bp
from .profiles import profile_bp
from .booking import booking_bp
from .bids import bids_bp
from .auctions import auction_bp
from .notifications import notification_bp

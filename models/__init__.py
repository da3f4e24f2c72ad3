from .db import db
from .audit_log import AuditLog
from .tenant import Tenant
from .profile import Profile
from .service import Service
from .availability import Availability
from .slot import Slot
from .bid import Bid
from .booking import Booking
from .auction import Auction, AuctionBid
from .notification import Notification

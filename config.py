import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    # SQLite database file stored next to config.py as chairbid.db
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "chairbid.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Hosted auth provider: we only verify its access tokens
    AUTH_JWT_SECRET = os.getenv("AUTH_JWT_SECRET", "dev-only-jwt-secret")
    AUTH_JWT_ALGORITHMS = [a.strip() for a in os.getenv("AUTH_JWT_ALGORITHMS", "HS256").split(",") if a.strip()]
    AUTH_JWT_AUDIENCE = os.getenv("AUTH_JWT_AUDIENCE", "authenticated")

    # Bidding
    BID_INCREMENT_CENTS = int(os.getenv("BID_INCREMENT_CENTS", "500"))  # $5 over base price
    OUTBID_SUGGESTION_PERCENT = int(os.getenv("OUTBID_SUGGESTION_PERCENT", "5"))

    # Cancellation policy
    CANCEL_CUTOFF_HOURS = int(os.getenv("CANCEL_CUTOFF_HOURS", "12"))

    # Slot generation from weekly availability
    SLOT_GENERATION_DAYS = int(os.getenv("SLOT_GENERATION_DAYS", "14"))
    SLOT_LENGTH_MINUTES = int(os.getenv("SLOT_LENGTH_MINUTES", "60"))  # used when service has no duration

    # Basic app settings
    DEBUG = False

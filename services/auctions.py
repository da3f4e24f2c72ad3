"""
Timed service auctions: highest bid at the end wins.
Clients poll ``bids_since`` instead of holding a subscription open.
"""
import math
from datetime import datetime

from flask import current_app

from models import db
from models.auction import Auction, AuctionBid
from models.service import Service
from services import notifications
from services.errors import Forbidden, InvalidTransition, NotFound, ValidationFailed
from utils.audit import log_event

SCHEDULED = "scheduled"
ACTIVE = "active"
COMPLETED = "completed"


def auction_status(auction, now=None) -> str:
    now = now or datetime.utcnow()
    if auction.auction_end <= now:
        return COMPLETED
    if auction.auction_start > now:
        return SCHEDULED
    return ACTIVE


def minimum_next_bid(auction) -> int:
    # strictly above the current price, or at least the starting price
    if auction.current_price:
        return auction.current_price + 1
    return auction.starting_price


def suggested_next_bid(auction) -> int:
    if not auction.current_price:
        return auction.starting_price
    percent = current_app.config.get("OUTBID_SUGGESTION_PERCENT", 5)
    return int(math.ceil(auction.current_price * (100 + percent) / 100))


def get_auction_or_404(auction_id: int) -> Auction:
    auction = Auction.query.get(auction_id)
    if not auction:
        raise NotFound("Auction not found")
    return auction


def create_auction(provider, service_id, starting_price, auction_start, auction_end) -> Auction:
    service = Service.query.get(service_id)
    if not service or service.tenant_id != provider.tenant_id:
        raise NotFound("Service not found")
    if starting_price is None or starting_price <= 0:
        raise ValidationFailed("starting_price must be positive")
    if auction_end <= auction_start:
        raise ValidationFailed("auction_end must be after auction_start")

    auction = Auction(
        tenant_id=service.tenant_id,
        service_id=service.id,
        provider_id=provider.id,
        starting_price=starting_price,
        auction_start=auction_start,
        auction_end=auction_end,
    )
    db.session.add(auction)
    db.session.commit()

    log_event("AUCTION_CREATE", profile_id=provider.id, entity="auction", entity_id=auction.id,
              tenant_id=auction.tenant_id)
    return auction


def list_auctions(tenant_id=None, status=None):
    q = Auction.query
    if tenant_id:
        q = q.filter(Auction.tenant_id == tenant_id)
    now = datetime.utcnow()
    if status == ACTIVE:
        q = q.filter(Auction.auction_start <= now, Auction.auction_end > now)
    elif status == SCHEDULED:
        q = q.filter(Auction.auction_start > now)
    elif status == COMPLETED:
        q = q.filter(Auction.auction_end <= now)
    return q.order_by(Auction.auction_end.asc()).limit(200).all()


def place_auction_bid(bidder, auction, amount: int) -> AuctionBid:
    status = auction_status(auction)
    if status != ACTIVE:
        raise InvalidTransition(f"Auction is {status}")
    if bidder.id == auction.provider_id:
        raise Forbidden("Providers cannot bid on their own auctions")

    if auction.current_price and amount <= auction.current_price:
        raise ValidationFailed(
            f"Your bid must be higher than the current bid of {notifications.format_cents(auction.current_price)}."
        )
    if not auction.current_price and amount < auction.starting_price:
        raise ValidationFailed(
            f"Your bid must be at least the starting price of {notifications.format_cents(auction.starting_price)}."
        )

    previous_winner_id = auction.current_winner_id

    row = AuctionBid(auction_id=auction.id, bidder_id=bidder.id, amount=amount)
    db.session.add(row)
    db.session.commit()

    # separate write, like the bid insert: last writer wins on current_price
    auction.current_price = amount
    auction.current_winner_id = bidder.id
    db.session.commit()

    log_event("AUCTION_BID", profile_id=bidder.id, entity="auction", entity_id=auction.id,
              metadata={"amount": amount}, tenant_id=auction.tenant_id)

    service = Service.query.get(auction.service_id)
    service_name = service.name if service else "a service"
    notifications.notify(
        auction.provider_id,
        "New Bid Placed",
        f"{bidder.display_name} placed a bid of {notifications.format_cents(amount)} "
        f"on your auction for {service_name}.",
        notifications.AUCTION,
        related_id=auction.id,
    )
    if previous_winner_id and previous_winner_id != bidder.id:
        notifications.notify(
            previous_winner_id,
            "You've Been Outbid",
            f"Someone placed a higher bid of {notifications.format_cents(amount)} "
            f"on the auction for {service_name}.",
            notifications.AUCTION,
            related_id=auction.id,
        )
    return row


def auction_bids(auction, since=None):
    q = AuctionBid.query.filter(AuctionBid.auction_id == auction.id)
    if since is not None:
        q = q.filter(AuctionBid.created_at > since)
    return q.order_by(AuctionBid.amount.desc(), AuctionBid.created_at.desc()).all()


def auction_details(auction, now=None) -> dict:
    now = now or datetime.utcnow()
    status = auction_status(auction, now)
    if status == ACTIVE:
        seconds_left = int((auction.auction_end - now).total_seconds())
    elif status == SCHEDULED:
        seconds_left = int((auction.auction_start - now).total_seconds())
    else:
        seconds_left = 0

    service = Service.query.get(auction.service_id)
    return {
        "id": auction.id,
        "tenant_id": auction.tenant_id,
        "service": service.to_dict() if service else None,
        "provider_id": auction.provider_id,
        "provider_name": auction.provider.display_name if auction.provider else None,
        "starting_price": auction.starting_price,
        "current_price": auction.current_price,
        "current_winner_id": auction.current_winner_id,
        "auction_start": auction.auction_start.isoformat(),
        "auction_end": auction.auction_end.isoformat(),
        "closed_at": auction.closed_at.isoformat() if auction.closed_at else None,
        "status": status,
        "seconds_left": seconds_left,
        "minimum_next_bid": minimum_next_bid(auction),
        "suggested_next_bid": suggested_next_bid(auction),
    }


def close_due_auctions(now=None) -> int:
    """Stamps ended auctions as closed and tells the winner and provider."""
    now = now or datetime.utcnow()
    due = (
        Auction.query
        .filter(Auction.auction_end <= now, Auction.closed_at.is_(None))
        .all()
    )
    for auction in due:
        auction.closed_at = now
        db.session.commit()

        if auction.current_winner_id:
            notifications.notify(
                auction.current_winner_id,
                "Auction Won",
                f"You won the auction with a bid of {notifications.format_cents(auction.current_price)}.",
                notifications.AUCTION,
                related_id=auction.id,
            )
            message = f"Your auction closed at {notifications.format_cents(auction.current_price)}."
        else:
            message = "Your auction closed without bids."
        notifications.notify(auction.provider_id, "Auction Closed", message,
                             notifications.AUCTION, related_id=auction.id)
        current_app.logger.info("Closed auction %s (winner=%s)", auction.id, auction.current_winner_id)
    return len(due)

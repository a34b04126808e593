"""FastAPI application entry point."""
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from tourmarket.config import settings
from tourmarket.database import Base, engine

# Import routers
from tourmarket.routers import (
    users, guides, programs, itinerary, tariffs, bookings, reviews, auctions, bids, tokens, admin,
)

# Import all models so Base.metadata knows about them
from tourmarket.models.user import User                                   # noqa: F401
from tourmarket.models.guide import Guide, GuideProfileChangeRequest      # noqa: F401
from tourmarket.models.program import Program, ProgramDay, ProgramPoint, PricingTier  # noqa: F401
from tourmarket.models.booking import Booking, Review                     # noqa: F401
from tourmarket.models.auction import Auction, Bid                        # noqa: F401
from tourmarket.models.token import TokenTransaction                      # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(
    title="Tour Marketplace",
    description="Guided-tour marketplace backend for a Telegram Mini App: programs, bookings, auctions and guide profiles",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(guides.router, prefix="/api/guides", tags=["Guides"])
app.include_router(programs.router, prefix="/api/programs", tags=["Programs"])
app.include_router(itinerary.router, prefix="/api/programs", tags=["Program itinerary"])
app.include_router(tariffs.router, prefix="/api/tariffs", tags=["Tariffs"])
app.include_router(bookings.router, prefix="/api/bookings", tags=["Bookings"])
app.include_router(reviews.router, prefix="/api/reviews", tags=["Reviews"])
app.include_router(auctions.router, prefix="/api/auctions", tags=["Auctions"])
app.include_router(bids.router, prefix="/api/bids", tags=["Bids"])
app.include_router(tokens.router, prefix="/api/tokens", tags=["Tokens"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}

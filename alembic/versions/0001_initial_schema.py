"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18

Creates all tables for the tour marketplace:
users, guides, programs, guide_programs, program_days, program_points,
pricing_tiers, bookings, reviews, auctions, bids,
guide_profile_change_requests, token_transactions.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("user_id", sa.String(36), primary_key=True),
        sa.Column("telegram_id", sa.String(32), nullable=False, unique=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("username", sa.String(100), nullable=True),
        sa.Column("language_code", sa.String(10), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="TOURIST"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- guides ---
    op.create_table(
        "guides",
        sa.Column("guide_id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False, unique=True),
        sa.Column("bio", sa.Text, nullable=True),
        sa.Column("phone_number", sa.String(32), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("images", sa.JSON, nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("is_approved", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("token_balance", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- programs ---
    op.create_table(
        "programs",
        sa.Column("program_id", sa.String(36), primary_key=True),
        sa.Column("guide_id", sa.String(36), sa.ForeignKey("guides.guide_id"), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("base_price", sa.Float, nullable=False),
        sa.Column("duration_days", sa.Integer, nullable=False),
        sa.Column("max_group_size", sa.Integer, nullable=False),
        sa.Column("start_location", sa.String(255), nullable=False),
        sa.Column("regions", sa.JSON, nullable=False),
        sa.Column("tags", sa.JSON, nullable=False),
        sa.Column("images", sa.JSON, nullable=False),
        sa.Column("booking_type", sa.String(20), nullable=False, server_default="BOTH"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("is_approved", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- guide_programs (programs a guide offers) ---
    op.create_table(
        "guide_programs",
        sa.Column("guide_id", sa.String(36), sa.ForeignKey("guides.guide_id", ondelete="CASCADE"), primary_key=True),
        sa.Column("program_id", sa.String(36), sa.ForeignKey("programs.program_id", ondelete="CASCADE"), primary_key=True),
    )

    # --- program_days ---
    op.create_table(
        "program_days",
        sa.Column("day_id", sa.String(36), primary_key=True),
        sa.Column("program_id", sa.String(36), sa.ForeignKey("programs.program_id"), nullable=False),
        sa.Column("day_number", sa.Integer, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
    )

    # --- program_points ---
    op.create_table(
        "program_points",
        sa.Column("point_id", sa.String(36), primary_key=True),
        sa.Column("day_id", sa.String(36), sa.ForeignKey("program_days.day_id"), nullable=False),
        sa.Column("order", sa.Integer, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("point_type", sa.String(20), nullable=False, server_default="ACTIVITY"),
        sa.Column("duration_minutes", sa.Integer, nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
    )

    # --- pricing_tiers ---
    op.create_table(
        "pricing_tiers",
        sa.Column("tier_id", sa.String(36), primary_key=True),
        sa.Column("program_id", sa.String(36), sa.ForeignKey("programs.program_id"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("min_people", sa.Integer, nullable=False),
        sa.Column("max_people", sa.Integer, nullable=False),
        sa.Column("price_per_person", sa.Float, nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
    )

    # --- bookings ---
    op.create_table(
        "bookings",
        sa.Column("booking_id", sa.String(36), primary_key=True),
        sa.Column("program_id", sa.String(36), sa.ForeignKey("programs.program_id"), nullable=False),
        sa.Column("tourist_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("pricing_tier_id", sa.String(36), sa.ForeignKey("pricing_tiers.tier_id"), nullable=True),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("number_of_people", sa.Integer, nullable=False),
        sa.Column("price_per_person", sa.Float, nullable=False),
        sa.Column("total_price", sa.Float, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )

    # --- reviews ---
    op.create_table(
        "reviews",
        sa.Column("review_id", sa.String(36), primary_key=True),
        sa.Column("program_id", sa.String(36), sa.ForeignKey("programs.program_id"), nullable=False),
        sa.Column("tourist_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("guide_id", sa.String(36), sa.ForeignKey("guides.guide_id"), nullable=True),
        sa.Column("rating", sa.Integer, nullable=False),
        sa.Column("comment", sa.Text, nullable=False, server_default=""),
        sa.Column("active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )

    # --- auctions ---
    op.create_table(
        "auctions",
        sa.Column("auction_id", sa.String(36), primary_key=True),
        sa.Column("creator_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("program_id", sa.String(36), sa.ForeignKey("programs.program_id"), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("number_of_people", sa.Integer, nullable=False),
        sa.Column("budget", sa.Float, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="OPEN"),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_auctions_status_expires_at", "auctions", ["status", "expires_at"])

    # --- bids ---
    op.create_table(
        "bids",
        sa.Column("bid_id", sa.String(36), primary_key=True),
        sa.Column("auction_id", sa.String(36), sa.ForeignKey("auctions.auction_id"), nullable=False),
        sa.Column("bidder_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("price", sa.Float, nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("is_accepted", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("auction_id", "bidder_id", name="uq_bids_auction_bidder"),
    )

    # --- guide_profile_change_requests ---
    op.create_table(
        "guide_profile_change_requests",
        sa.Column("request_id", sa.String(36), primary_key=True),
        sa.Column("guide_id", sa.String(36), sa.ForeignKey("guides.guide_id"), nullable=False),
        sa.Column("change_type", sa.String(30), nullable=False),
        sa.Column("proposed_bio", sa.Text, nullable=True),
        sa.Column("proposed_images", sa.JSON, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("admin_comment", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
    )

    # --- token_transactions ---
    op.create_table(
        "token_transactions",
        sa.Column("transaction_id", sa.String(36), primary_key=True),
        sa.Column("guide_id", sa.String(36), sa.ForeignKey("guides.guide_id"), nullable=False),
        sa.Column("kind", sa.String(20), nullable=False),
        sa.Column("amount", sa.Integer, nullable=False),
        sa.Column("description", sa.String(500), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("token_transactions")
    op.drop_table("guide_profile_change_requests")
    op.drop_table("bids")
    op.drop_index("ix_auctions_status_expires_at", table_name="auctions")
    op.drop_table("auctions")
    op.drop_table("reviews")
    op.drop_table("bookings")
    op.drop_table("pricing_tiers")
    op.drop_table("program_points")
    op.drop_table("program_days")
    op.drop_table("guide_programs")
    op.drop_table("programs")
    op.drop_table("guides")
    op.drop_table("users")

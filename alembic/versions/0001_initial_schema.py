"""initial schema: users, bills, reports, news, pricing tiers

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-16

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

ENUMS = {
    "user_role": ("customer", "admin", "staff"),
    "bill_status": ("pending", "paid", "overdue", "cancelled"),
    "report_type": (
        "water_leak", "water_quality", "no_water", "low_pressure",
        "meter_issue", "billing_issue", "other",
    ),
    "report_priority": ("low", "medium", "high", "urgent"),
    "report_status": ("submitted", "under_review", "in_progress", "resolved", "closed", "rejected"),
    "news_category": ("announcement", "maintenance", "service_update", "community", "tips", "emergency"),
    "news_status": ("draft", "published", "archived"),
    "target_audience": ("all", "customers", "staff", "public"),
    "news_priority": ("low", "normal", "high", "urgent"),
}


def _enum(name: str) -> postgresql.ENUM:
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def _timestamps() -> list:
    return [
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    for name, values in ENUMS.items():
        quoted = ", ".join(f"'{v}'" for v in values)
        op.execute(f"CREATE TYPE {name} AS ENUM ({quoted})")

    op.create_table(
        "users",
        *_timestamps(),
        sa.Column("username", sa.String(30), nullable=False),
        sa.Column("email", sa.String(100), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(100), nullable=False),
        sa.Column("phone", sa.String(15), nullable=False),
        sa.Column("address", postgresql.JSONB(), nullable=True),
        sa.Column("avatar", sa.String(255), nullable=True),
        sa.Column("role", _enum("user_role"), nullable=False),
        sa.Column("customer_id", sa.String(20), nullable=True),
        sa.Column("last_login", sa.DateTime(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_phone"), "users", ["phone"], unique=False)
    op.create_index(op.f("ix_users_role"), "users", ["role"], unique=False)
    op.create_index(op.f("ix_users_customer_id"), "users", ["customer_id"], unique=True)
    op.create_index(op.f("ix_users_is_active"), "users", ["is_active"], unique=False)

    op.create_table(
        "bills",
        *_timestamps(),
        sa.Column("bill_number", sa.String(20), nullable=False),
        sa.Column("customer_id", sa.String(20), nullable=False),
        sa.Column("customer_info", postgresql.JSONB(), nullable=False),
        sa.Column("period_from", sa.Date(), nullable=False),
        sa.Column("period_to", sa.Date(), nullable=False),
        sa.Column("water_usage", postgresql.JSONB(), nullable=False),
        sa.Column("rates", postgresql.JSONB(), nullable=False),
        sa.Column("amounts", postgresql.JSONB(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("status", _enum("bill_status"), nullable=False),
        sa.Column("payment_info", postgresql.JSONB(), nullable=True),
        sa.Column("meter_info", postgresql.JSONB(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_by", sa.UUID(), nullable=True),
        sa.ForeignKeyConstraint(["customer_id"], ["users.customer_id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_bills_id"), "bills", ["id"], unique=False)
    op.create_index(op.f("ix_bills_bill_number"), "bills", ["bill_number"], unique=True)
    op.create_index(op.f("ix_bills_customer_id"), "bills", ["customer_id"], unique=False)
    op.create_index(op.f("ix_bills_period_from"), "bills", ["period_from"], unique=False)
    op.create_index(op.f("ix_bills_status"), "bills", ["status"], unique=False)

    op.create_table(
        "reports",
        *_timestamps(),
        sa.Column("report_number", sa.String(20), nullable=False),
        sa.Column("reporter_id", sa.UUID(), nullable=False),
        sa.Column("customer_id", sa.String(20), nullable=True),
        sa.Column("customer_info", postgresql.JSONB(), nullable=False),
        sa.Column("report_type", _enum("report_type"), nullable=False),
        sa.Column("priority", _enum("report_priority"), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("location", postgresql.JSONB(), nullable=False),
        sa.Column("attachments", postgresql.JSONB(), nullable=False),
        sa.Column("status", _enum("report_status"), nullable=False),
        sa.Column("assigned_to", sa.UUID(), nullable=True),
        sa.Column("estimated_resolution", sa.DateTime(), nullable=True),
        sa.Column("actual_resolution", sa.DateTime(), nullable=True),
        sa.Column("resolution", postgresql.JSONB(), nullable=False),
        sa.Column("internal_notes", postgresql.JSONB(), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(["reporter_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["customer_id"], ["users.customer_id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["assigned_to"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_reports_id"), "reports", ["id"], unique=False)
    op.create_index(op.f("ix_reports_report_number"), "reports", ["report_number"], unique=True)
    op.create_index(op.f("ix_reports_reporter_id"), "reports", ["reporter_id"], unique=False)
    op.create_index(op.f("ix_reports_customer_id"), "reports", ["customer_id"], unique=False)
    op.create_index(op.f("ix_reports_report_type"), "reports", ["report_type"], unique=False)
    op.create_index(op.f("ix_reports_priority"), "reports", ["priority"], unique=False)
    op.create_index(op.f("ix_reports_status"), "reports", ["status"], unique=False)
    op.create_index(op.f("ix_reports_assigned_to"), "reports", ["assigned_to"], unique=False)
    op.create_index(op.f("ix_reports_estimated_resolution"), "reports", ["estimated_resolution"], unique=False)

    op.create_table(
        "news",
        *_timestamps(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("slug", sa.String(250), nullable=False),
        sa.Column("summary", sa.String(500), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("author_id", sa.UUID(), nullable=False),
        sa.Column("category", _enum("news_category"), nullable=False),
        sa.Column("tags", postgresql.JSONB(), nullable=False),
        sa.Column("featured_image", postgresql.JSONB(), nullable=True),
        sa.Column("images", postgresql.JSONB(), nullable=False),
        sa.Column("attachments", postgresql.JSONB(), nullable=False),
        sa.Column("seo", postgresql.JSONB(), nullable=False),
        sa.Column("status", _enum("news_status"), nullable=False),
        sa.Column("is_featured", sa.Boolean(), nullable=False),
        sa.Column("is_pinned", sa.Boolean(), nullable=False),
        sa.Column("published_at", sa.DateTime(), nullable=True),
        sa.Column("expires_at", sa.DateTime(), nullable=True),
        sa.Column("view_count", sa.Integer(), nullable=False),
        sa.Column("like_count", sa.Integer(), nullable=False),
        sa.Column("share_count", sa.Integer(), nullable=False),
        sa.Column("target_audience", _enum("target_audience"), nullable=False),
        sa.Column("priority", _enum("news_priority"), nullable=False),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_news_id"), "news", ["id"], unique=False)
    op.create_index(op.f("ix_news_slug"), "news", ["slug"], unique=True)
    op.create_index(op.f("ix_news_author_id"), "news", ["author_id"], unique=False)
    op.create_index(op.f("ix_news_category"), "news", ["category"], unique=False)
    op.create_index(op.f("ix_news_status"), "news", ["status"], unique=False)
    op.create_index(op.f("ix_news_published_at"), "news", ["published_at"], unique=False)

    op.create_table(
        "pricing_tiers",
        *_timestamps(),
        sa.Column("code", sa.String(30), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("badge", sa.String(50), nullable=True),
        sa.Column("description", sa.String(255), nullable=False),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("unit", sa.String(100), nullable=False),
        sa.Column("includes", postgresql.JSONB(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_pricing_tiers_id"), "pricing_tiers", ["id"], unique=False)
    op.create_index(op.f("ix_pricing_tiers_code"), "pricing_tiers", ["code"], unique=True)
    op.create_index(op.f("ix_pricing_tiers_is_active"), "pricing_tiers", ["is_active"], unique=False)


def downgrade() -> None:
    for table in ("pricing_tiers", "news", "reports", "bills", "users"):
        op.drop_table(table)
    for name in reversed(list(ENUMS)):
        op.execute(f"DROP TYPE IF EXISTS {name}")

"""Initial schema for users, properties, offers and agreements."""

from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from app.models.types import GUID, WalletAddress

# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    user_role = sa.Enum("owner", "tenant", "admin", name="user_role", native_enum=False, length=32)
    offer_status = sa.Enum(
        "pending",
        "accepted",
        "rejected",
        "withdrawn",
        name="offer_status",
        native_enum=False,
        length=32,
    )
    agreement_status = sa.Enum(
        "active",
        "terminated",
        "expired",
        name="agreement_status",
        native_enum=False,
        length=32,
    )

    op.create_table(
        "users",
        sa.Column("id", GUID(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("role", user_role, nullable=False),
        sa.Column("wallet_address", WalletAddress(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_users")),
        sa.UniqueConstraint("email", name=op.f("uq_users_email")),
        sa.UniqueConstraint("wallet_address", name=op.f("uq_users_wallet_address")),
    )

    op.create_table(
        "properties",
        sa.Column("id", GUID(), nullable=False),
        sa.Column("owner_id", GUID(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("monthly_rent", sa.Numeric(14, 2), nullable=True),
        sa.Column("is_available", sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"], name=op.f("fk_properties_owner_id_users")),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_properties")),
    )
    op.create_index("ix_properties_owner", "properties", ["owner_id"], unique=False)

    op.create_table(
        "offers",
        sa.Column("id", GUID(), nullable=False),
        sa.Column("property_id", GUID(), nullable=False),
        sa.Column("tenant_id", GUID(), nullable=False),
        sa.Column("rent_amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("status", offer_status, nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"], name=op.f("fk_offers_property_id_properties")),
        sa.ForeignKeyConstraint(["tenant_id"], ["users.id"], name=op.f("fk_offers_tenant_id_users")),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_offers")),
    )
    op.create_index("ix_offers_property_status", "offers", ["property_id", "status"], unique=False)
    op.create_index("ix_offers_tenant", "offers", ["tenant_id"], unique=False)
    op.create_index(
        "uq_offers_pending_property_tenant",
        "offers",
        ["property_id", "tenant_id"],
        unique=True,
        postgresql_where=sa.text("status = 'pending'"),
        sqlite_where=sa.text("status = 'pending'"),
    )

    op.create_table(
        "agreements",
        sa.Column("id", GUID(), nullable=False),
        sa.Column("offer_id", GUID(), nullable=False),
        sa.Column("property_id", GUID(), nullable=False),
        sa.Column("owner_id", GUID(), nullable=False),
        sa.Column("tenant_id", GUID(), nullable=False),
        sa.Column("monthly_rent", sa.Numeric(14, 2), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("content_id", sa.String(length=128), nullable=False),
        sa.Column("on_chain_id", sa.BigInteger(), nullable=False),
        sa.Column("tx_hash", sa.String(length=66), nullable=False),
        sa.Column("status", agreement_status, nullable=False),
        *_timestamps(),
        sa.CheckConstraint("end_date > start_date", name="ck_agreements_date_order"),
        sa.ForeignKeyConstraint(["offer_id"], ["offers.id"], name=op.f("fk_agreements_offer_id_offers")),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"], name=op.f("fk_agreements_property_id_properties")),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"], name=op.f("fk_agreements_owner_id_users")),
        sa.ForeignKeyConstraint(["tenant_id"], ["users.id"], name=op.f("fk_agreements_tenant_id_users")),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_agreements")),
        sa.UniqueConstraint("offer_id", name=op.f("uq_agreements_offer_id")),
        sa.UniqueConstraint("tx_hash", name=op.f("uq_agreements_tx_hash")),
    )
    op.create_index("ix_agreements_owner", "agreements", ["owner_id"], unique=False)
    op.create_index("ix_agreements_tenant", "agreements", ["tenant_id"], unique=False)
    op.create_index(
        "uq_agreements_active_property",
        "agreements",
        ["property_id"],
        unique=True,
        postgresql_where=sa.text("status = 'active'"),
        sqlite_where=sa.text("status = 'active'"),
    )

    op.create_table(
        "agreement_reconciliations",
        sa.Column("id", GUID(), nullable=False),
        sa.Column("offer_id", GUID(), nullable=False),
        sa.Column("content_id", sa.String(length=128), nullable=False),
        sa.Column("on_chain_id", sa.BigInteger(), nullable=False),
        sa.Column("tx_hash", sa.String(length=66), nullable=False),
        sa.Column("error", sa.String(length=1024), nullable=True),
        sa.Column("resolved", sa.Boolean(), server_default=sa.false(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_agreement_reconciliations")),
        sa.UniqueConstraint("tx_hash", name=op.f("uq_agreement_reconciliations_tx_hash")),
    )
    op.create_index("ix_agreement_reconciliations_offer", "agreement_reconciliations", ["offer_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_agreement_reconciliations_offer", table_name="agreement_reconciliations")
    op.drop_table("agreement_reconciliations")
    op.drop_index("uq_agreements_active_property", table_name="agreements")
    op.drop_index("ix_agreements_tenant", table_name="agreements")
    op.drop_index("ix_agreements_owner", table_name="agreements")
    op.drop_table("agreements")
    op.drop_index("uq_offers_pending_property_tenant", table_name="offers")
    op.drop_index("ix_offers_tenant", table_name="offers")
    op.drop_index("ix_offers_property_status", table_name="offers")
    op.drop_table("offers")
    op.drop_index("ix_properties_owner", table_name="properties")
    op.drop_table("properties")
    op.drop_table("users")

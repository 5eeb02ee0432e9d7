"""create_catalog_tables

Revision ID: 1f4e2a7c9b30
Revises:
Create Date: 2026-10-17
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "1f4e2a7c9b30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "variants",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("variant_id", sa.String(length=100), nullable=False),
        sa.Column("device_type", sa.Enum("PHONE", "LAPTOP", "TABLET", name="devicetype"), nullable=False),
        sa.Column("model", sa.String(length=200), nullable=False),
        sa.Column("sku_key", sa.String(length=300), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column("condition", sa.String(length=50), nullable=False),
        sa.Column("battery", sa.String(length=50), nullable=False),
        sa.Column("color", sa.String(length=100), nullable=False),
        sa.Column("storage", sa.String(length=50), nullable=False),
        sa.Column("cpu", sa.String(length=100), nullable=True),
        sa.Column("ram", sa.Integer(), nullable=True),
        sa.Column("connectivity", sa.String(length=100), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_variants_variant_id"), "variants", ["variant_id"], unique=True)
    op.create_index(op.f("ix_variants_device_type"), "variants", ["device_type"], unique=False)
    op.create_index(op.f("ix_variants_model"), "variants", ["model"], unique=False)
    op.create_index(op.f("ix_variants_sku_key"), "variants", ["sku_key"], unique=False)
    op.create_index(op.f("ix_variants_price"), "variants", ["price"], unique=False)

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(length=100), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("address", sa.JSON(), nullable=True),
        sa.Column("purchase_history", sa.JSON(), nullable=False),
        sa.Column("current_order_id", sa.String(length=100), nullable=True),
        sa.Column("current_order_status", sa.String(length=20), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_user_id"), "users", ["user_id"], unique=True)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_current_order_id"), "users", ["current_order_id"], unique=False)

    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("order_id", sa.String(length=100), nullable=False),
        sa.Column("user_id", sa.String(length=100), nullable=False),
        sa.Column(
            "status",
            sa.Enum("PENDING", "PROCESSING", "SHIPPED", "DELIVERED", "CANCELLED", name="orderstatus"),
            nullable=False,
        ),
        sa.Column("total_amount", sa.Float(), nullable=False),
        sa.Column("shipping_address", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.user_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_orders_order_id"), "orders", ["order_id"], unique=True)
    op.create_index(op.f("ix_orders_user_id"), "orders", ["user_id"], unique=False)
    op.create_index(op.f("ix_orders_status"), "orders", ["status"], unique=False)
    op.create_index(op.f("ix_orders_created_at"), "orders", ["created_at"], unique=False)

    op.create_table(
        "order_items",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("order_pk", sa.Integer(), nullable=False),
        sa.Column("variant_id", sa.String(length=100), nullable=False),
        sa.Column("configuration", sa.JSON(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("price_at_purchase", sa.Float(), nullable=False),
        sa.ForeignKeyConstraint(["order_pk"], ["orders.id"], ondelete="CASCADE"),
        # Variants referenced by order lines cannot be deleted
        sa.ForeignKeyConstraint(["variant_id"], ["variants.variant_id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_order_items_order_pk"), "order_items", ["order_pk"], unique=False)
    op.create_index(op.f("ix_order_items_variant_id"), "order_items", ["variant_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_order_items_variant_id"), table_name="order_items")
    op.drop_index(op.f("ix_order_items_order_pk"), table_name="order_items")
    op.drop_table("order_items")

    op.drop_index(op.f("ix_orders_created_at"), table_name="orders")
    op.drop_index(op.f("ix_orders_status"), table_name="orders")
    op.drop_index(op.f("ix_orders_user_id"), table_name="orders")
    op.drop_index(op.f("ix_orders_order_id"), table_name="orders")
    op.drop_table("orders")

    op.drop_index(op.f("ix_users_current_order_id"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_index(op.f("ix_users_user_id"), table_name="users")
    op.drop_table("users")

    op.drop_index(op.f("ix_variants_price"), table_name="variants")
    op.drop_index(op.f("ix_variants_sku_key"), table_name="variants")
    op.drop_index(op.f("ix_variants_model"), table_name="variants")
    op.drop_index(op.f("ix_variants_device_type"), table_name="variants")
    op.drop_index(op.f("ix_variants_variant_id"), table_name="variants")
    op.drop_table("variants")

    sa.Enum(name="orderstatus").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="devicetype").drop(op.get_bind(), checkfirst=True)

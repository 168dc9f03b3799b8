"""create users, catalog and wishlist tables

Revision ID: 3a9c1e7d52b0
Revises: 
Create Date: 2026-10-18 10:12:41.208113

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3a9c1e7d52b0'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("public_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("name", sa.String(128), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("email", name="users_email_key"),
    )
    op.create_index("ix_users_public_id", "users", ["public_id"], unique=True)

    op.create_table(
        "product",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("product_id", sa.BigInteger(), nullable=False),
        sa.Column("product_name", sa.String(255), nullable=False),
        sa.Column("brand", sa.String(128), nullable=False),
        sa.Column("category", sa.String(128), nullable=False),
        sa.Column("gender", sa.String(16), nullable=False),
        sa.Column("primary_colour", sa.String(64), nullable=True),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("mrp", sa.Integer(), nullable=False),
        sa.Column("discount_display_label", sa.String(128), nullable=True),
        sa.Column("search_image", sa.String(1024), nullable=True),
        sa.Column("additional_info", sa.Text(), nullable=True),
        sa.Column("rating", sa.Float(), nullable=False, server_default="0"),
        sa.Column("rating_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_out_of_stock", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_product_product_id", "product", ["product_id"], unique=True)
    for col in ("brand", "category", "gender", "primary_colour", "price", "rating", "is_active", "is_out_of_stock"):
        op.create_index(f"ix_product_{col}", "product", [col])

    op.create_table(
        "productvariant",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("product_pk", sa.Integer(), sa.ForeignKey("product.id", ondelete="CASCADE"), nullable=False),
        sa.Column("sku_id", sa.BigInteger(), nullable=False),
        sa.Column("label", sa.String(64), nullable=False),
        sa.Column("inventory_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("available", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.CheckConstraint("inventory_count >= 0", name="ck_productvariant_inventory_non_negative"),
    )
    op.create_index("ix_productvariant_product_pk", "productvariant", ["product_pk"])
    op.create_index("ix_productvariant_sku_id", "productvariant", ["sku_id"], unique=True)
    op.create_index("ix_productvariant_available", "productvariant", ["available"])

    op.create_table(
        "wishlistitem",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("product_pk", sa.Integer(), sa.ForeignKey("product.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("user_id", "product_pk", name="uq_wishlistitem_user_id_product_pk"),
    )
    op.create_index("ix_wishlistitem_user_id", "wishlistitem", ["user_id"])
    op.create_index("ix_wishlistitem_product_pk", "wishlistitem", ["product_pk"])


def downgrade():
    op.drop_table("wishlistitem")
    op.drop_table("productvariant")
    op.drop_table("product")
    op.drop_table("users")

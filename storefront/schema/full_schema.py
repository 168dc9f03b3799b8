import uuid
from datetime import datetime
from typing import List, Optional
from sqlalchemy import BigInteger, Boolean, CheckConstraint, DateTime, Float, ForeignKey, Integer, Text, UniqueConstraint, Uuid
from uuid6 import uuid7
from sqlmodel import Column, SQLModel, Field, Relationship, String
from storefront.common.utils import now


class Users(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    public_id: uuid.UUID = Field(
        default_factory=uuid7,
        sa_column=Column(Uuid(as_uuid=True), unique=True, index=True, nullable=False)
    )
    email: Optional[str] = Field(default=None,sa_column=Column(String(320), nullable=True,unique=True))
    name: Optional[str] = Field(default=None, sa_column=Column(String(128), nullable=True))
    created_at: datetime = Field(default_factory=now,
        sa_column=Column(DateTime(timezone=True), nullable=False,default=now))
    deleted_at: Optional[datetime] = Field(default=None,
        sa_column=Column(DateTime(timezone=True)))

    # the wishlist exists implicitly (empty) from registration; rows only appear on add
    wishlist_items: List["WishlistItem"] = Relationship(back_populates="user",
                                                        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
                                                        passive_deletes=True)


class Product(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)   # storage ref used by wishlist rows
    product_id: int = Field(sa_column=Column(BigInteger, unique=True, index=True, nullable=False))  # public id
    product_name: str = Field(sa_column=Column(String(255), nullable=False))
    brand: str = Field(sa_column=Column(String(128), nullable=False, index=True))
    category: str = Field(sa_column=Column(String(128), nullable=False, index=True))
    gender: str = Field(sa_column=Column(String(16), nullable=False, index=True))
    primary_colour: Optional[str] = Field(default=None, sa_column=Column(String(64), nullable=True, index=True))

    price: int = Field(sa_column=Column(Integer, nullable=False, index=True))
    mrp: int = Field(sa_column=Column(Integer, nullable=False))
    discount_display_label: Optional[str] = Field(default=None, sa_column=Column(String(128), nullable=True))

    search_image: Optional[str] = Field(default=None, sa_column=Column(String(1024), nullable=True))
    additional_info: Optional[str] = Field(default=None, sa_column=Column(Text(), nullable=True))
    rating: float = Field(default=0, sa_column=Column(Float, nullable=False, default=0, index=True))
    rating_count: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))

    # soft delete
    is_active: bool = Field(default=True, sa_column=Column(Boolean, nullable=False, default=True, index=True))
    # materialised from variants, rewritten by every inventory write path
    is_out_of_stock: bool = Field(default=False, sa_column=Column(Boolean, nullable=False, default=False, index=True))

    created_at: datetime = Field(default_factory=now,
        sa_column=Column(DateTime(timezone=True), nullable=False,default=now))
    updated_at: datetime = Field(default_factory=now,
        sa_column=Column(DateTime(timezone=True), nullable=False,default=now, onupdate=now))

    variants: List["ProductVariant"] = Relationship(back_populates="product",
                                                    sa_relationship_kwargs={"cascade": "all, delete-orphan",
                                                                            "order_by": "ProductVariant.position"})


class ProductVariant(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    product_pk: int = Field(sa_column=Column(ForeignKey("product.id", ondelete="CASCADE"), index=True, nullable=False))
    sku_id: int = Field(sa_column=Column(BigInteger, unique=True, index=True, nullable=False))  # unique across the catalog
    label: str = Field(sa_column=Column(String(64), nullable=False))
    inventory_count: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    available: bool = Field(default=True, sa_column=Column(Boolean, nullable=False, default=True, index=True))
    position: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))

    product: "Product" = Relationship(back_populates="variants")

    __table_args__ = (CheckConstraint("inventory_count >= 0", name="ck_productvariant_inventory_non_negative"),)


class WishlistItem(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(sa_column=Column(ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False))
    product_pk: int = Field(sa_column=Column(ForeignKey("product.id", ondelete="CASCADE"), index=True, nullable=False))
    created_at: datetime = Field(default_factory=now,
        sa_column=Column(DateTime(timezone=True), nullable=False, default=now))

    user: "Users" = Relationship(back_populates="wishlist_items")

    # one row per (user, product): the wishlist is a set
    __table_args__ = (UniqueConstraint("user_id", "product_pk", name="uq_wishlistitem_user_id_product_pk"),)

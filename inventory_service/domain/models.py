from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import (
    String, Text, Integer, Float, Numeric, JSON, DateTime, ForeignKey,
    UniqueConstraint, CheckConstraint, func,
)
from typing import Any, Optional
import datetime

class Base(DeclarativeBase):
    pass

class Warehouse(Base):
    __tablename__ = "warehouses"
    id: Mapped[int] = mapped_column(primary_key=True)
    address: Mapped[str] = mapped_column(String(255))

class Product(Base):
    __tablename__ = "products"
    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # Free-form characteristics, stored as a JSON blob in the "features" column
    attributes: Mapped[dict[str, Any]] = mapped_column("features", JSON, default=dict)
    # Weight of one unit, kg
    weight: Mapped[float] = mapped_column(Float, default=0)
    barcode: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

class InventoryRecord(Base):
    __tablename__ = "inventory"
    __table_args__ = (
        UniqueConstraint("productid", "warehouseid", name="uq_inventory_product_warehouse"),
        CheckConstraint("quantity >= 0", name="ck_inventory_quantity_non_negative"),
    )
    id: Mapped[int] = mapped_column(primary_key=True)
    product_id: Mapped[int] = mapped_column("productid", ForeignKey("products.id", ondelete="RESTRICT"), index=True)
    warehouse_id: Mapped[int] = mapped_column("warehouseid", ForeignKey("warehouses.id", ondelete="RESTRICT"), index=True)
    quantity: Mapped[int] = mapped_column(Integer, default=0)
    price: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False))
    # Fraction of the price, 0.0 - 1.0
    discount: Mapped[float] = mapped_column(Float, default=0.0)

class AnalyticsRecord(Base):
    __tablename__ = "analytics"
    id: Mapped[int] = mapped_column(primary_key=True)
    warehouse_id: Mapped[int] = mapped_column(ForeignKey("warehouses.id", ondelete="RESTRICT"), index=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id", ondelete="RESTRICT"), index=True)
    quantity: Mapped[int] = mapped_column(Integer)
    total_amount: Mapped[float] = mapped_column(Numeric(14, 2, asdecimal=False))
    recorded_at: Mapped[datetime.datetime] = mapped_column(DateTime, server_default=func.now())

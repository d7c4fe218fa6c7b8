import math
from sqlalchemy import select, func
from sqlalchemy.orm import Session
from shared.core import get_logger
from inventory_service.domain.models import AnalyticsRecord, Product, Warehouse
from inventory_service.domain.errors import ValidationError, NotFoundError
from .schemas import SaleCreate, ProductSalesRead, WarehouseRevenueRead

class AnalyticsService:
    def __init__(self, db: Session, logger=None):
        self.db = db
        self.logger = logger or get_logger(__name__)

    def record_sale(self, data: SaleCreate) -> AnalyticsRecord:
        if data.quantity < 0:
            raise ValidationError("Sold quantity cannot be negative")
        if not math.isfinite(data.total_amount) or data.total_amount < 0:
            raise ValidationError(f"Sale amount must be a non-negative number, got {data.total_amount}")
        if self.db.get(Warehouse, data.warehouse_id) is None:
            raise NotFoundError(f"Warehouse {data.warehouse_id} not found")
        if self.db.get(Product, data.product_id) is None:
            raise NotFoundError(f"Product {data.product_id} not found")

        obj = AnalyticsRecord(**data.model_dump())
        self.db.add(obj)
        self.db.commit()
        self.logger.info(
            "Sale recorded",
            extra={'extra_fields': data.model_dump()}
        )
        return obj

    def by_warehouse(self, warehouse_id: int) -> list[ProductSalesRead]:
        """Units sold and revenue per product for one warehouse, by product name."""
        stmt = (
            select(
                Product.name,
                func.coalesce(func.sum(AnalyticsRecord.quantity), 0),
                func.coalesce(func.sum(AnalyticsRecord.total_amount), 0),
            )
            .join(Product, Product.id == AnalyticsRecord.product_id)
            .where(AnalyticsRecord.warehouse_id == warehouse_id)
            .group_by(Product.id, Product.name)
            .order_by(Product.name, Product.id)
        )
        return [
            ProductSalesRead(product_name=name, total_sold=int(sold), total_revenue=round(float(revenue), 2))
            for name, sold, revenue in self.db.execute(stmt)
        ]

    def top_warehouses(self, limit: int = 10) -> list[WarehouseRevenueRead]:
        """Warehouses ranked by recorded revenue, highest first; ties by id."""
        if limit < 1:
            raise ValidationError("Limit must be at least 1")
        revenue = func.sum(AnalyticsRecord.total_amount)
        stmt = (
            select(Warehouse.id, Warehouse.address, revenue)
            .join(AnalyticsRecord, AnalyticsRecord.warehouse_id == Warehouse.id)
            .group_by(Warehouse.id, Warehouse.address)
            .order_by(revenue.desc(), Warehouse.id)
            .limit(limit)
        )
        return [
            WarehouseRevenueRead(warehouse_id=wid, address=address, total_revenue=round(float(total), 2))
            for wid, address, total in self.db.execute(stmt)
        ]

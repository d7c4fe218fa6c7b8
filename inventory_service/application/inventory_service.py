import math
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Iterable, Optional
from shared.core import get_logger
from inventory_service.domain.models import InventoryRecord, Product, Warehouse, AnalyticsRecord
from inventory_service.domain.errors import ValidationError, NotFoundError, InsufficientStockError
from .schemas import InventoryCreate, LineItem, PurchaseLineRead, PurchaseRead

def _check_discount(discount: float):
    if not 0.0 <= discount <= 1.0:
        raise ValidationError(f"Discount must be a fraction between 0 and 1, got {discount}")

def _merge_items(items: Iterable[LineItem]) -> dict[int, int]:
    """Sum quantities per product; every requested quantity must be positive."""
    merged: dict[int, int] = {}
    for item in items:
        if item.quantity <= 0:
            raise ValidationError(f"Quantity for product {item.product_id} must be positive")
        merged[item.product_id] = merged.get(item.product_id, 0) + item.quantity
    if not merged:
        raise ValidationError("At least one item is required")
    return merged

class InventoryService:
    def __init__(self, db: Session, logger=None):
        self.db = db
        self.logger = logger or get_logger(__name__)

    def get(self, record_id: int) -> InventoryRecord:
        record = self.db.get(InventoryRecord, record_id, populate_existing=True)
        if record is None:
            raise NotFoundError(f"Inventory record {record_id} not found")
        return record

    def get_by_warehouse(self, warehouse_id: int) -> list[InventoryRecord]:
        stmt = (
            select(InventoryRecord)
            .where(InventoryRecord.warehouse_id == warehouse_id)
            .order_by(InventoryRecord.id)
        )
        return list(self.db.scalars(stmt))

    def create(self, data: InventoryCreate) -> InventoryRecord:
        if data.quantity < 0:
            raise ValidationError("Quantity cannot be negative")
        if not math.isfinite(data.price) or data.price < 0:
            raise ValidationError(f"Price must be a non-negative number, got {data.price}")
        _check_discount(data.discount)

        if self.db.get(Product, data.product_id) is None:
            raise NotFoundError(f"Product {data.product_id} not found")
        if self.db.get(Warehouse, data.warehouse_id) is None:
            raise NotFoundError(f"Warehouse {data.warehouse_id} not found")

        obj = InventoryRecord(**data.model_dump())
        self.db.add(obj)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            # Only a clash on the (product, warehouse) pair is the caller's fault
            if self._available(data.warehouse_id, data.product_id) is None:
                raise
            raise ValidationError(
                f"Product {data.product_id} is already stocked in warehouse {data.warehouse_id}"
            ) from e
        self.db.refresh(obj)
        self.logger.info(
            "Inventory record created",
            extra={'extra_fields': {'inventory_id': obj.id, 'product_id': obj.product_id,
                                    'warehouse_id': obj.warehouse_id, 'quantity': obj.quantity}}
        )
        return obj

    def increase_quantity(self, record_id: int, delta: int) -> InventoryRecord:
        """Add ``delta`` (either sign) to the stock of one record, refusing to go below zero."""
        result = self.db.execute(
            update(InventoryRecord)
            .where(InventoryRecord.id == record_id, InventoryRecord.quantity + delta >= 0)
            .values(quantity=InventoryRecord.quantity + delta)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.db.rollback()
            record = self.get(record_id)
            raise ValidationError(
                f"Adjusting inventory record {record_id} by {delta} would leave "
                f"{record.quantity + delta} units"
            )
        self.db.commit()
        self.logger.info(
            "Inventory quantity adjusted",
            extra={'extra_fields': {'inventory_id': record_id, 'delta': delta}}
        )
        return self.get(record_id)

    def apply_discount(self, product_ids: Iterable[int], discount: float) -> int:
        _check_discount(discount)
        ids = set(product_ids)
        if not ids:
            return 0
        result = self.db.execute(
            update(InventoryRecord)
            .where(InventoryRecord.product_id.in_(sorted(ids)))
            .values(discount=discount)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        self.logger.info(
            "Discount applied",
            extra={'extra_fields': {'product_ids': sorted(ids), 'discount': discount,
                                    'updated': result.rowcount}}
        )
        return result.rowcount

    def compute_summary(self, warehouse_id: int, items: Iterable[LineItem]) -> float:
        """Total list price of a basket at one warehouse, discounts not applied."""
        items = list(items)
        for item in items:
            if item.quantity <= 0:
                raise ValidationError(f"Quantity for product {item.product_id} must be positive")

        prices = dict(self.db.execute(
            select(InventoryRecord.product_id, InventoryRecord.price).where(
                InventoryRecord.warehouse_id == warehouse_id,
                InventoryRecord.product_id.in_(sorted({item.product_id for item in items})),
            )
        ).all())

        total = 0.0
        for item in items:
            if item.product_id not in prices:
                raise NotFoundError(
                    f"Product {item.product_id} is not stocked in warehouse {warehouse_id}"
                )
            total += prices[item.product_id] * item.quantity
        return round(total, 2)

    def purchase(self, warehouse_id: int, items: Iterable[LineItem]) -> PurchaseRead:
        """
        Take a basket out of stock as a single transaction.

        Each line is an atomic conditional decrement, so concurrent purchases of
        the same record are serialized by the database and can never oversell.
        The first line that cannot be satisfied rolls back every line before it.
        Every line sold is also recorded as an analytics fact.
        """
        merged = _merge_items(items)
        lines: list[PurchaseLineRead] = []
        try:
            # Lock rows in product id order so concurrent baskets cannot deadlock
            for product_id in sorted(merged):
                quantity = merged[product_id]
                result = self.db.execute(
                    update(InventoryRecord)
                    .where(
                        InventoryRecord.warehouse_id == warehouse_id,
                        InventoryRecord.product_id == product_id,
                        InventoryRecord.quantity >= quantity,
                    )
                    .values(quantity=InventoryRecord.quantity - quantity)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    raise InsufficientStockError(
                        product_id, quantity, self._available(warehouse_id, product_id)
                    )

                price, discount = self.db.execute(
                    select(InventoryRecord.price, InventoryRecord.discount).where(
                        InventoryRecord.warehouse_id == warehouse_id,
                        InventoryRecord.product_id == product_id,
                    )
                ).one()
                amount = round(price * (1 - discount) * quantity, 2)
                self.db.add(AnalyticsRecord(
                    warehouse_id=warehouse_id,
                    product_id=product_id,
                    quantity=quantity,
                    total_amount=amount,
                ))
                lines.append(PurchaseLineRead(
                    product_id=product_id,
                    quantity=quantity,
                    unit_price=price,
                    discount=discount,
                    amount=amount,
                ))
            self.db.commit()
        except InsufficientStockError as e:
            self.db.rollback()
            self.logger.warning(
                "Purchase rejected: insufficient stock",
                extra={'extra_fields': {'warehouse_id': warehouse_id, 'product_id': e.product_id,
                                        'requested': e.requested, 'available': e.available}}
            )
            raise

        total = round(sum(line.amount for line in lines), 2)
        self.logger.info(
            "Purchase completed",
            extra={'extra_fields': {'warehouse_id': warehouse_id, 'lines': len(lines), 'total': total}}
        )
        return PurchaseRead(warehouse_id=warehouse_id, items=lines, total=total)

    def _available(self, warehouse_id: int, product_id: int) -> Optional[int]:
        return self.db.scalar(
            select(InventoryRecord.quantity).where(
                InventoryRecord.warehouse_id == warehouse_id,
                InventoryRecord.product_id == product_id,
            )
        )

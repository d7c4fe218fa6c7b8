from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Any, Optional

class CamelModel(BaseModel):
    """Serialized with camelCase keys; snake_case is accepted on input as well."""
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True

# Warehouses

class WarehouseCreate(CamelModel):
    address: str

class WarehouseRead(CamelModel):
    id: int
    address: str

# Products

class ProductCreate(CamelModel):
    name: str
    description: Optional[str] = None
    attributes: dict[str, Any] = {}
    weight: float = 0
    barcode: Optional[str] = None

class ProductUpdate(CamelModel):
    # Only these two fields may change after creation
    description: Optional[str] = None
    attributes: Optional[dict[str, Any]] = None

class ProductRead(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    attributes: dict[str, Any] = {}
    weight: float
    barcode: Optional[str] = None

# Inventory

class InventoryCreate(CamelModel):
    product_id: int
    warehouse_id: int
    quantity: int
    price: float
    discount: float = 0.0

class InventoryQuantityUpdate(CamelModel):
    # Signed delta added to the stored quantity
    quantity: int

class InventoryRead(CamelModel):
    id: int
    product_id: int
    warehouse_id: int
    quantity: int
    price: float
    discount: float

class DiscountRequest(CamelModel):
    product_ids: list[int]
    discount: float

class DiscountResult(CamelModel):
    updated: int

class LineItem(CamelModel):
    product_id: int
    quantity: int

class BasketRequest(CamelModel):
    warehouse_id: int
    items: list[LineItem]

class SummaryRead(CamelModel):
    total: float

class PurchaseLineRead(CamelModel):
    product_id: int
    quantity: int
    unit_price: float
    discount: float
    amount: float

class PurchaseRead(CamelModel):
    warehouse_id: int
    items: list[PurchaseLineRead]
    total: float

# Analytics

class SaleCreate(CamelModel):
    warehouse_id: int
    product_id: int
    quantity: int
    total_amount: float

class ProductSalesRead(CamelModel):
    product_name: str
    total_sold: int
    total_revenue: float

class WarehouseRevenueRead(CamelModel):
    warehouse_id: int
    address: str
    total_revenue: float

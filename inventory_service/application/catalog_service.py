import math
from sqlalchemy import select
from sqlalchemy.orm import Session
from shared.core import get_logger
from inventory_service.domain.models import Warehouse, Product
from inventory_service.domain.errors import ValidationError, NotFoundError
from .schemas import WarehouseCreate, ProductCreate, ProductUpdate

class WarehouseService:
    def __init__(self, db: Session, logger=None):
        self.db = db
        self.logger = logger or get_logger(__name__)

    def list(self):
        return list(self.db.scalars(select(Warehouse).order_by(Warehouse.id)))

    def create(self, data: WarehouseCreate) -> Warehouse:
        address = data.address.strip()
        if not address:
            raise ValidationError("Warehouse address is required")
        obj = Warehouse(address=address)
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        self.logger.info("Warehouse created", extra={'extra_fields': {'warehouse_id': obj.id}})
        return obj

class ProductService:
    def __init__(self, db: Session, logger=None):
        self.db = db
        self.logger = logger or get_logger(__name__)

    def list(self):
        return list(self.db.scalars(select(Product).order_by(Product.id)))

    def get(self, product_id: int) -> Product:
        product = self.db.get(Product, product_id)
        if product is None:
            raise NotFoundError(f"Product {product_id} not found")
        return product

    def create(self, data: ProductCreate) -> Product:
        if not data.name.strip():
            raise ValidationError("Product name is required")
        if not math.isfinite(data.weight) or data.weight < 0:
            raise ValidationError(f"Product weight must be a non-negative number, got {data.weight}")
        obj = Product(**data.model_dump())
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        self.logger.info("Product created", extra={'extra_fields': {'product_id': obj.id}})
        return obj

    def update(self, product_id: int, data: ProductUpdate) -> Product:
        product = self.get(product_id)

        # Update only provided fields
        changes = data.model_dump(exclude_unset=True)
        if "description" in changes:
            product.description = changes["description"]
        if "attributes" in changes:
            product.attributes = changes["attributes"] or {}

        self.db.commit()
        self.db.refresh(product)
        return product

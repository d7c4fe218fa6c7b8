from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from inventory_service.infrastructure.db import get_db
from inventory_service.application.catalog_service import WarehouseService, ProductService
from inventory_service.application.schemas import (
    WarehouseCreate, WarehouseRead, ProductCreate, ProductRead, ProductUpdate,
)

warehouse_router = APIRouter(prefix="/warehouses", tags=["warehouses"])
product_router = APIRouter(prefix="/products", tags=["products"])

@warehouse_router.get("", response_model=list[WarehouseRead])
def list_warehouses(db: Session = Depends(get_db)):
    return WarehouseService(db).list()

@warehouse_router.post("/create", response_model=WarehouseRead, status_code=201)
def create_warehouse(payload: WarehouseCreate, db: Session = Depends(get_db)):
    return WarehouseService(db).create(payload)

@product_router.get("", response_model=list[ProductRead])
def list_products(db: Session = Depends(get_db)):
    return ProductService(db).list()

@product_router.post("/create", response_model=ProductRead, status_code=201)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    return ProductService(db).create(payload)

@product_router.put("/update/{product_id}", response_model=ProductRead)
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    """Only description and attributes can change; omitted fields are kept."""
    return ProductService(db).update(product_id, payload)

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from inventory_service.infrastructure.db import get_db
from inventory_service.application.inventory_service import InventoryService
from inventory_service.application.schemas import (
    InventoryCreate, InventoryRead, InventoryQuantityUpdate, DiscountRequest, DiscountResult,
    BasketRequest, SummaryRead, PurchaseRead,
)

router = APIRouter(prefix="/inventory", tags=["inventory"])

@router.post("/create", response_model=InventoryRead, status_code=201)
def create_inventory(payload: InventoryCreate, db: Session = Depends(get_db)):
    return InventoryService(db).create(payload)

@router.post("/discount", response_model=DiscountResult)
def apply_discount(payload: DiscountRequest, db: Session = Depends(get_db)):
    updated = InventoryService(db).apply_discount(payload.product_ids, payload.discount)
    return DiscountResult(updated=updated)

@router.post("/summary", response_model=SummaryRead)
def compute_summary(payload: BasketRequest, db: Session = Depends(get_db)):
    total = InventoryService(db).compute_summary(payload.warehouse_id, payload.items)
    return SummaryRead(total=total)

@router.post("/purchase", response_model=PurchaseRead)
def purchase(payload: BasketRequest, db: Session = Depends(get_db)):
    return InventoryService(db).purchase(payload.warehouse_id, payload.items)

@router.get("/warehouse/{warehouse_id}", response_model=list[InventoryRead])
def list_warehouse_inventory(warehouse_id: int, db: Session = Depends(get_db)):
    return InventoryService(db).get_by_warehouse(warehouse_id)

@router.get("/{inventory_id}", response_model=InventoryRead)
def get_inventory(inventory_id: int, db: Session = Depends(get_db)):
    return InventoryService(db).get(inventory_id)

@router.put("/{inventory_id}", response_model=InventoryRead)
def adjust_inventory(inventory_id: int, payload: InventoryQuantityUpdate, db: Session = Depends(get_db)):
    """Add the signed ``quantity`` delta to the stored stock."""
    return InventoryService(db).increase_quantity(inventory_id, payload.quantity)

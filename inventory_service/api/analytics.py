from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session
from inventory_service.core_settings import get_settings
from inventory_service.infrastructure.db import get_db
from inventory_service.application.analytics_service import AnalyticsService
from inventory_service.application.schemas import SaleCreate, ProductSalesRead, WarehouseRevenueRead

router = APIRouter(tags=["analytics"])

TOP_WAREHOUSES_LIMIT = get_settings().TOP_WAREHOUSES_LIMIT

@router.put("/analytics", status_code=204)
def record_sale(payload: SaleCreate, db: Session = Depends(get_db)):
    AnalyticsService(db).record_sale(payload)
    return Response(status_code=204)

@router.get("/analytics/warehouse/{warehouse_id}", response_model=list[ProductSalesRead])
def warehouse_analytics(warehouse_id: int, db: Session = Depends(get_db)):
    return AnalyticsService(db).by_warehouse(warehouse_id)

@router.get("/top-warehouses", response_model=list[WarehouseRevenueRead])
def top_warehouses(
    db: Session = Depends(get_db),
    limit: int = Query(TOP_WAREHOUSES_LIMIT, ge=1, le=TOP_WAREHOUSES_LIMIT, description="Number of warehouses to return")
):
    return AnalyticsService(db).top_warehouses(limit)

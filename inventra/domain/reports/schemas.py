# inventra/domain/reports/schemas.py
from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel
from typing import List
from uuid import UUID

class LowStockItem(BaseModel):
    sku: str
    name: str
    on_hand: int
    unit_price: Decimal
    low_stock_threshold: int

class ReportSummary(BaseModel):
    products: int
    categories: int
    suppliers: int
    customers: int
    low_stock: int
    total_stock_value: Decimal
    low_stock_items: List[LowStockItem]

class CategoryValuation(BaseModel):
    category: str
    value: Decimal

class DailyMovement(BaseModel):
    date: date
    quantity: int

class AgingItem(BaseModel):
    id: UUID
    sku: str
    name: str
    category: str
    on_hand: int
    unit_price: Decimal
    last_movement_at: datetime
    days_since_movement: int

class AdvancedReport(BaseModel):
    valuation: List[CategoryValuation]
    movement_last_30: List[DailyMovement]
    aging: List[AgingItem]

# CATERING/backend/catering/schemas/schemas.py

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from typing import Optional, List, Literal, Dict, Any
from datetime import datetime, date
from decimal import Decimal

EventStatus = Literal["planned", "completed"]
# Alias : un champ nommé "date" masquerait le type dans le corps de classe
EventDate = date

# ---------- USER SCHEMAS ----------
class UserCreate(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)
    full_name: Optional[str] = None

class UserLogin(BaseModel):
    email: str
    password: str

class UserOut(BaseModel):
    id: int
    email: str
    user_metadata: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(from_attributes=True)

# ---------- TOKEN SCHEMA ----------
class Token(BaseModel):
    access_token: str
    token_type: str

# ---------- EVENT SCHEMAS ----------
class EventCreate(BaseModel):
    name: str = Field(..., min_length=1)
    date: EventDate
    client_name: Optional[str] = None
    location: Optional[str] = None
    status: EventStatus = "planned"
    pax: int = Field(0, ge=0)
    booked_amount: Decimal = Field(Decimal("0"), ge=0)
    notes: Optional[str] = None

class EventUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    date: Optional[EventDate] = None
    client_name: Optional[str] = None
    location: Optional[str] = None
    status: Optional[EventStatus] = None
    pax: Optional[int] = Field(None, ge=0)
    booked_amount: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = None

class EventOut(BaseModel):
    id: int
    name: str
    date: EventDate
    client_name: Optional[str] = None
    location: Optional[str] = None
    status: str
    pax: int
    booked_amount: float
    notes: Optional[str] = None
    created_by: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer('created_at', 'updated_at')
    def serialize_datetime(self, value: Optional[datetime]) -> Optional[str]:
        """Sérialise un datetime en chaîne ISO 8601 pour JSON."""
        return value.isoformat() if value else None

class EventWithTotals(EventOut):
    total_expenses: float = 0
    expense_count: int = 0
    profit: float = 0
    profit_margin: float = 0

# ---------- CATEGORY SCHEMAS ----------
class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1)

class CategoryOut(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)

# ---------- EXPENSE SCHEMAS ----------
class ExpenseCreate(BaseModel):
    description: str = Field(..., min_length=1)
    amount: Decimal = Field(..., ge=0)
    expense_date: date
    event_id: int
    category_id: int
    receipt_url: Optional[str] = None
    receipt_file_name: Optional[str] = None

class ExpenseUpdate(BaseModel):
    description: Optional[str] = Field(None, min_length=1)
    amount: Optional[Decimal] = Field(None, ge=0)
    expense_date: Optional[date] = None
    event_id: Optional[int] = None
    category_id: Optional[int] = None
    receipt_url: Optional[str] = None
    receipt_file_name: Optional[str] = None

class ExpenseOut(BaseModel):
    id: int
    description: str
    amount: float
    expense_date: date
    event_id: int
    category_id: int
    category_name: Optional[str] = None
    event_name: Optional[str] = None
    receipt_url: Optional[str] = None
    receipt_file_name: Optional[str] = None
    receipt_uploaded_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer('receipt_uploaded_at', 'created_at')
    def serialize_datetime(self, value: Optional[datetime]) -> Optional[str]:
        """Sérialise un datetime en chaîne ISO 8601 pour JSON."""
        return value.isoformat() if value else None

# ---------- RECEIPT SCHEMAS ----------
class ReceiptUploadOut(BaseModel):
    url: str
    filename: str
    size: int

# ---------- ANALYTICS SCHEMAS ----------
class EventProfitOut(BaseModel):
    event_id: int
    event_name: str
    client_name: str
    event_date: date
    status: str
    pax: int
    booked_amount: float
    total_expenses: float
    profit: float
    profit_margin: float

    model_config = ConfigDict(from_attributes=True)

class PeriodProfitOut(BaseModel):
    period: str
    total_revenue: float
    total_expenses: float
    total_profit: float
    profit_margin: float
    event_count: int

    model_config = ConfigDict(from_attributes=True)

class ProfitSummary(BaseModel):
    total_revenue: float
    total_expenses: float
    total_profit: float
    profit_margin: float
    average_profit_margin: float
    expense_ratio: float
    event_count: int
    profitable_events: int
    loss_events: int

    model_config = ConfigDict(from_attributes=True)

class EventProfitabilityResponse(BaseModel):
    sort_by: str
    events: List[EventProfitOut]
    summary: ProfitSummary

class PeriodProfitabilityResponse(BaseModel):
    mode: str
    periods: List[PeriodProfitOut]
    summary: ProfitSummary

class CategoryBreakdown(BaseModel):
    category: str
    total: float
    count: int
    percentage: float

    model_config = ConfigDict(from_attributes=True)

class ExpenseTrendPoint(BaseModel):
    period: str
    total: float
    count: int

    model_config = ConfigDict(from_attributes=True)

class DashboardOverview(BaseModel):
    total_events: int
    planned_events: int
    completed_events: int
    total_expenses: float
    expense_count: int
    recent_expenses: List[ExpenseOut]
    expenses_by_category: List[CategoryBreakdown]
    monthly_trend: List[ExpenseTrendPoint]

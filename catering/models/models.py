# CATERING/backend/catering/models/models.py

from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, DateTime, Date, Text, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from catering.database import Base
from catering.constants import DEFAULT_EVENT_STATUS

class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    user_metadata = Column(JSON, default=dict)
    created_at = Column(DateTime, default=datetime.utcnow)

    events = relationship("Event", back_populates="owner", cascade="all, delete-orphan")

class Event(Base):
    __tablename__ = "events"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    date = Column(Date, nullable=False, index=True)
    client_name = Column(String, nullable=True)
    location = Column(String, nullable=True)
    status = Column(String, nullable=False, default=DEFAULT_EVENT_STATUS)
    pax = Column(Integer, nullable=False, default=0)  # nombre d'invités
    booked_amount = Column(Numeric(12, 2), nullable=False, default=0)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    created_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    owner = relationship("User", back_populates="events")
    expenses = relationship("Expense", back_populates="event", cascade="all, delete-orphan")

class ExpenseCategory(Base):
    __tablename__ = "expense_categories"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)

    expenses = relationship("Expense", back_populates="category")

class Expense(Base):
    __tablename__ = "expenses"
    id = Column(Integer, primary_key=True)
    description = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    expense_date = Column(Date, nullable=False, index=True)
    receipt_url = Column(String, nullable=True)
    receipt_file_name = Column(String, nullable=True)
    receipt_uploaded_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("expense_categories.id"), nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    event = relationship("Event", back_populates="expenses")
    category = relationship("ExpenseCategory", back_populates="expenses")

    @property
    def category_name(self):
        return self.category.name if self.category else None

    @property
    def event_name(self):
        return self.event.name if self.event else None

# CATERING/backend/tests/conftest.py : configuration pour les tests

import os
import sys
import tempfile
from pathlib import Path

# Ajoute le dossier parent au PYTHONPATH
BASE_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(BASE_DIR))

# Configuration lue à l'import de catering.config : à fixer avant tout import de l'application
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["RECEIPT_STORAGE"] = "local"
os.environ["RECEIPTS_DIR"] = tempfile.mkdtemp(prefix="catering-receipts-")
os.environ["PUBLIC_BASE_URL"] = "http://testserver"
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from types import SimpleNamespace
from datetime import date
from decimal import Decimal


@pytest.fixture
def make_event():
    """Fabrique d'événements minimalistes pour les fonctions d'agrégation"""
    def _make(id, booked_amount, event_date=date(2024, 1, 15), name=None, **extra):
        return SimpleNamespace(
            id=id,
            name=name or f"Event {id}",
            date=event_date,
            client_name=extra.get("client_name", "Client"),
            booked_amount=None if booked_amount is None else Decimal(str(booked_amount)),
            pax=extra.get("pax", 100),
            status=extra.get("status", "planned"),
        )
    return _make


@pytest.fixture
def make_expense():
    """Fabrique de dépenses minimalistes pour les fonctions d'agrégation"""
    def _make(event_id, amount, expense_date=date(2024, 1, 10), category_name=None, description="Expense"):
        return SimpleNamespace(
            event_id=event_id,
            amount=Decimal(str(amount)),
            expense_date=expense_date,
            category_name=category_name,
            description=description,
        )
    return _make

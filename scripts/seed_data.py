# CATERING/backend/scripts/seed_data.py : script pour générer des données de test

#!/usr/bin/env python
"""Script pour générer des données de démo réalistes"""

import random
import sys
import os
from datetime import date, timedelta
from decimal import Decimal
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from catering.database import SessionLocal, create_tables, drop_tables
from catering.models import models
from catering.auth import hash_password
from catering.repository import seed_default_categories

CLIENTS = ["Sharma Family", "Infosys Ltd", "Patel Wedding", "Rotary Club", "Mehta & Sons"]
EVENT_TYPES = ["Wedding Reception", "Corporate Lunch", "Birthday Party", "Engagement", "Conference Dinner"]
LOCATIONS = ["Bengaluru", "Mysuru", "Chennai", "Hyderabad"]

def generate_test_data(reset=False):
    """Génère des données de démo : un utilisateur, des événements et leurs dépenses"""
    if reset:
        drop_tables()
    create_tables()
    db = SessionLocal()
    seed_default_categories(db)
    categories = db.query(models.ExpenseCategory).all()

    demo_user = db.query(models.User).filter(models.User.email == "demo@catering.app").first()
    if not demo_user:
        demo_user = models.User(
            email="demo@catering.app",
            password_hash=hash_password("demo123"),
            user_metadata={"full_name": "Demo Caterer"}
        )
        db.add(demo_user)
        db.commit()
        db.refresh(demo_user)

    # Un événement tous les 5 jours environ sur un an
    today = date.today()
    for days_ago in range(0, 365, 5):
        event_date = today - timedelta(days=days_ago - 30)
        pax = random.randint(50, 600)
        event = models.Event(
            name=random.choice(EVENT_TYPES),
            date=event_date,
            client_name=random.choice(CLIENTS),
            location=random.choice(LOCATIONS),
            status="planned" if event_date > today else "completed",
            pax=pax,
            booked_amount=Decimal(pax * random.randint(600, 1500)),
            created_by=demo_user.id
        )
        db.add(event)
        db.flush()

        # 2 à 6 dépenses par événement
        for _ in range(random.randint(2, 6)):
            category = random.choice(categories)
            db.add(models.Expense(
                description=f"{category.name} - {event.name}",
                amount=Decimal(random.randint(2000, 60000)),
                expense_date=event_date - timedelta(days=random.randint(0, 7)),
                event_id=event.id,
                category_id=category.id,
                created_by=demo_user.id
            ))

    db.commit()
    db.close()
    print("✅ Données de démo générées avec succès!")
    print(f"👤 Utilisateur de démo: demo@catering.app / demo123")

if __name__ == "__main__":
    # --reset : repart d'une base vide
    generate_test_data(reset="--reset" in sys.argv)

# CATERING/backend/tests/test_events.py : tests des événements et des catégories

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from catering.main import app
from catering.database import Base, get_db
from catering.repository import seed_default_categories
from catering.constants import DEFAULT_CATEGORIES

# Base de données de test
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()

app.dependency_overrides[get_db] = override_get_db

client = TestClient(app)

def _auth_headers(email, password="Test123!"):
    client.post("/auth/signup", json={"email": email, "password": password})
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}

class TestEvents:
    def setup_method(self):
        """Créer les tables et un utilisateur avant chaque test"""
        Base.metadata.create_all(bind=engine)
        with TestingSessionLocal() as db:
            seed_default_categories(db)
        self.headers = _auth_headers("caterer@example.com")

    def teardown_method(self):
        """Supprimer les tables après chaque test"""
        Base.metadata.drop_all(bind=engine)

    def _create_event(self, headers=None, **overrides):
        payload = {
            "name": "Sharma Wedding",
            "date": "2024-02-10",
            "client_name": "Sharma Family",
            "location": "Bengaluru",
            "pax": 250,
            "booked_amount": 10000,
            **overrides
        }
        response = client.post("/events/", json=payload, headers=headers or self.headers)
        assert response.status_code == 201
        return response.json()

    def _category_id(self, name="Food"):
        categories = client.get("/categories/", headers=self.headers).json()
        return next(c["id"] for c in categories if c["name"] == name)

    def _create_expense(self, event_id, amount, **overrides):
        payload = {
            "description": "Expense",
            "amount": amount,
            "expense_date": "2024-02-08",
            "event_id": event_id,
            "category_id": self._category_id(),
            **overrides
        }
        response = client.post("/expenses/", json=payload, headers=self.headers)
        assert response.status_code == 201
        return response.json()

    def test_create_event(self):
        """Test de création d'un événement"""
        data = self._create_event()

        assert data["name"] == "Sharma Wedding"
        assert data["date"] == "2024-02-10"
        assert data["status"] == "planned"
        assert data["booked_amount"] == 10000
        assert data["pax"] == 250
        assert "id" in data

    def test_create_event_validation(self):
        response = client.post("/events/", json={"name": "", "date": "2024-02-10"}, headers=self.headers)
        assert response.status_code == 422

        response = client.post("/events/", json={
            "name": "Lunch", "date": "2024-02-10", "booked_amount": -5
        }, headers=self.headers)
        assert response.status_code == 422

        response = client.post("/events/", json={
            "name": "Lunch", "date": "2024-02-10", "status": "cancelled"
        }, headers=self.headers)
        assert response.status_code == 422

    def test_list_events_newest_first(self):
        self._create_event(name="January", date="2024-01-05")
        self._create_event(name="March", date="2024-03-20")
        self._create_event(name="February", date="2024-02-14")

        response = client.get("/events/", headers=self.headers)
        assert response.status_code == 200
        assert [e["name"] for e in response.json()] == ["March", "February", "January"]

    def test_get_event_with_totals(self):
        event = self._create_event()
        self._create_expense(event["id"], 4000)
        self._create_expense(event["id"], 1000)

        response = client.get(f"/events/{event['id']}", headers=self.headers)
        assert response.status_code == 200

        data = response.json()
        assert data["total_expenses"] == 5000
        assert data["expense_count"] == 2
        assert data["profit"] == 5000
        assert data["profit_margin"] == 50

    def test_get_event_without_revenue(self):
        event = self._create_event(booked_amount=0)
        self._create_expense(event["id"], 100)

        data = client.get(f"/events/{event['id']}", headers=self.headers).json()
        assert data["profit"] == -100
        assert data["profit_margin"] == 0

    def test_partial_update(self):
        """Seuls les champs fournis sont modifiés"""
        event = self._create_event(notes="Veg only")

        response = client.put(f"/events/{event['id']}", json={
            "status": "completed",
            "name": None,
            "notes": None
        }, headers=self.headers)
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "completed"
        assert data["name"] == "Sharma Wedding"
        assert data["notes"] is None
        assert data["client_name"] == "Sharma Family"

    def test_update_unknown_event(self):
        response = client.put("/events/9999", json={"name": "Ghost"}, headers=self.headers)
        assert response.status_code == 404

    def test_delete_event_cascades_to_expenses(self):
        event = self._create_event()
        expense = self._create_expense(event["id"], 300)

        response = client.delete(f"/events/{event['id']}", headers=self.headers)
        assert response.status_code == 200
        assert response.json()["message"] == "Événement supprimé avec succès"

        assert client.get(f"/events/{event['id']}", headers=self.headers).status_code == 404
        assert client.get(f"/expenses/{expense['id']}", headers=self.headers).status_code == 404

    def test_delete_unknown_event(self):
        response = client.delete("/events/9999", headers=self.headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Événement non trouvé"

    def test_events_are_private(self):
        """Un utilisateur ne voit jamais les événements d'un autre"""
        event = self._create_event()
        other_headers = _auth_headers("other@example.com")

        assert client.get("/events/", headers=other_headers).json() == []
        assert client.get(f"/events/{event['id']}", headers=other_headers).status_code == 404
        assert client.put(f"/events/{event['id']}", json={"name": "Mine"}, headers=other_headers).status_code == 404
        assert client.delete(f"/events/{event['id']}", headers=other_headers).status_code == 404

        # L'événement est intact pour son propriétaire
        assert client.get(f"/events/{event['id']}", headers=self.headers).json()["name"] == "Sharma Wedding"

class TestCategories:
    def setup_method(self):
        Base.metadata.create_all(bind=engine)
        with TestingSessionLocal() as db:
            seed_default_categories(db)
        self.headers = _auth_headers("caterer@example.com")

    def teardown_method(self):
        Base.metadata.drop_all(bind=engine)

    def test_default_categories(self):
        response = client.get("/categories/", headers=self.headers)
        assert response.status_code == 200
        assert sorted(c["name"] for c in response.json()) == sorted(DEFAULT_CATEGORIES)

    def test_seed_is_idempotent(self):
        with TestingSessionLocal() as db:
            assert seed_default_categories(db) == 0
        assert len(client.get("/categories/", headers=self.headers).json()) == len(DEFAULT_CATEGORIES)

    def test_create_category(self):
        response = client.post("/categories/", json={"name": "Florist"}, headers=self.headers)
        assert response.status_code == 201
        assert response.json()["name"] == "Florist"

        # Les catégories sont partagées entre utilisateurs
        other_headers = _auth_headers("other@example.com")
        names = [c["name"] for c in client.get("/categories/", headers=other_headers).json()]
        assert "Florist" in names

    def test_duplicate_category(self):
        response = client.post("/categories/", json={"name": "Food"}, headers=self.headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "Cette catégorie existe déjà"

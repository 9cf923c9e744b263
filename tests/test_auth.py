# CATERING/backend/tests/test_auth.py : tests pour l'authentification

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from catering.main import app
from catering.database import Base, get_db
from catering.auth import create_access_token
import uuid

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

class TestAuth:
    def setup_method(self):
        """Créer les tables avant chaque test"""
        Base.metadata.create_all(bind=engine)
        self.test_email = "chef@example.com"
        self.test_password = "Test123!"

    def teardown_method(self):
        """Supprimer les tables après chaque test"""
        Base.metadata.drop_all(bind=engine)

    def _signup(self, email=None, password=None, **extra):
        return client.post("/auth/signup", json={
            "email": email or self.test_email,
            "password": password or self.test_password,
            **extra
        })

    def _login(self, email=None, password=None):
        return client.post("/auth/login", json={
            "email": email or self.test_email,
            "password": password or self.test_password
        })

    def test_signup(self):
        """Test d'inscription utilisateur"""
        response = self._signup(full_name="Anita Rao")
        assert response.status_code == 201

        data = response.json()
        assert data["email"] == self.test_email
        assert data["user_metadata"] == {"full_name": "Anita Rao"}
        assert "id" in data
        assert "password_hash" not in data

    def test_signup_normalizes_email(self):
        response = self._signup(email="  Chef@Example.COM ")
        assert response.status_code == 201
        assert response.json()["email"] == self.test_email

    def test_signup_duplicate_email(self):
        """Test d'inscription avec email déjà utilisé"""
        unique_email = f"test_{uuid.uuid4()}@test.com"

        response1 = self._signup(email=unique_email)
        assert response1.status_code == 201

        response2 = self._signup(email=unique_email.upper())
        assert response2.status_code == 400
        assert "Email déjà utilisé" in response2.json()["detail"]

    def test_signup_short_password(self):
        response = self._signup(password="123")
        assert response.status_code == 422

    def test_login_success(self):
        """Test de connexion réussie"""
        self._signup()

        response = self._login()
        assert response.status_code == 200

        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["access_token"]

    def test_login_wrong_password(self):
        """Test de connexion avec mauvais mot de passe"""
        self._signup()

        response = self._login(password="WrongPassword")
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid email or password"

    def test_login_unknown_user(self):
        response = self._login(email="nobody@example.com")
        assert response.status_code == 400

    def test_current_user(self):
        """L'utilisateur courant est retrouvé à partir du jeton"""
        self._signup()
        token = self._login().json()["access_token"]

        response = client.get("/auth/user", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json()["email"] == self.test_email

    def test_logout(self):
        self._signup()
        token = self._login().json()["access_token"]

        response = client.post("/auth/logout", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json()["message"] == "Déconnexion réussie"

    @pytest.mark.parametrize("path", ["/auth/user", "/events/", "/expenses/", "/dashboard/", "/analytics/summary"])
    def test_protected_routes_require_token(self, path):
        response = client.get(path)
        assert response.status_code == 401

    def test_invalid_token(self):
        response = client.get("/auth/user", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Jeton invalide"

    def test_expired_token(self):
        self._signup()
        token = create_access_token({"sub": self.test_email}, expires_minutes=-1)

        response = client.get("/auth/user", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert "expirée" in response.json()["detail"]

    def test_token_for_deleted_user(self):
        token = create_access_token({"sub": "ghost@example.com"})

        response = client.get("/auth/user", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

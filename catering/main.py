# CATERING/backend/catering/main.py

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from catering.routes import auth, events, categories, expenses, receipts, dashboard, analytics, reports
from catering.database import SessionLocal, check_connection, create_tables
from catering.repository import seed_default_categories
from catering.config import ALLOWED_ORIGINS, ENVIRONMENT, LOG_LEVEL, RECEIPT_STORAGE, RECEIPTS_DIR, CURRENCY
import logging
import datetime
import sys
import fastapi
import sqlalchemy

# Configuration du logging
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- STARTUP ---
    logger.info("🚀 Démarrage de l'API Catering...")

    if check_connection():
        logger.info("✅ Connexion à la base de données établie")

        # Création des tables si elles n'existent pas
        create_tables()
        with SessionLocal() as db:
            seed_default_categories(db)
    else:
        logger.error("❌ Impossible de se connecter à la base de données")

    yield

    # --- SHUTDOWN ---
    logger.info("👋 Arrêt de l'API Catering")

app = FastAPI(
    title="Catering API",
    description="Suivi des événements, dépenses, reçus et rentabilité d'un traiteur",
    version="1.0.0",
    docs_url="/docs",  # Swagger UI
    redoc_url="/redoc",  # ReDoc
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "auth",
            "description": "Inscription, connexion et session"
        },
        {
            "name": "events",
            "description": "Gestion des événements (prestations)"
        },
        {
            "name": "categories",
            "description": "Catégories de dépenses partagées"
        },
        {
            "name": "expenses",
            "description": "Gestion des dépenses et de leurs reçus"
        },
        {
            "name": "receipts",
            "description": "Envoi de reçus (images ou PDF)"
        },
        {
            "name": "dashboard",
            "description": "Tableau de bord synthétique"
        },
        {
            "name": "analytics",
            "description": "Rentabilité par événement et par période 📊"
        },
        {
            "name": "reports",
            "description": "Exports CSV et rapports de profits et pertes"
        }
    ]
)

# Configuration CORS pour permettre au frontend d'accéder à l'API
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Inclusion des routeurs
app.include_router(auth.router)
app.include_router(events.router)
app.include_router(categories.router)
app.include_router(expenses.router)
app.include_router(receipts.router)
app.include_router(dashboard.router)
app.include_router(analytics.router)
app.include_router(reports.router)

# Les reçus stockés localement sont servis directement par l'API
if RECEIPT_STORAGE != "s3":
    receipts_path = RECEIPTS_DIR / "receipts"
    receipts_path.mkdir(parents=True, exist_ok=True)
    app.mount("/receipts", StaticFiles(directory=str(receipts_path)), name="receipts")

@app.get("/")
def root():
    """
    Racine de l'API - Informations générales
    """
    return {
        "success": True,
        "message": "Catering backend opérationnel 🚀",
        "version": app.version,
        "environment": ENVIRONMENT,
        "currency": CURRENCY,
        "documentation": {
            "swagger": "/docs",
            "redoc": "/redoc"
        },
        "endpoints": {
            "auth": "/auth",
            "events": "/events",
            "categories": "/categories",
            "expenses": "/expenses",
            "receipts": "/api/upload-receipt",
            "dashboard": "/dashboard",
            "analytics": "/analytics",
            "reports": "/reports",
            "docs": "/docs"
        },
        "health_check": "/health"
    }

@app.get("/health")
def health_check():
    """
    Endpoint de santé pour le monitoring
    """
    db_status = check_connection()

    return {
        "status": "healthy" if db_status else "unhealthy",
        "database": "connected" if db_status else "disconnected",
        "version": app.version,
        "timestamp": datetime.datetime.now().isoformat()
    }

@app.get("/info")
def info():
    """
    Informations détaillées sur l'API
    """
    return {
        "name": app.title,
        "description": app.description,
        "version": app.version,
        "python_version": sys.version,
        "fastapi_version": fastapi.__version__,
        "sqlalchemy_version": sqlalchemy.__version__,
        "environment": ENVIRONMENT
    }

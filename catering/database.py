# CATERING/backend/catering/database.py

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import declarative_base, sessionmaker
from catering.config import DATABASE_URL, DEBUG
import logging

logger = logging.getLogger(__name__)

# Création de la connexion à la base de données
try:
    if DATABASE_URL.startswith("sqlite"):
        engine = create_engine(
            DATABASE_URL,
            connect_args={"check_same_thread": False},
            pool_pre_ping=True,
            echo=DEBUG
        )

        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_connection, _):
            # SQLite n'applique les clés étrangères que si on le demande
            cur = dbapi_connection.cursor()
            cur.execute("PRAGMA foreign_keys=ON")
            cur.close()
    else:
        engine = create_engine(
            DATABASE_URL,
            pool_size=5,  # Nombre de connexions permanentes
            max_overflow=10,  # Connexions supplémentaires temporaires
            pool_pre_ping=True,  # Vérifie que la connexion est vivante avant utilisation
            echo=DEBUG  # DEBUG=true affiche les requêtes SQL dans la console
        )
    logger.info("✅ Moteur de base de données initialisé")
except Exception as e:
    logger.error(f"❌ Erreur de connexion à la base de données: {e}")
    raise

# Session pour interagir avec la base
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

# Base pour créer les modèles (tables)
Base = declarative_base()

# Dependency pour FastAPI
def get_db():
    """
    Dépendance FastAPI pour obtenir une session de base de données.
    À utiliser dans les routes avec: db: Session = Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def create_tables():
    """Crée toutes les tables définies dans les modèles"""
    # Import nécessaire pour enregistrer les modèles sur Base.metadata
    from catering.models import models  # noqa: F401
    Base.metadata.create_all(bind=engine)
    logger.info("✅ Tables créées/vérifiées avec succès")

def drop_tables():
    """Supprime toutes les tables (UTILISER AVEC PRÉCAUTION)"""
    Base.metadata.drop_all(bind=engine)
    logger.warning("⚠️ Toutes les tables ont été supprimées")

def check_connection():
    """Vérifie que la connexion à la base fonctionne"""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"❌ Erreur de connexion: {e}")
        return False

# CATERING/backend/catering/config.py

import os
from dotenv import load_dotenv
from pathlib import Path

# Trouve le chemin absolu du dossier contenant ce fichier (catering/)
BASE_DIR = Path(__file__).parent.absolute()
env_path = BASE_DIR / '.env'

# Charge les variables depuis le fichier .env
print(f"🔍 Chargement du .env depuis: {env_path}")
if env_path.exists():
    load_dotenv(dotenv_path=env_path)
    print("✅ Fichier .env trouvé et chargé")
else:
    print(f"❌ Fichier .env non trouvé à: {env_path}")

# ============================================
# CONFIGURATION ENVIRONNEMENT
# ============================================
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
DEBUG = os.getenv("DEBUG", "false").lower() == "true"

# ============================================
# CONFIGURATION BASE DE DONNÉES
# ============================================
DATABASE_URL = os.getenv("DATABASE_URL")
if DATABASE_URL:
    print(f"📊 DATABASE_URL chargée: {DATABASE_URL.split('@')[0].split('://')[0]}://****@...")
else:
    if ENVIRONMENT == "production":
        raise ValueError("DATABASE_URL must be set in production")
    print("⚠️  DATABASE_URL non définie, utilisation de SQLite local")
    DATABASE_URL = "sqlite:///./catering.db"

# ============================================
# CONFIGURATION JWT / AUTH
# ============================================
SECRET_KEY = os.getenv("SECRET_KEY", "change_this_secret_key_in_production")
if SECRET_KEY == "change_this_secret_key_in_production" and ENVIRONMENT == "production":
    raise ValueError("SECRET_KEY must be changed in production")

ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))  # 24 heures par défaut

# ============================================
# CONFIGURATION STOCKAGE DES REÇUS
# ============================================
RECEIPT_STORAGE = os.getenv("RECEIPT_STORAGE", "local").lower()  # "local" ou "s3"
RECEIPTS_DIR = Path(os.getenv("RECEIPTS_DIR", "./data/uploads"))
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/")
MAX_RECEIPT_SIZE_MB = int(os.getenv("MAX_RECEIPT_SIZE_MB", "10"))
MAX_RECEIPT_SIZE = MAX_RECEIPT_SIZE_MB * 1024 * 1024

# ============================================
# CONFIGURATION AWS (stockage S3 des reçus)
# ============================================
AWS_CONFIG = {
    "access_key_id": os.getenv("AWS_ACCESS_KEY_ID", ""),
    "secret_access_key": os.getenv("AWS_SECRET_ACCESS_KEY", ""),
    "region": os.getenv("AWS_REGION", "ap-south-1"),  # Mumbai par défaut
    "bucket_name": os.getenv("AWS_BUCKET_NAME", "catering-receipts"),
    "public_read": os.getenv("AWS_PUBLIC_READ", "true").lower() == "true",
    "enabled": all([
        os.getenv("AWS_ACCESS_KEY_ID"),
        os.getenv("AWS_SECRET_ACCESS_KEY"),
        os.getenv("AWS_BUCKET_NAME")
    ])
}

if RECEIPT_STORAGE == "s3" and not AWS_CONFIG["enabled"]:
    print("⚠️  RECEIPT_STORAGE=s3 mais les identifiants AWS sont incomplets")

# ============================================
# CONFIGURATION MÉTIER
# ============================================
CURRENCY = os.getenv("CURRENCY", "INR")
FISCAL_YEAR_START_MONTH = int(os.getenv("FISCAL_YEAR_START_MONTH", "4"))  # Avril

# ============================================
# CONFIGURATION CORS (Frontend)
# ============================================
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:8080").split(",")

# ============================================
# LOGGING
# ============================================
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

print(f"✅ Configuration chargée - Environnement: {ENVIRONMENT}")

# ============================================
# FONCTIONS UTILITAIRES
# ============================================
def get_storage_config():
    """Retourne la configuration du stockage des reçus"""
    return {
        "backend": RECEIPT_STORAGE,
        "directory": RECEIPTS_DIR,
        "public_base_url": PUBLIC_BASE_URL,
        "max_size": MAX_RECEIPT_SIZE,
        "aws": AWS_CONFIG
    }

# CATERING/backend/catering/routes/auth.py

import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from catering import auth
from catering.models import models as db_models
from catering.schemas.schemas import UserOut, UserCreate, UserLogin, Token
from catering.database import get_db

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)

@router.post("/signup", response_model=UserOut, status_code=201)
def signup(user: UserCreate, db: Session = Depends(get_db)):
    """Inscription par email et mot de passe"""
    email = user.email.strip().lower()
    db_user = db.query(db_models.User).filter(db_models.User.email == email).first()
    if db_user:
        raise HTTPException(status_code=400, detail="Email déjà utilisé")
    metadata = {"full_name": user.full_name} if user.full_name else {}
    new_user = db_models.User(
        email=email,
        password_hash=auth.hash_password(user.password),
        user_metadata=metadata
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    logger.info(f"👤 Nouvel utilisateur inscrit: {new_user.id}")
    return new_user

@router.post("/login", response_model=Token)
def login(user: UserLogin, db: Session = Depends(get_db)):
    """Connexion : retourne un jeton de session"""
    email = user.email.strip().lower()
    db_user = db.query(db_models.User).filter(db_models.User.email == email).first()
    if not db_user or not auth.verify_password(user.password, db_user.password_hash):
        logger.warning("🔒 Échec de connexion")
        raise HTTPException(status_code=400, detail="Invalid email or password")
    token = auth.create_access_token({"sub": db_user.email})
    return {"access_token": token, "token_type": "bearer"}

@router.get("/user", response_model=UserOut)
def get_user(current_user: db_models.User = Depends(auth.get_current_user)):
    """Utilisateur associé au jeton courant"""
    return current_user

@router.post("/logout")
def logout(current_user: db_models.User = Depends(auth.get_current_user)):
    # Jetons sans état : le client supprime simplement le sien
    return {"message": "Déconnexion réussie"}

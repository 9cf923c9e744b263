# CATERING/backend/catering/repository.py : accès aux données d'un utilisateur

import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.orm import Session, joinedload

from catering.constants import DEFAULT_CATEGORIES
from catering.models import models
from catering.storage import ReceiptStorage, store_receipt

logger = logging.getLogger(__name__)


class CateringRepository:
    """Point d'accès unique aux événements, dépenses et reçus d'un utilisateur.

    Toutes les requêtes sont filtrées sur le propriétaire (created_by).
    Les méthodes get/upsert/delete retournent None (ou False) quand la ligne
    n'existe pas ou appartient à un autre utilisateur ; une référence invalide
    (événement d'autrui, catégorie inconnue) lève ValueError.
    """

    def __init__(self, db: Session, user_id: int, storage: Optional[ReceiptStorage] = None):
        self.db = db
        self.user_id = user_id
        self.storage = storage

    # ========== Événements ==========

    def list_events(self) -> List[models.Event]:
        return self.db.query(models.Event).filter(
            models.Event.created_by == self.user_id
        ).order_by(models.Event.date.desc(), models.Event.id.desc()).all()

    def get_event(self, event_id: int) -> Optional[models.Event]:
        return self.db.query(models.Event).filter(
            models.Event.id == event_id,
            models.Event.created_by == self.user_id
        ).first()

    def upsert_event(self, data: Dict, event_id: Optional[int] = None) -> Optional[models.Event]:
        """Crée l'événement si event_id est None, sinon met à jour les champs fournis"""
        if event_id is None:
            event = models.Event(**data, created_by=self.user_id)
            self.db.add(event)
        else:
            event = self.get_event(event_id)
            if not event:
                return None
            for field, value in data.items():
                setattr(event, field, value)

        self.db.commit()
        self.db.refresh(event)
        logger.info(f"📅 Événement {event.id} enregistré pour l'utilisateur {self.user_id}")
        return event

    def delete_event(self, event_id: int) -> bool:
        event = self.get_event(event_id)
        if not event:
            return False
        self.db.delete(event)
        self.db.commit()
        logger.info(f"🗑️ Événement {event_id} supprimé")
        return True

    # ========== Dépenses ==========

    def _expense_query(self):
        return self.db.query(models.Expense).options(
            joinedload(models.Expense.category),
            joinedload(models.Expense.event)
        ).filter(models.Expense.created_by == self.user_id)

    def list_expenses(self, event_id: Optional[int] = None, limit: Optional[int] = None) -> List[models.Expense]:
        query = self._expense_query()
        if event_id is not None:
            query = query.filter(models.Expense.event_id == event_id)
        query = query.order_by(models.Expense.expense_date.desc(), models.Expense.id.desc())
        if limit:
            query = query.limit(limit)
        return query.all()

    def get_expense(self, expense_id: int) -> Optional[models.Expense]:
        return self._expense_query().filter(models.Expense.id == expense_id).first()

    def _check_references(self, data: Dict):
        if "event_id" in data and not self.get_event(data["event_id"]):
            raise ValueError("Événement introuvable")
        if "category_id" in data and not self.db.get(models.ExpenseCategory, data["category_id"]):
            raise ValueError("Catégorie inconnue")

    def upsert_expense(self, data: Dict, expense_id: Optional[int] = None) -> Optional[models.Expense]:
        """Crée la dépense si expense_id est None, sinon met à jour les champs fournis"""
        if expense_id is None:
            self._check_references(data)
            expense = models.Expense(**data, created_by=self.user_id)
            if expense.receipt_url:
                expense.receipt_uploaded_at = datetime.utcnow()
            self.db.add(expense)
        else:
            # La dépense d'un autre utilisateur est introuvable avant toute validation
            expense = self.get_expense(expense_id)
            if not expense:
                return None
            self._check_references(data)
            if data.get("receipt_url") and data["receipt_url"] != expense.receipt_url:
                expense.receipt_uploaded_at = datetime.utcnow()
            for field, value in data.items():
                setattr(expense, field, value)

        self.db.commit()
        self.db.refresh(expense)
        logger.info(f"💸 Dépense {expense.id} enregistrée (événement {expense.event_id})")
        return expense

    def delete_expense(self, expense_id: int) -> bool:
        expense = self.get_expense(expense_id)
        if not expense:
            return False
        self.db.delete(expense)
        self.db.commit()
        logger.info(f"🗑️ Dépense {expense_id} supprimée")
        return True

    # ========== Reçus ==========

    def upload_receipt(self, filename: Optional[str], content_type: Optional[str],
                       data: bytes, max_size: int) -> Dict:
        """Valide puis envoie un reçu au stockage ; retourne {url, filename, size}"""
        if self.storage is None:
            raise RuntimeError("Aucun stockage de reçus configuré")
        return store_receipt(self.storage, filename, content_type, data, max_size)

    def attach_receipt(self, expense_id: int, url: str, filename: str) -> Optional[models.Expense]:
        expense = self.get_expense(expense_id)
        if not expense:
            return None
        expense.receipt_url = url
        expense.receipt_file_name = filename
        expense.receipt_uploaded_at = datetime.utcnow()
        self.db.commit()
        self.db.refresh(expense)
        return expense

    # ========== Catégories (partagées) ==========

    def list_categories(self) -> List[models.ExpenseCategory]:
        return self.db.query(models.ExpenseCategory).order_by(models.ExpenseCategory.name).all()

    def create_category(self, name: str) -> models.ExpenseCategory:
        name = name.strip()
        existing = self.db.query(models.ExpenseCategory).filter(
            models.ExpenseCategory.name == name
        ).first()
        if existing:
            raise ValueError("Cette catégorie existe déjà")
        category = models.ExpenseCategory(name=name)
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category


def seed_default_categories(db: Session) -> int:
    """Crée les catégories par défaut si la table est vide"""
    if db.query(models.ExpenseCategory).count() > 0:
        return 0
    for name in DEFAULT_CATEGORIES:
        db.add(models.ExpenseCategory(name=name))
    db.commit()
    logger.info(f"🏷️ {len(DEFAULT_CATEGORIES)} catégories par défaut créées")
    return len(DEFAULT_CATEGORIES)

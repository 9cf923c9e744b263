# CATERING/backend/catering/services/analytics_service.py : le service d'analytics

from datetime import date
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from catering.config import FISCAL_YEAR_START_MONTH
from catering.constants import DEFAULT_EVENT_STATUS, RECENT_EXPENSES_LIMIT
from catering.repository import CateringRepository
from catering.services import aggregation
from catering.services.aggregation import PeriodMode, SortBy


class AnalyticsService:
    """Service centralisé pour toutes les analytics d'un utilisateur"""

    def __init__(self, db: Session, user_id: int):
        self.db = db
        self.user_id = user_id
        self.repo = CateringRepository(db, user_id)

    def _load(self):
        return self.repo.list_events(), self.repo.list_expenses()

    def get_event_profitability(self, sort_by: SortBy = SortBy.PROFIT) -> Dict:
        """Rentabilité par événement, triée, avec résumé"""
        events, expenses = self._load()
        rows = aggregation.event_profitability(events, expenses)
        return {
            "sort_by": SortBy(sort_by).value,
            "events": aggregation.sort_profitability(rows, sort_by),
            "summary": aggregation.summarize(rows)
        }

    def get_period_profitability(self, mode: PeriodMode, start: Optional[date] = None,
                                 end: Optional[date] = None) -> Dict:
        """Rentabilité regroupée par jour/semaine/mois/trimestre/année/exercice/plage"""
        events, expenses = self._load()
        rows = aggregation.event_profitability(events, expenses)
        periods = aggregation.aggregate_rows(rows, mode, start, end, FISCAL_YEAR_START_MONTH)

        # Le résumé d'une plage personnalisée ne couvre que les événements de la plage
        if PeriodMode(mode) == PeriodMode.CUSTOM:
            rows = [r for r in rows if start <= r["event_date"] <= end]

        return {
            "mode": PeriodMode(mode).value,
            "periods": periods,
            "summary": aggregation.summarize(rows)
        }

    def get_summary_stats(self) -> Dict:
        """Résumé des statistiques clés"""
        events, expenses = self._load()
        return aggregation.summarize(aggregation.event_profitability(events, expenses))

    def get_event_totals(self, event) -> Dict:
        """Totaux d'un seul événement (dépenses, profit, marge)"""
        expenses = self.repo.list_expenses(event_id=event.id)
        row = aggregation.event_profitability([event], expenses)[0]
        return {
            "total_expenses": row["total_expenses"],
            "expense_count": len(expenses),
            "profit": row["profit"],
            "profit_margin": row["profit_margin"]
        }

    def get_expenses_by_category(self, event_id: Optional[int] = None) -> List[Dict]:
        """Dépenses par catégorie avec pourcentages"""
        return aggregation.expenses_by_category(self.repo.list_expenses(event_id=event_id))

    def get_dashboard(self) -> Dict:
        """Vue d'ensemble du tableau de bord"""
        events, expenses = self._load()
        total_expenses = sum((aggregation.to_decimal(e.amount) for e in expenses), aggregation.ZERO)

        return {
            "total_events": len(events),
            "planned_events": len([e for e in events if e.status == DEFAULT_EVENT_STATUS]),
            "completed_events": len([e for e in events if e.status == "completed"]),
            "total_expenses": total_expenses,
            "expense_count": len(expenses),
            "recent_expenses": expenses[:RECENT_EXPENSES_LIMIT],
            "expenses_by_category": aggregation.expenses_by_category(expenses),
            "monthly_trend": aggregation.expense_trend(expenses, PeriodMode.MONTH, FISCAL_YEAR_START_MONTH)
        }

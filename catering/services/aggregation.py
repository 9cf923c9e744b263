# CATERING/backend/catering/services/aggregation.py : agrégation de rentabilité

"""
Fonctions pures de calcul de rentabilité.

Elles prennent une liste d'événements et une liste de dépenses déjà chargées
(modèles SQLAlchemy ou tout objet exposant les mêmes attributs) et renvoient
des lignes agrégées sous forme de dictionnaires. Aucun accès à la base ici.

Événements : id, name, date, client_name, booked_amount, pax, status
Dépenses   : event_id, amount, expense_date, category_name (optionnel)

Les montants restent en Decimal, seul le pourcentage de marge est un float.
"""

import math
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from catering.constants import DEFAULT_EVENT_STATUS, MONTHS_SHORT, UNCATEGORIZED

ZERO = Decimal("0")
DEFAULT_FISCAL_START_MONTH = 4  # Avril


class PeriodMode(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"
    FISCAL_YEAR = "fiscal_year"
    CUSTOM = "custom"


class SortBy(str, Enum):
    PROFIT = "profit"
    MARGIN = "margin"
    DATE = "date"


def to_decimal(value: Any) -> Decimal:
    """Convertit un montant (None, int, float, str, Decimal) en Decimal"""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def as_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    raise ValueError(f"Date invalide: {value!r}")


def profit_margin(profit: Decimal, revenue: Decimal) -> float:
    """Marge en pourcentage ; 0 par convention quand le chiffre d'affaires est nul"""
    if revenue <= 0:
        return 0.0
    return float(profit / revenue * 100)


def totals_by_event(expenses: Iterable[Any]) -> Dict[Any, Decimal]:
    totals: Dict[Any, Decimal] = {}
    for expense in expenses:
        totals[expense.event_id] = totals.get(expense.event_id, ZERO) + to_decimal(expense.amount)
    return totals


def event_profitability(events: Sequence[Any], expenses: Iterable[Any]) -> List[Dict]:
    """Une ligne de rentabilité par événement.

    Les dépenses rattachées à un événement absent de la liste sont ignorées.
    """
    spent = totals_by_event(expenses)
    rows = []
    for event in events:
        booked = to_decimal(getattr(event, "booked_amount", None))
        total_expenses = spent.get(event.id, ZERO)
        profit = booked - total_expenses
        rows.append({
            "event_id": event.id,
            "event_name": event.name or "Unnamed Event",
            "client_name": getattr(event, "client_name", None) or "N/A",
            "event_date": as_date(event.date),
            "status": getattr(event, "status", None) or DEFAULT_EVENT_STATUS,
            "pax": getattr(event, "pax", None) or 0,
            "booked_amount": booked,
            "total_expenses": total_expenses,
            "profit": profit,
            "profit_margin": profit_margin(profit, booked),
        })
    return rows


def period_key(value: Any, mode: PeriodMode,
               fiscal_start_month: int = DEFAULT_FISCAL_START_MONTH) -> Tuple[str, str]:
    """Retourne (clé de tri, libellé) de la période contenant la date"""
    d = as_date(value)
    mode = PeriodMode(mode)

    if mode == PeriodMode.DAY:
        key = d.isoformat()
        return key, key
    if mode == PeriodMode.WEEK:
        iso_year, iso_week, _ = d.isocalendar()
        key = f"{iso_year}-W{iso_week:02d}"
        return key, key
    if mode == PeriodMode.MONTH:
        return f"{d.year}-{d.month:02d}", f"{MONTHS_SHORT[d.month - 1]} {d.year}"
    if mode == PeriodMode.QUARTER:
        quarter = math.ceil(d.month / 3)
        return f"{d.year}-Q{quarter}", f"Q{quarter} {d.year}"
    if mode == PeriodMode.YEAR:
        return str(d.year), str(d.year)
    if mode == PeriodMode.FISCAL_YEAR:
        start_year = d.year if d.month >= fiscal_start_month else d.year - 1
        if fiscal_start_month == 1:
            return str(start_year), f"FY {start_year}"
        return str(start_year), f"FY {start_year}-{(start_year + 1) % 100:02d}"

    raise ValueError("Le mode 'custom' n'a pas de clé de période, utiliser une plage de dates")


def _empty_period(label: str) -> Dict:
    return {
        "period": label,
        "total_revenue": ZERO,
        "total_expenses": ZERO,
        "total_profit": ZERO,
        "profit_margin": 0.0,
        "event_count": 0,
    }


def aggregate_rows(rows: Sequence[Dict], mode: PeriodMode,
                   start: Optional[date] = None, end: Optional[date] = None,
                   fiscal_start_month: int = DEFAULT_FISCAL_START_MONTH) -> List[Dict]:
    """Regroupe des lignes de event_profitability() par période de la date d'événement"""
    mode = PeriodMode(mode)

    if mode == PeriodMode.CUSTOM:
        if start is None or end is None:
            raise ValueError("Une plage personnalisée exige une date de début et de fin")
        if start > end:
            raise ValueError("La date de début doit précéder la date de fin")
        label = f"{start.isoformat()} to {end.isoformat()}"
        selected = [r for r in rows if start <= r["event_date"] <= end]
        keyed = [(start.isoformat(), label, r) for r in selected]
    else:
        keyed = [(*period_key(r["event_date"], mode, fiscal_start_month), r) for r in rows]

    groups: Dict[str, Dict] = {}
    for sort_key, label, row in keyed:
        group = groups.setdefault(sort_key, _empty_period(label))
        group["total_revenue"] += row["booked_amount"]
        group["total_expenses"] += row["total_expenses"]
        group["total_profit"] += row["profit"]
        group["event_count"] += 1

    result = []
    for sort_key in sorted(groups):
        group = groups[sort_key]
        group["profit_margin"] = profit_margin(group["total_profit"], group["total_revenue"])
        result.append(group)
    return result


def aggregate_by_period(events: Sequence[Any], expenses: Iterable[Any], mode: PeriodMode,
                        start: Optional[date] = None, end: Optional[date] = None,
                        fiscal_start_month: int = DEFAULT_FISCAL_START_MONTH) -> List[Dict]:
    rows = event_profitability(events, expenses)
    return aggregate_rows(rows, mode, start, end, fiscal_start_month)


def summarize(rows: Sequence[Dict]) -> Dict:
    """Totaux globaux sur des lignes de event_profitability()"""
    total_revenue = sum((r["booked_amount"] for r in rows), ZERO)
    total_expenses = sum((r["total_expenses"] for r in rows), ZERO)
    total_profit = total_revenue - total_expenses
    count = len(rows)

    return {
        "total_revenue": total_revenue,
        "total_expenses": total_expenses,
        "total_profit": total_profit,
        "profit_margin": profit_margin(total_profit, total_revenue),
        "average_profit_margin": sum(r["profit_margin"] for r in rows) / count if count else 0.0,
        "expense_ratio": float(total_expenses / total_revenue * 100) if total_revenue > 0 else 0.0,
        "event_count": count,
        "profitable_events": len([r for r in rows if r["profit"] > 0]),
        "loss_events": len([r for r in rows if r["profit"] < 0]),
    }


def sort_profitability(rows: Sequence[Dict], by: SortBy = SortBy.PROFIT) -> List[Dict]:
    """Tri décroissant ; à égalité le profit départage, puis l'ordre d'entrée"""
    keys = {
        SortBy.PROFIT: lambda r: r["profit"],
        SortBy.MARGIN: lambda r: (r["profit_margin"], r["profit"]),
        SortBy.DATE: lambda r: (r["event_date"], r["profit"]),
    }
    return sorted(rows, key=keys[SortBy(by)], reverse=True)


def expenses_by_category(expenses: Iterable[Any]) -> List[Dict]:
    """Dépenses groupées par catégorie avec pourcentages"""
    groups: Dict[str, Dict] = {}
    for expense in expenses:
        name = getattr(expense, "category_name", None) or UNCATEGORIZED
        group = groups.setdefault(name, {"category": name, "total": ZERO, "count": 0})
        group["total"] += to_decimal(expense.amount)
        group["count"] += 1

    grand_total = sum((g["total"] for g in groups.values()), ZERO)
    result = sorted(groups.values(), key=lambda g: g["total"], reverse=True)
    for group in result:
        group["percentage"] = round(float(group["total"] / grand_total * 100), 2) if grand_total > 0 else 0
    return result


def expense_trend(expenses: Iterable[Any], mode: PeriodMode = PeriodMode.MONTH,
                  fiscal_start_month: int = DEFAULT_FISCAL_START_MONTH) -> List[Dict]:
    """Total des dépenses par période de leur date de dépense"""
    groups: Dict[str, Dict] = {}
    for expense in expenses:
        sort_key, label = period_key(expense.expense_date, mode, fiscal_start_month)
        group = groups.setdefault(sort_key, {"period": label, "total": ZERO, "count": 0})
        group["total"] += to_decimal(expense.amount)
        group["count"] += 1
    return [groups[k] for k in sorted(groups)]

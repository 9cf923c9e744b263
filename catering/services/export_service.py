# CATERING/backend/catering/services/export_service.py : exports CSV et rapports JSON

import json
import re
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from catering.constants import UNCATEGORIZED
from catering.services.aggregation import ZERO, to_decimal


def _csv_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        # Guillemets uniquement autour des valeurs contenant une virgule
        return f'"{value}"' if "," in value else value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def to_csv(rows: List[Dict]) -> str:
    """CSV simple : en-têtes = clés de la première ligne, lignes séparées par \\n"""
    if not rows:
        raise ValueError("No data to export")

    headers = list(rows[0].keys())
    lines = [",".join(headers)]
    for row in rows:
        lines.append(",".join(_csv_value(row.get(header)) for header in headers))
    return "\n".join(lines)


def export_filename(base: str, extension: str, today: Optional[date] = None) -> str:
    """{base}-{AAAA-MM-JJ}.{ext}, limité aux caractères sûrs pour un en-tête HTTP"""
    today = today or date.today()
    safe_base = re.sub(r"[^A-Za-z0-9._-]+", "-", base).strip("-") or "export"
    return f"{safe_base}-{today.isoformat()}.{extension}"


def expense_rows(expenses: Iterable[Any]) -> List[Dict]:
    """Lignes d'export des dépenses d'un événement"""
    return [
        {
            "Description": e.description,
            "Category": getattr(e, "category_name", None) or "N/A",
            "Amount": to_decimal(e.amount),
            "Date": e.expense_date,
        }
        for e in expenses
    ]


def event_profit_rows(rows: Iterable[Dict]) -> List[Dict]:
    """Lignes d'export de la rentabilité par événement"""
    return [
        {
            "Event": r["event_name"],
            "Client": r["client_name"],
            "Date": r["event_date"],
            "Status": r["status"],
            "Pax": r["pax"],
            "Booked Amount": r["booked_amount"],
            "Expenses": r["total_expenses"],
            "Profit": r["profit"],
            "Margin %": f"{r['profit_margin']:.2f}",
        }
        for r in rows
    ]


def profit_loss_report(event_name: str, expenses: Iterable[Any], total_revenue: Any = 0,
                       generated_at: Optional[datetime] = None) -> Dict:
    """Rapport de profits et pertes d'un événement"""
    expenses = list(expenses)
    revenue = to_decimal(total_revenue)
    total_expenses = sum((to_decimal(e.amount) for e in expenses), ZERO)
    profit = revenue - total_expenses
    margin = f"{profit / revenue * 100:.2f}" if revenue > 0 else "0"

    breakdown: List[Dict] = []
    for expense in expenses:
        name = getattr(expense, "category_name", None) or UNCATEGORIZED
        existing = next((item for item in breakdown if item["category"] == name), None)
        if existing:
            existing["amount"] += to_decimal(expense.amount)
            existing["count"] += 1
        else:
            breakdown.append({"category": name, "amount": to_decimal(expense.amount), "count": 1})

    return {
        "eventName": event_name,
        "totalRevenue": f"{revenue:.2f}",
        "totalExpenses": f"{total_expenses:.2f}",
        "profit": f"{profit:.2f}",
        "profitMargin": margin,
        "categoryBreakdown": [
            {"category": b["category"], "amount": float(b["amount"]), "count": b["count"]}
            for b in breakdown
        ],
        "generatedAt": (generated_at or datetime.utcnow()).isoformat(),
    }


def report_to_json(report: Dict) -> str:
    return json.dumps(report, indent=2, default=_json_default)


def _json_default(value: Any):
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise TypeError(f"Type non sérialisable: {type(value).__name__}")

# backend/expenses.py
from datetime import datetime, timezone
from decimal import InvalidOperation

from settlement import ZERO, format_amount, to_decimal


class ExpenseValidationError(ValueError):
    """Raised when an incoming expense payload cannot be accepted."""


class Expense:
    def __init__(self, payer, amount, involved, description="", expense_id=None, timestamp=None):
        self.id = expense_id
        self.payer = payer
        self.amount = to_decimal(amount)
        self.involved = list(involved)
        self.description = description
        self.timestamp = timestamp

    def __repr__(self):
        return f"Expense({self.payer!r}, {self.amount}, {self.involved!r})"

    def to_dict(self):
        return {
            "id": self.id,
            "amount": format_amount(self.amount),
            "description": self.description,
            "payer": self.payer,
            "involved": list(self.involved),
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }


def _parse_amount(value):
    try:
        amount = to_decimal(value)
    except (InvalidOperation, TypeError):
        raise ExpenseValidationError("Amount must be a number")
    if not amount.is_finite() or amount <= ZERO:
        raise ExpenseValidationError("Amount must be greater than zero")
    return amount


def _parse_timestamp(value):
    # fromisoformat only understands a trailing "Z" from Python 3.11
    if isinstance(value, str) and value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    try:
        timestamp = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        raise ExpenseValidationError("Timestamp must be an ISO 8601 string")
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp


def parse_expense(payload, roster):
    """
    Build an Expense from a JSON payload, checking it against the roster.

    Raises ExpenseValidationError with a message suitable for the client.
    """
    if not isinstance(payload, dict):
        raise ExpenseValidationError("Expense must be a JSON object")

    amount = _parse_amount(payload.get("amount"))

    description = payload.get("description")
    if not isinstance(description, str) or not description.strip():
        raise ExpenseValidationError("Description is required")

    payer = payload.get("payer")
    if payer not in roster:
        raise ExpenseValidationError(f"Unknown payer: {payer}")

    involved = payload.get("involved")
    if not isinstance(involved, list) or not involved:
        raise ExpenseValidationError("Select at least one person involved")
    unknown = [person for person in involved if person not in roster]
    if unknown:
        raise ExpenseValidationError(f"Unknown participants: {', '.join(map(str, unknown))}")

    timestamp = payload.get("timestamp")
    if timestamp is not None:
        timestamp = _parse_timestamp(timestamp)

    return Expense(
        payer,
        amount,
        list(dict.fromkeys(involved)),
        description=description.strip(),
        timestamp=timestamp,
    )


def parse_calculation_item(payload):
    """
    Build an Expense for a one-off calculation, where there is no roster.

    An empty involved list is allowed; the balance step skips it.
    """
    if not isinstance(payload, dict):
        raise ExpenseValidationError("Expense must be a JSON object")

    payer = payload.get("payer")
    if not isinstance(payer, str) or not payer:
        raise ExpenseValidationError("Payer is required")

    amount = _parse_amount(payload.get("amount"))

    involved = payload.get("involved")
    if not isinstance(involved, list) or not all(isinstance(person, str) for person in involved):
        raise ExpenseValidationError("Involved must be a list of names")

    return Expense(payer, amount, list(dict.fromkeys(involved)))


def total_spent(expenses):
    return sum((expense.amount for expense in expenses), ZERO)


def sort_by_recent(expenses):
    """Newest first; expenses without a timestamp go last in their given order."""
    dated = [expense for expense in expenses if expense.timestamp is not None]
    undated = [expense for expense in expenses if expense.timestamp is None]
    return sorted(dated, key=lambda expense: expense.timestamp, reverse=True) + undated

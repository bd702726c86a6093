# backend/store.py
import logging
import threading
import uuid
from datetime import datetime, timezone

from expenses import Expense

logger = logging.getLogger(__name__)


class ExpenseStore:
    """
    In-process expense collection.

    Writes and reads go through one lock so every snapshot is a complete,
    consistent view; balances are always recomputed from a snapshot.
    """

    def __init__(self, expenses=()):
        self._lock = threading.Lock()
        self._expenses = {}
        for expense in expenses:
            self.add(expense)

    def __len__(self):
        with self._lock:
            return len(self._expenses)

    def add(self, expense):
        """Store a copy of the expense with its id and timestamp filled in."""
        expense = Expense(
            expense.payer,
            expense.amount,
            expense.involved,
            description=expense.description,
            expense_id=expense.id or uuid.uuid4().hex,
            timestamp=expense.timestamp or datetime.now(timezone.utc),
        )

        with self._lock:
            self._expenses[expense.id] = expense

        logger.info("Added expense %s: %s paid %s for %s",
                    expense.id, expense.payer, expense.amount, ", ".join(expense.involved))
        return expense

    def delete(self, expense_id):
        with self._lock:
            expense = self._expenses.pop(expense_id)

        logger.info("Deleted expense %s", expense_id)
        return expense

    def snapshot(self):
        with self._lock:
            return tuple(self._expenses.values())

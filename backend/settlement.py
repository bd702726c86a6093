# backend/settlement.py
import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
# Balances within +/- one cent of zero count as settled
TOLERANCE = CENT
ZERO = Decimal(0)


def to_decimal(value):
    """Convert a number (or numeric string) to Decimal without float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("amount must be a number, not a boolean")
    return Decimal(str(value))


def round_cents(value):
    rounded = to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    # Avoid "-0.00" for tiny negative residues
    return abs(rounded) if not rounded else rounded


def format_amount(value):
    return f"{round_cents(value):.2f}"


@dataclass(frozen=True)
class SettlementTransaction:
    debtor: str
    creditor: str
    amount: Decimal

    @property
    def formatted_amount(self):
        return format_amount(self.amount)

    def describe(self, currency="€"):
        return f"{self.debtor} owes {self.creditor} {currency}{self.formatted_amount}"

    def to_dict(self, currency="€"):
        return {
            "from": self.debtor,
            "to": self.creditor,
            "amount": self.formatted_amount,
            "message": self.describe(currency),
        }


def compute_balances(participants, expenses):
    """
    Reduce expenses into a net balance per participant.

    Positive balance = is owed money, negative = owes money. Keys follow the
    roster order; anyone outside the roster who shows up in an expense is
    appended after it.
    """
    balances = {person: ZERO for person in participants}

    for expense in expenses:
        # Nothing to split when nobody was involved
        if not expense.involved:
            logger.warning("Skipping expense %s with no involved participants", expense.id)
            continue

        share = expense.amount / len(expense.involved)

        # The payer gets credit for the full amount
        balances[expense.payer] = balances.get(expense.payer, ZERO) + expense.amount
        # Everyone involved is debited their share
        for person in expense.involved:
            balances[person] = balances.get(person, ZERO) - share

    logger.debug("Computed balances for %d participants from %d expenses",
                 len(balances), len(expenses))
    return balances


def settle(balances):
    """
    Turn a balance map into point-to-point payments that zero it out.

    Greedy matching of debtors against creditors, largest creditor first.
    Produces at most len(debtors) + len(creditors) - 1 transactions; the
    result is not guaranteed to be the global minimum.
    """
    drift = sum((to_decimal(amount) for amount in balances.values()), ZERO)
    if abs(drift) > TOLERANCE:
        logger.warning("Balances do not sum to zero (off by %s); "
                       "part of the balance will remain unsettled", format_amount(drift))

    # 1. Separate debtors and creditors, working in whole cents
    debtors = []
    creditors = []

    for person, amount in balances.items():
        net = round_cents(amount)
        cents = int(net / CENT)
        if net < -TOLERANCE: debtors.append({'person': person, 'cents': cents})
        if net > TOLERANCE: creditors.append({'person': person, 'cents': cents})

    debtors.sort(key=lambda x: x['cents'])
    creditors.sort(key=lambda x: x['cents'], reverse=True)

    # 2. Match them up
    transactions = []
    i = 0
    j = 0

    while i < len(debtors) and j < len(creditors):
        debtor = debtors[i]
        creditor = creditors[j]

        cents = min(-debtor['cents'], creditor['cents'])
        transactions.append(SettlementTransaction(debtor['person'], creditor['person'], cents * CENT))

        debtor['cents'] += cents
        creditor['cents'] -= cents

        if debtor['cents'] == 0: i += 1
        if creditor['cents'] == 0: j += 1

    logger.debug("Settled %d debtors and %d creditors with %d transactions",
                 len(debtors), len(creditors), len(transactions))
    return transactions


def roster_from_expenses(expenses):
    """Everyone named in the expenses, in first-seen order."""
    roster = {}
    for expense in expenses:
        roster.setdefault(expense.payer, None)
        for person in expense.involved:
            roster.setdefault(person, None)
    return list(roster)


def calculate_settlements(expenses, participants=None):
    if participants is None:
        participants = roster_from_expenses(expenses)
    return settle(compute_balances(participants, expenses))

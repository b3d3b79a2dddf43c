"""Financial record model."""

from dataclasses import dataclass
from decimal import Decimal

from imob_control.models.enums import RecordKind


@dataclass
class FinancialRecord:
    """One revenue or expense entry attached to a property.

    ``date`` is the cash-flow reference date. ``check_in``/``check_out``
    describe the stay and only feed occupancy. All three are kept as
    ``DD/MM/YYYY`` strings; unparseable values are tolerated here and
    excluded later by whichever computation needs them. The same goes for
    ``amount``, which is None when the stored value was not a number.
    """

    date: str
    amount: Decimal | None  # Non-negative magnitude, sign comes from kind
    description: str
    kind: RecordKind = RecordKind.REVENUE
    check_in: str | None = None
    check_out: str | None = None

    @property
    def is_expense(self) -> bool:
        return self.kind == RecordKind.EXPENSE

    @property
    def signed_amount(self) -> Decimal:
        """Amount with expenses negated; zero without a numeric amount."""
        if self.amount is None:
            return Decimal("0")
        return -self.amount if self.is_expense else self.amount

"""Sample portfolio generators."""

from imob_control.generators.portfolio import (
    FinancialRecordGenerator,
    PortfolioGenerator,
    PropertyGenerator,
)

__all__ = ["FinancialRecordGenerator", "PortfolioGenerator", "PropertyGenerator"]

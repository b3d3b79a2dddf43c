"""In-memory portfolio store."""

from imob_control.store.portfolio import PortfolioStore

__all__ = ["PortfolioStore"]

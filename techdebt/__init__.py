"""Tech Debt Insight - technical debt scanner."""

__version__ = "0.1.0"

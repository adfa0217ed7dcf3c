"""ETF Advisor: conversational intake and ETF allocation engine."""

__version__ = "0.1.0"

"""Restaurant table-reservation chatbot."""

__version__ = "1.0.0"

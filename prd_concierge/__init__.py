"""PRD Concierge - conversational requirements intake that ends in a structured PRD."""

__version__ = "1.0.0"

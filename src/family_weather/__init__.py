"""Family Weather - day-part forecast cards and clothing tips for families."""

__version__ = "0.1.0"

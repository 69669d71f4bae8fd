"""Role administration for the admin web application."""

__version__ = "0.1.0"

"""Database package: declarative base, ORM tables and engine factory."""

"""Persistence layer: declarative base, document store and query conditions."""

"""
Site cards service.

A small FastAPI application that keeps construction-site shipment/status
cards either in process memory or in a Postgres table, chosen at startup
from DATABASE_URL.
"""

"""Data stores for persistence.

Stores handle:
- PostgreSQL: engine, sessions, connection failure mapping
- Catalog: queries and writes for variants, users and orders

No business/validation logic in stores - that belongs in services.
"""

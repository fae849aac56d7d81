"""
Registration platform (Banner 9) access.

- client.py: session bootstrap + section search, raises QueryError
- status.py: raw search row -> AvailabilityStatus
"""

"""LibraNet - Lending Library Core Package

This package contains the core application modules including:
- Lending workflows (lending.py)
- Thread-safe in-memory stores (repositories.py)
- Catalogue items and loan records (items.py, records.py)
- Money and borrow-duration value types (money.py, duration.py)
- CLI interface (main.py)
"""

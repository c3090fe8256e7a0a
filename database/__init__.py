# database/__init__.py
"""
SQLite persistence for accounts and generations
"""

from database.db_manager import DatabaseManager

__all__ = ['DatabaseManager']

"""
Database module - MongoDB connection handle and dependencies.
"""
from hirehub.db.mongodb import MongoConnection, get_database, init_indexes

__all__ = [
    "MongoConnection",
    "get_database",
    "init_indexes"
]

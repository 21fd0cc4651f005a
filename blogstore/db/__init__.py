"""
Database layer: declarative base, store handle, migration and tracing
"""

"""Database layer for the reference endpoint."""

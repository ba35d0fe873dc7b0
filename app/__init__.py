"""
Appointment Management API

A FastAPI-based service for scheduling patient appointments, with
input validation, double-booking detection and SQLite persistence.
"""

__version__ = "1.0.0"

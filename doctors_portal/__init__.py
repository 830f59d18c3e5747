"""
Doctors Portal

A FastAPI booking backend for a dental clinic: service catalog, slot
availability, bookings, token issuance, admin roles and payment intents.
"""

__version__ = "1.0.0"

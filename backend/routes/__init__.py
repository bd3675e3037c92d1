"""
Routes package for Fixing Maritime backend.
Exports all route modules for easy import in main.py.
"""
from routes import (
    auth_routes,
    user_routes,
    quote_routes,
    order_routes,
    invoice_routes,
    registration_routes,
    truck_request_routes,
    content_routes,
    service_routes,
    stats_routes,
)

__all__ = [
    "auth_routes",
    "user_routes",
    "quote_routes",
    "order_routes",
    "invoice_routes",
    "registration_routes",
    "truck_request_routes",
    "content_routes",
    "service_routes",
    "stats_routes",
]

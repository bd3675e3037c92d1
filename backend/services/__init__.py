"""
Services package for Fixing Maritime backend.
Business logic shared by the route modules.
"""

__all__ = [
    "auth_service",
    "policy",
    "transitions",
    "number_service",
    "verification_store",
    "user_service",
    "quote_service",
    "order_service",
    "invoice_service",
    "pdf_service",
    "registration_service",
    "truck_request_service",
    "content_service",
    "service_catalog_service",
    "stats_service",
]

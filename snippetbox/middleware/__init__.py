"""
Snippetbox - Middleware Package
================================

What:  Cross-cutting concerns applied to every request before the router.

Middleware Chain (order matters!):
    Request → [Request ID] → [Access Log] → ServeMux → handler

    1. Request ID first, so the access log line and any error logged by a
       handler carry the same correlation id
    2. Access log measures the full time spent in the router and handler
"""

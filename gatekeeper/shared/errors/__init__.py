"""
Shared error handling package.

Centralizes error-to-HTTP mapping so that every error escaping
a request is classified by a single funnel.
"""

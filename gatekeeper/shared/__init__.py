"""
Shared module package.

Contains cross-cutting concerns applied to every request:
- Error funnel (exception handlers, not-found translation)
- Security middleware
- Rate limiting
- Logging configuration
"""

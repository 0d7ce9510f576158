"""
Interfaces layer package.

Contains FastAPI routers and dependency functions.
No business logic belongs here.
"""

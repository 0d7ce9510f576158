"""
Domain layer package.

Contains pure decision logic: value types, domain services,
and port interfaces. No framework imports, no IO.
"""

"""
Infrastructure adapters for the resilience bounded context.

Each adapter implements a domain port (ABC): log sinks and
rate-limit counter stores.
"""

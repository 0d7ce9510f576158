"""
Gatekeeper — request-resilience boundary for HTTP services.

Application package root. This is a modular monolith using
hexagonal architecture (ports & adapters).

Bounded contexts:
    - resilience: Error classification, not-found translation, rate limiting.

Layers:
    - domain: Pure decision logic, value types, ports (ABCs), errors.
    - infrastructure: Adapters (log sinks, counter stores) implementing domain ports.
    - interfaces: FastAPI routers and dependency wiring.
    - shared: Cross-cutting HTTP concerns (error funnel, rate limiting, headers, logging).
"""

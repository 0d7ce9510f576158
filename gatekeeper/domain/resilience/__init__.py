"""
Resilience bounded context — domain layer.

This module contains all decision logic of the request boundary:
- Error observation and classification
- Disclosure policy
- Fixed-window admission control
"""

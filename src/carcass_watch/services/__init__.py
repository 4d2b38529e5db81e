"""
Shared utilities for external service access.

- http.py - Pre-configured ``requests.Session`` (User-Agent, default timeout)
"""

"""Infrastructure Layer — database, email, security, and logging.

Invariants:
    - External failures mapped to typed errors from core/errors.py
"""

"""
Car trading bounded context, domain layer.

Marketplace concepts (cars, ownership, listings) on top of the
ledger context's contract calls.
"""

"""
Application layer package.

Use cases coordinate the ledger trading manager to fulfill
marketplace operations. No framework or infrastructure imports allowed.
"""

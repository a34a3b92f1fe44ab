"""
Infrastructure adapters for the ledger bounded context.

Each adapter implements a domain port (ABC) or feeds the domain
with validated input read from outside the process.
"""

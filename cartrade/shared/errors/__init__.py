"""
Shared error handling package.

Centralizes error-to-HTTP mapping so that ledger errors
are consistently translated into API responses.
"""

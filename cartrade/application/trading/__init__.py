"""
Application layer for the car trading bounded context.

Use cases translate marketplace commands into contract calls
on the ledger trading manager.
"""

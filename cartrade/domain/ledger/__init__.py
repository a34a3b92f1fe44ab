"""
Ledger bounded context, domain layer.

This module contains all domain logic for talking to the car trading
contract:
- Interface descriptor validation and call encoding
- Nonce allocation for the single signing identity
- Transaction submission and confirmation
- Receipt reconciliation into domain events
"""

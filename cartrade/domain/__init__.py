"""
Domain layer package.

Contains the ledger trading core: entities, the interface descriptor,
port interfaces and the trading manager. No web framework imports.
"""

"""
Infrastructure layer package.

Contains concrete implementations (adapters) of the ports
defined in the domain layer: the Web3 JSON-RPC client and the
contract descriptor loader.
"""

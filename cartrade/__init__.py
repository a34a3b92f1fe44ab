"""
CarTrade: car marketplace backed by a smart-contract ledger.

Application package root. This is a modular monolith using
hexagonal architecture (ports & adapters).

Bounded contexts:
    - ledger: Contract binding, transaction signing/submission, receipts.
    - trading: Car listing, purchase and ownership transfer use cases.

Layers:
    - domain: Ledger trading manager, entities, ports (ABCs), errors.
    - application: Use cases, DTOs, orchestration.
    - infrastructure: Adapters (Web3 RPC, descriptor files) implementing ports.
    - interfaces: FastAPI routers, Pydantic schemas.
    - shared: Cross-cutting concerns (errors, security, logging).
"""

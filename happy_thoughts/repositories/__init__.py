# Repositories package init
"""
Happy Thoughts API — Persistence Layer
========================================

What:  Store access behind small interfaces, one module per aggregate.

Repository Inventory:
    - ThoughtRepository (abstract) / SqlThoughtRepository: thoughts, tags, likes
    - UserRepository: user lookup by name or access token, registration insert

Repositories never commit; the per-request session dependency owns the
transaction.
"""

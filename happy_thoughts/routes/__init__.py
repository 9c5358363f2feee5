# Routes package init
"""
Happy Thoughts API — API Routes Package
=========================================

Route Inventory:
    - index.py:    GET /, GET /tags
    - health.py:   GET /health
    - users.py:    POST /users, POST /users/login
    - thoughts.py: every /thoughts endpoint

Design Principle:
    Routes stay THIN: extract request data, validate path ids, call the
    service, wrap the result in the envelope. Business rules live in services.
"""

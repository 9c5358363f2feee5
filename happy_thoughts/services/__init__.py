# Services package init
"""
Happy Thoughts API — Services Layer
=====================================

What:  Business logic between routes (HTTP) and repositories (persistence).
How:   Services take validated schema values, apply the rules (ownership,
       filters, like bookkeeping) and raise HappyThoughtsError subclasses,
       which main.py maps to HTTP responses. They are injected into routes
       via FastAPI's dependency injection (happy_thoughts.dependencies).

Service Inventory:
    - auth_service: password hashing, token generation, CredentialVerifier
    - UserService: register / login
    - ThoughtService: list, popular, recent, by author, get, create, edit,
      delete, like

Services never see HTTP objects, so they are unit-tested against an
in-memory ThoughtRepository without a database.
"""

"""
Users Backend — Services Layer
===============================

What:  Data access between routes (HTTP) and the database.

Service Inventory:
    - UserService: parameterized CRUD statements against the users table,
      one instance per request bound to that request's AsyncSession
"""

"""
Users Backend — API Routes Package
===================================

Route Inventory:
    - users.py:   GET    /users              (paginated, searchable list)
                  POST   /users              (create)
                  PUT    /users/{user_id}    (full replace)
                  DELETE /users/{user_id}    (delete)
    - health.py:  GET    /health             (service health check)

Routes stay thin: parse input, call UserService, pick the status code.
"""

"""
Journal API: Routes Package
===========================

What:  HTTP route handlers. Each module owns one resource.

Route Inventory:
    - users.py:    POST /users/signup, POST /users/signin,
                   GET /users, DELETE /users?username=
    - entries.py:  GET/POST /entries, GET/PUT/DELETE /entries/{id}
    - health.py:   GET /health

Handlers stay thin: parse the request, call one service method, choose the
status code. Authentication is the `get_principal` dependency; transactions
and business rules live in the services.
"""

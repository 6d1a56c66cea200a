# Routes package init
"""
DB Time Service: Routes Package
=================================

Route Inventory:
    - clock.py:   GET /   (database server time as plain text)

Routes stay thin: call the database client, format the body. Errors are
translated to HTTP by the exception handlers in main.py.
"""

# Routes package init
"""
Pressroom Backend — API Routes Package
========================================

Route Inventory:
    - articles.py: GET    /                    (list articles)
                   GET    /article/{id}        (get one article)
                   POST   /create              (create, optional image)
                   PUT    /update/{id}         (partial update, optional image)
                   DELETE /delete/{id}         (delete, echo the record)
    - admin.py:    POST   /admin               (register an administrator)
    - files.py:    GET    /files/{path}        (images from local storage)
    - health.py:   GET    /health              (service health check)

Routes stay thin: extract request data, call a service, pick the status code.
"""

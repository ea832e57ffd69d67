# Routes package init
"""
Travel Journal Backend — API Routes Package
=============================================

Route Inventory:
    - auth.py:          POST /create-account, POST /login, GET /get-user
    - travel_blogs.py:  POST /add-travel-blog, GET /get-all-blogs,
                        PUT /edit-blog/{id}, DELETE /delete-blog/{id},
                        PUT /update-is-favourite/{id}, GET /search,
                        GET /travel-blogs/filter
    - images.py:        POST /image-upload, DELETE /delete-image
    - health.py:        GET /health

Routes stay THIN: pull fields out of the request, call a service, wrap the
result in an envelope. Errors are raised, never returned, and turned into
responses by the handlers in main.py.
"""

# Services package init
"""
Travel Journal Backend — Services Layer
=========================================

Service Inventory:
    - CredentialService:  registration, password check, profile lookup
    - TokenService:       signed access tokens (issue / validate)
    - AssetService:       image files on disk and their public URLs
    - TravelBlogService:  owner-scoped entry CRUD, favourites, search, filter

Services take an owner id and plain values, never a Request, so they are
tested directly against a session without HTTP.
"""

"""
Database records that may own uploaded files.

`registry.py` declares the resources, `router.py` mounts the same CRUD
surface for each of them.
"""

"""
Per-domain repository modules for database access.

Functions take an open ``Session`` as their first argument, flush their
writes and return ORM instances (or ``None`` when a lookup finds nothing).
Committing is left to the calling service, see ``product_ethics.db.unit_of_work``.
"""

"""User Directory — a small REST service for managing users.

Stateless bearer-token authentication in front of an in-memory user
collection with filter / sort / paginate queries.
"""

__version__ = "0.1.0"

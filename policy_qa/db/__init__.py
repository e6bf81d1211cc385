"""Database layer package.

Public re-exports so callers can write::

    from policy_qa.db import get_connection, init_db
    from policy_qa.db import policies
"""

from policy_qa.db.connection import get_connection
from policy_qa.db.migrations import init_db
from policy_qa.db import interactions, policies

__all__ = ["get_connection", "init_db", "policies", "interactions"]

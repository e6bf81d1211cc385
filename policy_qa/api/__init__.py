"""FastAPI HTTP layer package.

    uvicorn policy_qa.api:app --reload
"""

from policy_qa.api.app import app

__all__ = ["app"]

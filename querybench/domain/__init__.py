"""
Domain package for querybench.

Exports the query record and batch models shared by the loader, runners,
executor and reporter. Keep this package focused on data definitions.
"""

from querybench.domain.models import Batch, QueryRecord

__all__ = [
    "Batch",
    "QueryRecord",
]

"""ORM Models — SQLAlchemy declarative models for all marketplace entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Uniqueness rules live in the schema as unique constraints, not only in code

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from gigmarket.models.user import User  # noqa: F401
from gigmarket.models.gig import Gig  # noqa: F401
from gigmarket.models.application import Application  # noqa: F401
from gigmarket.models.review import Review  # noqa: F401
from gigmarket.models.verification_token import VerificationToken  # noqa: F401

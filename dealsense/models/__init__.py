"""SQLAlchemy ORM models.

Models represent database tables:
- deals: Ingested deal listings with precomputed fingerprint and trust score
- profiles: Saved user interest profiles
"""

from dealsense.models.deal import Deal
from dealsense.models.profile import Profile

__all__ = ["Deal", "Profile"]

# Import all models so Alembic can detect them
from waka.models.user import User
from waka.models.track import Track

__all__ = [
    "User",
    "Track",
]

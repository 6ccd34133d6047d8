"""Categories feature module"""

from sequence_timer.features.categories.api import router
from sequence_timer.features.categories.repository import CategoryRepository

__all__ = ["router", "CategoryRepository"]

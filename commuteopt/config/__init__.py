"""
commuteopt configuration module
Handles the stored commute profile
"""

from .manager import ProfileManager, ProfileManagerError
from .models import CommuteProfile
from .parser import ProfileParser, ProfileParserError

__all__ = [
    "CommuteProfile",
    "ProfileManager",
    "ProfileManagerError",
    "ProfileParser",
    "ProfileParserError",
]

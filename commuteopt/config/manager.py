"""
Profile manager for commuteopt
Handles loading, saving and clearing the commute profile
"""

import logging
import os
from pathlib import Path
from typing import Optional

from commuteopt.core.errors import ConfigError

from .models import CommuteProfile
from .parser import ProfileParser, ProfileParserError


class ProfileManagerError(ConfigError):
    """Profile manager error"""
    pass


class ProfileManager:
    """Manager for the stored commute profile"""

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize profile manager

        Args:
            config_dir: Directory for the profile (defaults to $COMMUTEOPT_CONFIG_DIR or ~/.commuteopt)
        """
        if config_dir is None:
            env_dir = os.getenv("COMMUTEOPT_CONFIG_DIR")
            config_dir = Path(env_dir) if env_dir else Path.home() / ".commuteopt"

        self.config_dir = config_dir
        self.profile_file = self.config_dir / "profile.yaml"
        self.logger = logging.getLogger(__name__)

    def exists(self) -> bool:
        return self.profile_file.exists()

    def load_profile(self) -> CommuteProfile:
        """
        Load the stored profile

        Raises:
            ProfileManagerError: If there is no profile or it cannot be read
        """
        if not self.exists():
            raise ProfileManagerError(
                "No commute profile found. Run 'commuteopt setup' with your home and work addresses."
            )

        try:
            return ProfileParser.parse_profile(self.profile_file)
        except ProfileParserError as e:
            raise ProfileManagerError(f"Failed to load profile: {e}")

    def save_profile(self, profile: CommuteProfile) -> Path:
        """Save the profile, replacing any existing one"""
        self.config_dir.mkdir(parents=True, exist_ok=True)

        try:
            ProfileParser.save_file(profile, self.profile_file)
        except ProfileParserError as e:
            raise ProfileManagerError(f"Failed to save profile: {e}")

        self.logger.info(f"Saved commute profile to {self.profile_file}")
        return self.profile_file

    def clear(self) -> bool:
        """Delete the stored profile; returns False if there was none"""
        if not self.exists():
            return False
        self.profile_file.unlink()
        self.logger.info(f"Removed commute profile {self.profile_file}")
        return True

"""
Profile file parser
Handles YAML and JSON profile files with validation
"""

import json
from enum import Enum
from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import ValidationError

from commuteopt.core.errors import ConfigError

from .models import CommuteProfile


class ConfigFormat(str, Enum):
    """Supported profile file formats"""

    YAML = "yaml"
    JSON = "json"


class ProfileParserError(ConfigError):
    """Profile parsing error"""
    pass


class ProfileParser:
    """Parser for commute profile files"""

    @staticmethod
    def detect_format(file_path: Path) -> ConfigFormat:
        """Detect profile file format from extension"""
        suffix = file_path.suffix.lower()

        if suffix in ['.yaml', '.yml']:
            return ConfigFormat.YAML
        elif suffix == '.json':
            return ConfigFormat.JSON
        else:
            raise ProfileParserError(f"Unsupported file format: {suffix}")

    @staticmethod
    def load_file(file_path: Path) -> Dict[str, Any]:
        """Load profile file content"""
        if not file_path.exists():
            raise ProfileParserError(f"Profile file not found: {file_path}")

        format_type = ProfileParser.detect_format(file_path)

        try:
            content = file_path.read_text(encoding='utf-8')
            if format_type == ConfigFormat.YAML:
                data = yaml.safe_load(content) or {}
            else:
                data = json.loads(content)
        except yaml.YAMLError as e:
            raise ProfileParserError(f"Invalid YAML syntax: {e}")
        except json.JSONDecodeError as e:
            raise ProfileParserError(f"Invalid JSON syntax: {e}")
        except OSError as e:
            raise ProfileParserError(f"Error reading file: {e}")

        if not isinstance(data, dict):
            raise ProfileParserError(f"Profile must be a mapping, got {type(data).__name__}")
        return data

    @staticmethod
    def save_file(profile: CommuteProfile, file_path: Path) -> None:
        """Save profile to file"""
        format_type = ProfileParser.detect_format(file_path)

        # Ensure parent directory exists
        file_path.parent.mkdir(parents=True, exist_ok=True)

        data = profile.model_dump(mode='json')
        # Windows are stored in their compact HH:MM-HH:MM form
        data['morning_window'] = str(profile.morning_window)
        data['evening_window'] = str(profile.evening_window)

        if format_type == ConfigFormat.YAML:
            content = yaml.dump(
                data,
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False,
                indent=2
            )
        else:
            content = json.dumps(data, indent=2, ensure_ascii=False)

        try:
            file_path.write_text(content, encoding='utf-8')
        except OSError as e:
            raise ProfileParserError(f"Error saving file: {e}")

    @staticmethod
    def parse_profile(file_path: Path) -> CommuteProfile:
        """Load and validate a profile file"""
        data = ProfileParser.load_file(file_path)

        try:
            return CommuteProfile(**data)
        except ValidationError as e:
            raise ProfileParserError(f"Invalid profile: {e}")

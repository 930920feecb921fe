"""
Device Profile Parser

Parses device profile JSON files to extract:
- Profile metadata (name, manufacturer, description)
- Device resources (name, value type, read/write access)

A profile tells the host which resources a random device exposes and
which value type each one reads as.
"""

import json
from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field
from pathlib import Path

from .errors import UnsupportedType
from .types import CommandRequest, ValueType, lookup_bound_field


# Accepted readWrite values
READ_WRITE_MODES = ("R", "W", "RW")


class ProfileError(Exception):
    """Profile parsing errors"""
    pass


@dataclass
class DeviceResource:
    """A single resource declared by a profile"""
    name: str
    value_type: ValueType
    read_write: str = "R"
    description: str = ""

    @property
    def readable(self) -> bool:
        return "R" in self.read_write

    @property
    def writable(self) -> bool:
        return "W" in self.read_write

    @classmethod
    def from_dict(cls, resource: Dict[str, Any]) -> 'DeviceResource':
        """Parse from a profile ``deviceResources`` entry"""
        name = resource.get("name", "")
        if not name:
            raise ProfileError("Device resource missing 'name'")

        properties = resource.get("properties") or {}
        value = properties.get("value") if isinstance(properties, dict) else None
        if not isinstance(value, dict):
            raise ProfileError(f"Resource '{name}' has malformed properties")

        try:
            value_type = ValueType.parse(value.get("type"))
        except UnsupportedType:
            raise ProfileError(
                f"Resource '{name}' has unsupported type '{value.get('type')}'"
            )

        read_write = value.get("readWrite", "R")
        if read_write not in READ_WRITE_MODES:
            raise ProfileError(f"Resource '{name}' has invalid readWrite '{read_write}'")

        return cls(
            name=name,
            value_type=value_type,
            read_write=read_write,
            description=resource.get("description", ""),
        )


@dataclass
class DeviceProfile:
    """Parsed device profile"""
    name: str
    description: str = ""
    manufacturer: str = ""
    resources: List[DeviceResource] = field(default_factory=list)

    def get_resource(self, name: str) -> Optional[DeviceResource]:
        """Get a resource by name"""
        for resource in self.resources:
            if resource.name == name:
                return resource
        return None

    def get_resource_names(self) -> List[str]:
        """Get list of all resource names"""
        return [r.name for r in self.resources]

    def read_request(self, name: str) -> CommandRequest:
        """
        Build a read request for a readable resource.

        Raises:
            ProfileError: If the resource is unknown or write-only
        """
        resource = self.get_resource(name)
        if resource is None:
            raise ProfileError(f"Profile '{self.name}' has no resource '{name}'")
        if not resource.readable:
            raise ProfileError(f"Resource '{name}' is not readable")
        return CommandRequest(resource=resource.name, value_type=resource.value_type)


class ProfileParser:
    """Device profile parser"""

    @staticmethod
    def parse(profile_path: str) -> DeviceProfile:
        """
        Parse a device profile JSON file.

        Args:
            profile_path: Path to the profile

        Returns:
            Parsed DeviceProfile

        Raises:
            ProfileError: If the profile is invalid or missing required fields
        """
        profile_path = Path(profile_path)

        if not profile_path.exists():
            raise ProfileError(f"Profile not found: {profile_path}")

        try:
            content = profile_path.read_text(encoding='utf-8')

            # Skip UTF-8 BOM if present
            if content.startswith('\ufeff'):
                content = content[1:]

            profile_dict = json.loads(content)
        except json.JSONDecodeError as e:
            raise ProfileError(f"JSON parse error: {e}")
        except OSError as e:
            raise ProfileError(f"Failed to read profile: {e}")

        return ProfileParser.parse_dict(profile_dict)

    @staticmethod
    def parse_dict(profile: Dict[str, Any]) -> DeviceProfile:
        """Parse a profile from a dictionary"""
        if not isinstance(profile, dict):
            raise ProfileError("Profile must be a JSON object")

        name = profile.get("name")
        if not name:
            raise ProfileError("Missing required field: name")

        raw_resources = profile.get("deviceResources")
        if not isinstance(raw_resources, list) or not raw_resources:
            raise ProfileError("Profile must declare at least one entry in 'deviceResources'")

        resources = []
        seen = set()
        for entry in raw_resources:
            if not isinstance(entry, dict):
                raise ProfileError("Device resource entries must be objects")
            resource = DeviceResource.from_dict(entry)
            if resource.name in seen:
                raise ProfileError(f"Duplicate device resource '{resource.name}'")
            seen.add(resource.name)
            resources.append(resource)

        # Bound resources must carry the type of the width they control
        for resource in resources:
            bound = lookup_bound_field(resource.name)
            if bound is not None and bound.value_type is not resource.value_type:
                raise ProfileError(
                    f"Resource '{resource.name}' must have type {bound.value_type.value}"
                )

        return DeviceProfile(
            name=name,
            description=profile.get("description", ""),
            manufacturer=profile.get("manufacturer", ""),
            resources=resources,
        )


def default_profile_path() -> str:
    """Path of the profile shipped with the package"""
    return str(Path(__file__).parent / "res" / "device-random-profile.json")

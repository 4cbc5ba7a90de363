"""Package descriptor datatypes."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath
from typing import Any, Mapping

_HEX_RE = re.compile(r"^[0-9a-fA-F]{64}$")


class DistributionType(Enum):
    BINARY = "Binary"
    ARCHIVE = "Archive"
    ZIP = "Zip"

    @classmethod
    def parse(cls, value: Any) -> "DistributionType":
        text = str(value or "").strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        raise ValueError(f"unknown distribution type: {value!r}")


@dataclass(frozen=True)
class Package:
    name: str
    url: str
    version: str
    hash: str
    distribution_type: DistributionType
    executable_paths: tuple[str, ...]
    test_args: tuple[str, ...] = ()
    is_bundle: bool = False
    purl: str | None = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "Package":
        """Build a descriptor from an evaluated manifest.

        Accepts both the manifest's camelCase keys and snake_case keys.
        Raises ``ValueError`` when a required field is missing or malformed.
        """
        if not isinstance(payload, Mapping):
            raise ValueError("package manifest must evaluate to a mapping")

        name = _required_str(payload, "name")
        if "/" in name or name in {".", ".."}:
            raise ValueError(f"invalid package name: {name!r}")
        url = _required_str(payload, "url")
        version = str(payload.get("version") or "").strip()
        digest = _required_str(payload, "hash")
        if not _HEX_RE.match(digest):
            raise ValueError("package hash must be a 64 character hex SHA-256 digest")

        raw_type = _first(payload, "type", "distributionType", "distribution_type")
        distribution_type = DistributionType.parse(raw_type)

        executable_paths = _str_tuple(_first(payload, "executablePaths", "executable_paths"), "executablePaths")
        if not executable_paths:
            raise ValueError("executablePaths must not be empty")
        test_args = _str_tuple(_first(payload, "testArgs", "test_args"), "testArgs")

        is_bundle = _first(payload, "isBundle", "is_bundle")
        if is_bundle is None:
            is_bundle = False
        if not isinstance(is_bundle, bool):
            raise ValueError("isBundle must be a boolean")

        purl = str(payload.get("purl") or "").strip() or None
        return cls(
            name=name,
            url=url,
            version=version,
            hash=digest,
            distribution_type=distribution_type,
            executable_paths=executable_paths,
            test_args=test_args,
            is_bundle=is_bundle,
            purl=purl,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "url": self.url,
            "version": self.version,
            "hash": self.hash,
            "type": self.distribution_type.value,
            "executablePaths": list(self.executable_paths),
            "testArgs": list(self.test_args),
            "isBundle": self.is_bundle,
            "purl": self.purl,
        }


def executable_name(path: str) -> str:
    """Return the last component of an executable path, or an empty string."""
    return PurePosixPath(path.strip()).name if path.strip() else ""


def _first(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in payload:
            return payload[key]
    return None


def _required_str(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"package manifest missing required field: {key}")
    return value.strip()


def _str_tuple(value: Any, field_name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        raise ValueError(f"{field_name} must be a list of strings")
    items: list[str] = []
    for idx, item in enumerate(value):
        if not isinstance(item, str):
            raise ValueError(f"{field_name}[{idx}] must be a string")
        items.append(item)
    return tuple(items)

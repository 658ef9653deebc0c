"""The detection result and its derived family queries."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

REDHAT_COMPATIBLE_IDS = ("centos", "fedora", "ol", "rhel", "scientific")
RHEL_COMPATIBLE_IDS = ("centos", "ol", "rhel", "scientific")
RPM_EXTRA_IDS = ("opensuse", "sles")

# Field order used when every field is written out
FIELD_ORDER = ("id", "name", "version", "lsb_release", "os_release")

DISPLAY_KEYS = {
    "name": "Distro Name",
    "id": "Distro ID",
    "version": "Distro Version",
    "lsb_release": "Distro LSB",
    "os_release": "Distro OS",
}


def _frozen(properties) -> Mapping[str, str]:
    return MappingProxyType(dict(properties or {}))


@dataclass(frozen=True)
class LinuxDistro:
    """A detected distribution.

    lsb_release and os_release hold the parsed contents of /etc/lsb-release
    and /etc/os-release; they are empty mappings when the file was absent.
    """
    name: str
    id: str
    version: str
    lsb_release: Mapping[str, str] = field(default_factory=dict)
    os_release: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "lsb_release", _frozen(self.lsb_release))
        object.__setattr__(self, "os_release", _frozen(self.os_release))

    def __hash__(self):
        # mappingproxy is unhashable; hash the map contents instead
        return hash((
            self.name,
            self.id,
            self.version,
            frozenset(self.lsb_release.items()),
            frozenset(self.os_release.items()),
        ))

    @property
    def id_like(self) -> list:
        return self.os_release.get("ID_LIKE", "").split()

    @property
    def is_redhat_family(self) -> bool:
        if self.id in REDHAT_COMPATIBLE_IDS:
            return True
        return any(like in ("rhel", "fedora") for like in self.id_like)

    @property
    def is_rhel_family(self) -> bool:
        if self.id in RHEL_COMPATIBLE_IDS:
            return True
        return "rhel" in self.id_like

    @property
    def uses_rpm(self) -> bool:
        return self.is_redhat_family or self.id in RPM_EXTRA_IDS

    def as_map(self) -> dict:
        """Field-keyed view of the record, keyed like DISPLAY_KEYS."""
        return {
            "name": self.name,
            "id": self.id,
            "version": self.version,
            "lsb_release": dict(self.lsb_release),
            "os_release": dict(self.os_release),
        }

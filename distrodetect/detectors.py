"""Per-distribution detectors.

Each detector takes (files, lsb, osr): the FileSource used for any marker
file reads, and the parsed /etc/lsb-release and /etc/os-release properties.
It returns a LinuxDistro on a match and None otherwise. Detectors never
modify the property mappings they are given.

Several distributions copy each other's marker files, so the order of
DETECTORS matters and some detectors call each other first:
  - Oracle Linux ships a Red Hat /etc/redhat-release; the CentOS, RHEL,
    Fedora and Scientific Linux detectors check for Oracle Linux first.
  - MX Linux ships genuine Debian marker files; the Debian detector checks
    for MX Linux first.
  - BusyBox is a heuristic and runs last.
"""

import re
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from distrodetect import busybox
from distrodetect.distro import LinuxDistro
from distrodetect.filesource import CandidateNotFoundError, FileSource
from distrodetect.properties import UNKNOWN, parse_properties_text, parse_release_line

_CRUX_VERSION_RE = re.compile(r'\s*echo "CRUX version ([0-9.]+)"\s*')
_SOURCEMAGE_VERSION_RE = re.compile(r".*\((.+)\).*")
_MX_VERSION_RE = re.compile(r"(\S+)-([0-9.]+)")


@dataclass(frozen=True)
class Detector:
    """A named detection rule."""
    name: str
    match: Callable[[FileSource, Mapping, Mapping], Optional[LinuxDistro]]

    def __call__(self, files, lsb, osr) -> Optional[LinuxDistro]:
        return self.match(files, lsb, osr)


def _distro(name, distro_id, version, lsb, osr) -> LinuxDistro:
    return LinuxDistro(
        name=name,
        id=distro_id,
        version=version or UNKNOWN,
        lsb_release=lsb,
        os_release=osr,
    )


def _release_file_version(files, paths, expected_prefix) -> Optional[str]:
    """Version from the first existing release file naming `expected_prefix`."""
    contents = files.read_text(*paths)
    if contents is None:
        return None
    return parse_release_line(contents, expected_prefix)


def _suse_style_version(contents: str) -> str:
    """VERSION from a legacy SuSE style file: a free-text header then KEY = VALUE lines."""
    return parse_properties_text(contents).get("VERSION") or UNKNOWN


def _first_line_match(contents: str, pattern) -> Optional[str]:
    """First capture group of `pattern` on any non-blank, non-comment line."""
    for line in contents.splitlines():
        if not line or line.startswith("#"):
            continue
        m = pattern.search(line)
        if m:
            return m.group(1)
    return None


# --- Red Hat lineage ---

def is_centos(files, lsb, osr):
    oracle = is_oracle_linux(files, lsb, osr)
    if oracle:
        return oracle

    version = _release_file_version(
        files, ("/etc/centos-release", "/etc/redhat-release"), "CentOS")
    if version is None:
        return None
    return _distro("CentOS Linux", "centos", version, lsb, osr)


def is_rhel(files, lsb, osr):
    if osr.get("ID") == "rhel" and osr.get("VERSION_ID"):
        return _distro("Red Hat Enterprise Linux", "rhel", osr["VERSION_ID"], lsb, osr)

    oracle = is_oracle_linux(files, lsb, osr)
    if oracle:
        return oracle

    version = _release_file_version(
        files, ("/etc/redhat-release", "/etc/redhat-version"), "Red Hat Enterprise Linux")
    if version is None:
        return None
    return _distro("Red Hat Enterprise Linux", "rhel", version, lsb, osr)


def is_fedora(files, lsb, osr):
    if osr.get("ID") == "fedora":
        return _distro("Fedora", "fedora", osr.get("VERSION_ID"), lsb, osr)

    oracle = is_oracle_linux(files, lsb, osr)
    if oracle:
        return oracle

    version = _release_file_version(
        files, ("/etc/fedora-release", "/etc/redhat-release"), "Fedora")
    if version is None:
        return None
    return _distro("Fedora", "fedora", version, lsb, osr)


def is_oracle_linux(files, lsb, osr):
    if osr.get("ID") == "ol" and osr.get("VERSION_ID"):
        return _distro("Oracle Linux", "ol", osr["VERSION_ID"], lsb, osr)

    version = _release_file_version(files, ("/etc/oracle-release",), "Oracle Linux")
    if version is None:
        return None
    return _distro("Oracle Linux", "ol", version, lsb, osr)


def is_scientific_linux(files, lsb, osr):
    oracle = is_oracle_linux(files, lsb, osr)
    if oracle:
        return oracle

    version = _release_file_version(
        files, ("/etc/sl-release", "/etc/redhat-release"), "Scientific Linux")
    if version is None:
        return None
    return _distro("Scientific Linux", "scientific", version, lsb, osr)


def is_amazon_linux(files, lsb, osr):
    if osr.get("ID") != "amzn":
        return None
    return _distro("Amazon Linux", "amzn", osr.get("VERSION_ID"), lsb, osr)


def is_yellow_dog(files, lsb, osr):
    version = _release_file_version(files, ("/etc/yellowdog-release",), "Yellow Dog Linux")
    if version is None:
        return None
    return _distro("Yellow Dog Linux", "yellow-dog", version, lsb, osr)


# --- Debian lineage ---

def is_ubuntu(files, lsb, osr):
    if lsb.get("DISTRIB_ID") == "Ubuntu":
        return _distro("Ubuntu", "ubuntu", lsb.get("DISTRIB_RELEASE"), lsb, osr)
    if not lsb and osr.get("ID") == "ubuntu":
        return _distro("Ubuntu", "ubuntu", osr.get("VERSION_ID"), lsb, osr)
    return None


def is_debian(files, lsb, osr):
    mx = is_mx_linux(files, lsb, osr)
    if mx:
        return mx

    debian_version = files.read_text("/etc/debian_version")
    if debian_version is None:
        return None

    # Derivatives such as Ubuntu also carry /etc/debian_version
    issue = files.read_text("/etc/issue")
    if issue is not None and not issue.startswith("Debian"):
        return None

    if osr.get("ID") not in ("debian", "", None):
        return None

    return _distro("Debian GNU/Linux", "debian", debian_version.strip(), lsb, osr)


def is_mx_linux(files, lsb, osr):
    if lsb.get("DISTRIB_ID") == "MX":
        return _distro("MX Linux", "mx", lsb.get("DISTRIB_RELEASE"), lsb, osr)

    contents = files.read_text("/etc/mx-version")
    if contents is None:
        return None
    m = _MX_VERSION_RE.search(contents)
    if not m or m.group(1) != "MX":
        return None
    return _distro("MX Linux", "mx", m.group(2), lsb, osr)


def is_mint(files, lsb, osr):
    if lsb.get("DISTRIB_ID") != "LinuxMint":
        return None
    return _distro("Linux Mint", "linuxmint", lsb.get("DISTRIB_RELEASE"), lsb, osr)


def is_kali(files, lsb, osr):
    if osr.get("ID") != "kali":
        return None
    return _distro("Kali GNU/Linux", "kali", osr.get("VERSION_ID"), lsb, osr)


def is_puppy(files, lsb, osr):
    if lsb.get("DISTRIB_ID") != "Puppy":
        return None
    return _distro("Puppy Linux", "puppy", osr.get("VERSION_ID"), lsb, osr)


# --- SUSE lineage ---

def is_opensuse(files, lsb, osr):
    if osr.get("ID") == "opensuse":
        return _distro("openSUSE", "opensuse", osr.get("VERSION_ID"), lsb, osr)

    contents = files.read_text("/etc/SuSE-release")
    if contents is None or not contents.startswith("openSUSE"):
        return None
    return _distro("openSUSE", "opensuse", _suse_style_version(contents), lsb, osr)


def is_sles(files, lsb, osr):
    if osr.get("ID") == "sles":
        return _distro("SUSE Linux", "sles", osr.get("VERSION_ID"), lsb, osr)

    contents = files.read_text("/etc/SuSE-release", "/etc/sles-release")
    if contents is None or not contents.startswith("SUSE Linux"):
        return None
    return _distro("SUSE Linux", "sles", _suse_style_version(contents), lsb, osr)


def is_novell_oes(files, lsb, osr):
    contents = files.read_text("/etc/novell-release")
    if contents is None or not contents.startswith("Novell Open Enterprise Server"):
        return None
    return _distro("Novell Open Enterprise Server", "oes",
                   _suse_style_version(contents), lsb, osr)


# --- Independent ---

def is_alpine(files, lsb, osr):
    if osr.get("ID") == "alpine":
        return _distro("Alpine Linux", "alpine", osr.get("VERSION_ID"), lsb, osr)

    contents = files.read_text("/etc/alpine-release")
    if contents is None:
        return None
    return _distro("Alpine Linux", "alpine", contents.strip(), lsb, osr)


def is_arch_linux(files, lsb, osr):
    if osr.get("ID") != "arch":
        return None
    return _distro("Arch Linux", "arch", "rolling", lsb, osr)


def is_gentoo(files, lsb, osr):
    if osr.get("ID") != "gentoo":
        return None
    version = _release_file_version(files, ("/etc/gentoo-release",), "Gentoo")
    return _distro("Gentoo", "gentoo", version, lsb, osr)


def is_photon(files, lsb, osr):
    if osr.get("ID") == "photon" and osr.get("VERSION_ID"):
        return _distro("VMware Photon", "photon", osr["VERSION_ID"], lsb, osr)

    version = _release_file_version(files, ("/etc/photon-release",), "VMware Photon Linux")
    if version is None:
        return None
    return _distro("VMware Photon", "photon", version, lsb, osr)


def is_slackware(files, lsb, osr):
    if osr.get("ID") == "slackware" and osr.get("VERSION_ID"):
        return _distro("Slackware", "slackware", osr["VERSION_ID"], lsb, osr)

    contents = files.read_text("/etc/slackware-version")
    if contents is None or not contents.startswith("Slackware"):
        return None
    segments = contents.strip().split(" ", 1)
    version = segments[1] if len(segments) == 2 else UNKNOWN
    return _distro("Slackware", "slackware", version, lsb, osr)


def is_mageia(files, lsb, osr):
    if osr.get("ID") != "mageia":
        return None
    return _distro("Mageia", "mageia", osr.get("VERSION"), lsb, osr)


def is_clear_linux(files, lsb, osr):
    if osr.get("ID") != "clear-linux-os":
        return None
    return _distro("Clear Linux OS", "clear-linux-os", osr.get("VERSION_ID"), lsb, osr)


def is_rancheros(files, lsb, osr):
    if osr.get("ID") != "rancheros":
        return None
    return _distro("RancherOS", "rancheros", osr.get("VERSION_ID"), lsb, osr)


def is_alt_linux(files, lsb, osr):
    if osr.get("ID") != "altlinux":
        return None
    return _distro("ALT Starterkit", "altlinux", osr.get("VERSION_ID"), lsb, osr)


def is_nixos(files, lsb, osr):
    if osr.get("ID") != "nixos":
        return None
    return _distro("NixOS", "nixos", osr.get("VERSION_ID"), lsb, osr)


def is_crux(files, lsb, osr):
    contents = files.read_text("/usr/bin/crux")
    if contents is None:
        return None
    version = _first_line_match(contents, _CRUX_VERSION_RE)
    return _distro("CRUX", "crux", version, lsb, osr)


def is_source_mage(files, lsb, osr):
    contents = files.read_text("/etc/sourcemage-release")
    if contents is None:
        return None
    version = _first_line_match(contents, _SOURCEMAGE_VERSION_RE)
    return _distro("Source Mage GNU/Linux", "sourcemage", version, lsb, osr)


def is_android(files, lsb, osr):
    contents = files.read_text("/system/build.prop")
    if contents is None:
        return None
    build = parse_properties_text(contents)
    version = build.get("ro.com.google.gmsversion") or build.get("ro.build.version.release")
    return _distro("Android", "android", version, lsb, osr)


def is_busybox(files, lsb, osr):
    # A real distribution may use BusyBox applets; only a system without any
    # release file is reported as BusyBox itself.
    if files.exists("/etc/os-release", "/etc/lsb-release"):
        return None

    try:
        handle, resolved = files.open_first(("/bin/true",))
    except (CandidateNotFoundError, OSError):
        return None

    with handle:
        try:
            version = busybox.scan_version(handle)
        except OSError as e:
            files.log.error(f"unable to read in buffer for file({resolved}): {e}")
            return None

    if version is None:
        return None
    return _distro("BusyBox", "busybox", version, lsb, osr)


DETECTORS = (
    Detector("centos", is_centos),
    Detector("rhel", is_rhel),
    Detector("ubuntu", is_ubuntu),
    Detector("debian", is_debian),
    Detector("amazon-linux", is_amazon_linux),
    Detector("fedora", is_fedora),
    Detector("opensuse", is_opensuse),
    Detector("sles", is_sles),
    Detector("oracle-linux", is_oracle_linux),
    Detector("photon", is_photon),
    Detector("alpine", is_alpine),
    Detector("arch-linux", is_arch_linux),
    Detector("gentoo", is_gentoo),
    Detector("kali", is_kali),
    Detector("scientific-linux", is_scientific_linux),
    Detector("slackware", is_slackware),
    Detector("mageia", is_mageia),
    Detector("clear-linux", is_clear_linux),
    Detector("mint", is_mint),
    Detector("mx-linux", is_mx_linux),
    Detector("novell-oes", is_novell_oes),
    Detector("puppy", is_puppy),
    Detector("rancheros", is_rancheros),
    Detector("alt-linux", is_alt_linux),
    Detector("nixos", is_nixos),
    Detector("crux", is_crux),
    Detector("source-mage", is_source_mage),
    Detector("android", is_android),
    Detector("yellow-dog", is_yellow_dog),
    # Last: the heuristic would claim any minimal system without a release file
    Detector("busybox", is_busybox),
)


def detector_names(detectors=DETECTORS) -> list:
    return [d.name for d in detectors]

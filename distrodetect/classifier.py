"""Distribution classification.

The Classifier reads /etc/lsb-release and /etc/os-release once, then tries
each detector in order; the first match wins. When nothing matches,
best_guess() assembles an answer from whatever the two files contain.
"""

import os
from typing import Mapping, Sequence

from distrodetect.detectors import DETECTORS, Detector, detector_names
from distrodetect.distro import LinuxDistro
from distrodetect.filesource import CandidateNotFoundError, FileSource
from distrodetect.logging import DetectLogger
from distrodetect.properties import UNKNOWN, parse_properties

LSB_RELEASE_PATH = "/etc/lsb-release"
OS_RELEASE_PATH = "/etc/os-release"


class Classifier:
    """Runs the ordered detector set against one FileSource."""

    def __init__(
        self,
        files: FileSource = None,
        detectors: Sequence[Detector] = DETECTORS,
        log: DetectLogger = None,
    ):
        self.log = log or (files.log if files else DetectLogger())
        self.files = files or FileSource(log=self.log)
        self.detectors = tuple(detectors)

    def read_release_file(self, path: str) -> dict:
        """Parse a KEY=VALUE release file; empty when absent or unreadable."""
        try:
            handle, resolved = self.files.open_first((path,))
        except CandidateNotFoundError:
            self.log.debug(f"unable to find release file: {path}")
            return {}
        except OSError:
            return {}

        with handle:
            try:
                lines = (raw.decode("utf-8", errors="replace") for raw in handle)
                return parse_properties(lines)
            except OSError as e:
                self.log.error(f"unable to read release file ({resolved}): {e}")
                return {}

    def discover(self) -> LinuxDistro:
        """Detect the distribution installed below the FileSource root."""
        lsb = self.read_release_file(LSB_RELEASE_PATH)
        osr = self.read_release_file(OS_RELEASE_PATH)
        return self.classify(lsb, osr)

    def classify(self, lsb: Mapping[str, str], osr: Mapping[str, str]) -> LinuxDistro:
        """Classify already-parsed lsb-release and os-release properties."""
        lsb = dict(lsb or {})
        osr = dict(osr or {})

        self.log.debug(f"detector order: {' '.join(detector_names(self.detectors))}")
        for detector in self.detectors:
            distro = detector(self.files, lsb, osr)
            if distro is not None:
                self.log.debug(f"matched by detector: {detector.name}")
                return distro

        self.log.warn("distro is not part of the existing data set - attempting best guess")
        return best_guess(lsb, osr)


def _first_token(value: str) -> str:
    """First whitespace-delimited word of `value`, or "" if there is none."""
    tokens = (value or "").split()
    return tokens[0] if tokens else ""


def best_guess(lsb: Mapping[str, str], osr: Mapping[str, str]) -> LinuxDistro:
    """Build a result from whichever identifying fields are present.

    Missing and empty values are treated the same. The returned id and name
    are never empty.
    """
    if osr.get("ID"):
        distro_id = osr["ID"]
    elif lsb.get("DISTRIB_ID"):
        distro_id = lsb["DISTRIB_ID"].lower()
    else:
        distro_id = UNKNOWN

    pretty_name = _first_token(osr.get("PRETTY_NAME"))
    if osr.get("NAME"):
        name = osr["NAME"]
    elif pretty_name:
        name = pretty_name
    elif lsb.get("DISTRIB_ID"):
        name = lsb["DISTRIB_ID"]
    elif osr.get("ID"):
        name = osr["ID"]
    else:
        name = "Unknown"

    short_version = _first_token(osr.get("VERSION"))
    if osr.get("VERSION_ID"):
        version = osr["VERSION_ID"]
    elif lsb.get("DISTRIB_RELEASE"):
        version = lsb["DISTRIB_RELEASE"]
    elif short_version:
        version = short_version
    else:
        version = UNKNOWN

    return LinuxDistro(
        name=name,
        id=distro_id,
        version=version,
        lsb_release=lsb,
        os_release=osr,
    )


def discover_distro(root: str = os.sep, log: DetectLogger = None) -> LinuxDistro:
    """Detect the distribution of the filesystem mounted at `root`."""
    files = FileSource(root=root, log=log)
    return Classifier(files=files).discover()

"""distrodetect: identify the Linux distribution of a system or mounted image."""

__version__ = "1.0.0"

from distrodetect.classifier import Classifier, best_guess, discover_distro
from distrodetect.detectors import DETECTORS, Detector
from distrodetect.distro import LinuxDistro
from distrodetect.filesource import CandidateNotFoundError, FileSource, MemoryFileSource

__all__ = [
    "Classifier", "best_guess", "discover_distro",
    "DETECTORS", "Detector", "LinuxDistro",
    "CandidateNotFoundError", "FileSource", "MemoryFileSource",
    "main",
]


def __getattr__(name):
    if name == "main":
        from distrodetect.runner import main
        return main
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

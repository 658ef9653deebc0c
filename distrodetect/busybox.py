"""Version banner scanner for BusyBox binaries.

A BusyBox userland has no release file, but every applet is the same
multi-call binary and embeds a banner such as "BusyBox v1.32.0 (2020-...)".
"""

import re
from functools import partial
from typing import BinaryIO, Optional

SIGNATURE = b"BusyBox v"
MIN_VERSION_LENGTH = 6
CHUNK_SIZE = 4096

_VERSION_RE = re.compile(rb"[0-9.]+")


def scan_version(stream: BinaryIO, chunk_size: int = CHUNK_SIZE) -> Optional[str]:
    """Stream `stream` looking for the BusyBox banner.

    Returns "v" + the digits and dots following the signature, or None when
    no signature is followed by at least MIN_VERSION_LENGTH such characters.
    """
    buffer = b""
    for chunk in iter(partial(stream.read, chunk_size), b""):
        buffer += chunk
        version, buffer = _search(buffer, at_eof=False)
        if version:
            return version

    version, _ = _search(buffer, at_eof=True)
    return version


def _search(buffer: bytes, at_eof: bool) -> tuple:
    """Search `buffer` for a complete banner.

    Returns (version, remainder). The remainder is the tail that may still
    begin a banner once more data arrives.
    """
    while True:
        idx = buffer.find(SIGNATURE)
        if idx < 0:
            # Keep enough bytes to complete a signature split across chunks
            return None, buffer[-(len(SIGNATURE) - 1):]

        start = idx + len(SIGNATURE)
        m = _VERSION_RE.match(buffer, start)
        end = m.end() if m else start

        if end == len(buffer) and not at_eof:
            # Version run reaches the end of what has been read so far
            return None, buffer[idx:]

        if end - start >= MIN_VERSION_LENGTH:
            return "v" + buffer[start:end].decode("ascii"), b""

        buffer = buffer[idx + 1:]

"""Diagnostic logging for distro detection.

All output goes to stderr so that stdout carries only the detection result.
Plain lines look like "warn: <msg>"; with json_lines=True each entry is a
compact JSON object for tools that parse the diagnostics.
"""

import json
import sys


class DetectLogger:
    """Logger that writes leveled diagnostics to stderr."""

    def __init__(self, verbose: bool = False, json_lines: bool = False, stream=None):
        self.verbose = verbose
        self.json_lines = json_lines
        self._stream = stream

    def _emit(self, data: dict) -> None:
        stream = self._stream or sys.stderr
        if self.json_lines:
            line = json.dumps(data, separators=(",", ":"))
        else:
            line = f"{data['level']}: {data['msg']}"
        print(line, file=stream, flush=True)

    def debug(self, msg: str) -> None:
        """Emit only in verbose mode."""
        if self.verbose:
            self._emit({"level": "debug", "msg": msg})

    def warn(self, msg: str) -> None:
        self._emit({"level": "warn", "msg": msg})

    def error(self, msg: str) -> None:
        self._emit({"level": "error", "msg": msg})

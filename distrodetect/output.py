"""Text and JSON rendering of a LinuxDistro."""

import json
from typing import Iterable, TextIO

from distrodetect.distro import DISPLAY_KEYS, FIELD_ORDER, LinuxDistro

FORMATS = ("text", "text-no-labels", "json", "json-one-line")

LABEL_FORMAT = "{}: "


def write_result(distro: LinuxDistro, key: str, out: TextIO, labels: bool = True) -> None:
    """Write one field. Mapping fields produce one line per entry.

    e.g. "Distro ID: ubuntu" or "Distro OS VERSION_ID: 20.04"
    """
    display_key = DISPLAY_KEYS[key]
    value = distro.as_map()[key]

    if isinstance(value, dict):
        for k in sorted(value):
            label = LABEL_FORMAT.format(f"{display_key} {k}") if labels else ""
            out.write(f"{label}{value[k]}\n")
    else:
        label = LABEL_FORMAT.format(display_key) if labels else ""
        out.write(f"{label}{value}\n")


def write_all_results(distro: LinuxDistro, out: TextIO, labels: bool = True) -> None:
    for key in FIELD_ORDER:
        write_result(distro, key, out, labels=labels)


def select_fields(fields: Iterable[str]) -> tuple:
    """Normalize requested field names.

    Returns (known, unknown) lists, each in request order.
    """
    known, unknown = [], []
    for field in fields:
        key = field.strip().lower()
        if not key:
            continue
        if key in DISPLAY_KEYS:
            known.append(key)
        else:
            unknown.append(key)
    return known, unknown


def to_json(distro: LinuxDistro, one_line: bool = False) -> str:
    data = {
        "name": distro.name,
        "id": distro.id,
        "version": distro.version,
        "lsb_release": dict(sorted(distro.lsb_release.items())),
        "os_release": dict(sorted(distro.os_release.items())),
    }
    if one_line:
        return json.dumps(data, separators=(",", ":"))
    return json.dumps(data, indent=2)


def render(distro: LinuxDistro, fmt: str, out: TextIO, fields: Iterable[str] = None) -> None:
    """Write `distro` to `out` in one of FORMATS.

    `fields` only applies to the text formats. None writes every field;
    otherwise only the known names are written, skipping empty values.
    """
    if fmt not in FORMATS:
        raise ValueError(f"Invalid format '{fmt}'. Must be one of: {FORMATS}")

    if fmt in ("json", "json-one-line"):
        out.write(to_json(distro, one_line=(fmt == "json-one-line")) + "\n")
        return

    labels = fmt == "text"
    if fields is None:
        write_all_results(distro, out, labels=labels)
        return

    known, _ = select_fields(fields)
    values = distro.as_map()
    for key in known:
        if values[key] == "":
            continue
        write_result(distro, key, out, labels=labels)

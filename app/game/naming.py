# app/game/naming.py
from __future__ import annotations

import re
from typing import Tuple

# "Mortar #1" -> ("Mortar", 1); "Town Hall" -> ("Town Hall", 1)
_SUFFIX_RE = re.compile(r"\s#(\d+)$")


def strip_suffix(name: str) -> str:
    return _SUFFIX_RE.sub("", str(name))


def instance_name(structure_type: str, index: int) -> str:
    return f"{structure_type} #{int(index)}"


def parse_instance_name(name: str) -> Tuple[str, int]:
    name = (name or "").strip()
    m = _SUFFIX_RE.search(name)
    if not m:
        return name, 1
    return name[: m.start()], int(m.group(1))

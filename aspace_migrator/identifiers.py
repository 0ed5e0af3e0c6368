"""
Identifiers - Matching identifier strategies.

There is no shared primary key between the source and destination instances,
so a resource is matched by its four-part identifier (id_0..id_3). The
destination's find_by_id endpoint takes the identifier as a JSON array string,
and each strategy below produces that string:

  smushed    ["MS.123.A"]            all present parts joined with "."
  four_part  ["MS","123",null,null]  one entry per part, missing parts null

The output is compact JSON so the same resource always yields byte-identical
keys across runs.
"""

import json
from typing import Any, Callable, Dict, List

IdGenerator = Callable[[Dict[str, Any]], str]

ID_PARTS = ("id_0", "id_1", "id_2", "id_3")


def _dump(parts: List[Any]) -> str:
    return json.dumps(parts, separators=(",", ":"), ensure_ascii=False)


def four_part(resource: Dict[str, Any]) -> str:
    """One array entry per id part; raises KeyError when id_0 is missing."""
    parts = [resource["id_0"]] + [resource.get(key) for key in ID_PARTS[1:]]
    return _dump(parts)


def smushed(resource: Dict[str, Any]) -> str:
    """A single array entry with the present id parts joined by "."."""
    parts = [resource.get(key) for key in ID_PARTS]
    return _dump([".".join(str(part) for part in parts if part not in (None, ""))])


ID_GENERATORS: Dict[str, IdGenerator] = {
    "four_part": four_part,
    "smushed": smushed,
}


def get_id_generator(name: str) -> IdGenerator:
    """Look up a strategy by name.

    Raises:
        ValueError: If no strategy is registered under that name.
    """
    try:
        return ID_GENERATORS[name]
    except KeyError:
        known = ", ".join(sorted(ID_GENERATORS))
        raise ValueError(f"Unknown id generator '{name}' (expected one of: {known})") from None

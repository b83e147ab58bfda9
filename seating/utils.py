from __future__ import annotations
import re
from typing import Iterable, List, Optional, Tuple

import pandas as pd

_MEMBER_SEP = re.compile(r"[&;,|]")

def manhattan(ax: int, ay: int, bx: int, by: int) -> int:
    return abs(ax - bx) + abs(ay - by)

def entry_distance(a, b) -> int:
    """Manhattan distance between two objects carrying x/y (positions or entries)."""
    return manhattan(a.x, a.y, b.x, b.y)

def reading_order_key(p) -> Tuple[int, int]:
    # front (min y) first, then left to right
    return (p.y, p.x)

def reading_order(positions: Iterable) -> list:
    return sorted(positions, key=reading_order_key)

def row_bounds(ys: Iterable[int]) -> Optional[Tuple[int, int]]:
    ys = list(ys)
    if not ys:
        return None
    return min(ys), max(ys)

def _clean_opt(v) -> str:
    if v is None or (pd.api.types.is_scalar(v) and pd.isna(v)):
        return ""
    s = str(v).strip()
    return "" if s.lower() in {"", "nan", "none", "null"} else s

def split_members(text) -> List[str]:
    """'Ann & Bob; Cy' -> ['Ann', 'Bob', 'Cy'] (order kept, duplicates dropped)."""
    if isinstance(text, (list, tuple)):
        parts = [_clean_opt(t) for t in text]
    else:
        parts = [_clean_opt(t) for t in _MEMBER_SEP.split(_clean_opt(text))]
    return list(dict.fromkeys(p for p in parts if p))

def first_name(name: str) -> str:
    s = str(name or "").strip()
    return s.split(" ")[0] if s else ""

def truncate(s: str, limit: int) -> str:
    """Keep `limit` chars; longer strings get `limit-1` chars plus '...'."""
    s = str(s or "")
    return s if len(s) <= limit else f"{s[:limit - 1]}..."

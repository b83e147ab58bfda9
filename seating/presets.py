"""Ready-made classroom layouts, matching the layout editor's presets."""

from __future__ import annotations
from typing import Callable, Dict, List

from .models import DEFAULT_GRID_COLS, DEFAULT_GRID_ROWS, Layout, Position

def default_layout() -> Layout:
    """5 rows x 6 desks, one empty column between desks."""
    desks = [
        Position(id=f"desk-{row}-{col}", x=col * 2, y=row + 1)
        for row in range(5)
        for col in range(6)
    ]
    return Layout(desks, DEFAULT_GRID_ROWS, DEFAULT_GRID_COLS)

def traditional_rows() -> Layout:
    return Layout(
        [Position(id=f"desk-{i}", x=(i % 6) * 2, y=(i // 6) * 2 + 1) for i in range(30)],
        10,
        DEFAULT_GRID_COLS,
    )

def groups_of_four() -> Layout:
    desks: List[Position] = []
    n = 1
    for gy in (1, 4):
        for gx in (0, 3, 6):
            for dy in (0, 1):
                for dx in (0, 1):
                    desks.append(Position(id=f"d{n}", x=gx + dx, y=gy + dy))
                    n += 1
    return Layout(desks, DEFAULT_GRID_ROWS, DEFAULT_GRID_COLS)

def u_shape() -> Layout:
    desks = [Position(id=f"left-{i}", x=0, y=i + 1) for i in range(5)]
    desks += [Position(id=f"right-{i}", x=7, y=i + 1) for i in range(5)]
    desks += [Position(id=f"bottom-{i}", x=i + 1, y=5) for i in range(6)]
    return Layout(desks, DEFAULT_GRID_ROWS, DEFAULT_GRID_COLS)

_CIRCLE = [
    (3, 0), (4, 0), (5, 0),          # top
    (6, 1), (7, 2), (7, 3), (6, 4),  # right
    (5, 5), (4, 5), (3, 5),          # bottom
    (2, 4), (1, 3), (1, 2), (2, 1),  # left
]

def circle() -> Layout:
    return Layout(
        [Position(id=f"c{i + 1}", x=x, y=y) for i, (x, y) in enumerate(_CIRCLE)],
        DEFAULT_GRID_ROWS,
        DEFAULT_GRID_COLS,
    )

PRESET_LAYOUTS: Dict[str, Callable[[], Layout]] = {
    "Traditional Rows": traditional_rows,
    "Groups of 4": groups_of_four,
    "U-Shape": u_shape,
    "Circle/Oval": circle,
}

def rotate_desk(layout: Layout, desk_id: str) -> Layout:
    """Turn one desk a quarter turn clockwise. Unknown ids raise KeyError."""
    if layout.get(desk_id) is None:
        raise KeyError(f"Unknown desk id '{desk_id}'.")
    desks = [
        Position(p.id, p.x, p.y, (p.rotation + 90) % 360) if p.id == desk_id else p
        for p in layout.positions
    ]
    return Layout(desks, layout.grid_rows, layout.grid_cols)

def get_preset(name: str) -> Layout:
    try:
        return PRESET_LAYOUTS[name]()
    except KeyError:
        raise KeyError(f"Unknown preset layout: {name!r}") from None

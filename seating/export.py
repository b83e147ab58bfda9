from __future__ import annotations
import html
from datetime import datetime as dt
from typing import Dict, Optional, Sequence

from .models import DEFAULT_GRID_COLS, DEFAULT_GRID_ROWS, Assignment, Layout, Person
from .utils import first_name, truncate

LEGEND_LIMIT = 20
DESK_NAME_LIMIT = 8
LEGEND_NAME_LIMIT = 15
PRIMARY_COLOR = "#1ee876"

def grid_bounds(assignment: Assignment, grid_rows: int, grid_cols: int):
    """(min_x, max_x, min_y, max_y): at least the configured grid, stretched to fit every desk."""
    xs = [e.x for e in assignment.entries]
    ys = [e.y for e in assignment.entries]
    return (
        min(xs + [0]),
        max(xs + [grid_cols - 1]),
        min(ys + [0]),
        max(ys + [grid_rows - 1]),
    )

def seating_chart_html(
    assignment: Assignment,
    roster: Sequence[Person],
    layout: Optional[Layout] = None,
    title: str = "Seating Chart",
    on_date: Optional[dt] = None,
) -> str:
    """Printable HTML: front-of-room bar, desk grid, colour legend and summary line."""
    grid_rows = layout.grid_rows if layout is not None else DEFAULT_GRID_ROWS
    grid_cols = layout.grid_cols if layout is not None else DEFAULT_GRID_COLS
    n_desks = len(layout) if layout is not None else len(assignment)
    on_date = on_date or dt.now()
    def esc(x): return html.escape(str(x) if x is not None else "")

    by_id: Dict[str, Person] = {p.id: p for p in roster}
    rotations = {p.id: p.rotation for p in layout.positions} if layout is not None else {}
    def turn(position_id):
        deg = rotations.get(position_id, 0)
        return f" style='transform:rotate({deg}deg)'" if deg else ""
    min_x, max_x, min_y, max_y = grid_bounds(assignment, grid_rows, grid_cols)
    cells: Dict[tuple, list] = {}
    for e in assignment.entries:
        cells.setdefault((e.x, e.y), []).append(e)

    parts = [
        "<!doctype html><html><head><meta charset='utf-8'>",
        "<style>",
        "body{font-family:Helvetica,Arial,sans-serif;margin:16px;color:#1e1e1e}",
        f"header{{background:{PRIMARY_COLOR};padding:10px 16px;display:flex;justify-content:space-between}}",
        "h1{margin:0;font-size:20px}",
        ".muted{color:#646464;font-size:12px}",
        f".front{{background:{PRIMARY_COLOR};text-align:center;font-weight:bold;font-size:11px;"
        "border-radius:4px;padding:4px;margin:12px auto 6px auto;width:40%}",
        "table.grid{border-collapse:collapse;margin:0 auto}",
        "table.grid td{border:1px solid #e6e6e6;width:64px;height:56px;text-align:center;vertical-align:middle}",
        ".desk{background:#f0f0f0;border:1px solid #c8c8c8;border-radius:6px;padding:2px;font-size:10px}",
        ".desk.empty{border-style:dashed;color:#aaa}",
        ".dot{display:inline-block;width:18px;height:18px;border-radius:9px;color:#fff;font-weight:bold;line-height:18px}",
        ".legend{margin-top:16px;font-size:12px}",
        ".legend span.dot{width:10px;height:10px;margin-right:6px}",
        "footer{margin-top:16px;display:flex;justify-content:space-between}",
        "</style></head><body>",
        f"<header><h1>{esc(title)}</h1><span>Generated: {esc(on_date.strftime('%d/%m/%Y'))}</span></header>",
        "<div class='front'>FRONT OF CLASSROOM</div>",
        "<table class='grid'>",
    ]

    for y in range(min_y, max_y + 1):
        parts.append("<tr>")
        for x in range(min_x, max_x + 1):
            here = cells.get((x, y), [])
            if not here:
                parts.append("<td></td>")
                continue
            inner = []
            for e in here:
                person = by_id.get(e.person_id) if e.person_id else None
                if person is None:
                    inner.append(f"<div class='desk empty' title='{esc(e.position_id)}'{turn(e.position_id)}>&nbsp;</div>")
                    continue
                initial = person.name[:1].upper()
                short = truncate(first_name(person.name), DESK_NAME_LIMIT)
                inner.append(
                    f"<div class='desk' title='{esc(e.position_id)}'{turn(e.position_id)}>"
                    f"<span class='dot' style='background:{esc(person.display_color)}'>{esc(initial)}</span>"
                    f"<br>{esc(short)}</div>"
                )
            parts.append(f"<td>{''.join(inner)}</td>")
        parts.append("</tr>")
    parts.append("</table>")

    parts.append("<div class='legend'><b>Student Legend</b><br>")
    for person in list(roster)[:LEGEND_LIMIT]:
        parts.append(
            f"<div><span class='dot' style='background:{esc(person.display_color)}'></span>"
            f"{esc(truncate(person.name, LEGEND_NAME_LIMIT))}</div>"
        )
    if len(roster) > LEGEND_LIMIT:
        parts.append(f"<div class='muted'>+ {len(roster) - LEGEND_LIMIT} more students</div>")
    parts.append("</div>")

    parts.append(
        f"<footer class='muted'><span>{len(roster)} students | {n_desks} desks</span>"
        f"<span>Generated by Seating Chart Generator</span></footer>"
    )
    parts.append("</body></html>")
    return "".join(parts)

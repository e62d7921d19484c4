from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..grid import Grid
from ..level import Level
from ..palette import color_hex, color_label
from ..solver.types import Solution


def build_plotly_figure(
    level: Level,
    *,
    solution: Optional[Solution] = None,
    grid: Optional[Grid] = None,
    title: str = "dotknot",
):
    """Static picture of a level, optionally with a solution or board state.

    Cells are drawn as markers (row 0 at the top), anchors larger; solution
    paths are thick colored polylines.
    """
    import plotly.graph_objects as go

    anchors = level.anchor_cells()

    def xy(pos):
        return float(pos[1]), float(-pos[0])

    # Grid lattice (light)
    ex, ey = [], []
    for r in range(level.rows):
        for c in range(level.cols):
            x, y = xy((r, c))
            if c + 1 < level.cols:
                ex += [x, x + 1.0, None]
                ey += [y, y, None]
            if r + 1 < level.rows:
                ex += [x, x, None]
                ey += [y, y - 1.0, None]

    traces = [
        go.Scatter(
            x=ex,
            y=ey,
            mode="lines",
            line=dict(width=1, color="rgba(160,160,160,0.5)"),
            hoverinfo="none",
            name="grid",
        )
    ]

    if solution is not None:
        for color, path in solution.paths.items():
            px = [xy(p)[0] for p in path]
            py = [xy(p)[1] for p in path]
            traces.append(
                go.Scatter(
                    x=px,
                    y=py,
                    mode="lines",
                    line=dict(width=10, color=color_hex(color)),
                    hoverinfo="none",
                    name=color_label(color),
                )
            )

    nx, ny, ntext, ncolor, nsize = [], [], [], [], []
    for r in range(level.rows):
        for c in range(level.cols):
            pos = (r, c)
            x, y = xy(pos)
            nx.append(x)
            ny.append(y)
            owner = None
            if solution is not None:
                owner = solution.cell_color.get(pos)
            elif grid is not None:
                owner = grid.color_at(pos)
            elif pos in anchors:
                owner = anchors[pos]

            bits = [f"cell=({r}, {c})"]
            if pos in anchors:
                bits.append(f"anchor={color_label(anchors[pos])}")
            elif owner is not None:
                bits.append(f"color={color_label(owner)}")
            ntext.append("<br>".join(bits))
            ncolor.append(color_hex(owner) if owner is not None else "#cccccc")
            nsize.append(26 if pos in anchors else 10)

    traces.append(
        go.Scatter(
            x=nx,
            y=ny,
            mode="markers",
            marker=dict(size=nsize, color=ncolor, line=dict(width=0)),
            text=ntext,
            hoverinfo="text",
            name="cells",
        )
    )

    fig = go.Figure(data=traces)
    fig.update_layout(
        title=title,
        showlegend=solution is not None,
        xaxis=dict(visible=False),
        yaxis=dict(visible=False, scaleanchor="x", scaleratio=1),
        margin=dict(l=0, r=0, t=40, b=0),
    )
    return fig


def write_plotly_html(
    level: Level,
    *,
    out_path: str | Path,
    solution: Optional[Solution] = None,
    grid: Optional[Grid] = None,
    title: str = "dotknot",
) -> Path:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    fig = build_plotly_figure(level, solution=solution, grid=grid, title=title)
    fig.write_html(str(out_path), include_plotlyjs="cdn", full_html=True)
    return out_path

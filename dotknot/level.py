from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .grid import Color, Position

AnchorPair = Tuple[Position, Position]


@dataclass(frozen=True)
class Level:
    """An immutable puzzle: board size plus the anchor pair of every color.

    - every color has exactly two distinct, in-bounds anchors;
    - no cell is an anchor for two colors;
    - ``anchors`` iteration order is the color order every solver, hint and
      guard pass uses.
    """

    rows: int
    cols: int
    anchors: Mapping[Color, AnchorPair]
    meta: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        if self.rows <= 0 or self.cols <= 0:
            raise ValueError(f"Level dimensions must be positive (rows={self.rows}, cols={self.cols})")
        if not self.anchors:
            raise ValueError("Level needs at least one anchor pair")

        normalized: Dict[Color, AnchorPair] = {}
        seen: Dict[Position, Color] = {}
        for color, pair in self.anchors.items():
            if not isinstance(color, str) or not color:
                raise ValueError(f"Color ids must be non-empty strings, got {color!r}")
            if len(pair) != 2:
                raise ValueError(f"Color {color!r} must have exactly 2 anchors (found {len(pair)})")
            a = (int(pair[0][0]), int(pair[0][1]))
            b = (int(pair[1][0]), int(pair[1][1]))
            if a == b:
                raise ValueError(f"Anchors for {color!r} must be distinct")
            for pos in (a, b):
                if not (0 <= pos[0] < self.rows and 0 <= pos[1] < self.cols):
                    raise ValueError(f"Anchor {pos} for {color!r} is out of bounds")
                if pos in seen:
                    raise ValueError(f"Cell {pos} is an anchor for both {seen[pos]!r} and {color!r}")
                seen[pos] = color
            normalized[color] = (a, b)

        object.__setattr__(self, "anchors", MappingProxyType(normalized))
        object.__setattr__(self, "meta", MappingProxyType(dict(self.meta)))

    def __hash__(self) -> int:
        # Agrees with __eq__, which ignores anchor insertion order.
        return hash((self.rows, self.cols, frozenset(self.anchors.items())))

    def colors(self) -> List[Color]:
        return list(self.anchors.keys())

    def anchor_cells(self) -> Dict[Position, Color]:
        out: Dict[Position, Color] = {}
        for color, (a, b) in self.anchors.items():
            out[a] = color
            out[b] = color
        return out

    def to_flow_text(self) -> str:
        cells = [["."] * self.cols for _ in range(self.rows)]
        for pos, color in self.anchor_cells().items():
            cells[pos[0]][pos[1]] = color
        sep = " " if any(len(c) > 1 for c in self.anchors) else ""
        lines = [f"# {k}: {v}" for k, v in self.meta.items()]
        lines += [sep.join(row) for row in cells]
        return "\n".join(lines) + "\n"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rows": self.rows,
            "cols": self.cols,
            "anchors": {c: [list(a), list(b)] for c, (a, b) in self.anchors.items()},
        }

    @staticmethod
    def from_dict(obj: Mapping[str, Any]) -> "Level":
        anchors: Dict[Color, AnchorPair] = {}
        for color, pair in obj["anchors"].items():
            if not isinstance(pair, (list, tuple)) or len(pair) != 2:
                raise ValueError(f"Anchor pair for {color!r} must be a list of 2 positions")
            anchors[str(color)] = (tuple(pair[0]), tuple(pair[1]))  # type: ignore[assignment]
        return Level(rows=int(obj["rows"]), cols=int(obj["cols"]), anchors=anchors, meta=dict(obj.get("meta", {})))

    @staticmethod
    def from_file(path: str | Path) -> "Level":
        path = Path(path)
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() == ".json":
            return Level.from_dict(json.loads(text))
        return Level.from_flow_text(text, source_name=str(path))

    @staticmethod
    def from_flow_text(text: str, *, source_name: str = "<text>") -> "Level":
        meta, token_rows = parse_flow_text(text)
        meta.setdefault("source", source_name)
        return Level.from_token_rows(token_rows, meta=meta)

    @staticmethod
    def from_token_rows(
        token_rows: Sequence[Sequence[str]],
        *,
        meta: Optional[Dict[str, Any]] = None,
    ) -> "Level":
        """Build a level from a token grid.

        Supported tokens:
        - an uppercase letter: anchor (each letter must appear exactly twice)
        - '#': rejected, boards have no holes
        - anything else: empty cell
        """
        height = len(token_rows)
        if height == 0:
            raise ValueError("token_rows is empty")
        width = len(token_rows[0])
        if any(len(r) != width for r in token_rows):
            raise ValueError("All rows must have equal width")

        locs: Dict[Color, List[Position]] = {}
        for r in range(height):
            for c in range(width):
                tok = str(token_rows[r][c])
                if tok == "#":
                    raise ValueError(f"Holes are not supported (found '#' at {(r, c)})")
                if tok.isalpha() and tok.upper() == tok:
                    locs.setdefault(tok, []).append((r, c))

        anchors: Dict[Color, AnchorPair] = {}
        for color in sorted(locs):
            found = locs[color]
            if len(found) != 2:
                raise ValueError(f"Anchor {color!r} must appear exactly twice (found {len(found)})")
            anchors[color] = (found[0], found[1])

        if not anchors:
            raise ValueError("No anchors found (need at least one A-Z pair)")

        return Level(rows=height, cols=width, anchors=anchors, meta=meta or {})


def parse_flow_text(text: str) -> Tuple[Dict[str, Any], List[List[str]]]:
    """Split ``.flow`` text into metadata and token rows.

    - ``# key: value`` lines are metadata, other ``#`` lines are comments
    - a row containing spaces is whitespace-tokenized, otherwise every
      character is a token
    """
    meta: Dict[str, Any] = {}
    token_rows: List[List[str]] = []
    for ln in text.splitlines():
        raw = ln.strip()
        if not raw:
            continue
        if raw.startswith("#"):
            hdr = raw[1:].strip()
            if ":" in hdr:
                k, v = [x.strip() for x in hdr.split(":", 1)]
                meta[k] = v
            continue
        toks = raw.split() if " " in raw else list(raw)
        token_rows.append(toks)

    if not token_rows:
        raise ValueError("No grid found in .flow text")
    width = len(token_rows[0])
    if any(len(r) != width for r in token_rows):
        raise ValueError("All grid rows must have the same width in .flow")
    return meta, token_rows

"""Grid model: cells, decoded maze descriptors and the runtime maze."""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable, NamedTuple


class Cell(NamedTuple):
    """One grid position. Compared and hashed by coordinates."""

    x: int
    y: int

    def to_key(self) -> str:
        """Encode as the ``"x,y"`` string used in saved progress."""
        return f"{self.x},{self.y}"

    @classmethod
    def from_key(cls, key: str) -> "Cell":
        """Parse an ``"x,y"`` string. Raises ValueError when malformed."""
        parts = str(key).split(",")
        if len(parts) != 2:
            raise ValueError(f"Expected 'x,y' cell key, got {key!r}")
        return cls(int(parts[0].strip()), int(parts[1].strip()))

    def offset(self, dx: int, dy: int) -> "Cell":
        return Cell(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class MazeDescriptor:
    """Structural description of a maze as decoded from an image."""

    width: int
    height: int
    start: Cell
    goal: Cell
    walls: FrozenSet[Cell]

    def __post_init__(self) -> None:
        # Normalise plain tuples/iterables so equality and hashing stay by value.
        object.__setattr__(self, "start", Cell(*self.start))
        object.__setattr__(self, "goal", Cell(*self.goal))
        object.__setattr__(self, "walls", frozenset(Cell(*w) for w in self.walls))

        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Maze dimensions must be positive, got {self.width}x{self.height}")
        if self.start == self.goal:
            raise ValueError(f"Start and goal must differ, both are {self.start}")
        for name, cell in (("start", self.start), ("goal", self.goal)):
            if not self.contains(cell):
                raise ValueError(f"{name} {cell} lies outside {self.width}x{self.height}")
            if cell in self.walls:
                raise ValueError(f"{name} {cell} is a wall")
        outside = [w for w in self.walls if not self.contains(w)]
        if outside:
            raise ValueError(f"{len(outside)} wall cell(s) outside {self.width}x{self.height}")

    def contains(self, cell: Cell) -> bool:
        return 0 <= cell.x < self.width and 0 <= cell.y < self.height


class Maze:
    """Read-only wall and bounds queries over a MazeDescriptor."""

    __slots__ = ("_descriptor",)

    def __init__(self, descriptor: MazeDescriptor) -> None:
        self._descriptor = descriptor

    @property
    def descriptor(self) -> MazeDescriptor:
        return self._descriptor

    @property
    def width(self) -> int:
        return self._descriptor.width

    @property
    def height(self) -> int:
        return self._descriptor.height

    @property
    def start(self) -> Cell:
        return self._descriptor.start

    @property
    def goal(self) -> Cell:
        return self._descriptor.goal

    @property
    def walls(self) -> FrozenSet[Cell]:
        return self._descriptor.walls

    def is_wall(self, x: int, y: int) -> bool:
        """True iff (x, y) is a wall. Out-of-bounds cells are not walls."""
        return (x, y) in self._descriptor.walls

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_valid_move(self, x: int, y: int) -> bool:
        """True iff (x, y) is inside the maze and not a wall."""
        return self.in_bounds(x, y) and not self.is_wall(x, y)

    def cells(self) -> Iterable[Cell]:
        """All cells in row-major order."""
        for y in range(self.height):
            for x in range(self.width):
                yield Cell(x, y)

    def __repr__(self) -> str:
        return f"Maze({self.width}x{self.height}, start={tuple(self.start)}, goal={tuple(self.goal)})"

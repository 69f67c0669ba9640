from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, ClassVar, Optional, Sequence, Tuple, Union


# ── Unlock predicates ────────────────────────────────────────────────
# One frozen dataclass per parsing-info tag. `tag` is the catalog JSON name.

@dataclass(frozen=True)
class FlagInfo:
    tag: ClassVar[str] = "flag"
    name: str


@dataclass(frozen=True)
class TempIntFlagInfo:
    tag: ClassVar[str] = "tempIntFlag"
    name: str
    threshold: int


@dataclass(frozen=True)
class QuestInfo:
    tag: ClassVar[str] = "quest"
    name: str


@dataclass(frozen=True)
class SceneDataInfo:
    tag: ClassVar[str] = "sceneData"
    scene_name: str
    flag_id: str


@dataclass(frozen=True)
class ToolInfo:
    tag: ClassVar[str] = "tool"
    name: str


@dataclass(frozen=True)
class UpgradableToolInfo:
    """Several tool names for one item (base + upgraded forms)."""
    tag: ClassVar[str] = "upgradableTool"
    names: Tuple[str, ...]


@dataclass(frozen=True)
class CrestInfo:
    tag: ClassVar[str] = "crest"
    name: str


@dataclass(frozen=True)
class CollectableInfo:
    tag: ClassVar[str] = "collectable"
    name: str


ParsingInfo = Union[
    FlagInfo,
    TempIntFlagInfo,
    QuestInfo,
    SceneDataInfo,
    ToolInfo,
    UpgradableToolInfo,
    CrestInfo,
    CollectableInfo,
]

PARSING_INFO_TYPES = (
    FlagInfo,
    TempIntFlagInfo,
    QuestInfo,
    SceneDataInfo,
    ToolInfo,
    UpgradableToolInfo,
    CrestInfo,
    CollectableInfo,
)


# ── Catalog ──────────────────────────────────────────────────────────

class Necessity(str, Enum):
    PRIMARY = "primary"        # feeds the overall completion estimate
    SUPPORTING = "supporting"  # shown as raw counts only


@dataclass(frozen=True)
class CategoryItem:
    name: str
    act: int  # 0 = always available
    prerequisites: Tuple[str, ...]
    location: str
    parsing_info: ParsingInfo


@dataclass(frozen=True)
class ScoringRule:
    """Floor-divided item count: max(0, (count + offset) // divisor).

    divisor=4 -> every 4 items are worth 1%.
    offset=-1 -> one baseline item is always owned and does not count.
    """
    divisor: int = 1
    offset: int = 0

    def __call__(self, items: Sequence[CategoryItem]) -> int:
        return max(0, (len(items) + self.offset) // self.divisor)


ScoringFunction = Callable[[Sequence[CategoryItem]], int]


@dataclass(frozen=True)
class CollectableCategory:
    name: str
    necessity: Necessity
    tooltip: str
    items: Tuple[CategoryItem, ...]
    scoring_function: Optional[ScoringFunction] = None


@dataclass(frozen=True)
class Catalog:
    categories: Tuple[CollectableCategory, ...] = ()

    def __iter__(self):
        return iter(self.categories)

    def __len__(self) -> int:
        return len(self.categories)


# ── Evaluation results ───────────────────────────────────────────────

@dataclass
class ItemResult:
    name: str
    act: int
    prerequisites: Tuple[str, ...]
    location: str
    unlocked: bool


@dataclass
class CategoryResult:
    name: str
    tooltip: str
    necessity: Necessity
    unlocked_score: int
    max_score: int
    completed: bool
    items: list[ItemResult] = field(default_factory=list)


@dataclass
class CompletionReport:
    categories: list[CategoryResult] = field(default_factory=list)
    total_score: int = 0
    max_total_score: int = 0
    reported_completion: float | None = None  # in-game figure, not reconciled

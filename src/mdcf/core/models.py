"""Document model: ADF tree types, pass-local block records, and merge results"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class AdfMark(BaseModel):
    """A formatting mark on a text node (strong, em, code, strike, link)."""
    model_config = ConfigDict(extra="allow")
    type: str
    attrs: Optional[dict[str, Any]] = None


class AdfNode(BaseModel):
    """A block or inline ADF node; leaf nodes carry no content."""
    model_config = ConfigDict(extra="allow")
    type: str
    attrs: Optional[dict[str, Any]] = None
    content: Optional[list["AdfNode"]] = None
    marks: Optional[list[AdfMark]] = None
    text: Optional[str] = None


class AdfDocument(BaseModel):
    """Root ADF document. Passes return new documents; they never edit one in place."""
    model_config = ConfigDict(extra="allow")
    version: Literal[1] = 1
    type: Literal["doc"] = "doc"
    content: list[AdfNode] = Field(default_factory=list)

    @classmethod
    def from_json(cls, raw: str) -> "AdfDocument":
        return cls.model_validate_json(raw)

    def to_json(self, indent: Optional[int] = None) -> str:
        return self.model_dump_json(exclude_none=True, indent=indent)

    def with_content(self, content: list[AdfNode]) -> "AdfDocument":
        return self.model_copy(update={"content": content})


class PanelType(str, Enum):
    """Confluence panel colours"""
    info = "info"
    success = "success"
    note = "note"
    warning = "warning"
    error = "error"


class AlertType(str, Enum):
    """GFM alert keywords (> [!NOTE] etc.)"""
    NOTE = "NOTE"
    TIP = "TIP"
    IMPORTANT = "IMPORTANT"
    WARNING = "WARNING"
    CAUTION = "CAUTION"


ALERT_TO_PANEL: dict[AlertType, PanelType] = {
    AlertType.NOTE:      PanelType.info,
    AlertType.TIP:       PanelType.success,
    AlertType.IMPORTANT: PanelType.note,
    AlertType.WARNING:   PanelType.warning,
    AlertType.CAUTION:   PanelType.error,
}
PANEL_TO_ALERT: dict[PanelType, AlertType] = {v: k for k, v in ALERT_TO_PANEL.items()}


def panel_type_from_alert(alert: str) -> PanelType:
    """Map a GFM alert keyword (any case) to its panel type. Raises ValueError if unknown."""
    return ALERT_TO_PANEL[AlertType(alert.strip().upper())]


def alert_type_from_panel(panel_type: Optional[str]) -> AlertType:
    """Map a panel type to its GFM alert keyword; unknown or missing types become NOTE."""
    try:
        return PANEL_TO_ALERT[PanelType(panel_type)]
    except ValueError:
        return AlertType.NOTE


class MergeStrategy(str, Enum):
    """How local and remote markdown are reconciled on update"""
    local_wins = "local-wins"
    remote_wins = "remote-wins"
    append = "append"
    auto_merge = "auto-merge"


class MergeStats(BaseModel):
    added: int = 0
    removed: int = 0
    unchanged: int = 0


class MergeResult(BaseModel):
    markdown: str
    has_conflicts: bool = False
    stats: MergeStats = Field(default_factory=MergeStats)


@dataclass(frozen=True)
class TocBlock:
    index: int
    heading: str


@dataclass(frozen=True)
class PanelBlock:
    index: int
    panel_type: PanelType
    content_markdown: str


@dataclass(frozen=True)
class ExpandBlock:
    index: int
    title: str
    content_markdown: str


@dataclass(frozen=True)
class RenderResult:
    """Outcome of rendering one diagram: PNG bytes + filename, or an error."""
    success: bool
    png_bytes: Optional[bytes] = None
    filename: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class MermaidBlock:
    """A diagram lifted out before conversion; consumed again after upload."""
    index: int
    success: bool
    code: str
    png_bytes: Optional[bytes] = None
    filename: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class AttachmentRef:
    file_id: str
    collection_name: str


AttachmentMap = dict[str, AttachmentRef]


@dataclass
class StripResult:
    """Markdown with matched spans swapped for sentinels, plus the lifted blocks in order."""
    markdown: str
    blocks: list = field(default_factory=list)

    @property
    def found(self) -> bool:
        return bool(self.blocks)

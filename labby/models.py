"""
Data models for stored Services, Widgets and per-home Layouts (JSON-based management).
"""

import uuid
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from labby.metrics import MetricSelection, ServiceKind
from labby.sizing import GRID_COLUMNS, WidgetSize


def new_widget_id() -> str:
    return uuid.uuid4().hex


class Widget(BaseModel):
    """A single tile on a home grid, bound to one service."""
    id: str = Field(default_factory=new_widget_id, description="Unique widget identifier")
    service_id: str = Field(description="Lookup key of the StoredService")
    size: WidgetSize = Field(default=WidgetSize.SMALL)
    row: int = Field(default=0, description="Top-left row hint, recomputed by the packer")
    column: int = Field(default=0, description="Top-left column hint (0 or 1)")
    title_override: Optional[str] = None
    metrics: MetricSelection
    refresh_interval_override: Optional[float] = Field(default=None, gt=0, description="Seconds")

    @field_validator("row")
    @classmethod
    def _clamp_row(cls, v: int) -> int:
        return max(0, v)

    @model_validator(mode="after")
    def _normalize_column(self) -> "Widget":
        # multi-column widgets always anchor at the left edge
        if self.size.column_span > 1:
            self.column = 0
        else:
            self.column = max(0, min(GRID_COLUMNS - 1, self.column))
        return self

    @property
    def kind(self) -> ServiceKind:
        return self.metrics.kind

    def resized(self, size: WidgetSize) -> "Widget":
        data = self.model_dump()
        data["size"] = size
        return Widget.model_validate(data)

    def placed(self, row: int, column: int) -> "Widget":
        data = self.model_dump()
        data.update(row=row, column=column)
        return Widget.model_validate(data)


class Layout(BaseModel):
    """The ordered widgets of one home. Order alone decides placement."""
    home_name: str
    widgets: List[Widget] = Field(default_factory=list)

    def index_of(self, widget_id: str) -> Optional[int]:
        for i, w in enumerate(self.widgets):
            if w.id == widget_id:
                return i
        return None

    def get_widget(self, widget_id: str) -> Optional[Widget]:
        idx = self.index_of(widget_id)
        return self.widgets[idx] if idx is not None else None


class StoredService(BaseModel):
    """A configured service as the directory knows it."""
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    name: str = ""
    kind: ServiceKind
    home: str = Field(default="Default Home", description="Name of the home the service belongs to")
    base_url: str = ""
    config: dict[str, Any] = Field(default_factory=dict, description="Opaque client settings")


def effective_refresh_interval(widget: Widget, default: float) -> float:
    """The widget's own refresh interval, or the home-wide default."""
    if widget.refresh_interval_override is not None:
        return widget.refresh_interval_override
    return default

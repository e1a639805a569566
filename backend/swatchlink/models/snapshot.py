"""Page snapshot model: the serialized element tree a host hands to the engine."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Rect(BaseModel):
    """Resolved layout rectangle, viewport-relative."""

    x: float = 0.0
    y: float = 0.0
    width: float = Field(default=0.0, ge=0.0)
    height: float = Field(default=0.0, ge=0.0)


class ElementSnapshot(BaseModel):
    tag: str
    attrs: dict[str, str] = Field(default_factory=dict)
    rect: Rect | None = None
    # Computed style values the host chose to export (border-width, outline, ...)
    style: dict[str, str] = Field(default_factory=dict)
    text: str | None = None
    children: list[ElementSnapshot] = Field(default_factory=list)


class Viewport(BaseModel):
    width: float = Field(default=1280.0, gt=0.0)
    height: float = Field(default=800.0, gt=0.0)


class PageSnapshot(BaseModel):
    """Represents one layout snapshot of a page."""

    url: str = ""
    viewport: Viewport = Field(default_factory=Viewport)
    root: ElementSnapshot


ElementSnapshot.model_rebuild()

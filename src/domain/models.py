"""Domain models for responsive image breakpoint planning."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")

SIZE_KEYWORDS = ("cover", "contain")
DIMENSIONS = ("width", "height")
ORIENTATIONS = ("landscape", "portrait")


class DeviceDefinition(BaseModel):
    """Author-facing device description, expanded into concrete devices."""

    model_config = ConfigDict(frozen=True)

    w: int = Field(gt=0, description="Viewport width in CSS pixels")
    h: int = Field(gt=0, description="Viewport height in CSS pixels")
    dppx: Optional[List[float]] = Field(
        default=None, description="Pixel densities seen at this viewport size"
    )
    flip: bool = Field(default=False, description="Whether the device can be rotated")

    @field_validator("dppx")
    @classmethod
    def _positive_densities(cls, value: Optional[List[float]]) -> Optional[List[float]]:
        if value is not None and any(d <= 0 for d in value):
            raise ValueError("dppx values must be greater than zero")
        return value


class ImageAsset(BaseModel):
    """One generated image as reported by the resize collaborator."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    width: int
    height: int
    url: str
    source_type: str = Field(alias="sourceType")
    format: str


# format name -> assets produced in that format
Metadata = Dict[str, List[ImageAsset]]


@dataclass(frozen=True, slots=True)
class SourceImage:
    """Pixel dimensions of the original image, as reported by ``stat()``."""

    width: int
    height: int


@dataclass(frozen=True, slots=True)
class ResizeInstructions(Generic[T]):
    """Width-only, height-only or width+height+fit sizing of an image."""

    width: Optional[T] = None
    height: Optional[T] = None
    fit: Optional[str] = None

    @property
    def is_width_only(self) -> bool:
        return self.width is not None and self.height is None


@dataclass(frozen=True, slots=True)
class MediaQuery:
    """One width band x resolution band cell paired with an asset.

    Bounds are raw device values; ``None`` marks an open end of the band.
    """

    orientation: Optional[str]
    max_width: Optional[int]
    min_width: Optional[int]
    max_resolution: Optional[float]
    min_resolution: Optional[float]
    url: str
    source_type: str
    format: str
    dppx: float = 1


@dataclass(frozen=True, slots=True)
class ImageSetEntry:
    image: str
    type: Optional[str] = None
    dppx: Optional[float] = None


@dataclass(frozen=True, slots=True)
class ImageSource:
    """Attributes of a ``<source>`` element."""

    media: str
    srcset: str
    type: Optional[str] = None

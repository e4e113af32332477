from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ActionType(str, Enum):
    ADD_ELEMENT = "ADD_ELEMENT"
    UPDATE_ELEMENT_PROPS = "UPDATE_ELEMENT_PROPS"
    SET_ARTBOARD_PROPS = "SET_ARTBOARD_PROPS"
    ADD_KEYFRAME = "ADD_KEYFRAME"
    UPDATE_ANIMATION_DURATION = "UPDATE_ANIMATION_DURATION"
    SET_CURRENT_TIME = "SET_CURRENT_TIME"
    SET_PLAYBACK_SPEED = "SET_PLAYBACK_SPEED"
    SET_IS_PLAYING = "SET_IS_PLAYING"
    GROUP_ELEMENT = "GROUP_ELEMENT"
    REPARENT_ELEMENT = "REPARENT_ELEMENT"
    BRING_TO_FRONT = "BRING_TO_FRONT"
    SEND_TO_BACK = "SEND_TO_BACK"
    BRING_FORWARD = "BRING_FORWARD"
    SEND_BACKWARD = "SEND_BACKWARD"


class ElementKind(str, Enum):
    RECT = "rect"
    CIRCLE = "circle"
    PATH = "path"
    TEXT = "text"
    GROUP = "group"
    IMAGE = "image"


class Artboard(BaseModel):
    width: float = 800
    height: float = 600

    @field_validator("width", "height")
    @classmethod
    def _positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("artboard dimensions must be positive")
        return value


class ElementDescriptor(BaseModel):
    """Snapshot of an element already on the canvas."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    type: str = "rect"
    x: float | None = None
    y: float | None = None
    width: float | None = None
    height: float | None = None
    r: float | None = None
    scale: float | None = None
    href: str | None = None
    parent_id: str | None = Field(default=None, alias="parentId")


class GenerateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_request: str = Field(default="", alias="userRequest")
    artboard: Artboard | None = None
    animation_duration: float | None = Field(default=None, alias="animationDuration")
    element_to_animate: ElementDescriptor | None = Field(default=None, alias="elementToAnimate")
    existing_elements: list[ElementDescriptor] = Field(default_factory=list, alias="existingElements")

    @field_validator("user_request", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("animation_duration")
    @classmethod
    def _drop_non_positive(cls, value: float | None) -> float | None:
        if value is None or value <= 0:
            return None
        return value


class ValidateRequest(BaseModel):
    actions: list[Any] = Field(default_factory=list)


class GenerateResponse(BaseModel):
    summary: str
    actions: list[dict[str, Any]] = Field(default_factory=list)
    plan: dict[str, Any] | None = None


__all__ = [
    "ActionType",
    "Artboard",
    "ElementDescriptor",
    "ElementKind",
    "GenerateRequest",
    "GenerateResponse",
    "ValidateRequest",
]

"""Typed control descriptors.

A descriptor is the normalized declaration of one parameter. Descriptors are
validated with pydantic and serialize back to the declaration language, so a
dumped descriptor can be fed in again as configuration.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

from midicontrols.midi.notes import note_number

from .enums import ControlKind


class _Descriptor(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    @property
    def kind(self) -> ControlKind:
        """Kind tag used by the tree builder."""
        return ControlKind(self.type)

    def to_config(self) -> dict:
        """Dump to a re-loadable declaration (serialized key names, no unset options)."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ToggleDescriptor(_Descriptor):
    """On/off parameter, optionally bound to a note."""

    type: Literal["toggle"] = "toggle"
    value: bool = False
    note: int | str | None = Field(default=None, description="MIDI note number or name (e.g. 'C4')")

    @field_validator("note")
    @classmethod
    def _check_note(cls, note):
        if note is not None:
            note_number(note)
        return note


class _BoundedDescriptor(_Descriptor):
    value: float
    min: float
    max: float
    step: float = Field(gt=0, description="Increment per widget step and per knob tick")
    controller_id: int | None = Field(
        default=None, alias="controller", ge=0, le=127, description="MIDI CC number"
    )

    @model_validator(mode="after")
    def _check_bounds(self):
        if self.min >= self.max:
            raise ValueError(f"min ({self.min}) must be less than max ({self.max})")
        return self

    @property
    def span(self) -> float:
        """Width of the value range."""
        return self.max - self.min


class RangeDescriptor(_BoundedDescriptor):
    """Bounded number, optionally bound to a knob."""

    type: Literal["range"] = "range"
    loop_enabled: bool = Field(default=False, alias="loop", description="Wrap instead of clamp")


class RangeLoopDescriptor(_BoundedDescriptor):
    """Looping value that can run on its own at `speed` units per second."""

    type: Literal["rangeloop"] = "rangeloop"
    speed: float = 0.0
    auto: bool = False
    note: int | str | None = Field(default=None, description="Note that flips `auto`")

    @field_validator("note")
    @classmethod
    def _check_note(cls, note):
        if note is not None:
            note_number(note)
        return note

    @model_validator(mode="after")
    def _check_speed(self):
        if abs(self.speed) > self.span:
            raise ValueError(f"speed ({self.speed}) must be within +/- {self.span}")
        return self


ControlDescriptor = Annotated[
    Union[ToggleDescriptor, RangeDescriptor, RangeLoopDescriptor],
    Field(discriminator="type"),
]

DescriptorAdapter: TypeAdapter[ControlDescriptor] = TypeAdapter(ControlDescriptor)

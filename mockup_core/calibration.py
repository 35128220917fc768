"""Two-point calibration workflow.

This module provides:
- Tagged state variants: Instruction → Measuring → Input → Result
- Events fed in by the rendering layer (start, click, length entry, confirm, reset)
- A pure transition function ``transition(state, event) -> state``
- CalibrationFlow, a thin adapter that holds the current state and notifies a
  collaborator when a ratio is committed
- auto_calibrate for reference images that already carry a known ratio
"""

import logging
import math
from collections.abc import Callable
from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from mockup_core.coordinates import distance_px, format_measurement
from mockup_core.errors import CalibrationIncomplete
from mockup_core.validation import CalibrationRatio, MeasurementPoint, ReferenceImage

logger = logging.getLogger(__name__)


# States


class Instruction(BaseModel):
    """Entry state: reference line is shown, waiting for the user to start."""

    model_config = ConfigDict(frozen=True)

    step: Literal["instruction"] = "instruction"


class Measuring(BaseModel):
    """Collecting up to two pointer clicks on the subject image."""

    model_config = ConfigDict(frozen=True)

    step: Literal["measuring"] = "measuring"
    points: tuple[MeasurementPoint, ...] = ()


class Input(BaseModel):
    """Both points recorded; waiting for the known physical length."""

    model_config = ConfigDict(frozen=True)

    step: Literal["input"] = "input"
    points: tuple[MeasurementPoint, MeasurementPoint]
    px_measured: float = Field(description="Pixel distance between the points, fixed on entry")
    cm_real_text: str = Field(default="", description="Raw user entry for the real length")
    px_per_cm: float = Field(default=0.0, description="Live preview, 0 while the entry is invalid")


class Result(BaseModel):
    """Calibration committed."""

    model_config = ConfigDict(frozen=True)

    step: Literal["result"] = "result"
    ratio: CalibrationRatio


CalibrationState = Annotated[
    Union[Instruction, Measuring, Input, Result],
    Field(discriminator="step"),
]


# Events


class Start(BaseModel):
    model_config = ConfigDict(frozen=True)


class Click(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class EnterCm(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str


class Confirm(BaseModel):
    model_config = ConfigDict(frozen=True)

    subject_id: str | None = None
    view_id: str | None = None
    now: datetime


class Reset(BaseModel):
    model_config = ConfigDict(frozen=True)


CalibrationEvent = Union[Start, Click, EnterCm, Confirm, Reset]


def parse_cm(text: str) -> float | None:
    """Parse a user-entered real length; None unless it is a positive finite number."""
    try:
        value = float(text.strip())
    except (ValueError, AttributeError):
        return None
    if math.isnan(value) or math.isinf(value) or value <= 0:
        return None
    return value


def preview_ratio(px_measured: float, cm_real_text: str) -> float:
    """Live px/cm preview for the current entry, 0.0 when it cannot be computed."""
    cm_real = parse_cm(cm_real_text)
    if cm_real is None or px_measured <= 0:
        return 0.0
    return px_measured / cm_real


def transition(state: CalibrationState, event: CalibrationEvent) -> CalibrationState:
    """Compute the next calibration state.

    Args:
        state: Current state
        event: Event fed in by the UI adapter

    Returns:
        The next state. Events that do not apply to the current state return
        it unchanged.

    Raises:
        CalibrationIncomplete: On Confirm before two points are measured or
            while the entered length does not give a positive ratio. The
            caller keeps its current state.
    """
    if isinstance(event, Reset):
        return Instruction()

    if isinstance(state, Instruction):
        if isinstance(event, Start):
            return Measuring()
        if isinstance(event, Confirm):
            raise CalibrationIncomplete("Measure two points on the image before confirming")
        return state

    if isinstance(state, Measuring):
        if isinstance(event, Start):
            return Measuring()
        if isinstance(event, Click):
            point = MeasurementPoint(x=event.x, y=event.y)
            if not state.points:
                return Measuring(points=(point,))
            first = state.points[0]
            return Input(points=(first, point), px_measured=distance_px(first, point))
        if isinstance(event, Confirm):
            raise CalibrationIncomplete("Measure two points on the image before confirming")
        return state

    if isinstance(state, Input):
        if isinstance(event, EnterCm):
            return state.model_copy(
                update={
                    "cm_real_text": event.text,
                    "px_per_cm": preview_ratio(state.px_measured, event.text),
                }
            )
        if isinstance(event, Confirm):
            if state.px_per_cm <= 0:
                raise CalibrationIncomplete(
                    "Enter a positive real length for the measured distance"
                )
            return Result(
                ratio=CalibrationRatio(
                    px_per_cm=state.px_per_cm,
                    is_calibrated=True,
                    calibrated_at=event.now,
                    subject_id=event.subject_id,
                    view_id=event.view_id,
                    source="manual",
                )
            )
        return state

    return state


class CalibrationFlow:
    """Stateful adapter feeding pointer and input events into ``transition``.

    Args:
        on_complete: Called with the committed ratio. The flow does not wait
            on it beyond the call itself.
        clock: Timestamp source for ``calibrated_at``
    """

    def __init__(
        self,
        on_complete: Callable[[CalibrationRatio], None] | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._state: CalibrationState = Instruction()
        self._on_complete = on_complete
        self._clock = clock

    @property
    def state(self) -> CalibrationState:
        return self._state

    @property
    def step(self) -> str:
        return self._state.step

    @property
    def points(self) -> tuple[MeasurementPoint, ...]:
        if isinstance(self._state, (Measuring, Input)):
            return self._state.points
        return ()

    @property
    def px_measured(self) -> float:
        return self._state.px_measured if isinstance(self._state, Input) else 0.0

    @property
    def preview_px_per_cm(self) -> float:
        return self._state.px_per_cm if isinstance(self._state, Input) else 0.0

    def dispatch(self, event: CalibrationEvent) -> CalibrationState:
        previous = self._state.step
        self._state = transition(self._state, event)
        if self._state.step != previous:
            logger.debug(f"Calibration step {previous} -> {self._state.step}")
        return self._state

    def start(self) -> None:
        self.dispatch(Start())

    def click(self, x: float, y: float) -> None:
        previous = self._state.step
        self.dispatch(Click(x=x, y=y))
        if previous == "measuring" and isinstance(self._state, Input):
            logger.info(f"Measured {format_measurement(self._state.px_measured, 'px', 2)}")

    def enter_cm(self, text: str) -> float:
        """Record the real length entry and return the live px/cm preview."""
        self.dispatch(EnterCm(text=text))
        return self.preview_px_per_cm

    def confirm(self, subject_id: str | None = None, view_id: str | None = None) -> CalibrationRatio:
        """Commit the calibration.

        Returns:
            The committed CalibrationRatio

        Raises:
            CalibrationIncomplete: If the measurement or entry is not usable
        """
        try:
            self.dispatch(Confirm(subject_id=subject_id, view_id=view_id, now=self._clock()))
        except CalibrationIncomplete as e:
            logger.warning(f"Calibration not confirmed: {e}")
            raise

        if not isinstance(self._state, Result):
            raise CalibrationIncomplete(f"Calibration cannot be confirmed from step '{self._state.step}'")
        ratio = self._state.ratio
        logger.info(f"Calibration complete: {ratio.px_per_cm:.2f} px/cm")
        if self._on_complete is not None:
            self._on_complete(ratio)
        return ratio

    def reset(self) -> None:
        self.dispatch(Reset())


def auto_calibrate(
    current: CalibrationRatio,
    reference: ReferenceImage,
    now: datetime | None = None,
) -> CalibrationRatio | None:
    """Build a ratio from a reference image's known px/cm, if one applies.

    Args:
        current: Ratio currently held for the session
        reference: Reference image that may declare a known ratio
        now: Timestamp for ``calibrated_at`` (defaults to now)

    Returns:
        A calibrated ratio with ``source="known"``, or None when the image has
        no usable ratio or the subject/view is already calibrated. A calibrated
        ratio for the same subject/view is never replaced.
    """
    known = reference.px_per_cm
    if known is None or math.isnan(known) or math.isinf(known) or known <= 0:
        return None
    if current.is_calibrated and current.belongs_to(reference.subject_id, reference.view_id):
        return None

    logger.info(f"Auto calibration for {reference.subject_id}/{reference.view_id}: {known:.2f} px/cm")
    return CalibrationRatio(
        px_per_cm=known,
        is_calibrated=True,
        calibrated_at=now or datetime.now(),
        subject_id=reference.subject_id,
        view_id=reference.view_id,
        source="known",
    )

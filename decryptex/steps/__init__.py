"""Pipeline steps for decryptex."""

from decryptex.steps.base import (
    InPlaceStep,
    OutputDirStep,
    SiblingFileStep,
    Step,
    StepResult,
    TempSiblingStep,
)
from decryptex.steps.tools import default_steps

__all__ = [
    "Step",
    "StepResult",
    "InPlaceStep",
    "OutputDirStep",
    "SiblingFileStep",
    "TempSiblingStep",
    "default_steps",
]

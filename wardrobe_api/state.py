from dataclasses import dataclass
from typing import Optional, Union

from .client import ClientError
from .schemas import GarmentAnalysis


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Analyzing:
    pass


@dataclass(frozen=True)
class Completed:
    analysis: GarmentAnalysis


@dataclass(frozen=True)
class Failed:
    error: ClientError


AnalysisState = Union[Idle, Analyzing, Completed, Failed]


@dataclass(frozen=True)
class Started:
    pass


@dataclass(frozen=True)
class Succeeded:
    analysis: GarmentAnalysis


@dataclass(frozen=True)
class FailedWith:
    error: ClientError


@dataclass(frozen=True)
class Reset:
    pass


AnalysisEvent = Union[Started, Succeeded, FailedWith, Reset]


def transition(state: AnalysisState, event: AnalysisEvent) -> AnalysisState:
    """idle -> analyzing -> completed | failed; Reset returns to idle from anywhere.

    Events that don't apply to the current state leave it unchanged.
    """
    if isinstance(event, Reset):
        return Idle()
    if isinstance(event, Started):
        return state if isinstance(state, Analyzing) else Analyzing()
    if isinstance(state, Analyzing):
        if isinstance(event, Succeeded):
            return Completed(event.analysis)
        if isinstance(event, FailedWith):
            return Failed(event.error)
    return state


def is_analyzing(state: AnalysisState) -> bool:
    return isinstance(state, Analyzing)


def last_result(state: AnalysisState) -> Optional[GarmentAnalysis]:
    return state.analysis if isinstance(state, Completed) else None


def last_error(state: AnalysisState) -> Optional[ClientError]:
    return state.error if isinstance(state, Failed) else None

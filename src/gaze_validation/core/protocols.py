from typing import Protocol, runtime_checkable

from ..models.result import CalibrationValidationResult

@runtime_checkable
class ValidationView(Protocol):
    """
    Defines the methods required for any UI that presents validation targets.
    Whether it's a window, a web page or a console, it must support these calls.
    """
    async def open(self) -> None: ...

    async def show_point(self, x: float, y: float) -> None: ...

    async def show_message(self, text: str) -> None: ...

    async def show_results(self, result: CalibrationValidationResult) -> None: ...

    async def close(self) -> None: ...

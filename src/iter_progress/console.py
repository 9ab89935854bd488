"""Console printing (`cout` for progress output, `cerr` for failures)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypedDict, Unpack

from rich.console import Console

if TYPE_CHECKING:
    from rich.console import JustifyMethod, OverflowMethod
    from rich.style import Style


class RichConsolePrintKwargs(TypedDict, total=False):
    """Typed keyword arguments for `rich.console.print`."""

    sep: str
    end: str
    style: str | Style | None
    justify: JustifyMethod | None
    overflow: OverflowMethod | None
    no_wrap: bool | None
    markup: bool | None
    highlight: bool | None
    soft_wrap: bool | None


class _Console(Console):
    def __call__(
        self,
        *objects: Any,  # noqa: ANN401
        **kwargs: Unpack[RichConsolePrintKwargs],
    ) -> None:
        self.print(*objects, **kwargs)

    def write(self, msg: object, /) -> None:
        """Write `msg` unchanged to the console's file (no newline, markup or emoji codes).

        Control characters survive, so `"\\r..."` messages overwrite the current line.
        """
        self.file.write(str(msg))
        self.file.flush()


class _ErrConsole(Console):
    def __call__(
        self,
        *objects: Any,  # noqa: ANN401
        **kwargs: Unpack[RichConsolePrintKwargs],
    ) -> None:
        self.print("[bold red]error:[/]", *objects, **kwargs)


cout = _Console()
cerr = _ErrConsole(stderr=True)

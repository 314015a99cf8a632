"""Typer subclass that can register ``async def`` commands."""

import asyncio
import inspect
from functools import wraps
from typing import Any, Callable

import typer
from typer.core import TyperCommand, TyperGroup


def _run_sync(f: Callable) -> Callable:
    """Wrap a coroutine function so Click can call it synchronously."""

    @wraps(f)
    def runner(*args: Any, **kwargs: Any) -> Any:
        coro = f(*args, **kwargs)
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(coro)
        # Called from inside a loop (tests): hand the coroutine back
        return coro

    return runner


class AsyncTyperGroup(TyperGroup):
    """Group whose callback may be a coroutine function."""

    def invoke(self, ctx: Any) -> Any:
        if inspect.iscoroutinefunction(self.callback):
            return asyncio.run(self.callback(**ctx.params))
        return super().invoke(ctx)


class ATyper(typer.Typer):
    """Typer with async command support.

    Commands declared with ``async def`` run in a fresh event loop per
    invocation; sync commands are registered unchanged.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("cls", AsyncTyperGroup)
        kwargs.setdefault("no_args_is_help", False)
        super().__init__(*args, **kwargs)

    def command(  # type: ignore[override]
        self,
        name: str | None = None,
        *,
        cls: type[TyperCommand] | None = None,
        **kwargs: Any,
    ) -> Any:
        def decorator(f: Callable) -> Callable:
            if inspect.iscoroutinefunction(f):
                f = _run_sync(f)
            return typer.Typer.command(self, name, cls=cls, **kwargs)(f)

        return decorator

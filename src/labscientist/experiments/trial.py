"""Trial: a named candidate behaviour and the way it is invoked."""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple


def bind_arguments(
    context: Any,
    arguments: Sequence[Any],
    args: Sequence[Any],
    kwargs: Optional[Mapping[str, Any]] = None,
) -> Tuple[Tuple[Any, ...], Dict[str, Any]]:
    """
    Resolve the positional and keyword arguments for one invocation.
    
    Construction-time ``arguments`` win when non-empty, otherwise the
    run-time ``args`` are used. Run-time keywords are always forwarded.
    A non-None ``context`` is passed first, the way a bound method
    receives ``self``.
    """
    positional = tuple(arguments) if arguments else tuple(args)
    if context is not None:
        positional = (context,) + positional
    return positional, dict(kwargs or {})


@dataclass(frozen=True)
class Trial:
    """
    A candidate behaviour registered on an experiment.
    
    Attributes:
        name: Trial name, unique within its experiment.
        callback: The candidate implementation.
        context: Optional receiver passed as the first argument.
        arguments: Fixed positional arguments. When empty, the arguments
                   given to run()/report() are used instead.
    """
    
    name: str
    callback: Callable[..., Any]
    context: Any = None
    arguments: Tuple[Any, ...] = field(default_factory=tuple)
    
    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ValueError(f"trial name must be a non-empty string, got {self.name!r}")
        if not callable(self.callback):
            raise TypeError(f"trial '{self.name}' callback must be callable, got {type(self.callback)}")
        # Freeze lists passed by callers
        object.__setattr__(self, "arguments", tuple(self.arguments or ()))
    
    def bind(
        self,
        args: Sequence[Any] = (),
        kwargs: Optional[Mapping[str, Any]] = None,
    ) -> Tuple[Tuple[Any, ...], Dict[str, Any]]:
        """Arguments this trial is called with for the given run-time params."""
        return bind_arguments(self.context, self.arguments, args, kwargs)

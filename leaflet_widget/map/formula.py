"""
Deferred expressions evaluated against the data attached to a map.

A Formula is never evaluated implicitly: builders call resolve() once per
call, with the dataset of that call.
"""

from typing import Any, Callable, Optional, Union


class Formula:
    """
    A value to be computed from a dataset.

    Usage:
        m = Map(data={"lat": [...], "lng": [...], "pop": [...]})
        m.add_circle_markers(lng=Formula("lng"), lat=Formula("lat"))
        m.add_legend(pal=pal, values=Formula(lambda d: d["pop"] / 1000, label="pop (k)"))
    """

    def __init__(self, expr: Union[str, Callable], label: Optional[str] = None):
        """
        Args:
            expr: Column name, or a callable taking the dataset
            label: Display name (used as the default legend title)
        """
        if not isinstance(expr, str) and not callable(expr):
            raise TypeError(f"Formula expects a column name or a callable, got {type(expr).__name__}")
        self.expr = expr
        self._label = label

    @property
    def label(self) -> Optional[str]:
        if self._label is not None:
            return self._label
        if isinstance(self.expr, str):
            return self.expr
        name = getattr(self.expr, "__name__", None)
        return None if name == "<lambda>" else name

    def evaluate(self, data: Any) -> Any:
        if data is None:
            raise ValueError(
                f"Formula {self!r} cannot be resolved: no data is attached to the map"
            )
        if isinstance(self.expr, str):
            try:
                return data[self.expr]
            except KeyError:
                raise KeyError(f"Column '{self.expr}' not found in map data") from None
        return self.expr(data)

    def __repr__(self):
        return f"Formula({self.label or '<callable>'})"


def resolve(value: Any, data: Any) -> Any:
    """
    Resolve a (possibly nested) value against a dataset.

    Formulas are evaluated; lists, tuples and dicts are walked recursively;
    everything else is returned unchanged.
    """
    if isinstance(value, Formula):
        return value.evaluate(data)
    if isinstance(value, dict):
        return {k: resolve(v, data) for k, v in value.items()}
    if isinstance(value, list):
        return [resolve(v, data) for v in value]
    if isinstance(value, tuple) and not hasattr(value, "_asdict"):
        return tuple(resolve(v, data) for v in value)
    return value

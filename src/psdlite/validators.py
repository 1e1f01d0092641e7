"""
Validation functions for attrs.

Both validators raise :py:class:`~psdlite.errors.FormatError`, so that a
malformed field read from a stream aborts the load with a format error.
"""

from typing import Any

import attrs
from attrs import define

from psdlite.errors import FormatError

__all__ = ["in_", "range_"]


@define(repr=False, frozen=True)
class _FormatErrorValidator:
    validator: Any

    def __call__(self, inst: Any, attr: Any, value: Any) -> None:
        try:
            self.validator(inst, attr, value)
        except (TypeError, ValueError) as e:
            raise FormatError(e.args[0] if e.args else str(e)) from e

    def __repr__(self) -> str:
        return repr(self.validator)


@define(repr=False, frozen=True)
class _RangeValidator:
    minimum: int
    maximum: int

    def __call__(self, inst: Any, attr: Any, value: Any) -> None:
        try:
            in_range = self.minimum <= value and value <= self.maximum
        except TypeError:
            in_range = False

        if not in_range:
            raise FormatError(
                "'{name}' must be in range [{minimum}, {maximum}] (got {value!r})".format(
                    name=attr.name,
                    minimum=self.minimum,
                    maximum=self.maximum,
                    value=value,
                )
            )

    def __repr__(self) -> str:
        return "<range_ validator with [{minimum!r}, {maximum!r}]>".format(
            minimum=self.minimum, maximum=self.maximum
        )


def in_(options: Any) -> _FormatErrorValidator:
    """
    :py:func:`attrs.validators.in_` that raises a
    :exc:`~psdlite.errors.FormatError` instead of a plain ``ValueError``.
    """
    return _FormatErrorValidator(attrs.validators.in_(tuple(options)))


def range_(minimum: int, maximum: int) -> _RangeValidator:
    """
    A validator that raises a :exc:`~psdlite.errors.FormatError` if the
    initializer is called with a value that does not belong in the
    [minimum, maximum] range.
    """
    return _RangeValidator(minimum, maximum)

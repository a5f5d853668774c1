# Copyright 2026 by the Switchyard authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Validators for path variables and request conditions."""

from __future__ import annotations

import abc
from math import isfinite
import re
from typing import Any, Callable, Optional, Union
import uuid

from switchyard.errors import ValidationConfigError

__all__ = (
    'as_validator',
    'BaseValidator',
    'EqualityValidator',
    'FloatValidator',
    'IntValidator',
    'PredicateValidator',
    'RegexValidator',
    'UUIDValidator',
)


class BaseValidator(metaclass=abc.ABCMeta):
    """Abstract base class for variable and condition validators.

    A validator decides whether a candidate value may be bound to a
    variable. A rejection is not an error; the router simply tries the
    next alternative.
    """

    __slots__ = ()

    @abc.abstractmethod
    def accepts(self, value: Any) -> bool:
        """Return ``True`` if `value` is acceptable.

        Args:
            value (str): A single path token or request attribute.

        Returns:
            bool: Whether or not the value passes validation.
        """

    def _identity(self) -> Any:
        return id(self)

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return False

        return self._identity() == other._identity()  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self._identity()))


class EqualityValidator(BaseValidator):
    """Accepts only values equal to the given one."""

    __slots__ = ('_expected',)

    def __init__(self, expected: Any) -> None:
        self._expected = expected

    def accepts(self, value: Any) -> bool:
        return value == self._expected

    def _identity(self) -> Any:
        return self._expected

    def __repr__(self) -> str:
        return '{}({!r})'.format(self.__class__.__name__, self._expected)


class RegexValidator(BaseValidator):
    """Accepts values entirely matched by a regular expression.

    Args:
        pattern (str or re.Pattern): The expression to match. Strings are
            compiled as-is. The whole value must match; a pattern that only
            matches a prefix of the value rejects it.
    """

    __slots__ = ('_regex',)

    def __init__(self, pattern: Union[str, re.Pattern[str]]) -> None:
        if isinstance(pattern, str):
            try:
                pattern = re.compile(pattern)
            except re.error as e:
                raise ValidationConfigError(
                    'Invalid regular expression: {!r}'.format(pattern)
                ) from e

        self._regex = pattern

    @property
    def regex(self) -> re.Pattern[str]:
        return self._regex

    def accepts(self, value: Any) -> bool:
        return self._regex.fullmatch(str(value)) is not None

    def match_prefix(self, text: str) -> Optional[str]:
        """Return the prefix of `text` matched by the expression, if any."""
        match = self._regex.match(text)
        return match.group(0) if match is not None else None

    def _identity(self) -> Any:
        return (self._regex.pattern, self._regex.flags)

    def __repr__(self) -> str:
        return '{}({!r})'.format(self.__class__.__name__, self._regex.pattern)


class PredicateValidator(BaseValidator):
    """Wraps a user-supplied function returning a truthy value on success.

    Exceptions raised by the function are not caught.
    """

    __slots__ = ('_func',)

    def __init__(self, func: Callable[[Any], Any]) -> None:
        self._func = func

    def accepts(self, value: Any) -> bool:
        return bool(self._func(value))

    def _identity(self) -> Any:
        return self._func

    def __repr__(self) -> str:
        return '{}({!r})'.format(self.__class__.__name__, self._func)


class IntValidator(BaseValidator):
    """Accepts values that represent an int.

    Keyword Args:
        num_digits (int): Require the value to have the given
            number of digits.
        min (int): Reject the value if it is less than this number.
        max (int): Reject the value if it is greater than this number.
    """

    __slots__ = ('_num_digits', '_min', '_max')

    def __init__(
        self,
        num_digits: Optional[int] = None,
        min: Optional[int] = None,
        max: Optional[int] = None,
    ) -> None:
        if num_digits is not None and num_digits < 1:
            raise ValueError('num_digits must be at least 1')
        self._num_digits = num_digits
        self._min = min
        self._max = max

    def accepts(self, value: Any) -> bool:
        value = str(value)
        if self._num_digits is not None and len(value) != self._num_digits:
            return False

        # NOTE: int() will accept numbers with preceding or trailing
        #   whitespace, so we need to do our own check.
        if value.strip() != value:
            return False

        try:
            converted = int(value)
        except ValueError:
            return False

        return _within_bounds(self._min, self._max, converted)

    def _identity(self) -> Any:
        return (self._num_digits, self._min, self._max)


class FloatValidator(BaseValidator):
    """Accepts values that represent a float.

    Keyword Args:
        min (float): Reject the value if it is less than this number.
        max (float): Reject the value if it is greater than this number.
        finite (bool) : Determines whether or not to only accept ordinary
            finite numbers (default: ``True``).
    """

    __slots__ = ('_finite', '_min', '_max')

    def __init__(
        self,
        min: Optional[float] = None,
        max: Optional[float] = None,
        finite: bool = True,
    ) -> None:
        self._min = min
        self._max = max
        self._finite = finite

    def accepts(self, value: Any) -> bool:
        value = str(value)
        if value.strip() != value:
            return False

        try:
            converted = float(value)
        except ValueError:
            return False

        if self._finite and not isfinite(converted):
            return False

        return _within_bounds(self._min, self._max, converted)

    def _identity(self) -> Any:
        return (self._min, self._max, self._finite)


class UUIDValidator(BaseValidator):
    """Accepts values that can be parsed as a uuid.UUID."""

    __slots__ = ()

    def accepts(self, value: Any) -> bool:
        try:
            uuid.UUID(str(value))
        except ValueError:
            return False

        return True

    def _identity(self) -> Any:
        return None


def _within_bounds(
    min_value: Optional[Union[int, float]],
    max_value: Optional[Union[int, float]],
    value: Union[int, float],
) -> bool:
    if min_value is not None and value < min_value:
        return False
    if max_value is not None and value > max_value:
        return False

    return True


def as_validator(obj: Any) -> BaseValidator:
    """Coerce a requirement or condition value into a validator.

    Args:
        obj: A :class:`BaseValidator` instance (returned unchanged), a
            compiled regular expression, a callable predicate, or any other
            hashable value, which is compared for equality.

    Returns:
        BaseValidator: The validator to use.

    Raises:
        ValidationConfigError: `obj` is ``None``.
    """

    if isinstance(obj, BaseValidator):
        return obj

    if isinstance(obj, re.Pattern):
        return RegexValidator(obj)

    if callable(obj):
        return PredicateValidator(obj)

    if obj is None:
        raise ValidationConfigError('A requirement may not be None')

    return EqualityValidator(obj)

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

"""Segment classes shared by the compiler, the trie, and the index.

A concrete path is simply a list of segments. Segments are immutable
once created; use :meth:`Variable.with_options` to derive a modified
copy.
"""

from __future__ import annotations

from typing import Any, Hashable, Optional, Tuple

from switchyard.routing.validators import BaseValidator

__all__ = (
    'ANY',
    'Condition',
    'GlobVariable',
    'Literal',
    'Segment',
    'Separator',
    'SingleVariable',
    'Variable',
)


class _AnyValue:
    """Wildcard condition value, satisfied by any request attribute."""

    __slots__ = ()

    def __repr__(self) -> str:
        return 'ANY'

    def __reduce__(self) -> str:
        return 'ANY'


ANY = _AnyValue()


class Segment:
    """Base class for all segments."""

    __slots__ = ()

    is_variable = False

    @property
    def key(self) -> Hashable:
        """Key under which this segment is stored in a trie node."""
        raise NotImplementedError

    def _fields(self) -> Tuple[Any, ...]:
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented

        return self._fields() == other._fields()  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self),) + self._fields())

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError('{} is immutable'.format(type(self).__name__))

    def _init(self, **values: Any) -> None:
        for name, value in values.items():
            object.__setattr__(self, name, value)


class Literal(Segment):
    """Matches exactly one token equal to `text`."""

    __slots__ = ('text',)

    def __init__(self, text: str) -> None:
        self._init(text=text)

    @property
    def key(self) -> Hashable:
        return self.text

    def _fields(self) -> Tuple[Any, ...]:
        return (self.text,)

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return 'Literal({!r})'.format(self.text)


class Separator(Segment):
    """Matches one delimiter token."""

    __slots__ = ('char',)

    def __init__(self, char: str) -> None:
        self._init(char=char)

    @property
    def key(self) -> Hashable:
        return self.char

    def _fields(self) -> Tuple[Any, ...]:
        return (self.char,)

    def __str__(self) -> str:
        return self.char

    def __repr__(self) -> str:
        return 'Separator({!r})'.format(self.char)


class Condition(Segment):
    """A request attribute the route requires, such as the HTTP method.

    Conditions always precede the path segments of a concrete path. When
    used as an input token, `value` is the actual request attribute; when
    stored in a route, `value` is the required value, a validator, or
    :data:`ANY`.
    """

    __slots__ = ('kind', 'value')

    def __init__(self, kind: str, value: Any) -> None:
        self._init(kind=kind, value=value)

    @property
    def key(self) -> Hashable:
        return (self.kind, self.value)

    @property
    def is_wildcard(self) -> bool:
        return self.value is ANY

    @property
    def is_pattern(self) -> bool:
        return isinstance(self.value, BaseValidator)

    def _fields(self) -> Tuple[Any, ...]:
        return (self.kind, self.value)

    def __repr__(self) -> str:
        return 'Condition({!r}, {!r})'.format(self.kind, self.value)


class Variable(Segment):
    """Base class for the segments that bind path tokens to a name.

    Attributes:
        name (str): Name the matched value is bound to.
        validator (BaseValidator): Optional validator applied to each
            candidate token before binding.
        default: Value used for generation when the caller omits the
            variable. Only ``None`` means "no default"; falsy values such
            as ``0``, ``False`` or ``''`` are real defaults.
        lookahead (str): The delimiter or literal expected to follow the
            variable in its concrete path, computed at registration. It is
            informational only: matching backtracks over every
            alternative and never reads it.
    """

    __slots__ = ('name', 'validator', 'default', 'lookahead')

    is_variable = True
    is_glob = False

    def __init__(
        self,
        name: str,
        validator: Optional[BaseValidator] = None,
        default: Any = None,
        lookahead: Optional[str] = None,
    ) -> None:
        self._init(
            name=name, validator=validator, default=default, lookahead=lookahead
        )

    @property
    def key(self) -> Hashable:
        # NOTE: Variables are never stored in a node's literal table; see
        #   TrieNode.variable_child.
        return None

    @property
    def has_default(self) -> bool:
        """``True`` unless the default is ``None``."""
        return self.default is not None

    def accepts(self, token: str) -> bool:
        return self.validator is None or self.validator.accepts(token)

    def matches_position(self, other: 'Variable') -> bool:
        """Return ``True`` if both variables may share one trie node."""
        return type(self) is type(other) and self._position() == other._position()

    def with_options(self, **changes: Any) -> 'Variable':
        values = {
            'name': self.name,
            'validator': self.validator,
            'default': self.default,
            'lookahead': self.lookahead,
        }
        values.update(changes)
        return type(self)(**values)

    def _position(self) -> Tuple[Any, ...]:
        return (self.name, self.validator)

    def _fields(self) -> Tuple[Any, ...]:
        return (self.name, self.validator, self.default, self.lookahead)

    def __repr__(self) -> str:
        return '{}({!r})'.format(type(self).__name__, self.name)


class SingleVariable(Variable):
    """Binds exactly one non-delimiter token (``:name``)."""

    __slots__ = ()

    def __str__(self) -> str:
        return ':' + self.name


class GlobVariable(Variable):
    """Binds one or more consecutive tokens (``*name``).

    A greedy glob (``{!name,regex}``) matches `regex` against the
    remaining path text, across delimiter boundaries. A requirement on
    the same name becomes the `validator`, which is then applied to the
    whole matched text; `regex` keeps driving the match itself.
    """

    __slots__ = ('greedy', 'regex')

    is_glob = True

    def __init__(
        self,
        name: str,
        validator: Optional[BaseValidator] = None,
        default: Any = None,
        lookahead: Optional[str] = None,
        greedy: bool = False,
        regex: Optional[BaseValidator] = None,
    ) -> None:
        super().__init__(name, validator, default, lookahead)
        if greedy and regex is None:
            regex = validator
        self._init(greedy=greedy, regex=regex)

    def with_options(self, **changes: Any) -> 'Variable':
        changes.setdefault('greedy', self.greedy)
        changes.setdefault('regex', self.regex)
        values = {
            'name': self.name,
            'validator': self.validator,
            'default': self.default,
            'lookahead': self.lookahead,
        }
        values.update(changes)
        return GlobVariable(**values)

    def _position(self) -> Tuple[Any, ...]:
        return (self.name, self.validator, self.greedy, self.regex)

    def _fields(self) -> Tuple[Any, ...]:
        return super()._fields() + (self.greedy, self.regex)

    def __str__(self) -> str:
        return ('!' if self.greedy else '*') + self.name

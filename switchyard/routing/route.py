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

"""Registered routes and their concrete paths."""

from __future__ import annotations

from collections import namedtuple
from typing import Any, Collection, Iterable, List, Mapping, Optional, Tuple
from urllib.parse import quote

from switchyard.constants import DEFAULT_DELIMITERS
from switchyard.errors import GenerationError
from switchyard.routing.index import SignificantKeyIndex
from switchyard.routing.segments import Condition
from switchyard.routing.segments import Segment
from switchyard.routing.segments import Variable

__all__ = (
    'GenerateWith',
    'Path',
    'Route',
)


GenerateWith = namedtuple('GenerateWith', ('scheme', 'port', 'host'))
GenerateWith.__new__.__defaults__ = (None, None, None)


class Route:
    """A registered route pattern.

    Instances are created by :meth:`switchyard.Router.add_route`; they
    are not normally instantiated directly.

    Args:
        original (str): The pattern string the route was compiled from.
        parsed_paths (list): The concrete segment sequences produced by
            :func:`~.compile_pattern`.

    Keyword Args:
        condition_segments (tuple): :class:`~.Condition` segments shared by
            every concrete path of the route.
        conditions (dict): The conditions as given by the caller.
        requirements (dict): The requirements as given by the caller.
        default_values (dict): Values used for omitted variables.
        destination: Opaque payload returned on a successful match.
        generate_with (dict): Optional ``scheme``, ``port`` and ``host``
            used when rendering absolute URLs.
        delimiters (tuple): The router's delimiters.
        router (Router): The router the route is registered with, used by
            :meth:`name`.

    Attributes:
        paths (tuple): The route's :class:`Path` instances, in expansion
            order (optional sections present before absent).
        named: The name the route was registered under, if any.
    """

    __slots__ = (
        'original',
        'paths',
        'conditions',
        'requirements',
        'default_values',
        'destination',
        'generate_with',
        'delimiters',
        'named',
        'router',
        '_index',
    )

    def __init__(
        self,
        original: str,
        parsed_paths: Iterable[Iterable[Segment]],
        condition_segments: Tuple[Condition, ...] = (),
        conditions: Optional[Mapping[str, Any]] = None,
        requirements: Optional[Mapping[str, Any]] = None,
        default_values: Optional[Mapping[str, Any]] = None,
        destination: Any = None,
        generate_with: Optional[Mapping[str, Any]] = None,
        delimiters: Tuple[str, ...] = DEFAULT_DELIMITERS,
        router: Any = None,
    ) -> None:
        self.original = original
        self.conditions = dict(conditions or {})
        self.requirements = dict(requirements or {})
        self.default_values = dict(default_values or {})
        self.destination = destination
        self.generate_with = GenerateWith(**generate_with) if generate_with else None
        self.delimiters = tuple(delimiters)
        self.named = None
        self.router = router

        self.paths = tuple(
            Path(self, segments, condition_segments) for segments in parsed_paths
        )

        # NOTE: Built eagerly, so that the route is read-only once it has
        #   been registered.
        self._index = None
        if len(self.paths) > 1:
            self._index = SignificantKeyIndex()
            for path in self.paths:
                self._index.register(path)

    def to(self, destination: Any) -> 'Route':
        """Set the destination payload of this route and return the route."""
        self.destination = destination
        return self

    def name(self, name: str) -> 'Route':
        """Register this route under `name` and return the route.

        The name is recorded in :attr:`named`, and the route's router (if
        any) resolves it in :meth:`~switchyard.Router.url_for`.
        """

        if self.router is None:
            self.named = name
            return self

        return self.router.name(name, self)

    def find_matching_path(self, params: Collection[str]) -> Optional['Path']:
        """Pick the concrete path of this route best suited to `params`.

        Args:
            params: Parameter names (or a dict keyed by them).

        Returns:
            Path: The most specific path that can be generated from the
            parameters, or the first static path when none can. ``None``
            is returned when the route has neither.
        """

        if self._index is None:
            return self.paths[0]

        path = self._index.find_matching_path(params)
        if path is not None:
            return path

        for path in self.paths:
            if not path.is_dynamic:
                return path

        return None

    def __repr__(self) -> str:
        return '<{} {!r}>'.format(type(self).__name__, self.original)


class Path:
    """A single concrete segment sequence of a :class:`Route`.

    Attributes:
        route (Route): The route this path belongs to.
        conditions (tuple): Leading condition segments.
        parts (tuple): The path segments, in order.
        dynamic_parts (tuple): The variables among `parts`.
        dynamic_keys (tuple): Names of the variables, in order.
        dynamic_keys_with_defaults (frozenset): Names of the variables
            that have a default value.
        dynamic_keys_without_defaults (frozenset): Names of the variables
            that must be supplied for generation.
    """

    __slots__ = (
        'route',
        'conditions',
        'parts',
        'dynamic_parts',
        'dynamic_keys',
        'dynamic_keys_with_defaults',
        'dynamic_keys_without_defaults',
        '_dynamic_key_set',
    )

    def __init__(
        self,
        route: Route,
        parts: Iterable[Segment],
        conditions: Tuple[Condition, ...] = (),
    ) -> None:
        self.route = route
        self.conditions = tuple(conditions)
        self.parts = tuple(parts)

        self.dynamic_parts = tuple(part for part in self.parts if part.is_variable)
        self.dynamic_keys = tuple(part.name for part in self.dynamic_parts)
        self.dynamic_keys_with_defaults = frozenset(
            part.name for part in self.dynamic_parts if part.has_default
        )
        self.dynamic_keys_without_defaults = frozenset(
            part.name for part in self.dynamic_parts if not part.has_default
        )
        self._dynamic_key_set = frozenset(self.dynamic_keys)

    @property
    def segments(self) -> Tuple[Segment, ...]:
        """The full sequence inserted into the trie (conditions first)."""
        return self.conditions + self.parts

    @property
    def is_dynamic(self) -> bool:
        return bool(self.dynamic_parts)

    def can_generate_from(self, names: Collection[str]) -> bool:
        """Return ``True`` if this path can be rendered from `names`.

        Every variable without a default must be named, and every name
        must be used by the path.
        """

        names = frozenset(names)
        return self.dynamic_keys_without_defaults <= names <= self._dynamic_key_set

    def render(self, params: Optional[Mapping[str, Any]] = None) -> str:
        """Render this path as a string.

        Args:
            params (dict): Values for the path's variables. Variables that
                are missing use their default value. Glob variables accept
                a list of values, which are joined with the first
                delimiter.

        Returns:
            str: The rendered, percent-encoded path.

        Raises:
            GenerationError: A value is missing or is rejected by the
                variable's validator.
        """

        params = params or {}
        delimiter = self.route.delimiters[0]
        safe = ''.join(self.route.delimiters)

        rendered = []
        for part in self.parts:
            if not part.is_variable:
                rendered.append(str(part))
                continue

            value = self._value_for(part, params)

            if part.is_glob and not isinstance(value, str):
                values = [str(v) for v in value]
                self._validate(part, values)
                rendered.append(delimiter.join(quote(v, safe='') for v in values))
            elif part.is_glob and part.greedy:
                self._validate(part, [value])
                rendered.append(quote(value, safe=safe))
            else:
                value = str(value)
                self._validate(part, [value])
                rendered.append(quote(value, safe=''))

        return ''.join(rendered)

    def _value_for(self, part: Variable, params: Mapping[str, Any]) -> Any:
        if part.name in params and params[part.name] is not None:
            return params[part.name]

        if part.has_default:
            return part.default

        raise GenerationError(
            'No value given for "{}" in {!r}'.format(part.name, self.route.original)
        )

    def _validate(self, part: Variable, values: List[str]) -> None:
        if part.validator is None:
            return

        for value in values:
            if not part.validator.accepts(value):
                raise GenerationError(
                    'The value {!r} does not satisfy the requirement for '
                    '"{}" in {!r}'.format(value, part.name, self.route.original)
                )

    def __str__(self) -> str:
        return ''.join(str(part) for part in self.parts)

    def __repr__(self) -> str:
        return '<{} {!r}>'.format(type(self).__name__, str(self))


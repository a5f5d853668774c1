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

"""Router facade tying the compiler, the trie, and the index together."""

import logging
import re
from threading import Lock
from urllib.parse import urlencode

from switchyard.constants import DEFAULT_DELIMITERS
from switchyard.constants import DEFAULT_REQUEST_METHODS
from switchyard.errors import GenerationError
from switchyard.errors import ValidationConfigError
from switchyard.routing.compiler import compile_pattern
from switchyard.routing.index import SignificantKeyIndex
from switchyard.routing.route import Route
from switchyard.routing.segments import ANY
from switchyard.routing.segments import Condition
from switchyard.routing.splitter import Splitter
from switchyard.routing.trie import RouteTrie
from switchyard.routing.validators import as_validator
from switchyard.routing.validators import BaseValidator

__all__ = ('Match', 'Router', 'RouterOptions')

_logger = logging.getLogger(__name__)

_RESERVED_CHARS = frozenset('(){}|:*!')


def _is_requirement(value):
    # NOTE: Classes are callable too, but are taken as destination values.
    if isinstance(value, (re.Pattern, BaseValidator)):
        return True

    return callable(value) and not isinstance(value, type)


class RouterOptions:
    """Defines the set of options a :class:`Router` is created with.

    Options are fixed once the router exists, since every compiled route
    depends on them.

    Attributes:
        delimiters (tuple): Single-character strings on which patterns
            and request paths are split (default ``('/', '.')``). The first
            delimiter is used to join glob values during generation.
        request_methods (tuple): Names of the request attributes routes may
            impose conditions on, in the order they are matched. Defaults
            to ``('protocol', 'domain', 'port', 'query_string',
            'remote_ip', 'user_agent', 'referer', 'method',
            'subdomains')``.
    """

    __slots__ = ('_delimiters', '_request_methods')

    def __init__(self, delimiters=None, request_methods=None):
        if delimiters is None:
            delimiters = DEFAULT_DELIMITERS
        if request_methods is None:
            request_methods = DEFAULT_REQUEST_METHODS

        self._delimiters = self._validate_delimiters(tuple(delimiters))
        self._request_methods = self._validate_request_methods(tuple(request_methods))

    @property
    def delimiters(self):
        return self._delimiters

    @property
    def request_methods(self):
        return self._request_methods

    @staticmethod
    def _validate_delimiters(delimiters):
        if not delimiters:
            raise ValueError('At least one delimiter is required')

        for delimiter in delimiters:
            if not isinstance(delimiter, str) or len(delimiter) != 1:
                raise ValueError(
                    'Delimiters must be single characters ({!r} is not '
                    'valid)'.format(delimiter)
                )
            if delimiter in _RESERVED_CHARS or delimiter.isspace():
                raise ValueError(
                    'The character {!r} is reserved by the pattern syntax and '
                    'may not be used as a delimiter'.format(delimiter)
                )

        if len(set(delimiters)) != len(delimiters):
            raise ValueError('Delimiters may not be duplicated')

        return delimiters

    @staticmethod
    def _validate_request_methods(request_methods):
        if len(set(request_methods)) != len(request_methods):
            raise ValueError('Request methods may not be duplicated')

        return request_methods


class Match:
    """The result of a successful match.

    Attributes:
        path (Path): The concrete path that matched.
        bindings (list): ``(name, value)`` pairs in binding order. Single
            variables bind a string; glob variables bind a list of
            strings.
    """

    __slots__ = ('path', 'bindings')

    def __init__(self, path, bindings):
        self.path = path
        self.bindings = bindings

    @property
    def route(self):
        """The :class:`~.Route` the path belongs to."""
        return self.path.route

    @property
    def destination(self):
        """The opaque destination payload given when adding the route."""
        return self.path.route.destination

    @property
    def params(self):
        """The bindings as a dict, with defaults for unbound variables."""
        params = dict(self.path.route.default_values)
        params.update(self.bindings)
        return params

    def __repr__(self):
        return '<Match {!r} {!r}>'.format(self.path, self.bindings)


class _RouteSet:
    """Everything a router knows about its routes.

    Resetting a router swaps in a fresh instance, so that lookups in
    progress keep working against the previous one.
    """

    __slots__ = ('trie', 'index', 'routes', 'named_routes')

    def __init__(self, delimiters):
        self.trie = RouteTrie(delimiters)
        self.index = SignificantKeyIndex()
        self.routes = []
        self.named_routes = {}


class Router:
    """Route recognizer and generator.

    Patterns are registered with :meth:`add_route`, typically while the
    application starts up. Afterwards, :meth:`recognize` (or :meth:`match`
    for a pre-tokenized path) finds the route for an incoming request, and
    :meth:`generate` or :meth:`url_for` find the route best suited to
    render a path from a set of parameters::

        router = Router()
        router.add_route('/:controller(/:action(/:id))')

        match = router.recognize_path('/users/show/42')
        match.params  # {'controller': 'users', 'action': 'show', 'id': '42'}

        router.url_for({'controller': 'users', 'action': 'index'})  # '/users/index'

    Note:
        Lookups do not take any lock and may run concurrently with each
        other. Adding routes is serialized with a lock, but should still
        happen before lookups start; :meth:`reset` replaces the whole route
        set at once.

    Keyword Args:
        delimiters (tuple): See :class:`RouterOptions`.
        request_methods (tuple): See :class:`RouterOptions`.
    """

    __slots__ = ('_options', '_splitter', '_state', '_lock')

    def __init__(self, delimiters=None, request_methods=None):
        self._options = RouterOptions(delimiters, request_methods)
        self._splitter = Splitter(self._options.delimiters)
        self._lock = Lock()
        self._state = _RouteSet(self._options.delimiters)

    @property
    def options(self):
        return self._options

    @property
    def splitter(self):
        return self._splitter

    @property
    def routes(self):
        """The registered routes, in registration order."""
        return tuple(self._state.routes)

    @property
    def named_routes(self):
        return dict(self._state.named_routes)

    @property
    def route_count(self):
        return len(self._state.routes)

    @property
    def empty(self):
        return not self._state.routes

    def __len__(self):
        return len(self._state.routes)

    def reset(self):
        """Forget every route, returning the router to its initial state."""

        with self._lock:
            self._state = _RouteSet(self._options.delimiters)

        _logger.debug('Router %r was reset', self)

    clear = reset

    def add_route(
        self,
        pattern,
        requirements=None,
        conditions=None,
        default_values=None,
        destination=None,
        generate_with=None,
        name=None,
        **options
    ):
        """Compile `pattern` and add it to the router.

        Args:
            pattern (str): The route pattern, e.g. ``'/users/:id(.:format)'``.
                See :mod:`switchyard.routing.compiler` for the syntax.

        Keyword Args:
            requirements (dict): Maps variable names to a validator, a
                compiled regular expression, a predicate, or a value the
                token must equal.
            conditions (dict): Maps request attribute names (see
                :attr:`RouterOptions.request_methods`) to a required value,
                a compiled regular expression, or a predicate.
            default_values (dict): Values used for variables omitted during
                generation, and added to :attr:`Match.params` when the
                variable is not bound.
            destination: Opaque payload returned with each match.
            generate_with (dict): ``scheme``, ``host`` and ``port`` used by
                :meth:`url_for` to render absolute URLs.
            name (str): Register the route under this name as well.
            **options: Values that are compiled regular expressions,
                validators, or callables are treated as requirements for
                the variable of the same name. When `destination` is not
                given, any remaining options become the destination.

        Returns:
            Route: The new route.

        Raises:
            PatternSyntaxError: The pattern is malformed.
            ValidationConfigError: A requirement, default, or condition does
                not fit the pattern or the router's options.
            AmbiguousPattern: The pattern conflicts with an existing route.
                The router is left unchanged.
        """

        requirements = dict(requirements or {})
        for key in list(options):
            if _is_requirement(options[key]):
                requirements[key] = options.pop(key)

        if destination is None and options:
            destination = options

        delimiters = self._options.delimiters
        parsed_paths = compile_pattern(pattern, requirements, default_values, delimiters)

        route = Route(
            pattern,
            parsed_paths,
            condition_segments=self._condition_segments(conditions or {}),
            conditions=conditions,
            requirements=requirements,
            default_values=default_values,
            destination=destination,
            generate_with=generate_with,
            delimiters=delimiters,
            router=self,
        )

        with self._lock:
            state = self._state

            # NOTE: Detect every conflict up front, including conflicts
            #   between two paths of the new route, so that a failed
            #   registration leaves the trie untouched.
            staging = RouteTrie(delimiters)
            for path in route.paths:
                state.trie.check(path)
                staging.insert(path)

            for path in route.paths:
                state.trie.insert(path)
                state.index.register(path)

            state.routes.append(route)
            if name is not None:
                self._name(state, name, route)

        _logger.debug(
            'Added route %r with %d concrete path(s)', pattern, len(route.paths)
        )

        return route

    def add_named_route(self, name, pattern, **kwargs):
        """Add a route that can also be referred to by `name`.

        See :meth:`add_route` for the remaining arguments.
        """

        return self.add_route(pattern, name=name, **kwargs)

    def name(self, name, route):
        """Register an existing `route` under `name` and return the route."""

        with self._lock:
            self._name(self._state, name, route)

        return route

    def match(self, tokens, request=None):
        """Match a tokenized path.

        Args:
            tokens (list): The path tokens, as produced by :attr:`splitter`.
                They may be preceded by one :class:`~.Condition` token per
                configured request method, in order; otherwise, condition
                tokens are derived from `request`.

        Keyword Args:
            request (object): Object whose attributes named after
                :attr:`RouterOptions.request_methods` are matched against the
                route conditions. Missing attributes only satisfy routes
                without a condition on them.

        Returns:
            Match: The match, or ``None`` if no route matches.
        """

        tokens = list(tokens)
        if not tokens or not isinstance(tokens[0], Condition):
            tokens = self._condition_tokens(request) + tokens

        result = self._state.trie.find(tokens)
        if result is None:
            return None

        path, bindings = result
        return Match(path, bindings)

    def recognize(self, request=None, path=None):
        """Match a request.

        Args:
            request (object): The request; see :meth:`match`.
            path (str): The path to match (default ``request.path``).

        Returns:
            Match: The match, or ``None`` if no route matches.
        """

        if path is None:
            path = request.path

        return self.match(self._splitter.split(path), request=request)

    def recognize_path(self, path):
        """Match a bare path, without a request.

        Every condition token is ``None``, so only routes without
        conditions can match.
        """

        return self.recognize(None, path)

    def generate(self, params):
        """Find the path best suited to render a URL from `params`.

        Args:
            params: Parameter names, or a dict keyed by them.

        Returns:
            Path: The most specific matching path, or ``None``.
        """

        return self._state.index.find_matching_path(params)

    path_for_options = generate

    def url_for(self, params=None, name=None):
        """Render a URL from `params`.

        Args:
            params (dict): Values for the path variables. Values for names
                the chosen path does not use are appended as a query string.

        Keyword Args:
            name (str): Render the named route instead of searching every
                route for the best match.

        Returns:
            str: The rendered URL. It is absolute when the route was added
            with `generate_with`.

        Raises:
            GenerationError: No route can be rendered from the parameters.
        """

        params = dict(params or {})
        state = self._state

        if name is not None:
            try:
                route = state.named_routes[name]
            except KeyError:
                raise GenerationError('No route is named {!r}'.format(name))

            path = route.find_matching_path(params)
        else:
            path = state.index.find_matching_path(params)

        if path is None:
            raise GenerationError(
                'No route can be generated from {!r}'.format(sorted(params))
            )

        url = path.render(params)

        extra = [
            (key, value)
            for key, value in sorted(params.items())
            if key not in path.dynamic_keys and value is not None
        ]
        if extra:
            url += '?' + urlencode(extra, doseq=True)

        generate_with = path.route.generate_with
        if generate_with is not None and generate_with.host:
            authority = generate_with.host
            if generate_with.port:
                authority += ':{}'.format(generate_with.port)
            url = '{}://{}{}'.format(generate_with.scheme or 'http', authority, url)

        return url

    # -----------------------------------------------------------------
    # Private
    # -----------------------------------------------------------------

    def _name(self, state, name, route):
        state.named_routes[name] = route
        route.named = name

    def _condition_segments(self, conditions):
        request_methods = self._options.request_methods

        unknown = sorted(set(conditions) - set(request_methods))
        if unknown:
            raise ValidationConfigError(
                'Unknown condition(s) {}; expected one of {}'.format(
                    ', '.join(repr(k) for k in unknown), ', '.join(request_methods)
                )
            )

        segments = []
        for kind in request_methods:
            value = conditions.get(kind, ANY)
            if _is_requirement(value):
                value = as_validator(value)
            elif value is None:
                raise ValidationConfigError(
                    'The condition on {!r} may not be None'.format(kind)
                )
            elif isinstance(value, list):
                value = tuple(value)

            segments.append(Condition(kind, value))

        return tuple(segments)

    def _condition_tokens(self, request):
        tokens = []
        for kind in self._options.request_methods:
            value = getattr(request, kind, None)
            if isinstance(value, list):
                value = tuple(value)

            tokens.append(Condition(kind, value))

        return tokens

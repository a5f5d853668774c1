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

"""Inspect utilities for switchyard routers."""

import inspect
from typing import Any, Dict, List, Optional, Tuple

from switchyard.router import Router

__all__ = (
    'inspect_router',
    'InspectVisitor',
    'PathInfo',
    'RouteInfo',
    'RouterInfo',
    'StringVisitor',
)


def inspect_router(router: Router) -> 'RouterInfo':
    """Inspect a router.

    Args:
        router (Router): The router to inspect.

    Returns:
        RouterInfo: The information regarding the router. Call
        :meth:`~.RouterInfo.to_string` on the result to obtain a
        human-friendly representation.
    """

    routes = []
    for route in router.routes:
        paths = [
            PathInfo(
                str(path),
                list(path.dynamic_keys),
                sorted(path.dynamic_keys_with_defaults),
            )
            for path in route.paths
        ]

        source_info, destination_name = _describe_destination(route.destination)
        routes.append(
            RouteInfo(
                route.original,
                route.named,
                destination_name,
                source_info,
                dict(route.conditions),
                paths,
            )
        )

    return RouterInfo(routes, router.options.delimiters, router.options.request_methods)


# ------------------------------------------------------------------------
# Inspection classes
# ------------------------------------------------------------------------


class _Traversable:
    __visit_name__ = 'N/A'

    def to_string(self, verbose=False) -> str:
        """Return a string representation of this class.

        Args:
            verbose (bool, optional): Adds more information. Defaults to False.

        Returns:
            str: string representation of this class.
        """
        return StringVisitor(verbose).process(self)

    def __repr__(self):
        return self.to_string()


class PathInfo(_Traversable):
    """Describes one concrete path of a route.

    Args:
        path (str): The path, as it would appear in a pattern.
        dynamic_keys (List[str]): Names of the path's variables, in order.
        keys_with_defaults (List[str]): Names of the variables that have a
            default value.
    """

    __visit_name__ = 'path'

    def __init__(self, path: str, dynamic_keys: List[str], keys_with_defaults: List[str]):
        self.path = path
        self.dynamic_keys = dynamic_keys
        self.keys_with_defaults = keys_with_defaults


class RouteInfo(_Traversable):
    """Describes a route.

    Args:
        pattern (str): The pattern the route was added with.
        name (str): The name of the route, or ``None``.
        destination_name (str): The name of the destination, or ``None``.
        source_info (str): The source path where the destination was
            defined, when it could be determined.
        conditions (Dict[str, Any]): The request conditions of the route.
        paths (List[PathInfo]): The concrete paths the pattern expands into.
    """

    __visit_name__ = 'route'

    def __init__(
        self,
        pattern: str,
        name: Optional[str],
        destination_name: Optional[str],
        source_info: Optional[str],
        conditions: Dict[str, Any],
        paths: List[PathInfo],
    ):
        self.pattern = pattern
        self.name = name
        self.destination_name = destination_name
        self.source_info = source_info
        self.conditions = conditions
        self.paths = paths


class RouterInfo(_Traversable):
    """Describes a router.

    Args:
        routes (List[RouteInfo]): The routes, in registration order.
        delimiters (Tuple[str]): The delimiters of the router.
        request_methods (Tuple[str]): The request attributes routes may be
            conditioned on.
    """

    __visit_name__ = 'router'

    def __init__(
        self,
        routes: List[RouteInfo],
        delimiters: Tuple[str, ...],
        request_methods: Tuple[str, ...],
    ):
        self.routes = routes
        self.delimiters = delimiters
        self.request_methods = request_methods


class InspectVisitor:
    """Base visitor class that implements the `process` method.

    Subclasses must implement ``visit_<name>`` methods for each supported class.
    """

    def process(self, instance: _Traversable):
        """Process the instance, by calling the appropriate visit method.

        Uses the `__visit_name__` attribute of the `instance` to obtain the method to use.

        Args:
            instance (_Traversable): The instance to process.
        """
        try:
            visit = getattr(self, 'visit_{}'.format(instance.__visit_name__))
        except AttributeError as e:
            raise RuntimeError(
                'This visitor does not support {}'.format(type(instance))
            ) from e

        return visit(instance)


class StringVisitor(InspectVisitor):
    """Visitor that returns a string representation of the info class.

    This is used automatically by calling ``to_string()`` on the info class.
    It can also be used directly by calling ``StringVisitor.process(info_instance)``.

    Args:
        verbose (bool, optional): Adds more information. Defaults to ``False``.
    """

    def __init__(self, verbose=False):
        self.verbose = verbose
        self.indent = 0

    @property
    def tab(self):
        """Get the current tabulation."""
        return ' ' * self.indent

    def visit_path(self, path: PathInfo) -> str:
        """Visit a PathInfo instance. Usually called by `process`."""
        text = path.path
        if self.verbose and path.keys_with_defaults:
            text += ' (defaults: {})'.format(', '.join(path.keys_with_defaults))
        return text

    def visit_route(self, route: RouteInfo) -> str:
        """Visit a RouteInfo instance. Usually called by `process`."""
        text = '{}⇒ {}'.format(self.tab, route.pattern)
        if route.name is not None:
            text += ' [{}]'.format(route.name)
        if route.destination_name is not None:
            text += ' - {}'.format(route.destination_name)
        if self.verbose and route.source_info:
            text += ' ({})'.format(route.source_info)

        lines = [self.process(p) for p in route.paths]
        if self.verbose:
            lines = [
                '{} = {!r}'.format(kind, value)
                for kind, value in sorted(route.conditions.items())
            ] + lines

        if not lines:
            return text

        tab = self.tab + ' ' * 3
        children = ['{}├── {}'.format(tab, line) for line in lines[:-1]]
        children += ['{}└── {}'.format(tab, line) for line in lines[-1:]]
        return '{}:\n{}'.format(text, '\n'.join(children))

    def visit_router(self, router: RouterInfo) -> str:
        """Visit a RouterInfo instance. Usually called by `process`."""
        self.indent = 4
        text = 'Router (delimiters: {})'.format(' '.join(router.delimiters))

        if router.routes:
            routes = '\n'.join(self.process(r) for r in router.routes)
            text += '\n• Routes:\n{}'.format(routes)

        return text


# ------------------------------------------------------------------------
# Helpers functions
# ------------------------------------------------------------------------


def _get_source_info(obj, default='[unknown file]'):
    """Try to get the definition file and line of obj.

    Return default on error.
    """
    try:
        source_file = inspect.getsourcefile(obj)
        source_lines = inspect.findsource(obj)
        source_info = '{}:{}'.format(source_file, source_lines[1])
    except (OSError, TypeError):
        # NOTE: Built-ins and objects defined in cythonized modules raise a
        #   TypeError when trying to locate the source file.
        source_info = default
    return source_info


def _describe_destination(destination):
    """Return the source info and a display name for a route destination."""
    if destination is None:
        return None, None

    if not (callable(destination) or inspect.isclass(destination)):
        return None, repr(destination)

    source_info = _get_source_info(destination, None)
    if source_info is None:
        source_info = _get_source_info(type(destination))

    name = getattr(destination, '__name__', None)
    if name is None:
        name = getattr(type(destination), '__name__', '[unknown]')

    return source_info, name

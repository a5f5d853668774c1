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

"""Switchyard-specific errors.

All classes are available directly from the `switchyard` package
namespace::

    import switchyard

    router = switchyard.Router()

    try:
        router.add_route('/users/(:id')
    except switchyard.PatternSyntaxError as ex:
        print(ex)

Note that a path that does not match any route is *not* an error; the
matching and generation methods simply return ``None`` in that case.
"""

__all__ = (
    'AmbiguousPattern',
    'GenerationError',
    'PatternSyntaxError',
    'RoutingError',
    'ValidationConfigError',
)


class RoutingError(Exception):
    """Base class for all errors raised by switchyard."""


# NOTE: The registration errors below inherit from ValueError, since they
#   are all caused by an unacceptable argument passed to add_route().
class PatternSyntaxError(RoutingError, ValueError):
    """The route pattern is malformed (grouping, braces, or variable syntax)."""


class ValidationConfigError(RoutingError, ValueError):
    """A requirement, default, or condition is inconsistent with the pattern."""


class AmbiguousPattern(RoutingError, ValueError):
    """The pattern conflicts with a previously added pattern."""


class GenerationError(RoutingError, LookupError):
    """A path could not be generated from the given parameters."""

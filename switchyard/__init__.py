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

"""Primary package for Switchyard, a path recognizer and generator.

Switchyard compiles route patterns such as ``'/:controller(/:action)'``
into a prefix tree for fast matching, and indexes them by parameter name
so that paths can be generated back from a set of parameters. The
`switchyard` package can be used to directly access the most commonly
used classes::

    import switchyard

    router = switchyard.Router()
"""

import logging as _logging

__all__ = (
    # Router
    'Match',
    'Router',
    'RouterOptions',
    # Routing building blocks
    'Path',
    'Route',
    # Validators
    'BaseValidator',
    'FloatValidator',
    'IntValidator',
    'RegexValidator',
    'UUIDValidator',
    # Errors
    'AmbiguousPattern',
    'GenerationError',
    'PatternSyntaxError',
    'RoutingError',
    'ValidationConfigError',
    # Package version
    '__version__',
)

from switchyard.errors import AmbiguousPattern
from switchyard.errors import GenerationError
from switchyard.errors import PatternSyntaxError
from switchyard.errors import RoutingError
from switchyard.errors import ValidationConfigError
from switchyard.router import Match
from switchyard.router import Router
from switchyard.router import RouterOptions
from switchyard.routing.route import Path
from switchyard.routing.route import Route
from switchyard.routing.validators import BaseValidator
from switchyard.routing.validators import FloatValidator
from switchyard.routing.validators import IntValidator
from switchyard.routing.validators import RegexValidator
from switchyard.routing.validators import UUIDValidator
from switchyard.version import __version__  # NOQA: F401

# NOTE: Leave handler configuration to the application.
_logger = _logging.getLogger('switchyard')
_logger.addHandler(_logging.NullHandler())

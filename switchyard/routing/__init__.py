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

"""Routing engine: pattern compiler, segment and validator classes,
the matching trie, and the generation index.

Most applications only need :class:`switchyard.Router`; the classes here
are useful when building or testing custom routing front ends.
"""

from switchyard.routing.compiler import compile_pattern
from switchyard.routing.compiler import expand
from switchyard.routing.compiler import Group
from switchyard.routing.compiler import parse
from switchyard.routing.index import SignificantKeyIndex
from switchyard.routing.route import GenerateWith
from switchyard.routing.route import Path
from switchyard.routing.route import Route
from switchyard.routing.segments import ANY
from switchyard.routing.segments import Condition
from switchyard.routing.segments import GlobVariable
from switchyard.routing.segments import Literal
from switchyard.routing.segments import Segment
from switchyard.routing.segments import Separator
from switchyard.routing.segments import SingleVariable
from switchyard.routing.segments import Variable
from switchyard.routing.splitter import Splitter
from switchyard.routing.trie import RouteTrie
from switchyard.routing.trie import TrieNode
from switchyard.routing.validators import as_validator
from switchyard.routing.validators import BaseValidator
from switchyard.routing.validators import EqualityValidator
from switchyard.routing.validators import FloatValidator
from switchyard.routing.validators import IntValidator
from switchyard.routing.validators import PredicateValidator
from switchyard.routing.validators import RegexValidator
from switchyard.routing.validators import UUIDValidator

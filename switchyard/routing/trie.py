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

"""Prefix tree used to match tokenized paths against concrete paths."""

import logging

from switchyard.constants import DEFAULT_DELIMITERS
from switchyard.errors import AmbiguousPattern
from switchyard.routing.segments import ANY
from switchyard.routing.segments import Condition
from switchyard.routing.segments import Separator

__all__ = ('RouteTrie', 'TrieNode')

_logger = logging.getLogger(__name__)


class TrieNode:
    """A single node of the routing trie.

    Attributes:
        segment (Segment): The segment that leads to this node (``None``
            for the root).
        depth (int): Distance from the root.
        literal_children (dict): Children keyed by literal text, delimiter
            character, or ``(kind, value)`` for exact and wildcard
            conditions.
        condition_patterns (dict): Children for conditions whose value is
            a validator, keyed by ``(kind, validator)`` in insertion order.
        variable_child (TrieNode): The single child reached by binding the
            token to a variable, if any.
        terminates (Path): The concrete path ending at this node, if any.
    """

    __slots__ = (
        'segment',
        'depth',
        'literal_children',
        'condition_patterns',
        'variable_child',
        'terminates',
    )

    def __init__(self, segment=None, depth=0):
        self.segment = segment
        self.depth = depth
        self.literal_children = {}
        self.condition_patterns = {}
        self.variable_child = None
        self.terminates = None

    def get_child(self, segment):
        """Return the child stored for `segment`, or ``None``.

        Raises:
            AmbiguousPattern: `segment` is a variable that cannot share this
                node's variable child.
        """

        if segment.is_variable:
            child = self.variable_child
            if child is not None and not child.segment.matches_position(segment):
                raise AmbiguousPattern(
                    'The variable {} conflicts with the variable {} already '
                    'routed at the same position. Variables sharing a '
                    'position must have the same name, kind, and '
                    'requirement.'.format(segment, child.segment)
                )
            return child

        if isinstance(segment, Condition) and segment.is_pattern:
            return self.condition_patterns.get(segment.key)

        return self.literal_children.get(segment.key)

    def add_child(self, segment):
        """Return the child for `segment`, creating it if needed."""

        child = self.get_child(segment)
        if child is not None:
            return child

        child = TrieNode(segment, self.depth + 1)

        if segment.is_variable:
            self.variable_child = child
        elif isinstance(segment, Condition) and segment.is_pattern:
            self.condition_patterns[segment.key] = child
        else:
            self.literal_children[segment.key] = child

        return child

    def children(self):
        """Iterate over all children: literals, condition patterns, variable."""

        yield from self.literal_children.values()
        yield from self.condition_patterns.values()
        if self.variable_child is not None:
            yield self.variable_child

    def __repr__(self):
        return '<TrieNode {!r} depth={}>'.format(self.segment, self.depth)


class RouteTrie:
    """A prefix tree of concrete paths.

    Concrete paths sharing a prefix share nodes, so the cost of a lookup
    is proportional to the length of the requested path rather than to
    the number of registered routes.

    Args:
        delimiters (tuple): Tokens equal to one of these characters are
            treated as separators when matching.
    """

    __slots__ = ('root', '_delimiters')

    def __init__(self, delimiters=DEFAULT_DELIMITERS):
        self.root = TrieNode()
        self._delimiters = frozenset(delimiters)

    def check(self, path):
        """Verify that `path` can be inserted, without modifying the trie.

        Raises:
            AmbiguousPattern: The path conflicts with an existing one.
        """

        node = self.root
        for segment in path.segments:
            node = node.get_child(segment)
            if node is None:
                # NOTE: The remainder of the path would be a new branch,
                #   which can not conflict with anything.
                return

    def insert(self, path):
        """Insert `path`, sharing nodes with any common prefix.

        When an identical concrete path was inserted before, the new path
        replaces it as the terminal of the final node.

        Raises:
            AmbiguousPattern: The path conflicts with an existing one. The
                trie may have been partially extended in that case, so call
                :meth:`check` first when atomicity matters.
        """

        node = self.root
        for segment in path.segments:
            node = node.add_child(segment)

        if node.terminates is not None and node.terminates is not path:
            _logger.debug(
                'Path %r of %r overrides the identical path of %r',
                path,
                path.route,
                node.terminates.route,
            )

        node.terminates = path
        return node

    def walk(self):
        """Yield every terminal path, depth first."""

        stack = [self.root]
        while stack:
            node = stack.pop()
            if node.terminates is not None:
                yield node.terminates

            stack.extend(reversed(list(node.children())))

    def find(self, tokens):
        """Match a token sequence against the trie.

        Args:
            tokens (list): Leading :class:`~.Condition` tokens (one per
                configured request attribute) followed by the path tokens
                produced by a :class:`~.Splitter`.

        Returns:
            tuple: A ``(path, bindings)`` tuple, where `bindings` is a list
            of ``(name, value)`` pairs in binding order. Single variables
            bind a string, glob variables a list of strings, and greedy
            globs the matched text. ``None`` is returned when nothing
            matches.
        """

        result = self._find(self.root, tokens, 0, (), None)
        if result is None:
            return None

        path, bindings = result
        return path, [
            (name, list(value) if isinstance(value, tuple) else value)
            for name, value in bindings
        ]

    # -----------------------------------------------------------------
    # Private
    # -----------------------------------------------------------------

    def _find(self, node, tokens, index, bindings, glob):
        # NOTE: `bindings` is an immutable tuple, so that alternatives that
        #   fail leave nothing behind. `glob` is either None or a tuple of
        #   (binding index, glob segment) for the glob still accepting
        #   tokens at this node.
        while True:
            if index == len(tokens):
                if node.terminates is not None:
                    return node.terminates, bindings
                return None

            token = tokens[index]

            if isinstance(token, Condition):
                return self._find_condition(node, tokens, index, bindings, token)

            is_separator = token in self._delimiters

            child = node.literal_children.get(token)
            if child is not None:
                # NOTE: A glob keeps accepting tokens across separators, but
                #   a literal closes it.
                next_glob = glob if isinstance(child.segment, Separator) else None
                result = self._find(child, tokens, index + 1, bindings, next_glob)
                if result is not None:
                    return result

            child = node.variable_child
            if child is not None and not is_separator:
                result = self._find_variable(child, tokens, index, bindings)
                if result is not None:
                    return result

            if glob is None:
                return None

            if not is_separator:
                glob_index, segment = glob
                if not segment.accepts(token):
                    return None

                name, values = bindings[glob_index]
                bindings = (
                    bindings[:glob_index]
                    + ((name, values + (token,)),)
                    + bindings[glob_index + 1 :]
                )

            # NOTE: Retry the same node with the next token. Since this is
            #   the last alternative, looping is equivalent to recursing.
            index += 1

    def _find_variable(self, child, tokens, index, bindings):
        segment = child.segment
        token = tokens[index]

        if segment.is_glob and segment.greedy:
            return self._find_greedy(child, tokens, index, bindings)

        if not segment.accepts(token):
            return None

        if segment.is_glob:
            glob = (len(bindings), segment)
            bindings += ((segment.name, (token,)),)
        else:
            glob = None
            bindings += ((segment.name, token),)

        return self._find(child, tokens, index + 1, bindings, glob)

    def _find_greedy(self, child, tokens, index, bindings):
        segment = child.segment
        remaining = ''.join(tokens[index:])

        matched = segment.regex.match_prefix(remaining)
        if not matched:
            return None

        if segment.validator is not segment.regex and not segment.accepts(matched):
            return None

        # NOTE: The match must end on a token boundary.
        consumed = 0
        end = index
        while consumed < len(matched):
            consumed += len(tokens[end])
            end += 1

        if consumed != len(matched):
            return None

        bindings += ((segment.name, matched),)
        return self._find(child, tokens, end, bindings, None)

    def _find_condition(self, node, tokens, index, bindings, token):
        try:
            child = node.literal_children.get(token.key)
        except TypeError:
            # NOTE: Unhashable request attribute; only patterns and the
            #   wildcard can match it.
            child = None

        if child is not None:
            result = self._find(child, tokens, index + 1, bindings, None)
            if result is not None:
                return result

        for (kind, validator), child in node.condition_patterns.items():
            if kind == token.kind and token.value is not None:
                if validator.accepts(token.value):
                    result = self._find(child, tokens, index + 1, bindings, None)
                    if result is not None:
                        return result

        child = node.literal_children.get((token.kind, ANY))
        if child is not None:
            return self._find(child, tokens, index + 1, bindings, None)

        return None

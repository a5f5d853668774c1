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

"""Route pattern compiler.

A pattern string is lexed, parsed into a tree of groups, and then
expanded into the list of concrete segment sequences it denotes. For
example, ``'/:controller(/:action(/:id))(.:format)'`` expands into six
concrete paths.

Pattern syntax:

* ``:name`` binds exactly one path token.
* ``*name`` binds one or more path tokens.
* ``{:name,regex}`` and ``{*name,regex}`` are the same, with each token
  required to match `regex`.
* ``{!name,regex}`` is a greedy glob; `regex` is matched against the
  remaining path text, across delimiters.
* ``(...)`` marks an optional section.
* ``(a|b|...)`` requires exactly one of the alternatives.

Anything else is literal text, split on the configured delimiters.
"""

from __future__ import annotations

import itertools
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from switchyard.constants import DEFAULT_DELIMITERS
from switchyard.constants import IDENTIFIER_PATTERN
from switchyard.errors import PatternSyntaxError
from switchyard.errors import ValidationConfigError
from switchyard.routing.segments import GlobVariable
from switchyard.routing.segments import Literal
from switchyard.routing.segments import Segment
from switchyard.routing.segments import Separator
from switchyard.routing.segments import SingleVariable
from switchyard.routing.validators import as_validator
from switchyard.routing.validators import RegexValidator

__all__ = (
    'compile_pattern',
    'expand',
    'Group',
    'parse',
)

# Lexer token kinds
_DELIM = 'delim'
_OPEN = 'open'
_CLOSE = 'close'
_PIPE = 'pipe'
_BRACE = 'brace'
_TEXT = 'text'

_VARIABLE_PREFIXES = {':': SingleVariable, '*': GlobVariable}


class Group:
    """A node of the parsed pattern tree.

    Args:
        kind (str): One of ``'all'`` (a sequence), ``'optional'`` (zero or
            one occurrence of the sequence in `children`), or
            ``'one_of'`` (exactly one of `children`, each of which is an
            ``'all'`` group).
        children (list): Segments and nested groups.
    """

    __slots__ = ('kind', 'children')

    ALL = 'all'
    OPTIONAL = 'optional'
    ONE_OF = 'one_of'

    def __init__(self, kind: str, children: Optional[List[Any]] = None) -> None:
        self.kind = kind
        self.children = children if children is not None else []

    def append(self, child: Union[Segment, 'Group']) -> None:
        self.children.append(child)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Group):
            return NotImplemented

        return self.kind == other.kind and self.children == other.children

    def __repr__(self) -> str:
        return 'Group({!r}, {!r})'.format(self.kind, self.children)


def compile_pattern(
    pattern: str,
    requirements: Optional[Mapping[str, Any]] = None,
    default_values: Optional[Mapping[str, Any]] = None,
    delimiters: Sequence[str] = DEFAULT_DELIMITERS,
) -> List[List[Segment]]:
    """Compile a pattern string into its concrete segment sequences.

    Args:
        pattern (str): The route pattern.
        requirements (dict): Maps variable names to validators (or to
            anything :func:`~.as_validator` accepts).
        default_values (dict): Maps variable names to the value used when
            the variable is omitted during generation.
        delimiters (tuple): Delimiter characters; the first one is used as
            the lookahead of a path-final single variable.

    Returns:
        list: One list of segments per concrete path.

    Raises:
        PatternSyntaxError: The pattern is malformed.
        ValidationConfigError: A requirement or default refers to a variable
            the pattern does not declare.
    """

    requirements = dict(requirements or {})
    default_values = dict(default_values or {})

    validators = {}
    for name, requirement in requirements.items():
        validators[name] = as_validator(requirement)

    tree = parse(pattern, delimiters)
    expanded = expand(tree)

    declared = set()
    paths = []
    for segments in expanded:
        segments = _merge_literals(segments)
        _check_variables(pattern, segments)

        path = []
        for index, segment in enumerate(segments):
            if segment.is_variable:
                declared.add(segment.name)
                changes = {'lookahead': _lookahead(segments, index, delimiters)}
                if segment.name in validators:
                    changes['validator'] = validators[segment.name]
                if segment.name in default_values:
                    changes['default'] = default_values[segment.name]

                segment = segment.with_options(**changes)

            path.append(segment)

        paths.append(path)

    for label, names in (('requirement', validators), ('default', default_values)):
        undeclared = sorted(set(names) - declared)
        if undeclared:
            raise ValidationConfigError(
                'The pattern {!r} has no variable named {} to attach a {} '
                'to'.format(pattern, ', '.join(repr(n) for n in undeclared), label)
            )

    return paths


def parse(pattern: str, delimiters: Sequence[str] = DEFAULT_DELIMITERS) -> Group:
    """Parse a pattern string into a tree of groups.

    Returns:
        Group: An ``'all'`` group wrapping the whole pattern.
    """

    tokens = list(_lex(pattern, delimiters))
    parser = _Parser(pattern, tokens)
    return parser.parse()


def expand(group: Group) -> List[Tuple[Segment, ...]]:
    """Expand a group into every concrete segment sequence it denotes."""

    if group.kind == Group.OPTIONAL:
        return _expand_sequence(group.children) + [()]

    if group.kind == Group.ONE_OF:
        expanded = []
        for branch in group.children:
            expanded.extend(expand(branch))
        return expanded

    return _expand_sequence(group.children)


def _expand_sequence(children: Iterable[Any]) -> List[Tuple[Segment, ...]]:
    choices = []
    for child in children:
        if isinstance(child, Group):
            choices.append(expand(child))
        else:
            choices.append([(child,)])

    # NOTE: The cross product of the choices, each combination
    #   concatenated in order.
    return [
        tuple(itertools.chain.from_iterable(combination))
        for combination in itertools.product(*choices)
    ]


def _lex(pattern, delimiters):
    delimiters = frozenset(delimiters)
    text = []
    position = 0
    length = len(pattern)

    while position < length:
        char = pattern[position]

        if char in delimiters or char in '()|{}':
            if text:
                yield _TEXT, ''.join(text)
                text = []

        if char in delimiters:
            yield _DELIM, char
        elif char == '(':
            yield _OPEN, char
        elif char == ')':
            yield _CLOSE, char
        elif char == '|':
            yield _PIPE, char
        elif char == '{':
            end = _find_closing_brace(pattern, position)
            yield _BRACE, pattern[position + 1 : end]
            position = end
        elif char == '}':
            raise PatternSyntaxError(
                'Unbalanced "}}" at position {} of {!r}'.format(position, pattern)
            )
        else:
            text.append(char)

        position += 1

    if text:
        yield _TEXT, ''.join(text)


def _find_closing_brace(pattern, start):
    # NOTE: Brace bodies are kept whole, including any delimiters or
    #   nested braces (such as regex quantifiers) they contain.
    depth = 0
    position = start
    while position < len(pattern):
        char = pattern[position]
        if char == '\\':
            position += 2
            continue

        if char == '{':
            depth += 1
        elif char == '}':
            depth -= 1
            if depth == 0:
                return position

        position += 1

    raise PatternSyntaxError(
        'Unbalanced "{{" at position {} of {!r}'.format(start, pattern)
    )


class _Parser:
    def __init__(self, pattern, tokens):
        self._pattern = pattern
        self._tokens = tokens
        self._index = 0

    def parse(self):
        root = self._parse_sequence()

        if self._index < len(self._tokens):
            kind, __ = self._tokens[self._index]
            if kind == _CLOSE:
                msg = 'Unbalanced ")" in {!r}'
            else:
                msg = 'Alternatives ("|") must be enclosed in parentheses in {!r}'
            raise PatternSyntaxError(msg.format(self._pattern))

        return root

    def _parse_sequence(self):
        group = Group(Group.ALL)

        while self._index < len(self._tokens):
            kind, value = self._tokens[self._index]
            if kind in (_CLOSE, _PIPE):
                break

            self._index += 1

            if kind == _DELIM:
                group.append(Separator(value))
            elif kind == _TEXT:
                group.append(self._parse_text(value))
            elif kind == _BRACE:
                group.append(self._parse_brace(value))
            else:
                group.append(self._parse_group())

        return group

    def _parse_group(self):
        branches = [self._parse_sequence()]

        while self._index < len(self._tokens):
            kind, __ = self._tokens[self._index]
            self._index += 1

            if kind == _CLOSE:
                if len(branches) == 1:
                    return Group(Group.OPTIONAL, branches[0].children)

                return Group(Group.ONE_OF, branches)

            # NOTE: _parse_sequence() only stops at a ")" or a "|"
            branches.append(self._parse_sequence())

        raise PatternSyntaxError('Unbalanced "(" in {!r}'.format(self._pattern))

    def _parse_text(self, text):
        variable_class = _VARIABLE_PREFIXES.get(text[0])
        if variable_class is None:
            return Literal(text)

        return variable_class(self._validate_name(text[1:]))

    def _parse_brace(self, body):
        prefix = body[:1]
        name, sep, regex = body[1:].partition(',')

        if prefix == '!':
            if not sep or not regex:
                raise PatternSyntaxError(
                    'A greedy variable requires a regular expression: '
                    '{{{}}} in {!r}'.format(body, self._pattern)
                )

            regex = self._compile_regex(regex)
            return GlobVariable(
                self._validate_name(name),
                validator=regex,
                greedy=True,
                regex=regex,
            )

        variable_class = _VARIABLE_PREFIXES.get(prefix)
        if variable_class is None:
            raise PatternSyntaxError(
                'Expected a variable (":", "*" or "!") inside '
                '{{{}}} in {!r}'.format(body, self._pattern)
            )

        if sep and not regex:
            raise PatternSyntaxError(
                'Expected a regular expression after "," in '
                '{{{}}} in {!r}'.format(body, self._pattern)
            )

        validator = self._compile_regex(regex) if regex else None
        return variable_class(self._validate_name(name), validator=validator)

    def _validate_name(self, name):
        if not IDENTIFIER_PATTERN.match(name):
            raise PatternSyntaxError(
                'Variable names must be valid identifiers ("{}" is not '
                'valid) in {!r}'.format(name, self._pattern)
            )

        return name

    def _compile_regex(self, regex):
        try:
            return RegexValidator(regex)
        except ValidationConfigError as e:
            raise PatternSyntaxError(
                'Invalid regular expression {!r} in {!r}'.format(regex, self._pattern)
            ) from e


def _merge_literals(segments):
    merged = []
    for segment in segments:
        if merged and isinstance(segment, Literal) and isinstance(merged[-1], Literal):
            merged[-1] = Literal(merged[-1].text + segment.text)
        else:
            merged.append(segment)

    return merged


def _check_variables(pattern, segments):
    used_names = set()

    for index, segment in enumerate(segments):
        if not segment.is_variable:
            continue

        if segment.name in used_names:
            raise PatternSyntaxError(
                'Variable names may not be duplicated ("{}" was used more '
                'than once) in {!r}'.format(segment.name, pattern)
            )
        used_names.add(segment.name)

        neighbors = segments[max(index - 1, 0) : index] + segments[index + 1 : index + 2]
        for neighbor in neighbors:
            if not isinstance(neighbor, Separator):
                raise PatternSyntaxError(
                    'A variable must span an entire path segment ("{}" is '
                    'adjacent to "{}") in {!r}'.format(segment, neighbor, pattern)
                )


def _lookahead(segments, index, delimiters):
    variable = segments[index]
    following = segments[index + 1 :]

    if variable.is_glob:
        for segment in following:
            if isinstance(segment, Literal):
                return segment.text

        return None

    for segment in following:
        if isinstance(segment, Separator):
            return segment.char

    return delimiters[0]


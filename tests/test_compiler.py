import re

import pytest

from switchyard import PatternSyntaxError
from switchyard import ValidationConfigError
from switchyard.routing import compile_pattern
from switchyard.routing import GlobVariable
from switchyard.routing import Group
from switchyard.routing import IntValidator
from switchyard.routing import Literal
from switchyard.routing import parse
from switchyard.routing import RegexValidator
from switchyard.routing import Separator
from switchyard.routing import SingleVariable


def _render(paths):
    return [''.join(str(segment) for segment in segments) for segments in paths]


def _variables(segments):
    return [segment for segment in segments if segment.is_variable]


@pytest.mark.parametrize(
    'pattern,expected',
    [
        ('/', ['/']),
        ('/users', ['/users']),
        ('/users/:id', ['/users/:id']),
        ('/users/:id.:format', ['/users/:id.:format']),
        ('/users(/:id)', ['/users/:id', '/users']),
        (
            '/:controller(/:action(/:id))(.:format)',
            [
                '/:controller/:action/:id.:format',
                '/:controller/:action/:id',
                '/:controller/:action.:format',
                '/:controller/:action',
                '/:controller.:format',
                '/:controller',
            ],
        ),
        ('/(foo|bar)/:id', ['/foo/:id', '/bar/:id']),
        ('/(a|b)(/c)', ['/a/c', '/a', '/b/c', '/b']),
        ('/(a|b(/:x))', ['/a', '/b/:x', '/b']),
        ('/files/*path', ['/files/*path']),
        ('/files/*path/edit', ['/files/*path/edit']),
        ('/static/{!path,.*}', ['/static/!path']),
    ],
)
def test_expansion(pattern, expected):
    assert _render(compile_pattern(pattern)) == expected


def test_parse_tree():
    tree = parse('/a(/:b|/c)')

    assert tree == Group(
        Group.ALL,
        [
            Separator('/'),
            Literal('a'),
            Group(
                Group.ONE_OF,
                [
                    Group(Group.ALL, [Separator('/'), SingleVariable('b')]),
                    Group(Group.ALL, [Separator('/'), Literal('c')]),
                ],
            ),
        ],
    )


def test_parse_optional_group():
    tree = parse('/a(.b)')
    assert tree.children[2] == Group(Group.OPTIONAL, [Separator('.'), Literal('b')])


def test_adjacent_literals_are_merged():
    paths = compile_pattern('/foo(bar)')

    assert paths[0] == [Separator('/'), Literal('foobar')]
    assert paths[1] == [Separator('/'), Literal('foo')]


def test_custom_delimiters():
    paths = compile_pattern('/files/:name', delimiters=('/',))
    assert paths == [
        [Separator('/'), Literal('files'), Separator('/'), SingleVariable('name', lookahead='/')]
    ]

    paths = compile_pattern('/a-:b', delimiters=('/', '-'))
    assert _render(paths) == ['/a-:b']


def test_inline_regex():
    (segments,) = compile_pattern(r'/users/{:id,\d+}')
    (variable,) = _variables(segments)

    assert isinstance(variable, SingleVariable)
    assert isinstance(variable.validator, RegexValidator)
    assert variable.accepts('42')
    assert not variable.accepts('abc')


def test_inline_regex_with_braces_and_delimiters():
    (segments,) = compile_pattern(r'/v/{:version,\d{1,2}\.\d}')
    (variable,) = _variables(segments)

    assert variable.validator.regex.pattern == r'\d{1,2}\.\d'
    assert variable.accepts('10.2')


def test_glob_with_regex():
    (segments,) = compile_pattern(r'/files/{*parts,[a-z]+}')
    (variable,) = _variables(segments)

    assert isinstance(variable, GlobVariable)
    assert not variable.greedy
    assert variable.accepts('abc')
    assert not variable.accepts('ABC')


def test_greedy_glob():
    (segments,) = compile_pattern('/static/{!path,.*}')
    (variable,) = _variables(segments)

    assert isinstance(variable, GlobVariable)
    assert variable.greedy
    assert str(variable) == '!path'


def test_requirements_and_defaults():
    paths = compile_pattern(
        '/:controller(/:id)',
        requirements={'id': re.compile(r'\d+')},
        default_values={'controller': 'home'},
    )

    controller, id_ = _variables(paths[0])
    assert controller.default == 'home'
    assert controller.has_default
    assert controller.validator is None
    assert not id_.has_default
    assert isinstance(id_.validator, RegexValidator)

    (controller,) = _variables(paths[1])
    assert controller.default == 'home'


def test_requirement_overrides_inline_regex():
    validator = IntValidator(max=10)
    (segments,) = compile_pattern(r'/{:id,[a-z]+}', requirements={'id': validator})
    (variable,) = _variables(segments)

    assert variable.validator is validator


def test_greedy_requirement_keeps_inline_regex():
    (segments,) = compile_pattern('/s/{!p,[a-z/]+}', requirements={'p': 'a/b'})
    (variable,) = _variables(segments)

    assert variable.greedy
    assert variable.regex == RegexValidator('[a-z/]+')
    assert variable.validator.accepts('a/b')
    assert not variable.validator.accepts('a/c')


@pytest.mark.parametrize('default', [0, False, ''])
def test_falsy_defaults_count(default):
    (segments,) = compile_pattern('/:page', default_values={'page': default})
    (variable,) = _variables(segments)

    assert variable.has_default
    assert variable.default == default


@pytest.mark.parametrize(
    'pattern,name,expected',
    [
        ('/users/:id.:format', 'id', '.'),
        ('/users/:id.:format', 'format', '/'),
        ('/users/:id/edit', 'id', '/'),
        ('/files/*path/edit', 'path', 'edit'),
        ('/files/*path', 'path', None),
    ],
)
def test_lookahead(pattern, name, expected):
    (segments,) = compile_pattern(pattern)
    variables = {v.name: v for v in _variables(segments)}

    assert variables[name].lookahead == expected


@pytest.mark.parametrize(
    'pattern,match',
    [
        ('/users/(:id', 'Unbalanced "\\("'),
        ('/users/:id)', 'Unbalanced "\\)"'),
        ('/a|b', 'must be enclosed'),
        ('/{:id', 'Unbalanced "{"'),
        ('/id}', 'Unbalanced "}"'),
        ('/:1abc', 'valid identifiers'),
        ('/:', 'valid identifiers'),
        ('/:id:other', 'valid identifiers'),
        ('/{!path}', 'requires a regular expression'),
        ('/{:id,}', 'Expected a regular expression'),
        ('/{*rest,}', 'Expected a regular expression'),
        ('/{?x,a}', 'Expected a variable'),
        ('/{:id,(}', 'Invalid regular expression'),
        ('/:a/:a', 'duplicated'),
        ('/:a(/:a)', 'duplicated'),
        ('/:id(foo)', 'entire path segment'),
        ('/foo{:id}', 'entire path segment'),
    ],
)
def test_syntax_errors(pattern, match):
    with pytest.raises(PatternSyntaxError, match=match):
        compile_pattern(pattern)


def test_syntax_errors_are_value_errors():
    with pytest.raises(ValueError):
        compile_pattern('/(')


@pytest.mark.parametrize(
    'kwargs',
    [
        {'requirements': {'missing': re.compile('x')}},
        {'default_values': {'missing': 'x'}},
    ],
)
def test_undeclared_variables(kwargs):
    with pytest.raises(ValidationConfigError, match='no variable named'):
        compile_pattern('/users/:id', **kwargs)


def test_requirement_may_target_optional_variable():
    paths = compile_pattern('/users(/:id)', requirements={'id': IntValidator()})
    assert len(paths) == 2

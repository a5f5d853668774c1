import pytest

from switchyard.routing import Splitter


@pytest.mark.parametrize(
    'path,expected',
    [
        ('/users/42.json', ['/', 'users', '/', '42', '.', 'json']),
        ('/', ['/']),
        ('', []),
        ('//a', ['/', '/', 'a']),
        ('/a/', ['/', 'a', '/']),
        ('users', ['users']),
    ],
)
def test_split(path, expected):
    assert Splitter().split(path) == expected


def test_split_preserves_text():
    path = '/a.b/c..d/'
    assert ''.join(Splitter().split(path)) == path


def test_custom_delimiters():
    splitter = Splitter(('/', '-'))

    assert splitter.split('/report-2020.pdf') == ['/', 'report', '-', '2020.pdf']
    assert splitter.is_separator('-')
    assert not splitter.is_separator('.')
    assert splitter.delimiters == frozenset(('/', '-'))


def test_regex_metacharacters_as_delimiters():
    splitter = Splitter(('/', '+'))
    assert splitter.split('/a+b') == ['/', 'a', '+', 'b']

import re
import uuid

import pytest

from switchyard import ValidationConfigError
from switchyard.routing import as_validator
from switchyard.routing import EqualityValidator
from switchyard.routing import FloatValidator
from switchyard.routing import IntValidator
from switchyard.routing import PredicateValidator
from switchyard.routing import RegexValidator
from switchyard.routing import UUIDValidator


@pytest.mark.parametrize(
    'value,num_digits,min,max,expected',
    [
        ('123', None, None, None, True),
        ('01', None, None, None, True),
        ('001', 3, None, None, True),
        ('1', 2, None, None, False),
        (' 1', None, None, None, False),
        ('1 ', None, None, None, False),
        ('12', None, 1, 12, True),
        ('13', None, 1, 12, False),
        ('0', None, 1, 12, False),
        ('1.2', None, None, None, False),
        ('abc', None, None, None, False),
    ],
)
def test_int_validator(value, num_digits, min, max, expected):
    validator = IntValidator(num_digits, min, max)
    assert validator.accepts(value) is expected


def test_int_validator_rejects_invalid_num_digits():
    with pytest.raises(ValueError):
        IntValidator(num_digits=0)


@pytest.mark.parametrize(
    'value,kwargs,expected',
    [
        ('1.5', {}, True),
        ('-2', {}, True),
        ('1e3', {}, True),
        ('nan', {}, False),
        ('inf', {}, False),
        ('inf', {'finite': False}, True),
        ('5.1', {'max': 5}, False),
        ('4.9', {'min': 5}, False),
        (' 1.0', {}, False),
        ('one', {}, False),
    ],
)
def test_float_validator(value, kwargs, expected):
    assert FloatValidator(**kwargs).accepts(value) is expected


def test_uuid_validator():
    validator = UUIDValidator()

    assert validator.accepts(str(uuid.uuid4()))
    assert not validator.accepts('not-a-uuid')


def test_regex_validator_matches_whole_value():
    validator = RegexValidator(r'\d+')

    assert validator.accepts('42')
    assert not validator.accepts('42a')
    assert not validator.accepts('a42')


def test_regex_validator_match_prefix():
    validator = RegexValidator(r'[a-z]+/[a-z]+')

    assert validator.match_prefix('ab/cd/ef') == 'ab/cd'
    assert validator.match_prefix('12/ab') is None


def test_regex_validator_invalid_pattern():
    with pytest.raises(ValidationConfigError):
        RegexValidator('(')


def test_validator_equality():
    assert RegexValidator('a+') == RegexValidator('a+')
    assert RegexValidator('a+') == RegexValidator(re.compile('a+'))
    assert RegexValidator('a+') != RegexValidator('b+')
    assert IntValidator(min=1) == IntValidator(min=1)
    assert IntValidator(min=1) != IntValidator(min=2)
    assert hash(UUIDValidator()) == hash(UUIDValidator())

    # NOTE: Distinct types never compare equal, even with the same identity.
    assert EqualityValidator(None) != UUIDValidator()


def test_as_validator():
    regex = re.compile('[a-z]+')
    validator = IntValidator()

    def predicate(value):
        return value.startswith('x')

    assert as_validator(validator) is validator
    assert isinstance(as_validator(regex), RegexValidator)
    assert as_validator(regex).regex is regex
    assert isinstance(as_validator(predicate), PredicateValidator)
    assert as_validator(predicate).accepts('xyz')
    assert not as_validator(predicate).accepts('abc')
    assert isinstance(as_validator('GET'), EqualityValidator)
    assert as_validator('GET').accepts('GET')
    assert not as_validator('GET').accepts('POST')


def test_as_validator_rejects_none():
    with pytest.raises(ValidationConfigError):
        as_validator(None)


def test_predicate_exceptions_propagate():
    def predicate(value):
        raise KeyError(value)

    with pytest.raises(KeyError):
        PredicateValidator(predicate).accepts('x')

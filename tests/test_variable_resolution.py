"""Tests for placeholder resolution against the context tree."""

import math

import pytest

from makinilya.context import Context
from makinilya.exceptions import (
    NotFoundError,
    NotIndexableError,
    ContextError,
    NotScalarError,
    ResolveError,
)
from makinilya.text.parser import parse
from makinilya.variables.resolver import (
    ContextResolver,
    format_value,
    resolve,
    resolve_safe,
)


@pytest.fixture
def context():
    return Context.from_mapping({
        'a': {'b': 'X'},
        'names': {'author': {'first': 'Mark', 'last': 'Lopez'}},
        'age': 21,
        'height': 2.5,
        'published': True,
    })


class TestResolve:
    """Path walking and the three failure kinds."""

    def test_nested_string(self, context):
        assert resolve('a.b', context) == 'X'

    def test_path_as_sequence(self, context):
        assert resolve(('names', 'author', 'last'), context) == 'Lopez'

    def test_plain_mapping_root(self):
        assert resolve('a.b', {'a': {'b': 'X'}}) == 'X'

    def test_plain_mapping_root_is_validated(self):
        with pytest.raises(ContextError):
            resolve('a.b', {'a': [1]})
        with pytest.raises(ContextError):
            ContextResolver({'n': None})

    def test_not_found(self, context):
        with pytest.raises(NotFoundError) as exc_info:
            resolve('a.c', context)

        error = exc_info.value
        assert error.path == 'a.c'
        assert error.segment == 'c'
        assert error.kind == 'not_found'

    def test_not_found_at_root(self, context):
        with pytest.raises(NotFoundError) as exc_info:
            resolve('missing', context)
        assert "'<root>'" in exc_info.value.message

    def test_not_indexable(self, context):
        with pytest.raises(NotIndexableError) as exc_info:
            resolve('a.b.c', context)

        error = exc_info.value
        assert error.path == 'a.b.c'
        assert error.segment == 'c'
        assert "'a.b' is a string" in error.message

    def test_not_indexable_number(self, context):
        with pytest.raises(NotIndexableError) as exc_info:
            resolve('age.years', context)
        assert 'number' in exc_info.value.message

    def test_not_scalar(self, context):
        with pytest.raises(NotScalarError) as exc_info:
            resolve('a', context)
        assert exc_info.value.path == 'a'

    def test_all_failures_share_base_class(self, context):
        for path in ('a.c', 'a.b.c', 'a'):
            with pytest.raises(ResolveError):
                resolve(path, context)

    def test_resolution_does_not_mutate_context(self, context):
        before = repr(context)
        for path in ('a.b', 'a.c', 'a.b.c', 'a'):
            resolve_safe(path, context)
        assert repr(context) == before

    def test_resolve_safe(self, context):
        assert resolve_safe('a.b', context) == (True, 'X', None)

        success, value, error = resolve_safe('a.c', context)
        assert success is False
        assert value is None
        assert isinstance(error, NotFoundError)


class TestFormatValue:
    """Scalar to text conversion."""

    def test_integers_have_no_fraction(self):
        assert format_value(21) == '21'
        assert format_value(21.0) == '21'
        assert format_value(-3) == '-3'

    def test_floats_round_trip(self):
        assert format_value(2.5) == '2.5'
        assert format_value(0.1) == '0.1'
        assert float(format_value(1 / 3)) == 1 / 3

    def test_non_finite_floats(self):
        assert format_value(math.inf) == 'inf'
        assert format_value(math.nan) == 'nan'

    def test_booleans(self):
        assert format_value(True) == 'true'
        assert format_value(False) == 'false'

    def test_strings_pass_through(self):
        assert format_value('Core') == 'Core'

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            format_value([1, 2])

    def test_context_numbers(self, context):
        assert resolve('age', context) == '21'
        assert resolve('height', context) == '2.5'
        assert resolve('published', context) == 'true'


class TestInterpolate:
    """Splicing resolved values into parsed scenes."""

    def test_interpolates_all_placeholders(self, context):
        resolver = ContextResolver(context)
        text, errors = resolver.interpolate(
            parse("{{ names.author.first }} {{names.author.last}} is {{ age }}.")
        )
        assert text == 'Mark Lopez is 21.'
        assert errors == []

    def test_failures_are_collected_and_left_symbolic(self, context):
        resolver = ContextResolver(context)
        text, errors = resolver.interpolate(parse("A {{ a.c }} B {{ a }} C {{ a.b }}"))

        assert text == 'A {{ a.c }} B {{ a }} C X'
        assert [e.kind for e in errors] == ['not_found', 'not_scalar']
        assert [e.offset for e in errors] == [2, 14]

    def test_resolver_method(self, context):
        assert ContextResolver(context).resolve('a.b') == 'X'

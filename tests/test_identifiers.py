"""Tests for :mod:`keyper.identifiers`."""

from unittest import TestCase, mock

import pytest

from keyper import identifiers
from keyper.identifiers import ALPHANUMERIC, Exhausted, Issued, Keyspace


class TestRandomString(TestCase):
    """:func:`.identifiers.random_string` draws uniform symbols."""

    def test_length_and_alphabet(self):
        """The result has the requested length, from the alphabet."""
        for length in (1, 6, 9, 32):
            value = identifiers.random_string(length)
            self.assertEqual(len(value), length)
            self.assertTrue(set(value) <= set(ALPHANUMERIC))

    def test_custom_alphabet(self):
        """Only symbols of the given alphabet are used."""
        value = identifiers.random_string(50, 'ab')
        self.assertTrue(set(value) <= {'a', 'b'})

    def test_bad_arguments(self):
        """Non-positive lengths and empty alphabets are refused."""
        with self.assertRaises(ValueError):
            identifiers.random_string(0)
        with self.assertRaises(ValueError):
            identifiers.random_string(6, '')


@pytest.mark.asyncio
async def test_is_taken_by_key(store):
    """A key keyspace is checked with a lookup by key."""
    await store.set('clients', 'abc', {'platformId': 'xyz'})
    assert await identifiers.is_taken(store, Keyspace('clients'), 'abc')
    assert not await identifiers.is_taken(store, Keyspace('clients'), 'xyz')


@pytest.mark.asyncio
async def test_is_taken_by_field(store):
    """A field keyspace is checked with an equality query."""
    await store.set('clients', 'abc', {'platformId': 'xyz'})
    keyspace = Keyspace('clients', 'platformId')
    assert await identifiers.is_taken(store, keyspace, 'xyz')
    assert not await identifiers.is_taken(store, keyspace, 'abc')


@pytest.mark.asyncio
async def test_issue_skips_values_in_use(store):
    """Issuance never returns a value already present in the keyspace."""
    await store.set('tokens', 'a', {})
    with mock.patch.object(identifiers, 'random_string',
                           side_effect=['a', 'a', 'b']) as draw:
        result = await identifiers.issue(store, Keyspace('tokens'), 1)
    assert result == Issued('b')
    assert draw.call_count == 3


@pytest.mark.asyncio
async def test_issue_gives_up_after_cap(store):
    """Under an always-colliding keyspace, exactly ``attempts`` are made."""
    await store.set('tokens', 'same', {})
    with mock.patch.object(identifiers, 'random_string',
                           return_value='same') as draw:
        result = await identifiers.issue(store, Keyspace('tokens'), 4,
                                         attempts=10)
    assert result == Exhausted(10)
    assert draw.call_count == 10


@pytest.mark.asyncio
async def test_issue_in_empty_keyspace(store):
    """The first candidate is accepted when nothing is stored."""
    result = await identifiers.issue(store, Keyspace('clients', 'platformId'),
                                     6)
    assert isinstance(result, Issued)
    assert len(result.value) == 6

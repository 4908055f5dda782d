"""Tests for :mod:`keyper.controllers.tokens`."""

from unittest import mock

import pytest

from keyper.controllers import tokens
from keyper.domain import Expired, NotFound, Valid
from keyper.exceptions import AuthenticationError, NotFoundError, \
    ValidationError

ISSUED = 1700000000000
EXPIRES = ISSUED + 10 * 60 * 1000
PROFILE = {'name': 'A', 'email': 'a@x.com', 'phone': '9123456789',
           'imageUrl': None, 'expiryTimestamp': EXPIRES}


@pytest.fixture
def populated(store):
    store.collections['clients'] = {'KEY123456': {'platformId': 'PID123'}}
    store.collections['tokens'] = {'Tok3n1': dict(PROFILE)}
    return store


@pytest.mark.asyncio
async def test_load_token_state(populated):
    state = await tokens.load_token_state(populated, 'Tok3n1', ISSUED)
    assert isinstance(state, Valid)
    assert state.profile.email == 'a@x.com'

    state = await tokens.load_token_state(populated, 'Tok3n1', EXPIRES)
    assert isinstance(state, Valid), 'still valid at the expiry instant'

    state = await tokens.load_token_state(populated, 'Tok3n1', EXPIRES + 1)
    assert state == Expired('Tok3n1', EXPIRES)

    state = await tokens.load_token_state(populated, 'nope', ISSUED)
    assert state == NotFound('nope')


@pytest.mark.asyncio
async def test_check_valid_token(populated):
    with mock.patch('keyper.util.now', return_value=ISSUED + 60 * 1000):
        data, code, _ = await tokens.check_token(populated, 'Tok3n1',
                                                 'KEY123456')
    assert code == 200
    assert data['success'] is True
    assert data['data']['email'] == 'a@x.com'
    assert data['data']['expiryTimestamp'] == EXPIRES


@pytest.mark.asyncio
async def test_check_expired_token(populated):
    """A token issued 11 minutes ago has expired."""
    with mock.patch('keyper.util.now', return_value=ISSUED + 11 * 60 * 1000):
        with pytest.raises(AuthenticationError) as ctx:
            await tokens.check_token(populated, 'Tok3n1', 'KEY123456')
    assert ctx.value.code == 'TOKEN_EXPIRED'
    assert ctx.value.status_code == 401
    assert 'Tok3n1' in populated.collections['tokens']


@pytest.mark.asyncio
async def test_check_unknown_token(populated):
    with pytest.raises(NotFoundError) as ctx:
        await tokens.check_token(populated, 'nope', 'KEY123456')
    assert ctx.value.code == 'TOKEN_NOT_FOUND'
    assert ctx.value.status_code == 404


@pytest.mark.asyncio
async def test_check_unknown_apikey(populated):
    with pytest.raises(AuthenticationError) as ctx:
        await tokens.check_token(populated, 'Tok3n1', 'WRONG')
    assert ctx.value.code == 'INVALID_API_KEY'
    assert ctx.value.status_code == 401


@pytest.mark.asyncio
async def test_check_missing_parameters(populated):
    for token, apikey in (('', 'KEY123456'), ('Tok3n1', ' '), (None, None)):
        with pytest.raises(ValidationError) as ctx:
            await tokens.check_token(populated, token, apikey)
        assert ctx.value.code == 'MISSING_PARAMETER'

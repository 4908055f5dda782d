"""Tests for :mod:`keyper.controllers.users`."""

from unittest import mock

import pytest

from keyper import passwords
from keyper.controllers import users
from keyper.exceptions import ConflictError, ValidationError


async def register(store, settings, **params):
    args = dict(name='A', email='a@x.com', phone='9123456789',
                hashed_password='h1')
    args.update(params)
    return await users.register(store, settings, **args)


@pytest.mark.asyncio
async def test_register(store, settings):
    with mock.patch('keyper.util.now', return_value=1700000000000):
        data, code, _ = await register(store, settings)
    assert code == 201
    assert data['success'] is True
    user = data['data']
    assert user['phone'] == '9123456789'
    assert user['createdAt'] == 1700000000000
    assert user['activityLog'] == [{'action': 'registered',
                                    'timestamp': 1700000000000}]
    assert 'hashedPassword' not in user

    stored = await store.get('users', '9123456789')
    assert stored['email'] == 'a@x.com'
    assert passwords.check_password('h1', stored['hashedPassword'])


@pytest.mark.asyncio
async def test_register_with_image(store, settings):
    data, _, _ = await register(store, settings,
                                image_url='https://img.example.com/a.png')
    assert data['data']['imageUrl'] == 'https://img.example.com/a.png'


@pytest.mark.asyncio
async def test_duplicate_phone(store, settings):
    """The second registration fails and leaves the first intact."""
    await register(store, settings)
    before = await store.get('users', '9123456789')
    with pytest.raises(ConflictError) as ctx:
        await register(store, settings)
    assert ctx.value.code == 'DUPLICATE_PHONE'
    with pytest.raises(ConflictError) as ctx:
        await register(store, settings, name='B', email='b@x.com',
                       hashed_password='h2')
    assert ctx.value.code == 'DUPLICATE_PHONE'
    assert ctx.value.status_code == 409
    assert await store.get('users', '9123456789') == before


@pytest.mark.asyncio
async def test_concurrent_duplicate_phone(store, settings):
    """A registration that passes the lookup still cannot replace a user."""
    await register(store, settings)
    before = await store.get('users', '9123456789')
    with mock.patch.object(store, 'get', mock.AsyncMock(return_value=None)):
        with pytest.raises(ConflictError) as ctx:
            await register(store, settings, name='B', email='b@x.com',
                           hashed_password='h2')
    assert ctx.value.code == 'DUPLICATE_PHONE'
    assert ctx.value.status_code == 409
    assert await store.get('users', '9123456789') == before


@pytest.mark.asyncio
async def test_duplicate_email(store, settings):
    await register(store, settings)
    with pytest.raises(ConflictError) as ctx:
        await register(store, settings, phone='9000000000')
    assert ctx.value.code == 'DUPLICATE_EMAIL'
    assert ctx.value.status_code == 409
    assert await store.get('users', '9000000000') is None


@pytest.mark.asyncio
async def test_invalid_contact(store, settings):
    with pytest.raises(ValidationError) as ctx:
        await register(store, settings, email='a@x')
    assert ctx.value.code == 'INVALID_EMAIL'
    with pytest.raises(ValidationError) as ctx:
        await register(store, settings, phone='12345')
    assert ctx.value.code == 'INVALID_PHONE'

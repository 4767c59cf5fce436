import pytest


@pytest.mark.asyncio
async def test_register_login_and_me(client):
    res = await client.post('/api/users/register', json={
        'username': 'carol',
        'email': 'carol@example.com',
        'password': 'secret1',
        'nickname': 'Caz',
    })
    assert res.status_code == 201, res.text
    user = res.json()
    assert user['role'] == 'subscriber'
    assert user['status'] == 'active'
    assert 'hashed_password' not in user

    login = await client.post('/api/users/login', data={'username': 'carol@example.com', 'password': 'secret1'})
    assert login.status_code == 200, login.text
    token = login.json()['access_token']
    assert login.json()['token_type'] == 'bearer'

    me = await client.get('/api/users/me', headers={'Authorization': f'Bearer {token}'})
    assert me.status_code == 200
    assert me.json() == {'id': user['id'], 'username': 'carol', 'role': 'subscriber', 'status': 'active'}


@pytest.mark.asyncio
async def test_register_rejections(client):
    body = {'username': 'dave', 'email': 'dave@example.com', 'password': 'secret1'}
    assert (await client.post('/api/users/register', json={**body, 'password': '123'})).status_code == 400
    assert (await client.post('/api/users/register', json=body)).status_code == 201
    assert (await client.post('/api/users/register', json={**body, 'email': 'other@example.com'})).status_code == 409
    assert (await client.post('/api/users/register', json={**body, 'username': 'other'})).status_code == 409


@pytest.mark.asyncio
async def test_bad_credentials(client):
    await client.post('/api/users/register', json={'username': 'erin', 'email': 'erin@example.com', 'password': 'secret1'})
    res = await client.post('/api/users/login', data={'username': 'erin', 'password': 'wrong-pass'})
    assert res.status_code == 401
    res = await client.post('/api/users/login', data={'username': 'nobody', 'password': 'secret1'})
    assert res.status_code == 401


@pytest.mark.asyncio
async def test_disabled_account_token_is_refused(client, make_user):
    frank = await make_user('frank', status='disabled')
    assert (await client.get('/api/users/me', headers=frank['headers'])).status_code == 401

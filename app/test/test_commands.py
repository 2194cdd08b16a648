"""
JSON command routes: the outer boundary where errors become strings.
"""


def _data(response):
    body = response.get_json()
    assert body['success'] is True, body
    return body['data']


def _create_location(client, name, kind='STORAGE', parent_id=None):
    return _data(client.post('/api/locations', json={'name': name, 'type': kind, 'parent_id': parent_id}))


def test_create_and_list_locations(client):
    root = _create_location(client, 'Warehouse', 'BUILDING')
    _create_location(client, 'Shelf A', 'SHELF', parent_id=root['id'])

    response = client.get('/api/locations')
    assert response.status_code == 200
    assert [loc['name'] for loc in _data(response)] == ['Shelf A', 'Warehouse']


def test_create_location_returns_201(client):
    response = client.post('/api/locations', json={'name': 'Closet', 'type': 'STORAGE'})
    assert response.status_code == 201
    assert response.get_json()['data']['type'] == 'STORAGE'


def test_delete_location_with_children_is_conflict(client):
    root = _create_location(client, 'Warehouse', 'BUILDING')
    _create_location(client, 'Shelf A', 'SHELF', parent_id=root['id'])

    response = client.delete(f"/api/locations/{root['id']}")
    assert response.status_code == 409
    assert response.get_json() == {
        'success': False,
        'error': 'Cannot delete location with child locations',
    }


def test_missing_parent_is_conflict(client):
    response = client.post('/api/locations', json={'name': 'Shelf', 'type': 'SHELF', 'parent_id': 'nope'})
    assert response.status_code == 409
    assert response.get_json()['error'] == 'Parent location not found'


def test_reparent_cycle_is_rejected(client):
    root = _create_location(client, 'Warehouse', 'BUILDING')
    shelf = _create_location(client, 'Shelf A', 'SHELF', parent_id=root['id'])

    response = client.patch(f"/api/locations/{root['id']}", json={'parent_id': shelf['id']})
    assert response.status_code == 409
    assert response.get_json()['error'] == 'Location cannot be its own ancestor'


def test_asset_flow(client):
    shelf = _create_location(client, 'Shelf A', 'SHELF')
    project = _data(client.post('/api/projects', json={'name': 'Rollout', 'status': 'active'}))
    user = _data(client.post('/api/users', json={'name': 'Engineer User'}))

    asset = _data(client.post('/api/assets', json={
        'name': 'Laptop',
        'type': 'COMPUTER',
        'location_id': shelf['id'],
        'project_id': project['id'],
        'assigned_to_id': user['id'],
    }))

    detail = _data(client.get(f"/api/assets/{asset['id']}"))
    assert detail['location'] == {'id': shelf['id'], 'name': 'Shelf A'}
    assert detail['assigned_to'] == {'id': user['id'], 'name': 'Engineer User'}
    assert detail['project'] == {'id': project['id'], 'name': 'Rollout'}

    response = client.delete(f"/api/projects/{project['id']}")
    assert response.status_code == 409
    assert response.get_json()['error'] == 'Cannot delete project that has assigned assets'

    updated = _data(client.patch(f"/api/assets/{asset['id']}", json={'project_id': None, 'assigned_to_id': None}))
    assert updated['project_id'] is None
    assert updated['assigned_to'] is None

    assert client.delete(f"/api/projects/{project['id']}").status_code == 200
    assert len(_data(client.get('/api/assets'))) == 1


def test_unknown_asset_is_404(client):
    response = client.get('/api/assets/missing')
    assert response.status_code == 404
    assert response.get_json() == {'success': False, 'error': 'Asset not found'}


def test_invalid_project_date_is_400(client):
    response = client.post('/api/projects', json={'name': 'Rollout', 'status': 'active', 'start_date': 'soon'})
    assert response.status_code == 400
    assert response.get_json()['error'] == 'Invalid date for start_date: soon'


def test_dangling_asset_reference_is_storage_error(client):
    response = client.post('/api/assets', json={'name': 'Ghost', 'type': 'TOOL', 'location_id': 'missing'})
    assert response.status_code == 500
    assert response.get_json()['error'].startswith('Storage error:')


def test_body_must_be_json_object(client):
    response = client.post('/api/locations', data='not json', content_type='text/plain')
    assert response.status_code == 400
    assert response.get_json()['error'] == 'Request body must be a JSON object'


def test_empty_asset_update_is_400(client):
    shelf = _create_location(client, 'Shelf A', 'SHELF')
    asset = _data(client.post('/api/assets', json={'name': 'Drill', 'type': 'TOOL', 'location_id': shelf['id']}))

    response = client.patch(f"/api/assets/{asset['id']}", json={})
    assert response.status_code == 400


def test_zero_timeout_is_504(client):
    response = client.get('/api/locations?timeout=0')
    assert response.status_code == 504
    assert response.get_json()['error'] == 'Operation timed out during location query'


def test_bad_timeout_is_400(client):
    response = client.get('/api/locations?timeout=soon')
    assert response.status_code == 400


def test_create_and_list_users(client):
    response = client.post('/api/users', json={'name': 'Admin User', 'role': 'ADMIN'})
    assert response.status_code == 201

    users = _data(client.get('/api/users'))
    assert [(user['name'], user['role']) for user in users] == [('Admin User', 'ADMIN')]


def test_user_without_name_is_400(client):
    response = client.post('/api/users', json={'email': 'nobody@example.com'})
    assert response.status_code == 400
    assert response.get_json() == {'success': False, 'error': 'name is required'}


def test_consumable_flow(client):
    shelf = _create_location(client, 'Shelf A', 'SHELF')

    response = client.post('/api/consumables', json={
        'name': 'SDI Cables', 'location_id': shelf['id'], 'quantity': 50, 'reorder_level': 10,
    })
    assert response.status_code == 201
    consumable = _data(response)

    response = client.delete(f"/api/locations/{shelf['id']}")
    assert response.status_code == 409
    assert response.get_json()['error'] == 'Cannot delete location that contains consumables'

    updated = _data(client.put(f"/api/consumables/{consumable['id']}/quantity", json={'quantity': 4}))
    assert updated['low_stock'] is True

    assert client.delete(f"/api/consumables/{consumable['id']}").status_code == 200
    assert _data(client.get('/api/consumables')) == []
    assert client.delete(f"/api/locations/{shelf['id']}").status_code == 200


def test_missing_quantity_is_400(client):
    shelf = _create_location(client, 'Shelf A', 'SHELF')
    consumable = _data(client.post('/api/consumables', json={'name': 'Tape', 'location_id': shelf['id']}))

    response = client.put(f"/api/consumables/{consumable['id']}/quantity", json={})
    assert response.status_code == 400
    assert response.get_json()['error'] == 'quantity must be a non-negative integer'

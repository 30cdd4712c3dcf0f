from config import Settings


def test_webhook_accepts_valid_secret(client):
    resp = client.post('/api/publish-webhook', json={'slug': 'first-light'},
                       headers={'X-Sitemap-Secret': 's3cret'})
    assert resp.status_code == 200
    assert resp.get_json() == {
        'ok': True,
        'slug': 'first-light',
        'url': 'https://storyvermo.com/stories/first-light',
        'sitemap': 'https://storyvermo.com/sitemap.xml',
    }


def test_webhook_rejects_wrong_secret(client):
    resp = client.post('/api/publish-webhook', json={'slug': 'x'}, headers={'X-Sitemap-Secret': 'nope'})
    assert resp.status_code == 401


def test_webhook_rejects_missing_secret_header(client):
    assert client.post('/api/publish-webhook', json={'slug': 'x'}).status_code == 401


def test_webhook_requires_slug(client):
    resp = client.post('/api/publish-webhook', data='not json', headers={'X-Sitemap-Secret': 's3cret'})
    assert resp.status_code == 400
    assert resp.get_json() == {'error': 'Missing slug'}


def test_webhook_without_configured_secret(make_client, deleted_paths_file):
    c = make_client(Settings(api_url='http://backend.test', deleted_paths_file=deleted_paths_file))
    resp = c.post('/api/publish-webhook', json={'slug': 'x'}, headers={'X-Sitemap-Secret': 'anything'})
    assert resp.status_code == 500
    assert resp.get_json()['details'] == 'Webhook secret not configured'

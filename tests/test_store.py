import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from nikki import store
from nikki.errors import StoreFailure
from nikki.timeline import home_timeline


def _broken_get(*args, **kwargs):
    raise OperationalError('SELECT', {}, Exception('database is gone'))


@pytest.fixture
def broken_store(app, monkeypatch):
    rollbacks = []
    monkeypatch.setattr(Session, 'get', _broken_get)
    monkeypatch.setattr(Session, 'rollback', lambda self: rollbacks.append(True))
    return rollbacks


def test_database_error_becomes_store_failure(broken_store):
    with pytest.raises(StoreFailure):
        store.user_by_id(1)

    assert broken_store == [True]


def test_store_failure_aborts_whole_timeline(make_user, add_entry, cache, settings, monkeypatch):
    alice = make_user('alice')
    add_entry(alice, 'hello')
    monkeypatch.setattr(Session, 'get', _broken_get)

    with pytest.raises(StoreFailure):
        home_timeline(alice.id, cache, settings)


def test_store_failure_is_a_500_over_http(make_user, login, monkeypatch):
    as_alice = login(make_user('alice'))
    monkeypatch.setattr(Session, 'get', _broken_get)

    response = as_alice.get('/')

    assert response.status_code == 500
    assert response.get_json()['error'] == 'データストアへのアクセスに失敗しました'

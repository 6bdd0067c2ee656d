from datetime import datetime, timedelta

import fakeredis
import pytest

from nikki import create_app
from nikki.cache import UserRecord, get_identity_cache
from nikki.config import TestConfig
from nikki.extensions import db
from nikki.models import User, Entry, Comment
from nikki.timeline import TimelineSettings
from nikki.utils import password_digest

BASE_TIME = datetime(2024, 6, 1, 12, 0, 0)


@pytest.fixture
def app():
    app = create_app(TestConfig, redis_client=fakeredis.FakeRedis(decode_responses=True))
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def cache(app):
    return get_identity_cache()


@pytest.fixture
def settings():
    return TimelineSettings()


@pytest.fixture
def make_user(app):
    def _make(account_name, cached=True):
        salt = f"salt-{account_name}"
        user = User(
            account_name=account_name,
            nick_name=account_name.capitalize(),
            email=f"{account_name}@example.com",
            passhash=password_digest(account_name, salt),
            salt=salt,
        )
        db.session.add(user)
        db.session.commit()
        # cached=True は「ログイン済み」の状態
        if cached:
            get_identity_cache().put(UserRecord.from_model(user))
        return user
    return _make


@pytest.fixture
def add_entry(app):
    def _add(user, title, content='', private=False, minutes=0):
        entry = Entry(
            user_id=user.id,
            private=private,
            body=f"{title}\n{content}",
            created_at=BASE_TIME + timedelta(minutes=minutes),
        )
        db.session.add(entry)
        db.session.commit()
        return entry
    return _add


@pytest.fixture
def add_comment(app):
    def _add(entry, user, text, minutes=0):
        comment = Comment(
            entry_id=entry.id,
            user_id=user.id,
            comment=text,
            created_at=BASE_TIME + timedelta(minutes=minutes),
        )
        db.session.add(comment)
        db.session.commit()
        return comment
    return _add


@pytest.fixture
def login(app):
    def _login(user):
        c = app.test_client()
        response = c.post('/login', data={'email': user.email, 'password': user.account_name})
        assert response.status_code == 302
        return c
    return _login

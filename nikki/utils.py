import hashlib
import secrets
from functools import wraps
from flask import current_app, g, session

from . import store
from .cache import UserRecord, get_identity_cache, resolve_user
from .errors import AuthenticationFailure, ContentNotFound
from .timeline import TimelineSettings


def password_digest(password, salt):
    """パスワードとSaltを組み合わせてハッシュ化する"""
    return hashlib.sha256(f"{password}{salt}".encode('utf-8')).hexdigest()


def new_salt():
    return secrets.token_hex(8)


def authenticate(email, password, cache):
    """認証に成功したらユーザーをキャッシュへ書き込んで返す"""
    user = store.user_by_email(email)
    if user is None or not secrets.compare_digest(user.passhash, password_digest(password, user.salt)):
        current_app.logger.warning('authentication failed for %s', email)
        raise AuthenticationFailure()

    record = UserRecord.from_model(user)
    cache.put(record)
    current_app.logger.info('user %s logged in', user.id)
    return record


def current_viewer(cache):
    """セッションのユーザーIDからログイン中のユーザーを引く"""
    user_id = session.get('user_id')
    if user_id is None:
        raise AuthenticationFailure()
    try:
        return resolve_user(cache, user_id, current_app.config['IDENTITY_CACHE_FALLBACK'])
    except ContentNotFound as exc:
        raise AuthenticationFailure() from exc


def login_required(f):
    """
    デコレータ: ログイン中のユーザーを g.viewer に載せる
    いなければ AuthenticationFailure（エラーハンドラが401を返す）
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        g.viewer = current_viewer(get_identity_cache())
        return f(*args, **kwargs)
    return decorated_function


def timeline_settings():
    return TimelineSettings.from_config(current_app.config)

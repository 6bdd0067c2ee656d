import os


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """基本設定クラス"""
    # セッションCookieの署名キー（本番では環境変数を推奨）
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-key-keep-it-secret-nikki')

    # データベース設定
    # Heroku等のPostgreSQL対応: postgres:// を postgresql:// に置換する処理
    _db_uri = os.environ.get('DATABASE_URL')
    if _db_uri and _db_uri.startswith("postgres://"):
        _db_uri = _db_uri.replace("postgres://", "postgresql://", 1)

    SQLALCHEMY_DATABASE_URI = _db_uri or 'sqlite:///nikki.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # DB接続切れ防止の設定
    SQLALCHEMY_ENGINE_OPTIONS = { "pool_pre_ping": True }

    # ユーザー情報キャッシュ（Redis）
    REDIS_URL = os.environ.get('REDIS_URL', 'redis://localhost:6379/0')

    # キャッシュに載っていないユーザーをDBから引き直すか
    # False にするとログインしていないユーザーは「存在しない」扱いになる
    IDENTITY_CACHE_FALLBACK = _env_flag('IDENTITY_CACHE_FALLBACK', True)

    # "non_friends": 友人以外の日記・コメントを流す（従来の挙動）
    # "friends": 友人の日記・コメントだけを流す
    FRIEND_FEED_MODE = os.environ.get('FRIEND_FEED_MODE', 'non_friends')

    # --- タイムラインの件数設定 ---
    RECENT_SCAN_WINDOW = int(os.environ.get('RECENT_SCAN_WINDOW', 1000))
    HOME_FEED_LIMIT = 10
    HOME_ENTRIES_LIMIT = 5
    COMMENTS_FOR_ME_LIMIT = 10
    HOME_FOOTPRINTS_LIMIT = 10
    PROFILE_ENTRIES_LIMIT = 5
    DIARY_ENTRIES_LIMIT = 20
    FOOTPRINTS_PAGE_LIMIT = 50

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class TestConfig(Config):
    """テスト用設定（インメモリSQLite、CSRF無効）"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    WTF_CSRF_ENABLED = False
    IDENTITY_CACHE_FALLBACK = True
    FRIEND_FEED_MODE = 'non_friends'
    RECENT_SCAN_WINDOW = 1000

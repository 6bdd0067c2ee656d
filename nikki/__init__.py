import redis
from flask import Flask
from .config import Config
from .extensions import db, csrf
from .cache import IdentityCache

def create_app(config_object=Config, redis_client=None):
    # 1. Flaskアプリのインスタンスを作成
    app = Flask(__name__)

    # 2. 設定ファイル（config.py）の内容を読み込む
    app.config.from_object(config_object)
    app.logger.setLevel(app.config['LOG_LEVEL'])

    # 3. 拡張機能（DBやCSRF）をアプリと紐付ける
    db.init_app(app)
    csrf.init_app(app)

    # ユーザーキャッシュ（テストでは fakeredis を渡す）
    if redis_client is None:
        redis_client = redis.Redis.from_url(app.config['REDIS_URL'], decode_responses=True)
    app.extensions['identity_cache'] = IdentityCache(redis_client)

    # 4. アプリケーションコンテキスト内での処理
    with app.app_context():
        # モデルをインポートしてSQLAlchemyに認識させる
        from . import models

        # テーブルが存在しなければ作成する
        db.create_all()

        # Blueprintの登録
        from .routes import system, main, post

        app.register_blueprint(system.bp)
        app.register_blueprint(main.bp)
        app.register_blueprint(post.bp)

    return app

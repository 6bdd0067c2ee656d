from flask_sqlalchemy import SQLAlchemy
from flask_wtf.csrf import CSRFProtect

# アプリ本体とは紐付けずに、空のインスタンスを作っておきます
# ユーザーキャッシュ（Redis）は create_app で app.extensions に登録します
db = SQLAlchemy()
csrf = CSRFProtect()

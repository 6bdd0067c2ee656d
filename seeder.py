import json
import random
import sys
from datetime import datetime, timedelta
from nikki import create_app
from nikki.extensions import db
from nikki.models import User, Entry, Relation
from nikki.utils import password_digest, new_salt

def seed_data(data):
    """
    開発用データを投入する。
    data = {"users": [{"account_name", "nick_name", "email", "password"}],
            "relations": [["alice", "bob"], ...],
            "entries": [{"account_name", "title", "content", "private"}]}
    """
    users = {}
    for row in data.get('users', []):
        salt = new_salt()
        user = User(
            account_name=row['account_name'],
            nick_name=row.get('nick_name', row['account_name']),
            email=row['email'],
            passhash=password_digest(row['password'], salt),
            salt=salt,
        )
        db.session.add(user)
        users[user.account_name] = user
    db.session.flush()

    # 友人関係は必ず両方向の2行で入れる
    for one, another in data.get('relations', []):
        db.session.add(Relation(one=users[one].id, another=users[another].id))
        db.session.add(Relation(one=users[another].id, another=users[one].id))

    for row in data.get('entries', []):
        # 日時の偽装ロジック: 過去1日〜7日のどこか
        days_ago = random.randint(1, 7)
        random_minutes = random.randint(0, 24 * 60)
        fake_created_at = datetime.now() - timedelta(days=days_ago, minutes=random_minutes)

        db.session.add(Entry(
            user_id=users[row['account_name']].id,
            private=bool(row.get('private', False)),
            body=f"{row.get('title', 'タイトルなし')}\n{row.get('content', '')}",
            created_at=fake_created_at,
        ))

    # 最後にまとめて保存
    db.session.commit()
    return len(users)

def main(path='seeds.json'):
    # jsonファイルを読み込む
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        print(f"エラー: {path} が見つかりません。")
        return

    app = create_app()
    with app.app_context():
        count = seed_data(data)
        print(f"完了: {count} 人のユーザーを登録しました。")

if __name__ == '__main__':
    main(*sys.argv[1:])

from datetime import datetime
from .extensions import db


def split_body(body):
    """本文を「1行目=タイトル」と「残り=内容」に分ける（最初の改行でのみ分割）"""
    title, _, content = (body or '').partition('\n')
    return title, content


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    # 作成後は変更しない
    account_name = db.Column(db.String(64), unique=True, nullable=False)
    nick_name = db.Column(db.String(32), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)

    # --- 認証情報（パスワード + Salt のハッシュ） ---
    passhash = db.Column(db.String(128), nullable=False)
    salt = db.Column(db.String(32), nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'account_name': self.account_name,
            'nick_name': self.nick_name,
            'email': self.email,
        }


class Profile(db.Model):
    __tablename__ = 'profiles'

    # ユーザーと1対1
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), primary_key=True)
    first_name = db.Column(db.String(64), nullable=False)
    last_name = db.Column(db.String(64), nullable=False)
    sex = db.Column(db.String(4), nullable=False)
    birthday = db.Column(db.Date, nullable=False)
    pref = db.Column(db.String(4), nullable=False)

    updated_at = db.Column(db.DateTime, default=datetime.now, onupdate=datetime.now)

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'sex': self.sex,
            'birthday': self.birthday.isoformat() if self.birthday else None,
            'pref': self.pref,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }


class Entry(db.Model):
    __tablename__ = 'entries'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    private = db.Column(db.Boolean, nullable=False, default=False)

    # 1行目がタイトル、2行目以降が内容
    body = db.Column(db.Text, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.now, index=True)

    @property
    def title(self):
        return split_body(self.body)[0]

    @property
    def content(self):
        return split_body(self.body)[1]

    def to_dict(self, with_content=True):
        data = {
            'id': self.id,
            'user_id': self.user_id,
            'private': bool(self.private),
            'title': self.title,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
        if with_content:
            data['content'] = self.content
        return data


class Comment(db.Model):
    __tablename__ = 'comments'

    id = db.Column(db.Integer, primary_key=True)
    entry_id = db.Column(db.Integer, db.ForeignKey('entries.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    comment = db.Column(db.Text, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.now, index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'entry_id': self.entry_id,
            'user_id': self.user_id,
            'comment': self.comment,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


class Relation(db.Model):
    __tablename__ = 'relations'

    # 友人関係は one→another / another→one の2行で表現する
    id = db.Column(db.Integer, primary_key=True)
    one = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    another = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.now)

    __table_args__ = (
        db.Index('ix_relations_one_another', 'one', 'another'),
    )


class Footprint(db.Model):
    __tablename__ = 'footprints'

    id = db.Column(db.Integer, primary_key=True)
    # 訪問されたユーザー
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    # 訪問したユーザー
    owner_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.now)

"""DB（正本）へのアクセスをまとめたモジュール。

ここではリトライしない。SQLAlchemy のエラーはロールバックしたうえで
StoreFailure として呼び出し元へ投げる。
"""
from datetime import datetime
from functools import wraps

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from .errors import StoreFailure
from .extensions import db
from .models import User, Profile, Entry, Comment, Relation, Footprint


def store_call(f):
    """デコレータ: DBエラーを StoreFailure に変換する"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.error('store failure in %s', f.__name__, exc_info=True)
            raise StoreFailure() from exc
    return decorated_function


def _newest_first(query, model):
    # 同時刻の行があっても並びが揺れないよう id でも並べる
    return query.order_by(model.created_at.desc(), model.id.desc())


# --- users / profiles ---

@store_call
def user_by_id(user_id):
    return db.session.get(User, user_id)


@store_call
def user_by_email(email):
    return User.query.filter_by(email=email).first()


@store_call
def user_by_account(account_name):
    return User.query.filter_by(account_name=account_name).first()


@store_call
def profile_for(user_id):
    return db.session.get(Profile, user_id)


@store_call
def upsert_profile(user_id, first_name, last_name, sex, birthday, pref):
    profile = db.session.get(Profile, user_id)
    if profile is None:
        profile = Profile(user_id=user_id)
        db.session.add(profile)

    profile.first_name = first_name
    profile.last_name = last_name
    profile.sex = sex
    profile.birthday = birthday
    profile.pref = pref
    profile.updated_at = datetime.now()

    db.session.commit()
    return profile


# --- entries ---

@store_call
def entry_by_id(entry_id):
    return db.session.get(Entry, entry_id)


@store_call
def entries_by_owner(owner_id, limit, include_private=True):
    query = Entry.query.filter_by(user_id=owner_id)
    if not include_private:
        query = query.filter_by(private=False)
    return _newest_first(query, Entry).limit(limit).all()


@store_call
def recent_entries(limit):
    """全ユーザーの新しい日記を limit 件まで（全件は読まない）"""
    return _newest_first(Entry.query, Entry).limit(limit).all()


@store_call
def insert_entry(user_id, private, body):
    entry = Entry(user_id=user_id, private=bool(private), body=body)
    db.session.add(entry)
    db.session.commit()
    return entry


# --- comments ---

@store_call
def comments_for_owner(owner_id, limit):
    """owner_id の日記に付いたコメント（新しい順）"""
    query = Comment.query.join(Entry, Comment.entry_id == Entry.id).filter(Entry.user_id == owner_id)
    return _newest_first(query, Comment).limit(limit).all()


@store_call
def recent_comments_with_entries(limit):
    """新しいコメント limit 件を親の日記と一緒に返す: [(Comment, Entry), ...]"""
    query = db.session.query(Comment, Entry).join(Entry, Comment.entry_id == Entry.id)
    return [tuple(row) for row in _newest_first(query, Comment).limit(limit).all()]


@store_call
def comments_for_entry(entry_id):
    return (
        Comment.query.filter_by(entry_id=entry_id)
        .order_by(Comment.created_at, Comment.id)
        .all()
    )


@store_call
def insert_comment(entry_id, user_id, comment):
    row = Comment(entry_id=entry_id, user_id=user_id, comment=comment)
    db.session.add(row)
    db.session.commit()
    return row


# --- relations ---

@store_call
def relation_exists(one, another):
    row = db.session.query(Relation.id).filter_by(one=one, another=another).first()
    return row is not None


@store_call
def friend_ids(user_id):
    return [another for (another,) in db.session.query(Relation.another).filter_by(one=user_id)]


@store_call
def relations_of(user_id):
    return _newest_first(Relation.query.filter_by(one=user_id), Relation).all()


@store_call
def insert_relation_pair(one, another):
    # 2行は同じトランザクションで入れる
    now = datetime.now()
    db.session.add_all([
        Relation(one=one, another=another, created_at=now),
        Relation(one=another, another=one, created_at=now),
    ])
    db.session.commit()


# --- footprints ---

@store_call
def insert_footprint(user_id, owner_id, created_at=None):
    row = Footprint(user_id=user_id, owner_id=owner_id, created_at=created_at or datetime.now())
    db.session.add(row)
    db.session.commit()
    return row


@store_call
def grouped_footprints(user_id, limit):
    """(user_id, owner_id, 日付) ごとに最新の訪問時刻をまとめて新しい順に返す"""
    day = func.date(Footprint.created_at, type_=db.Date)
    updated = func.max(Footprint.created_at)
    return (
        db.session.query(
            Footprint.user_id,
            Footprint.owner_id,
            day.label('date'),
            updated.label('updated'),
        )
        .filter(Footprint.user_id == user_id)
        .group_by(Footprint.user_id, Footprint.owner_id, day)
        .order_by(updated.desc(), Footprint.owner_id)
        .limit(limit)
        .all()
    )

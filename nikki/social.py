"""友人関係と閲覧権限の判定"""
from flask import current_app

from . import store
from .cache import UserResolver
from .errors import ContentNotFound


def is_friend(a, b):
    # a から見た向き（one=a, another=b）だけを確認する
    return store.relation_exists(a, b)


def permitted(subject_id, viewer_id):
    """本人か友人なら True。非公開日記・コメント投稿の判定はすべてこれを使う"""
    return subject_id == viewer_id or is_friend(viewer_id, subject_id)


def add_friend(a, b):
    """友人登録（既に友人なら何もしない）。新しく登録したら True"""
    if a == b:
        raise ValueError("users cannot befriend themselves")
    if is_friend(a, b):
        return False
    store.insert_relation_pair(a, b)
    current_app.logger.info('relation added: %s <-> %s', a, b)
    return True


def add_friend_by_account(viewer_id, account_name):
    user = store.user_by_account(account_name)
    if user is None:
        raise ContentNotFound()
    add_friend(viewer_id, user.id)
    return user


def friend_ids(user_id):
    return set(store.friend_ids(user_id))


def friend_count(user_id):
    return len(friend_ids(user_id))


def friends_of(user_id, cache, fallback=True):
    """友人一覧（新しく友人になった順、同じ相手は1件にまとめる）"""
    resolve = UserResolver(cache, fallback)
    friends = []
    seen = set()
    for relation in store.relations_of(user_id):
        if relation.another in seen:
            continue
        seen.add(relation.another)
        friends.append({
            'user': resolve(relation.another).to_dict(),
            'created_at': relation.created_at.isoformat() if relation.created_at else None,
        })
    return friends

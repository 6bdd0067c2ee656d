"""ユーザー情報のキャッシュ（Redis）。

DB の users テーブルを正本とし、ログイン成功時にだけ書き込む派生コピー。
期限切れも追い出しもない。キャッシュ自身は DB を読みに行かない。
"""
from dataclasses import dataclass
from typing import Dict, Optional

import redis
from flask import current_app

from . import store
from .errors import ContentNotFound, StoreFailure


@dataclass(frozen=True)
class UserRecord:
    id: int
    account_name: str
    nick_name: str
    email: str

    @classmethod
    def from_model(cls, user) -> "UserRecord":
        return cls(
            id=user.id,
            account_name=user.account_name,
            nick_name=user.nick_name,
            email=user.email,
        )

    @classmethod
    def from_mapping(cls, data: Dict[str, str]) -> "UserRecord":
        return cls(
            id=int(data['id']),
            account_name=data['account_name'],
            nick_name=data['nick_name'],
            email=data['email'],
        )

    def to_mapping(self) -> Dict[str, str]:
        return {
            'id': str(self.id),
            'account_name': self.account_name,
            'nick_name': self.nick_name,
            'email': self.email,
        }

    def to_dict(self):
        """表示用（メールアドレスは含めない）"""
        return {'id': self.id, 'account_name': self.account_name, 'nick_name': self.nick_name}


class IdentityCache:
    """user:{id} のハッシュにユーザーの全フィールドを持つ"""

    def __init__(self, client: redis.Redis):
        self._redis = client

    @staticmethod
    def build_key(user_id) -> str:
        return f"user:{user_id}"

    def put(self, user: UserRecord) -> None:
        key = self.build_key(user.id)
        try:
            # レコード丸ごとの上書き（同じidへの同時書き込みは後勝ち）
            with self._redis.pipeline(transaction=True) as pipe:
                pipe.delete(key)
                pipe.hset(key, mapping=user.to_mapping())
                pipe.execute()
        except redis.RedisError as exc:
            current_app.logger.error('identity cache put failed for %s', key, exc_info=True)
            raise StoreFailure() from exc

    def get(self, user_id) -> Optional[UserRecord]:
        key = self.build_key(user_id)
        try:
            data = self._redis.hgetall(key)
        except redis.RedisError as exc:
            current_app.logger.error('identity cache get failed for %s', key, exc_info=True)
            raise StoreFailure() from exc
        if not data:
            return None
        return UserRecord.from_mapping(data)


def get_identity_cache() -> IdentityCache:
    return current_app.extensions['identity_cache']


def resolve_user(cache: IdentityCache, user_id, fallback: bool = True) -> UserRecord:
    """キャッシュからユーザーを引く。

    fallback=True ならキャッシュに無いときDBを読む（キャッシュへは書かない）。
    どちらにも無ければ ContentNotFound。
    """
    record = cache.get(user_id)
    if record is not None:
        return record
    if fallback:
        user = store.user_by_id(user_id)
        if user is not None:
            current_app.logger.debug('identity cache miss for user %s, read from store', user_id)
            return UserRecord.from_model(user)
    raise ContentNotFound()


class UserResolver:
    """1リクエストの中で同じユーザーを何度もキャッシュへ問い合わせないためのメモ"""

    def __init__(self, cache: IdentityCache, fallback: bool = True):
        self.cache = cache
        self.fallback = fallback
        self._seen: Dict[int, UserRecord] = {}

    def __call__(self, user_id) -> UserRecord:
        if user_id not in self._seen:
            self._seen[user_id] = resolve_user(self.cache, user_id, self.fallback)
        return self._seen[user_id]

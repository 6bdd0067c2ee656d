"""トップページ（ホームタイムライン）の組み立て。

一番重い処理なので、全体を舐めるクエリは必ず scan_window 件で打ち切る。
完全さより応答時間を優先している。
"""
from dataclasses import dataclass

from . import footprints, social, store
from .cache import UserResolver

FEED_MODES = ('non_friends', 'friends')


@dataclass(frozen=True)
class TimelineSettings:
    scan_window: int = 1000
    feed_limit: int = 10
    entries_limit: int = 5
    comments_for_me_limit: int = 10
    footprints_limit: int = 10
    profile_entries_limit: int = 5
    diary_entries_limit: int = 20
    footprints_page_limit: int = 50
    friend_feed_mode: str = 'non_friends'
    cache_fallback: bool = True

    def __post_init__(self):
        if self.friend_feed_mode not in FEED_MODES:
            raise ValueError(f"unknown FRIEND_FEED_MODE: {self.friend_feed_mode!r}")
        if self.scan_window < 1:
            raise ValueError("RECENT_SCAN_WINDOW must be positive")

    @classmethod
    def from_config(cls, config):
        return cls(
            scan_window=int(config['RECENT_SCAN_WINDOW']),
            feed_limit=config['HOME_FEED_LIMIT'],
            entries_limit=config['HOME_ENTRIES_LIMIT'],
            comments_for_me_limit=config['COMMENTS_FOR_ME_LIMIT'],
            footprints_limit=config['HOME_FOOTPRINTS_LIMIT'],
            profile_entries_limit=config['PROFILE_ENTRIES_LIMIT'],
            diary_entries_limit=config['DIARY_ENTRIES_LIMIT'],
            footprints_page_limit=config['FOOTPRINTS_PAGE_LIMIT'],
            friend_feed_mode=config['FRIEND_FEED_MODE'],
            cache_fallback=bool(config['IDENTITY_CACHE_FALLBACK']),
        )


# --- 共通部品（プロフィール・日記一覧でも使う） ---

def entry_view(entry, with_content=True):
    return entry.to_dict(with_content=with_content)


def visible_entries(owner_id, viewer_id, limit):
    """viewer が読める owner の日記を新しい順に limit 件"""
    include_private = social.permitted(owner_id, viewer_id)
    rows = store.entries_by_owner(owner_id, limit, include_private=include_private)
    return [entry_view(entry) for entry in rows]


def comment_view(comment, resolve):
    data = comment.to_dict()
    data['user'] = resolve(comment.user_id).to_dict()
    return data


def _feed_accepts(author_id, friends, mode):
    if mode == 'friends':
        return author_id in friends
    return author_id not in friends


def _can_read(entry, viewer_id, friends):
    # permitted() と同じ判定。友人一覧は読み込み済みなのでクエリは発行しない
    if not entry.private:
        return True
    return entry.user_id == viewer_id or entry.user_id in friends


def entries_feed(viewer_id, friends, settings, resolve):
    """直近 scan_window 件の日記から条件に合うものを feed_limit 件まで（タイトルのみ）"""
    feed = []
    for entry in store.recent_entries(settings.scan_window):
        if not _feed_accepts(entry.user_id, friends, settings.friend_feed_mode):
            continue
        if not _can_read(entry, viewer_id, friends):
            continue
        data = entry_view(entry, with_content=False)
        data['user'] = resolve(entry.user_id).to_dict()
        feed.append(data)
        if len(feed) >= settings.feed_limit:
            break
    return feed


def comments_feed(viewer_id, friends, settings, resolve):
    """直近 scan_window 件のコメントから、読める日記へのものを feed_limit 件まで"""
    feed = []
    # 親の日記はJOINでまとめて取得する
    for comment, entry in store.recent_comments_with_entries(settings.scan_window):
        if not _feed_accepts(comment.user_id, friends, settings.friend_feed_mode):
            continue
        if not _can_read(entry, viewer_id, friends):
            continue
        data = comment_view(comment, resolve)
        data['entry'] = {
            'id': entry.id,
            'title': entry.title,
            'user': resolve(entry.user_id).to_dict(),
        }
        feed.append(data)
        if len(feed) >= settings.feed_limit:
            break
    return feed


def home_timeline(viewer_id, cache, settings):
    """トップページに出すものを全部まとめて返す。途中で失敗したら何も返さない"""
    resolve = UserResolver(cache, settings.cache_fallback)
    viewer = resolve(viewer_id)

    profile = store.profile_for(viewer_id)
    entries = [entry_view(e) for e in store.entries_by_owner(viewer_id, settings.entries_limit)]
    comments_for_me = [
        comment_view(c, resolve)
        for c in store.comments_for_owner(viewer_id, settings.comments_for_me_limit)
    ]

    friends = social.friend_ids(viewer_id)
    entries_of_friends = entries_feed(viewer_id, friends, settings, resolve)
    comments_of_friends = comments_feed(viewer_id, friends, settings, resolve)

    visits = []
    for visit in footprints.recent_visits(viewer_id, settings.footprints_limit):
        data = visit.to_dict()
        data['owner'] = resolve(visit.owner_id).to_dict()
        visits.append(data)

    return {
        'user': viewer.to_dict(),
        'profile': profile.to_dict() if profile else None,
        'entries': entries,
        'comments_for_me': comments_for_me,
        'entries_of_friends': entries_of_friends,
        'comments_of_friends': comments_of_friends,
        'friends': len(friends),
        'footprints': visits,
    }

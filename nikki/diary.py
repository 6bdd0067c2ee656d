"""日記・コメントの閲覧と投稿（プロフィール画面の日記もここ）"""
from flask import current_app

from . import footprints, social, store
from .cache import UserRecord, UserResolver, resolve_user
from .errors import ContentNotFound, PermissionDenied
from .timeline import entry_view, visible_entries, comment_view

DEFAULT_TITLE = 'タイトルなし'


def _owner_by_account(account_name):
    owner = store.user_by_account(account_name)
    if owner is None:
        raise ContentNotFound()
    return owner


def profile_view(viewer_id, account_name, settings):
    owner = _owner_by_account(account_name)
    profile = store.profile_for(owner.id)
    entries = visible_entries(owner.id, viewer_id, settings.profile_entries_limit)
    footprints.record_visit(owner.id, viewer_id)
    return {
        'owner': UserRecord.from_model(owner).to_dict(),
        'profile': profile.to_dict() if profile else {},
        'entries': entries,
        'private': social.permitted(owner.id, viewer_id),
    }


def diary_entries(viewer_id, account_name, settings):
    owner = _owner_by_account(account_name)
    entries = visible_entries(owner.id, viewer_id, settings.diary_entries_limit)
    footprints.record_visit(owner.id, viewer_id)
    return {
        'owner': UserRecord.from_model(owner).to_dict(),
        'entries': entries,
        'myself': owner.id == viewer_id,
    }


def entry_detail(viewer_id, entry_id, cache, settings):
    entry = store.entry_by_id(entry_id)
    if entry is None:
        raise ContentNotFound()
    owner = resolve_user(cache, entry.user_id, settings.cache_fallback)
    if entry.private and not social.permitted(owner.id, viewer_id):
        raise PermissionDenied()

    resolve = UserResolver(cache, settings.cache_fallback)
    comments = [comment_view(c, resolve) for c in store.comments_for_entry(entry.id)]
    footprints.record_visit(owner.id, viewer_id)
    return {
        'owner': owner.to_dict(),
        'entry': entry_view(entry),
        'comments': comments,
    }


def post_entry(viewer_id, title=None, content=None, private=False):
    title = DEFAULT_TITLE if title is None else title
    content = '' if content is None else content
    entry = store.insert_entry(viewer_id, private, f"{title}\n{content}")
    current_app.logger.info('entry %s posted by user %s (private=%s)', entry.id, viewer_id, bool(private))
    return entry


def post_comment(viewer_id, entry_id, comment):
    entry = store.entry_by_id(entry_id)
    if entry is None:
        raise ContentNotFound()
    # 投稿時点の権限だけを見る（後から友人でなくなっても消さない）
    if entry.private and not social.permitted(entry.user_id, viewer_id):
        raise PermissionDenied()
    return store.insert_comment(entry.id, viewer_id, comment)

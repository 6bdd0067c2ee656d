from datetime import timedelta

import pytest

from nikki import footprints, social
from nikki.errors import ContentNotFound
from nikki.extensions import db
from nikki.models import Entry, split_body
from nikki.timeline import TimelineSettings, home_timeline

from conftest import BASE_TIME


@pytest.mark.parametrize('body, expected', [
    ("Hello\nWorld\nmore", ("Hello", "World\nmore")),
    ("Only a title", ("Only a title", "")),
    ("Title\n", ("Title", "")),
])
def test_split_body_on_first_newline(body, expected):
    assert split_body(body) == expected


def test_own_entries_are_most_recent_five(make_user, add_entry, cache, settings):
    alice = make_user('alice')
    for i in range(8):
        add_entry(alice, f'title {i}', f'content {i}', minutes=i)

    view = home_timeline(alice.id, cache, settings)

    assert [e['title'] for e in view['entries']] == ['title 7', 'title 6', 'title 5', 'title 4', 'title 3']
    assert view['entries'][0]['content'] == 'content 7'


def test_comments_for_me_are_capped_at_ten(make_user, add_entry, add_comment, cache, settings):
    alice, bob = make_user('alice'), make_user('bob')
    entry = add_entry(alice, 'mine')
    for i in range(15):
        add_comment(entry, bob, f'comment {i}', minutes=i)

    view = home_timeline(alice.id, cache, settings)

    assert len(view['comments_for_me']) == 10
    assert view['comments_for_me'][0]['comment'] == 'comment 14'
    assert view['comments_for_me'][0]['user']['account_name'] == 'bob'


def test_entries_feed_never_scans_beyond_window(make_user, cache, settings):
    alice, bob, carol = make_user('alice'), make_user('bob'), make_user('carol')
    social.add_friend(alice.id, bob.id)

    qualifying = {600, 700, 800}
    rows = []
    for i in range(1500):
        # 古い500件は carol（条件には合うが窓の外）
        author = carol if i < 500 or i in qualifying else bob
        rows.append(Entry(user_id=author.id, body=f'entry {i}\n', created_at=BASE_TIME + timedelta(seconds=i)))
    db.session.add_all(rows)
    db.session.commit()

    view = home_timeline(alice.id, cache, settings)

    assert [e['title'] for e in view['entries_of_friends']] == ['entry 800', 'entry 700', 'entry 600']
    assert 'content' not in view['entries_of_friends'][0]


def test_entries_feed_is_capped_and_newest_first(make_user, add_entry, cache, settings):
    alice, carol = make_user('alice'), make_user('carol')
    for i in range(30):
        add_entry(carol, f'carol {i}', minutes=i)

    feed = home_timeline(alice.id, cache, settings)['entries_of_friends']

    assert len(feed) == 10
    assert feed[0]['title'] == 'carol 29'
    assert feed[0]['user']['nick_name'] == 'Carol'


def test_scan_window_is_configurable(make_user, add_entry, cache):
    alice, bob, carol = make_user('alice'), make_user('bob'), make_user('carol')
    social.add_friend(alice.id, bob.id)
    add_entry(carol, 'old stranger entry', minutes=0)
    for i in range(5):
        add_entry(bob, f'bob {i}', minutes=10 + i)

    feed = home_timeline(alice.id, cache, TimelineSettings(scan_window=5))['entries_of_friends']

    assert feed == []


def test_friends_mode_keeps_only_friends_content(make_user, add_entry, cache):
    alice, bob, carol = make_user('alice'), make_user('bob'), make_user('carol')
    social.add_friend(alice.id, bob.id)
    add_entry(bob, 'from bob', minutes=1)
    add_entry(carol, 'from carol', minutes=2)

    feed = home_timeline(alice.id, cache, TimelineSettings(friend_feed_mode='friends'))['entries_of_friends']

    assert [e['title'] for e in feed] == ['from bob']


def test_entries_feed_hides_private_entries_of_strangers(make_user, add_entry, cache, settings):
    alice, carol = make_user('alice'), make_user('carol')
    add_entry(carol, 'secret', private=True, minutes=1)
    add_entry(carol, 'public', minutes=2)
    add_entry(alice, 'my secret', private=True, minutes=3)

    feed = home_timeline(alice.id, cache, settings)['entries_of_friends']

    assert [e['title'] for e in feed] == ['my secret', 'public']


def test_comments_feed_checks_parent_entry_permission(make_user, add_entry, add_comment, cache, settings):
    alice, bob, carol, dave = (make_user(name) for name in ('alice', 'bob', 'carol', 'dave'))
    social.add_friend(alice.id, bob.id)
    private_entry = add_entry(dave, 'dave secret', private=True)
    public_entry = add_entry(dave, 'dave public')
    add_comment(private_entry, carol, 'hidden', minutes=1)
    add_comment(public_entry, carol, 'visible', minutes=2)
    add_comment(public_entry, bob, 'from friend', minutes=3)

    feed = home_timeline(alice.id, cache, settings)['comments_of_friends']

    assert [c['comment'] for c in feed] == ['visible']
    assert feed[0]['entry']['title'] == 'dave public'
    assert feed[0]['entry']['user']['account_name'] == 'dave'


def test_comments_feed_is_capped(make_user, add_entry, add_comment, cache, settings):
    alice, carol = make_user('alice'), make_user('carol')
    entry = add_entry(carol, 'busy')
    for i in range(20):
        add_comment(entry, carol, f'c{i}', minutes=i)

    feed = home_timeline(alice.id, cache, settings)['comments_of_friends']

    assert len(feed) == 10
    assert feed[0]['comment'] == 'c19'


def test_home_includes_friend_count_and_footprints(make_user, cache, settings):
    alice, bob, carol = make_user('alice'), make_user('bob'), make_user('carol')
    social.add_friend(alice.id, bob.id)
    social.add_friend(alice.id, carol.id)
    footprints.record_visit(alice.id, bob.id)

    view = home_timeline(alice.id, cache, settings)

    assert view['user']['account_name'] == 'alice'
    assert view['profile'] is None
    assert view['friends'] == 2
    assert len(view['footprints']) == 1
    assert view['footprints'][0]['owner']['account_name'] == 'bob'


def test_cold_cache_without_fallback_aborts_aggregation(make_user, add_entry, cache):
    alice = make_user('alice')
    stranger = make_user('stranger', cached=False)
    add_entry(stranger, 'hello')

    with pytest.raises(ContentNotFound):
        home_timeline(alice.id, cache, TimelineSettings(cache_fallback=False))


def test_unknown_feed_mode_is_rejected():
    with pytest.raises(ValueError):
        TimelineSettings(friend_feed_mode='everyone')

from flask import Blueprint, request, redirect, url_for, jsonify, g, abort
from .. import footprints, social
from ..cache import get_identity_cache
from ..diary import profile_view
from ..profiles import update_profile
from ..timeline import home_timeline
from ..utils import login_required, timeline_settings

# 'main' という名前のBlueprintを作成
bp = Blueprint('main', __name__)

@bp.route('/')
@login_required
def index():
    view = home_timeline(g.viewer.id, get_identity_cache(), timeline_settings())
    return jsonify(view)

@bp.route('/profile/<account_name>')
@login_required
def profile(account_name):
    return jsonify(profile_view(g.viewer.id, account_name, timeline_settings()))

@bp.route('/profile/<account_name>', methods=['POST'])
@login_required
def edit_profile(account_name):
    fields = {key: request.form.get(key) for key in ('first_name', 'last_name', 'sex', 'birthday', 'pref')}
    missing = [key for key, value in fields.items() if value is None]
    if missing:
        abort(400, f"missing fields: {', '.join(missing)}")

    try:
        update_profile(g.viewer, account_name, **fields)
    except ValueError as e:
        abort(400, str(e))
    return redirect(url_for('main.profile', account_name=account_name))

@bp.route('/footprints')
@login_required
def footprints_page():
    settings = timeline_settings()
    visits = footprints.recent_visits(g.viewer.id, settings.footprints_page_limit)
    return jsonify({'footprints': [visit.to_dict() for visit in visits]})

@bp.route('/friends')
@login_required
def friends():
    settings = timeline_settings()
    return jsonify({'friends': social.friends_of(g.viewer.id, get_identity_cache(), settings.cache_fallback)})

@bp.route('/friends/<account_name>', methods=['POST'])
@login_required
def add_friend(account_name):
    try:
        social.add_friend_by_account(g.viewer.id, account_name)
    except ValueError as e:
        abort(400, str(e))
    return redirect(url_for('main.friends'))

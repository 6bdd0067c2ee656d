from flask import Blueprint, request, redirect, url_for, jsonify, g
from ..cache import get_identity_cache
from ..diary import diary_entries, entry_detail, post_entry, post_comment
from ..utils import login_required, timeline_settings

# 'post' という名前のBlueprintを作成
bp = Blueprint('post', __name__, url_prefix='/diary')

@bp.route('/entries/<account_name>')
@login_required
def entries(account_name):
    return jsonify(diary_entries(g.viewer.id, account_name, timeline_settings()))

@bp.route('/entry/<int:entry_id>')
@login_required
def entry(entry_id):
    return jsonify(entry_detail(g.viewer.id, entry_id, get_identity_cache(), timeline_settings()))

@bp.route('/entry', methods=['POST'])
@login_required
def write():
    # チェックボックスなので、送られてくれば非公開
    private = True if request.form.get('private') else False
    post_entry(
        g.viewer.id,
        title=request.form.get('title'),
        content=request.form.get('content'),
        private=private,
    )
    return redirect(url_for('post.entries', account_name=g.viewer.account_name))

@bp.route('/comment/<int:entry_id>', methods=['POST'])
@login_required
def comment(entry_id):
    post_comment(g.viewer.id, entry_id, request.form.get('comment', ''))
    return redirect(url_for('post.entry', entry_id=entry_id))

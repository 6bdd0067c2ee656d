from flask import Blueprint, request, session, redirect, url_for, jsonify, abort, current_app
from flask_wtf.csrf import generate_csrf
from ..cache import get_identity_cache
from ..errors import NikkiError, AuthenticationFailure
from ..profiles import PREFECTURES
from ..utils import authenticate

bp = Blueprint('system', __name__)

@bp.route('/login')
def login_form():
    # フォーム送信に必要なCSRFトークンもここで渡す
    return jsonify({'message': '高負荷に耐えられるSNSコミュニティサイトへようこそ!', 'csrf_token': generate_csrf()})

@bp.route('/login', methods=['POST'])
def login():
    email = request.form.get('email')
    password = request.form.get('password')
    if not email or password is None:
        abort(400, 'email と password が必要です')

    user = authenticate(email, password, get_identity_cache())
    session['user_id'] = user.id
    return redirect(url_for('main.index'))

@bp.route('/logout')
def logout():
    session.pop('user_id', None)
    return jsonify({'message': 'logged out'})

@bp.route('/prefectures')
def prefectures():
    return jsonify({'prefectures': PREFECTURES})

@bp.app_errorhandler(NikkiError)
def handle_nikki_error(e):
    # 認証に失敗したらセッションのユーザーも忘れる
    if isinstance(e, AuthenticationFailure):
        session.pop('user_id', None)
    return jsonify({'error': e.message}), e.status_code

@bp.app_errorhandler(400)
def bad_request(e):
    return jsonify({'error': e.description}), 400

@bp.app_errorhandler(404)
def page_not_found(e):
    return jsonify({'error': '要求されたコンテンツは存在しません'}), 404

@bp.app_errorhandler(405)
def method_not_allowed(e):
    current_app.logger.debug('method not allowed: %s %s', request.method, request.path)
    return jsonify({'error': 'method not allowed'}), 405

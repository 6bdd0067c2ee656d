from datetime import datetime

from flask import current_app

from . import store
from .errors import PermissionDenied

PREFECTURES = [
    '未入力',
    '北海道', '青森県', '岩手県', '宮城県', '秋田県', '山形県', '福島県', '茨城県', '栃木県', '群馬県', '埼玉県', '千葉県', '東京都', '神奈川県', '新潟県', '富山県',
    '石川県', '福井県', '山梨県', '長野県', '岐阜県', '静岡県', '愛知県', '三重県', '滋賀県', '京都府', '大阪府', '兵庫県', '奈良県', '和歌山県', '鳥取県', '島根県',
    '岡山県', '広島県', '山口県', '徳島県', '香川県', '愛媛県', '高知県', '福岡県', '佐賀県', '長崎県', '熊本県', '大分県', '宮崎県', '鹿児島県', '沖縄県',
]


def parse_birthday(value):
    """'YYYY-MM-DD' を date に変換する。不正なら ValueError"""
    return datetime.strptime(value, '%Y-%m-%d').date()


def update_profile(viewer, account_name, first_name, last_name, sex, birthday, pref):
    """本人のプロフィールだけ登録・更新できる（無ければ作る）"""
    if account_name != viewer.account_name:
        raise PermissionDenied()
    if pref not in PREFECTURES:
        raise ValueError(f"unknown prefecture: {pref}")
    if isinstance(birthday, str):
        birthday = parse_birthday(birthday)

    profile = store.upsert_profile(viewer.id, first_name, last_name, sex, birthday, pref)
    current_app.logger.info('profile updated for user %s', viewer.id)
    return profile

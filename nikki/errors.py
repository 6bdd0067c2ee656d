"""リクエスト単位で処理を打ち切るエラー群。

どのエラーもその場でリトライや縮退はせず、そのままエラーハンドラまで伝播させる。
"""


class NikkiError(Exception):
    status_code = 500
    message = 'サーバーエラーが発生しました'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class AuthenticationFailure(NikkiError):
    """認証情報が不正、またはセッションにユーザーがいない"""
    status_code = 401
    message = 'ログインに失敗しました'


class PermissionDenied(NikkiError):
    """非公開の資源に友人以外がアクセスした"""
    status_code = 403
    message = '友人のみしかアクセスできません'


class ContentNotFound(NikkiError):
    """ユーザー・日記が存在しない（キャッシュ未登録も含む）"""
    status_code = 404
    message = '要求されたコンテンツは存在しません'


class StoreFailure(NikkiError):
    """DB・キャッシュへのアクセス自体が失敗した"""
    status_code = 500
    message = 'データストアへのアクセスに失敗しました'

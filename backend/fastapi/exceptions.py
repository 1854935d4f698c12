NOT_FOUND_MESSAGE = "山岳情報が見つかりませんでした。"
GENERIC_ERROR_MESSAGE = "エラーが発生しました。"


class QueryValidationError(Exception):
    """検索パラメータの検証エラー（全てのエラーメッセージを保持する）"""

    def __init__(self, messages: list[str]):
        super().__init__("; ".join(messages))
        self.messages = list(messages)


class MountainNotFoundError(Exception):
    """指定されたIDの山岳が存在しない"""

    def __init__(self, mountain_id: int):
        super().__init__(f"Mountain with id {mountain_id} not found")
        self.mountain_id = mountain_id


class StoreError(Exception):
    """ストアへのアクセスに失敗"""

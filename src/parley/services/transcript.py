"""会話トランスクリプトの記録と表示テキストの抽出。"""

import logging
from typing import Any

from parley.models.voice import TranscriptEntry

logger = logging.getLogger(__name__)

PROCESSING_PLACEHOLDER = "Processing voice message..."

_TEXT_FIELDS = ("transcript", "text")


def _field(obj: Any, name: str) -> Any:
    """辞書キーまたは属性から値を取り出す。"""
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _text_of(obj: Any) -> str | None:
    for name in _TEXT_FIELDS:
        value = _field(obj, name)
        if isinstance(value, str) and value:
            return value
    return None


def extract_text(content: Any) -> str:
    """メッセージのcontentから表示用テキストを取り出す。

    文字列はそのまま返す。配列の場合は先頭から順にtranscriptまたはtextを持つ
    要素を探し、オブジェクトの場合はtranscript、textの順に参照する。
    認識できない形状はプレースホルダーになり、例外は送出しない。
    """
    if isinstance(content, str):
        return content
    try:
        if isinstance(content, list | tuple):
            for item in content:
                text = _text_of(item)
                if text is not None:
                    return text
        elif content is not None:
            text = _text_of(content)
            if text is not None:
                return text
    except Exception:
        logger.exception("Failed to extract message content")
    return PROCESSING_PLACEHOLDER


def parse_turn(item: Any) -> TranscriptEntry | None:
    """外部セッションのイベントをトランスクリプトの1ターンに変換する。

    type属性を持ち、それが"message"以外のイベント（ツール呼び出し等）は無視する。
    """
    item_type = _field(item, "type")
    if item_type is not None and item_type != "message":
        return None
    role = _field(item, "role")
    if role not in ("user", "assistant"):
        logger.debug("Ignoring transcript item with role %r", role)
        return None
    return TranscriptEntry(role=role, text=extract_text(_field(item, "content")))


class TranscriptLog:
    """到着順を保持する追記専用の会話ログ。"""

    def __init__(self) -> None:
        self._entries: list[TranscriptEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> list[TranscriptEntry]:
        return list(self._entries)

    def append(self, entry: TranscriptEntry) -> None:
        self._entries.append(entry)

    def reset(self) -> None:
        self._entries.clear()

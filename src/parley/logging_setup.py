"""コンソールログの初期化。"""

import logging


def setup_console_logging(level: int | str = logging.INFO) -> None:
    """ルートロガーにコンソールハンドラーを設定する。起動時に一度だけ呼び出す。"""
    root = logging.getLogger()
    if root.handlers:
        # 設定済みの場合はレベルのみ更新する
        root.setLevel(level)
        return

    root.setLevel(level)
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root.addHandler(handler)

"""Parleyサーバーの設定管理。"""

from pathlib import Path

from pydantic_settings import BaseSettings

from parley.services.voice import DEFAULT_READY_MESSAGE

_PACKAGE_ROOT = Path(__file__).parent
_REPO_ROOT = _PACKAGE_ROOT.parent.parent


class ServerConfig(BaseSettings):
    """サーバー設定。環境変数から読み込み可能。"""

    model_config = {"env_prefix": "PARLEY_"}

    config_dir: Path = _REPO_ROOT / "config"
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # Trueの場合、カタログ外の質問IDや定義外の選択肢を回答ストアで拒否する
    strict_answers: bool = False

    # 会話エージェント
    agent_name: str = "Survey Assistant"
    realtime_model: str = "gpt-4o-realtime-preview-2025-06-03"
    ready_notification_delay: float = 0.5
    ready_notification_message: str = DEFAULT_READY_MESSAGE

"""アンケート関連のMCPプロンプト定義。"""

from fastmcp import FastMCP

from parley.services.briefing import build_briefing
from parley.storage.responses import ResponseStore


def register_survey_prompts(mcp: FastMCP, store: ResponseStore) -> None:
    """アンケート関連のMCPプロンプトを登録する。"""

    @mcp.prompt()
    async def conduct_survey() -> str:
        """アンケートの回答を会話で収集するためのプロンプト。

        質問カタログと現在の回答状況を含むブリーフィングを返します。
        """
        return build_briefing(store)

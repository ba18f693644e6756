"""アンケート関連のMCPリソース定義。"""

import yaml
from fastmcp import FastMCP

from parley.services.briefing import build_briefing
from parley.storage.responses import ResponseStore


def register_survey_resources(mcp: FastMCP, store: ResponseStore) -> None:
    """アンケート関連のMCPリソースを登録する。"""

    @mcp.resource("parley://survey/questions")
    async def survey_questions() -> str:
        """質問カタログを取得する。

        質問ID、質問文、種別、選択肢を含む質問定義を返します。
        """
        data = store.catalog.model_dump()
        return yaml.dump(data, allow_unicode=True, default_flow_style=False, sort_keys=False)

    @mcp.resource("parley://survey/briefing")
    async def survey_briefing() -> str:
        """会話エージェント向けのブリーフィングを取得する。

        読み出すたびに現在の回答状況から生成し直します。
        """
        return build_briefing(store)

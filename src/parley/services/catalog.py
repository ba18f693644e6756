"""質問カタログの読み込み。"""

from pathlib import Path

import yaml
from pydantic import ValidationError

from parley.models.errors import CatalogError
from parley.models.survey import SurveyCatalog

CATALOG_FILENAME = "survey-questions.yaml"


def load_catalog(config_dir: Path) -> SurveyCatalog:
    """設定ディレクトリから質問カタログを読み込み、検証する。

    Args:
        config_dir: survey-questions.yamlを含むディレクトリ。

    Returns:
        検証済みの質問カタログ。

    Raises:
        CatalogError: ファイルが存在しない、または定義が不正な場合。
    """
    catalog_file = config_dir / CATALOG_FILENAME
    try:
        with open(catalog_file, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise CatalogError(f"Question catalog not found: {catalog_file}") from None
    except yaml.YAMLError as e:
        raise CatalogError(f"Malformed question catalog: {catalog_file}: {e}") from e

    if not isinstance(data, dict):
        raise CatalogError(f"Question catalog must be a mapping: {catalog_file}")

    try:
        catalog = SurveyCatalog.model_validate(data)
    except ValidationError as e:
        raise CatalogError(f"Invalid question catalog: {e}") from e

    seen: set[int] = set()
    for question in catalog.questions:
        if question.id in seen:
            raise CatalogError(f"Duplicate question id: {question.id}")
        seen.add(question.id)
        if question.kind == "multiple-choice" and not question.options:
            raise CatalogError(f"Multiple-choice question {question.id} has no options")
        if question.kind == "long-text" and question.options:
            raise CatalogError(f"Long-text question {question.id} must not declare options")

    return catalog

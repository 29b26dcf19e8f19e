"""
配置加载器：将 YAML 配置文件解析为 Pydantic 模型。
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field

from labby.models import StoredService

logger = logging.getLogger(__name__)


# ── 布局配置 ──────────────────────────────────────────

class LayoutSettings(BaseModel):
    default_refresh_interval: float = Field(default=30.0, gt=0, description="Seconds between stat fetches")
    # 删除服务时是否同时清理引用它的组件
    prune_orphaned_widgets: bool = False


# ── 顶层配置 ──────────────────────────────────────────

class AppConfig(BaseModel):
    data_dir: str = "data"
    layout: LayoutSettings = Field(default_factory=LayoutSettings)
    # 启动时写入服务目录（已存在的 id 不覆盖）
    services: List[StoredService] = Field(default_factory=list)

    def data_path(self, root: Optional[Path] = None) -> Path:
        path = Path(self.data_dir)
        if path.is_absolute():
            return path
        return (root or Path(os.getenv("LABBY_ROOT", "."))) / path


# ── Loading ──────────────────────────────────────────

_CONFIG_SEARCH_PATHS = [
    "config/config.yaml",
    "config.yaml",
]


def find_config_root() -> Path:
    """Find the root config file or directory."""
    base = Path(os.getenv("LABBY_ROOT", "."))
    config_dir = base / "config"
    if config_dir.is_dir():
        return config_dir

    for p in _CONFIG_SEARCH_PATHS:
        path = base / p
        if path.exists():
            return path

    # Nothing found: load defaults
    return base


def deep_merge_dict(base: dict, update: dict) -> dict:
    """Deep merge two dictionaries. Lists under 'services' are appended."""
    for k, v in update.items():
        if isinstance(v, dict) and k in base and isinstance(base[k], dict):
            base[k] = deep_merge_dict(base[k], v)
        elif isinstance(v, list) and k in base and isinstance(base[k], list) and k == "services":
            base[k].extend(v)
        else:
            base[k] = v
    return base


def load_all_yamls(root: Path) -> Dict[str, Any]:
    """Load and merge all YAML files."""
    combined: Dict[str, Any] = {"services": []}

    files = []
    if root.is_file():
        files.append(root)
    elif root.is_dir():
        files.extend(root.glob("*.yaml"))
        files.extend(root.glob("*.yml"))
        files.sort()

    for f in files:
        try:
            with open(f, "r", encoding="utf-8") as fp:
                content = yaml.safe_load(fp)
        except (yaml.YAMLError, IOError) as e:
            logger.error(f"Error loading {f}: {e}")
            continue
        if not isinstance(content, dict):
            continue
        deep_merge_dict(combined, content)

    return combined


def load_config(path: Optional[str | Path] = None) -> AppConfig:
    """
    Load and merge configuration from YAML files.
    """
    if path is None:
        path = find_config_root()
    raw = load_all_yamls(Path(path))
    return AppConfig.model_validate(raw)

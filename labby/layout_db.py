"""
布局持久化：基于 TinyDB 的键值存储，每个 home 一条不透明的布局 blob。
"""

import logging
import os
import time
from pathlib import Path
from typing import Any

from tinydb import Query, TinyDB

logger = logging.getLogger(__name__)

_DATA_DIR = Path(os.getenv("LABBY_ROOT", ".")) / "data"


class LayoutDatabase:
    """TinyDB 布局表封装。"""

    def __init__(self, db_path: str | Path | None = None):
        if db_path is None:
            db_path = _DATA_DIR / "layouts.json"
        db_path = Path(db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)

        self.db = TinyDB(str(db_path), indent=2, ensure_ascii=False)
        self.layouts_table = self.db.table("layouts")
        logger.info(f"TinyDB 布局库已打开: {db_path}")

    # ── 写入 ──────────────────────────────────────────

    def save(self, home_name: str, blob: dict[str, Any]):
        """更新或插入指定 home 的布局（按 home_name 去重）。"""
        record = {
            "home_name": home_name,
            "layout": blob,
            "updated_at": time.time(),
        }
        Home = Query()
        self.layouts_table.upsert(record, Home.home_name == home_name)
        logger.debug(f"[{home_name}] 布局已保存")

    def delete(self, home_name: str):
        """删除指定 home 的布局。"""
        Home = Query()
        self.layouts_table.remove(Home.home_name == home_name)

    def clear(self):
        """清空所有布局。"""
        self.layouts_table.truncate()

    # ── 查询 ──────────────────────────────────────────

    def load_all(self) -> dict[str, dict]:
        """获取全部布局，home_name -> blob。"""
        blobs = {}
        for r in self.layouts_table.all():
            if "home_name" not in r or "layout" not in r:
                logger.warning(f"跳过无效的布局记录: {r.doc_id}")
                continue
            blobs[r["home_name"]] = r["layout"]
        return blobs

    # ── 管理 ──────────────────────────────────────────

    def close(self):
        """关闭数据库。"""
        self.db.close()

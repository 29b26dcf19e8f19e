"""
Labby 主入口：启动 FastAPI 后端服务。
"""

import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from labby import api
from labby.auto_layout import verify_default_tables
from labby.config_loader import AppConfig, load_config
from labby.layout_db import LayoutDatabase
from labby.layout_store import LayoutStore
from labby.service_directory import ServiceDirectory

# 日志配置
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def seed_services(config: AppConfig, service_directory: ServiceDirectory):
    """把配置文件中声明、但目录里还没有的服务写入服务目录。"""
    existing = {s.id for s in service_directory.load_services()}
    added = 0
    for service in config.services:
        if service.id not in existing:
            service_directory.save_service(service)
            added += 1
    if added:
        logger.info(f"已从配置写入 {added} 个服务")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan 事件处理：启动时和关闭时的逻辑。"""
    layout_store = app.state.layout_store
    logger.info(f"已加载 {len(layout_store.homes())} 个 home 布局")

    yield  # 应用运行中

    # 关闭时：关闭数据库连接
    logger.info("正在关闭...")
    app.state.layout_db.close()


def create_app(config: AppConfig | None = None) -> FastAPI:
    """创建并配置 FastAPI 应用。"""
    app = FastAPI(
        title="Labby API",
        description="Home dashboard layout API",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 默认指标表必须能放进对应尺寸，否则拒绝启动
    verify_default_tables()

    # ── 初始化核心组件 ────────────────────────────────────────
    if config is None:
        logger.info("正在加载配置...")
        config = load_config()
    data_dir = config.data_path()

    service_directory = ServiceDirectory(data_dir)
    seed_services(config, service_directory)

    layout_db = LayoutDatabase(data_dir / "layouts.json")
    layout_store = LayoutStore(layout_db)

    # 注入依赖到 API 模块
    api.init_api(
        config=config,
        service_directory=service_directory,
        layout_store=layout_store,
    )
    app.include_router(api.router)

    app.state.config = config
    app.state.layout_db = layout_db
    app.state.layout_store = layout_store
    app.state.service_directory = service_directory

    return app


def main():
    """主入口。"""
    port = int(sys.argv[1]) if len(sys.argv) > 1 else 8400

    logger.info(f"🚀 启动 Labby 后端 (port={port})...")

    app = create_app()

    uvicorn.run(
        app,
        host="127.0.0.1",
        port=port,
        log_level="info",
    )


if __name__ == "__main__":
    main()

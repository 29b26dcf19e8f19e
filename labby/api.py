"""
FastAPI 路由：暴露服务目录与 home 布局的 REST API。
"""

import logging
from typing import Any

from fastapi import APIRouter, HTTPException

from labby.auto_layout import generate_layout
from labby.models import Layout, StoredService, Widget, effective_refresh_interval
from labby.packing import pack_rows
from labby.validator import correct_widget_size

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

# 这些全局引用会在 main.py 中注入
_config = None
_service_directory = None
_layout_store = None


def init_api(config, service_directory, layout_store):
    """注入全局依赖（由 main.py 调用）。"""
    global _config, _service_directory, _layout_store
    _config = config
    _service_directory = service_directory
    _layout_store = layout_store


def _require_service(service_id: str) -> StoredService:
    service = _service_directory.get_service(service_id)
    if service is None:
        raise HTTPException(404, f"服务 '{service_id}' 不存在")
    return service


def _check_widget(widget: Widget) -> StoredService:
    """The widget's selection tag must match the kind of the service it points at."""
    service = _require_service(widget.service_id)
    if widget.kind != service.kind:
        raise HTTPException(
            400,
            f"Metrics of type '{widget.kind.value}' do not match service kind '{service.kind.value}'",
        )
    return service


def _require_widget(home_name: str, widget_id: str) -> Widget:
    widget = _layout_store.layout(home_name).get_widget(widget_id)
    if widget is None:
        raise HTTPException(404, f"Widget {widget_id} not found in '{home_name}'")
    return widget


# ── 服务目录 ──────────────────────────────────────────

@router.get("/services")
async def list_services(home: str | None = None) -> list[StoredService]:
    if home is not None:
        return _service_directory.services_for_home(home)
    return _service_directory.load_services()


@router.post("/services")
async def create_service(service: StoredService) -> StoredService:
    return _service_directory.save_service(service)


@router.delete("/services/{service_id}")
async def delete_service(service_id: str) -> dict:
    """删除服务；按配置决定是否清理引用它的组件。"""
    if not _service_directory.delete_service(service_id):
        raise HTTPException(404, f"Service {service_id} not found")
    pruned = 0
    if _config.layout.prune_orphaned_widgets:
        pruned = _layout_store.prune_service(service_id)
    return {"message": f"Service {service_id} deleted", "pruned_widgets": pruned}


# ── Home 布局 ─────────────────────────────────────────

@router.get("/homes/{home_name}/layout")
async def get_layout(home_name: str) -> Layout:
    """获取布局；home 为空时按其服务自动生成。"""
    services = _service_directory.services_for_home(home_name)
    return _layout_store.ensure_layout(home_name, services)


@router.put("/homes/{home_name}/layout")
async def replace_layout(home_name: str, layout: Layout) -> Layout:
    if layout.home_name != home_name:
        raise HTTPException(400, "Home name mismatch")
    ids = [w.id for w in layout.widgets]
    if len(set(ids)) != len(ids):
        raise HTTPException(400, "Widget ids must be unique within a home")
    for widget in layout.widgets:
        _check_widget(widget)
    _layout_store.set_layout(layout)
    return _layout_store.layout(home_name)


@router.delete("/homes/{home_name}/layout")
async def clear_layout(home_name: str) -> dict:
    _layout_store.remove_all(home_name)
    return {"message": f"Layout of '{home_name}' cleared"}


@router.post("/homes/{home_name}/autolayout")
async def regenerate_layout(home_name: str) -> Layout:
    """重新自动布局（整体替换现有组件）。"""
    services = _service_directory.services_for_home(home_name)
    _layout_store.set_layout(generate_layout(home_name, services))
    return _layout_store.layout(home_name)


@router.get("/homes/{home_name}/rows")
async def get_rows(home_name: str) -> list[list[dict[str, Any]]]:
    """按两列网格分行，跳过引用已删除服务的组件。"""
    known = {s.id for s in _service_directory.load_services()}
    default = _config.layout.default_refresh_interval
    widgets = [w for w in _layout_store.layout(home_name).widgets if w.service_id in known]
    return [
        [
            {
                **w.model_dump(mode="json"),
                "column_span": w.size.column_span,
                "row_span": w.size.row_span,
                "refresh_interval": effective_refresh_interval(w, default),
            }
            for w in row
        ]
        for row in pack_rows(widgets)
    ]


# ── 组件编辑 ──────────────────────────────────────────

@router.post("/homes/{home_name}/widgets")
async def add_widget(home_name: str, widget: Widget) -> Widget:
    _check_widget(widget)
    if _layout_store.layout(home_name).get_widget(widget.id) is not None:
        raise HTTPException(409, f"Widget {widget.id} already exists in '{home_name}'")
    widget = correct_widget_size(None, widget)
    _layout_store.add_widget(widget, home_name)
    return _require_widget(home_name, widget.id)


@router.put("/homes/{home_name}/widgets/{widget_id}")
async def update_widget(home_name: str, widget_id: str, widget: Widget) -> Widget:
    """更新组件；尺寸或指标变化后按需自动修正尺寸。"""
    if widget.id != widget_id:
        raise HTTPException(400, "ID mismatch")
    previous = _require_widget(home_name, widget_id)
    _check_widget(widget)
    _layout_store.update_widget(correct_widget_size(previous, widget), home_name)
    return _require_widget(home_name, widget_id)


@router.delete("/homes/{home_name}/widgets/{widget_id}")
async def delete_widget(home_name: str, widget_id: str) -> dict:
    _require_widget(home_name, widget_id)
    _layout_store.remove_widget(widget_id, home_name)
    return {"message": f"Widget {widget_id} deleted"}


@router.post("/homes/{home_name}/widgets/{widget_id}/move")
async def move_widget(home_name: str, widget_id: str, to_index: int) -> Layout:
    _require_widget(home_name, widget_id)
    _layout_store.move_widget(widget_id, to_index, home_name)
    return _layout_store.layout(home_name)


@router.post("/homes/{home_name}/widgets/{widget_id}/drop")
async def drop_widget(home_name: str, widget_id: str, target_id: str) -> Layout:
    """拖拽：把组件放到 target_id 所在位置。"""
    _require_widget(home_name, widget_id)
    _require_widget(home_name, target_id)
    _layout_store.move_widget_onto(widget_id, target_id, home_name)
    return _layout_store.layout(home_name)

# backend/app/routes/v1/materials.py
"""
Study material routes - API v1

Admins upload files (multipart) or register existing URLs. Published
materials are browsable and downloads are counted publicly.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from ...api.dependencies import get_material_service, require_admin
from ...principal import Caller
from ...repositories.query_pipeline import PaginationOptions
from ...schemas.base import MessageResponse, PageResponse
from ...schemas.media import MaterialCreate, MaterialUpdate
from ...services.material_service import MaterialService
from .common import drop_none, pagination_params, run_service

router = APIRouter(tags=["materials-v1"])


@router.get("/", response_model=PageResponse)
async def list_materials(
    category: Optional[str] = None,
    file_type: Optional[str] = Query(None, alias="fileType"),
    tags: Optional[str] = None,
    search: Optional[str] = None,
    options: PaginationOptions = Depends(pagination_params),
    material_service: MaterialService = Depends(get_material_service),
) -> Dict[str, Any]:
    filters = drop_none(isPublished=True, category=category, fileType=file_type, tags=tags)
    page = await run_service(material_service.list_materials, filters, options, search)
    return page.to_dict()


@router.get("/all", response_model=PageResponse)
async def list_all_materials(
    is_published: Optional[bool] = Query(None, alias="isPublished"),
    category: Optional[str] = None,
    file_type: Optional[str] = Query(None, alias="fileType"),
    tags: Optional[str] = None,
    search: Optional[str] = None,
    options: PaginationOptions = Depends(pagination_params),
    _: Caller = Depends(require_admin),
    material_service: MaterialService = Depends(get_material_service),
) -> Dict[str, Any]:
    filters = drop_none(isPublished=is_published, category=category, fileType=file_type, tags=tags)
    page = await run_service(material_service.list_materials, filters, options, search)
    return page.to_dict()


@router.post("/upload", status_code=status.HTTP_201_CREATED, response_model=Dict[str, Any])
async def upload_material(
    file: UploadFile = File(...),
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    tags: Optional[str] = Form(None, description="Comma-separated"),
    is_published: bool = Form(False, alias="isPublished"),
    caller: Caller = Depends(require_admin),
    material_service: MaterialService = Depends(get_material_service),
) -> Dict[str, Any]:
    data = await file.read()
    metadata = drop_none(
        name=name,
        description=description,
        category=category,
        tags=[tag.strip() for tag in tags.split(",") if tag.strip()] if tags else None,
        isPublished=is_published,
    )
    return await run_service(
        material_service.upload_material,
        data,
        file.filename or "upload",
        file.content_type or "application/octet-stream",
        metadata,
        caller,
    )


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=Dict[str, Any])
async def create_material(
    material_data: MaterialCreate,
    caller: Caller = Depends(require_admin),
    material_service: MaterialService = Depends(get_material_service),
) -> Dict[str, Any]:
    return await run_service(material_service.create_material, material_data.to_payload(), caller)


@router.get("/categories", response_model=List[str])
async def get_categories(
    material_service: MaterialService = Depends(get_material_service),
) -> List[str]:
    return await run_service(material_service.get_categories)


@router.get("/tags", response_model=List[str])
async def get_tags(material_service: MaterialService = Depends(get_material_service)) -> List[str]:
    return await run_service(material_service.get_tags)


@router.get("/category-stats", response_model=List[Dict[str, Any]])
async def get_category_stats(
    _: Caller = Depends(require_admin),
    material_service: MaterialService = Depends(get_material_service),
) -> List[Dict[str, Any]]:
    return await run_service(material_service.get_category_stats)


@router.get("/stats", response_model=Dict[str, Any])
async def get_material_stats(
    _: Caller = Depends(require_admin),
    material_service: MaterialService = Depends(get_material_service),
) -> Dict[str, Any]:
    return await run_service(material_service.get_stats)


@router.get("/{material_id}", response_model=Dict[str, Any])
async def get_material(
    material_id: str,
    material_service: MaterialService = Depends(get_material_service),
) -> Dict[str, Any]:
    return await run_service(material_service.get_material, material_id)


@router.post("/{material_id}/download", response_model=Dict[str, Any])
async def track_download(
    material_id: str,
    material_service: MaterialService = Depends(get_material_service),
) -> Dict[str, Any]:
    return await run_service(material_service.track_download, material_id)


@router.patch("/{material_id}", response_model=Dict[str, Any])
async def update_material(
    material_id: str,
    material_data: MaterialUpdate,
    _: Caller = Depends(require_admin),
    material_service: MaterialService = Depends(get_material_service),
) -> Dict[str, Any]:
    return await run_service(
        material_service.update_material, material_id, material_data.to_payload()
    )


@router.delete("/{material_id}", response_model=MessageResponse)
async def delete_material(
    material_id: str,
    _: Caller = Depends(require_admin),
    material_service: MaterialService = Depends(get_material_service),
) -> MessageResponse:
    await run_service(material_service.delete_material, material_id)
    return MessageResponse(message="Material deleted successfully")

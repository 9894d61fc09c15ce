# backend/app/services/material_service.py
"""Material Service - study material stored in object storage."""

import os
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.orm import Session

from ..core.constants import MATERIALS_FOLDER
from ..core.exceptions import NotFoundException, ValidationException
from ..principal import Caller
from ..repositories.factory import RepositoryFactory
from ..repositories.item_store import Item
from ..repositories.material_repository import MaterialRepository
from ..repositories.query_pipeline import PageResult, PaginationOptions
from .base import BaseService
from .storage_service import StorageService

MATERIAL_FIELDS = (
    "name",
    "description",
    "fileUrl",
    "fileName",
    "fileType",
    "fileSize",
    "category",
    "tags",
    "isPublished",
)


class MaterialService(BaseService):
    def __init__(
        self,
        db: Session,
        repository: Optional[MaterialRepository] = None,
        storage_service: Optional[StorageService] = None,
    ):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_material_repository(db)
        self.storage_service = storage_service or StorageService(db)

    def _get_or_404(self, material_id: str) -> Item:
        material = self.repository.get_by_id(material_id)
        if material is None or not material.get("isActive"):
            raise NotFoundException("Material not found", details={"material_id": material_id})
        return material

    @staticmethod
    def _clean(data: Mapping[str, Any]) -> Dict[str, Any]:
        return {k: data[k] for k in MATERIAL_FIELDS if data.get(k) is not None}

    def _store(self, fields: Dict[str, Any], caller: Optional[Caller]) -> Item:
        fields.setdefault("tags", [])
        fields.setdefault("isPublished", False)
        material = self.repository.create(
            {**fields, "uploadedBy": caller.id if caller else None, "downloadCount": 0}
        )
        self.log_operation("material_created", material_id=material["id"])
        return material

    @BaseService.measure_operation("upload_material")
    def upload_material(
        self,
        data: bytes,
        filename: str,
        content_type: str,
        metadata: Mapping[str, Any],
        caller: Optional[Caller] = None,
    ) -> Item:
        if not data:
            raise ValidationException("Uploaded file is empty")
        url = self.storage_service.upload_bytes(data, MATERIALS_FOLDER, filename, content_type)
        fields = self._clean(metadata)
        fields.update(
            {
                "fileUrl": url,
                "fileName": filename,
                "fileSize": len(data),
                "fileType": fields.get("fileType") or os.path.splitext(filename)[1].lstrip(".").lower(),
            }
        )
        fields.setdefault("name", filename)
        return self._store(fields, caller)

    @BaseService.measure_operation("create_material")
    def create_material(self, data: Mapping[str, Any], caller: Optional[Caller] = None) -> Item:
        fields = self._clean(data)
        if not fields.get("fileUrl"):
            raise ValidationException("fileUrl is required")
        return self._store(fields, caller)

    def list_materials(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        options: Optional[PaginationOptions] = None,
        search: Optional[str] = None,
    ) -> PageResult:
        return self.repository.find_all({"isActive": True, **dict(filters or {})}, options, search)

    def get_material(self, material_id: str) -> Item:
        return self._get_or_404(material_id)

    def update_material(self, material_id: str, data: Mapping[str, Any]) -> Item:
        material = self._get_or_404(material_id)
        changes = self._clean(data)
        return self.repository.update(material_id, changes) if changes else material

    @BaseService.measure_operation("delete_material")
    def delete_material(self, material_id: str) -> None:
        material = self._get_or_404(material_id)
        self.repository.soft_delete(material_id)
        if material.get("fileUrl"):
            self.storage_service.delete_by_url(material["fileUrl"])

    def track_download(self, material_id: str) -> Item:
        self._get_or_404(material_id)
        return self.repository.increment_download(material_id)

    def get_categories(self) -> List[str]:
        return self.repository.all_categories()

    def get_tags(self) -> List[str]:
        return self.repository.all_tags()

    def get_category_stats(self) -> List[Dict[str, Any]]:
        return self.repository.category_stats()

    def get_stats(self) -> Dict[str, Any]:
        return self.repository.get_stats()

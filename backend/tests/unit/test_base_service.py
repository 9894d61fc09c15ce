# backend/tests/unit/test_base_service.py
"""Tests for BaseService metrics and caller checks."""

import pytest

from app.core.exceptions import ForbiddenException, UnauthorizedException
from app.principal import Caller
from app.services.base import BaseService


class _ProbeService(BaseService):
    @BaseService.measure_operation("ok")
    def ok(self):
        return "done"

    @BaseService.measure_operation("boom")
    def boom(self):
        raise ValueError("boom")


class TestMeasureOperation:
    def setup_method(self):
        BaseService._class_metrics.pop("_ProbeService", None)

    def test_records_success_and_failure(self):
        service = _ProbeService()

        assert service.ok() == "done"
        with pytest.raises(ValueError):
            service.boom()

        metrics = service.get_metrics()
        assert metrics["ok"]["count"] == 1
        assert metrics["ok"]["success_rate"] == 1.0
        assert metrics["boom"]["failure_count"] == 1
        assert metrics["boom"]["success_rate"] == 0.0

    def test_wrapper_keeps_name(self):
        assert _ProbeService.ok.__name__ == "ok"
        assert _ProbeService.ok._operation_name == "ok"


class TestOwnerOrAdmin:
    def test_owner_is_allowed(self):
        caller = Caller(id="u1", role="USER")

        assert _ProbeService().ensure_owner_or_admin(caller, "u1", "thing") is caller

    def test_admin_is_allowed(self):
        admin = Caller(id="a1", role="ADMIN")

        assert _ProbeService().ensure_owner_or_admin(admin, "u1", "thing") is admin

    def test_stranger_is_forbidden(self):
        with pytest.raises(ForbiddenException):
            _ProbeService().ensure_owner_or_admin(Caller(id="u2", role="USER"), "u1", "thing")

    def test_ownerless_resource_needs_admin(self):
        with pytest.raises(ForbiddenException):
            _ProbeService().ensure_owner_or_admin(Caller(id="u2", role="USER"), None, "thing")

    def test_anonymous_is_unauthorized(self):
        with pytest.raises(UnauthorizedException):
            _ProbeService().ensure_owner_or_admin(None, "u1", "thing")

"""Tests for switchyard.config — RouterConfig frozen dataclass."""

import os
import time
from pathlib import Path

import pytest

from switchyard.config import RouterConfig
from switchyard.http.request import RoutingRequest
from switchyard.routing.router import Router


class TestRouterConfig:
    def test_defaults(self) -> None:
        cfg = RouterConfig()
        assert cfg.route_files == ()
        assert cfg.detect_changes is False
        assert cfg.method_override is True
        assert cfg.head_fallback is True

    def test_frozen(self) -> None:
        cfg = RouterConfig()
        with pytest.raises(AttributeError):
            cfg.detect_changes = True  # type: ignore[misc]


class TestFromConfig:
    def test_loads_route_files(self, tmp_path: Path) -> None:
        routes = tmp_path / "routes"
        routes.write_text("GET /users Users.list\n")

        router = Router.from_config(RouterConfig(route_files=(routes,)))

        assert [str(r) for r in router.routes] == ["GET /users -> Users.list"]
        assert router.config.route_files == (routes,)

    def test_no_route_files(self) -> None:
        router = Router.from_config(RouterConfig())
        assert router.routes == ()
        assert router.last_loading == -1.0

    def test_detect_changes_before_dispatch(self, tmp_path: Path) -> None:
        routes = tmp_path / "routes"
        routes.write_text("GET /users Users.list\n")
        router = Router.from_config(RouterConfig(route_files=(routes,), detect_changes=True))

        routes.write_text("GET /people People.list\n")
        future = time.time() + 60
        os.utime(routes, (future, future))

        request = RoutingRequest("GET", "/people")
        router.route(request)
        assert request.action == "People.list"

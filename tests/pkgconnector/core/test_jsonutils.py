# tests/pkgconnector/core/test_jsonutils.py
from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

from pkgconnector.core.jsonutils import safeJsonDumps, tryJSONify
from pkgconnector.packages.record import PackageRecord


def test_safeJsonDumps_is_compact():
    assert safeJsonDumps({"a": [1, 2], "b": "ü"}) == '{"a":[1,2],"b":"ü"}'


def test_safeJsonDumps_falls_back_for_paths_and_records():
    record = PackageRecord.fromLockEntry({"name": "acme/test-lib", "version": "1.1.0", "time": "2015-06-17"})
    out = json.loads(safeJsonDumps({"path": Path("/srv/site"), "record": record}))
    assert out["path"] == "/srv/site"
    assert out["record"]["fullName"] == "acme/test-lib"
    assert out["record"]["installedAt"] == "2015-06-17T00:00:00+00:00"
    assert out["record"]["data"]["version"] == "1.1.0"


def test_tryJSONify_guards_cycles_and_depth():
    loop: list = []
    loop.append(loop)
    assert tryJSONify(loop) == ["<circular_ref list>"]

    nested: dict = {"x": {"x": {"x": {}}}}
    assert tryJSONify(nested, _maxDepth=1) == {"x": {"x": "<max_depth_exceeded dict>"}}


def test_tryJSONify_scalars():
    assert tryJSONify(float("nan")) == "nan"
    assert tryJSONify(datetime(2015, 1, 1, tzinfo=timezone.utc)) == "2015-01-01T00:00:00+00:00"
    assert tryJSONify(ValueError("bad")) == {"type": "ValueError", "message": "bad"}

# tests/conftest.py
import json
import sys
from pathlib import Path
from typing import Any

import pytest

from pkgconnector.app.settings import SETTINGS_ENV_VAR, reloadSettings



def pytest_configure(config: pytest.Config) -> None:
    if sys.flags.optimize:
        raise RuntimeError("Assertions are disabled (optimize > 0)")



@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path_factory):
    """Keeps a developer's ~/.pkgconnector/settings.json5 out of the tests."""
    missing = tmp_path_factory.mktemp("settings") / "absent.json5"
    monkeypatch.setenv(SETTINGS_ENV_VAR, str(missing))
    reloadSettings()
    yield
    monkeypatch.delenv(SETTINGS_ENV_VAR, raising=False)
    reloadSettings()



BOOTSTRAP_LOCK_ENTRY: dict[str, Any] = {
    "name": "components/bootstrap",
    "version": "3.3.5",
    "source": {
        "type": "git",
        "url": "https://github.com/components/bootstrap.git",
        "reference": "0cc1c2d1e3a0a8e2e5b9c9d5f5d4e6c3b5a2f1e0",
    },
    "type": "component",
    "require": {"components/jquery": ">=1.9.1"},
    "notification-url": "https://packagist.org/downloads/",
    "license": ["MIT"],
    "description": "The most popular front-end framework for developing responsive, mobile first projects on the web.",
    "homepage": "http://getbootstrap.com",
    "time": "2015-06-16 16:13:22",
}

JQUERY_LOCK_ENTRY: dict[str, Any] = {
    "name": "components/jquery",
    "version": "2.1.4",
    "type": "component",
    "notification-url": "https://packagist.org/downloads/",
    "license": ["MIT"],
    "description": "jQuery JavaScript Library",
    "homepage": "http://jquery.com",
    "time": "2015-04-28 16:00:00",
}



def write_json(path: Path, payload: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=4), encoding="utf-8")
    return path



@pytest.fixture()
def project_dir(tmp_path) -> Path:
    """
    A locked project with vendor dir `lib`, an autoload entry point and
    two installed components (only bootstrap has its package directory).
    """
    base = tmp_path / "site"
    write_json(
        base / "composer.json",
        {
            "name": "cotonti/site",
            "description": "dropped on load",
            "require": {"components/bootstrap": "3.3.*"},
            "repositories": [{"type": "composer", "url": "https://packagist.org"}],
            "config": {"vendor-dir": "lib"},
            "extra": {"cotonti": {"plugins-dir": "plugins"}},
            "minimum-stability": "stable",
        },
    )
    write_json(
        base / "composer.lock",
        {
            "_readme": ["This file locks the dependencies of your project to a known state"],
            "hash": "a6c2b8e0f9d1c3b5a7e9f1d3c5b7a9e1",
            "content-hash": "0f1e2d3c4b5a69788796a5b4c3d2e1f0",
            "packages": [BOOTSTRAP_LOCK_ENTRY, JQUERY_LOCK_ENTRY],
            "packages-dev": [],
            "aliases": [],
        },
    )
    (base / "lib").mkdir(parents=True, exist_ok=True)
    (base / "lib" / "autoload.php").write_text("<?php\n// autoload\n", encoding="utf-8")
    write_json(base / "lib" / "components" / "bootstrap" / "composer.json", {"name": "components/bootstrap"})
    return base



@pytest.fixture()
def unlocked_project_dir(tmp_path) -> Path:
    base = tmp_path / "fresh"
    write_json(base / "composer.json", {"require": {"acme/test-lib": "^1.1"}})
    return base



@pytest.fixture()
def json_writer():
    return write_json

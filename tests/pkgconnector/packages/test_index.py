# tests/pkgconnector/packages/test_index.py
from __future__ import annotations

import pytest

from pkgconnector.core.error_stack import DEFAULT_MESSAGES, ErrorStack
from pkgconnector.packages import index as index_module
from pkgconnector.packages.index import PackageIndex
from pkgconnector.packages.record import PackageRecord
from pkgconnector.packages.types import PackageTypeFlag


PACKAGE1 = {"name": "vendor1/some-package", "version": "1.2.3", "time": "2015-11-01 00:00:00", "type": "cotonti-siena-theme"}
PACKAGE2 = {"name": "vendor2/some-package", "version": "0.0.1", "time": "2015-07-15 06:08:09", "type": "package"}
PACKAGE3 = {
    "name": "acme/test-lib",
    "version": "1.1.0",
    "time": "2015-06-17 01:01:01",
    "type": "library",
    "notification-url": "https://packagist.org/downloads/",
    "description": "Test library",
}


@pytest.fixture()
def index() -> PackageIndex:
    return PackageIndex([PACKAGE1, PACKAGE2, PACKAGE3])


def _names(records) -> list[str]:
    return [rec.fullName for rec in records]


# ----------------------------------------
# initPackagesData / names list
# ----------------------------------------

def test_builds_names_list_sorted_by_key_and_install_time(index):
    names = index.namesIndex
    assert list(names) == ["some-package", "test-lib"]
    assert _names(names["some-package"]) == ["vendor2/some-package", "vendor1/some-package"]
    assert _names(names["test-lib"]) == ["acme/test-lib"]


def test_equal_times_keep_file_order():
    first = {"name": "a/dup", "time": "2015-01-01", "type": "library"}
    second = {"name": "b/dup", "time": "2015-01-01", "type": "library"}
    assert _names(PackageIndex([first, second]).namesIndex["dup"]) == ["a/dup", "b/dup"]
    assert _names(PackageIndex([second, first]).namesIndex["dup"]) == ["b/dup", "a/dup"]


@pytest.mark.parametrize("data", [None, "vendor/pkg", {"packages": []}, 42])
def test_non_list_input_is_ignored(index, data):
    assert index.initPackagesData(data) is False
    assert len(index) == 3


def test_reinit_replaces_everything(index):
    assert index.select("test-lib")
    assert index.initPackagesData([PACKAGE1]) is True
    assert _names(index.packages) == ["vendor1/some-package"]
    assert list(index.namesIndex) == ["some-package"]
    assert not index.selected
    assert not index.isInstalled("acme/test-lib")


def test_names_without_vendor_are_kept_but_not_indexed(caplog):
    index = PackageIndex([{"name": "standalone", "type": "library"}, {"version": "1.0"}, PACKAGE3])
    assert _names(index.packages) == ["standalone", "acme/test-lib"]
    assert list(index.namesIndex) == ["test-lib"]
    assert index.isInstalled("standalone")
    assert index.expandName("standalone") is None
    assert any("Skipping unusable lock entry" in rec.getMessage() for rec in caplog.records)


def test_accepts_package_records():
    record = PackageRecord.fromLockEntry(PACKAGE3)
    index = PackageIndex([record])
    assert index.packages == (record,)


def test_listPackages_filters_in_file_order(index):
    assert _names(index.listPackages()) == ["vendor1/some-package", "vendor2/some-package", "acme/test-lib"]
    assert _names(index.listPackages(PackageTypeFlag.OTHER)) == ["vendor2/some-package", "acme/test-lib"]
    assert _names(index.listPackages("library")) == ["acme/test-lib"]


# ----------------------------------------
# isInstalled / getInfo
# ----------------------------------------

@pytest.mark.parametrize(
    ("fullName", "typeFilter", "expected"),
    [
        ("not/installed", None, False),
        ("acme/test-lib", None, True),
        ("ACME/Test-Lib", None, True),
        ("acme/test-lib", "library", True),
        ("acme/test-lib", "not-existent-type", False),
        ("vendor1/some-package", PackageTypeFlag.THEME, True),
        ("vendor1/some-package", PackageTypeFlag.OTHER, False),
    ],
)
def test_isInstalled(index, fullName, typeFilter, expected):
    assert index.isInstalled(fullName, typeFilter) is expected


def test_getInfo_returns_first_match_in_file_order():
    older = {"name": "dup/pkg", "version": "1.0.0", "type": "library"}
    newer = {"name": "dup/pkg", "version": "2.0.0", "type": "library"}
    record = PackageIndex([older, newer]).getInfo("dup/pkg")
    assert record is not None and record.version == "1.0.0"


# ----------------------------------------
# expandName
# ----------------------------------------

@pytest.mark.parametrize(
    ("shortName", "typeFilter", "expected"),
    [
        ("unknown_package", None, None),
        ("test-lib", "not-existing-type", None),
        ("test-lib", None, "acme/test-lib"),
        ("test-lib", "library", "acme/test-lib"),
        ("test-lib", PackageTypeFlag.MODULE, None),
        ("test-lib", PackageTypeFlag.OTHER, "acme/test-lib"),
        ("test-lib", PackageTypeFlag.ALL, "acme/test-lib"),
        ("Test-Lib", None, "acme/test-lib"),
        ("some-package", None, "vendor2/some-package"),
        ("some-package", PackageTypeFlag.THEME, "vendor1/some-package"),
        ("some-package", "cotonti-siena-theme", "vendor1/some-package"),
        ("some-package", PackageTypeFlag.PLUGIN, None),
    ],
)
def test_expandName(index, shortName, typeFilter, expected):
    assert index.expandName(shortName, typeFilter) == expected


def test_expandName_oldest_wins_regardless_of_input_order():
    assert PackageIndex([PACKAGE2, PACKAGE1]).expandName("some-package") == "vendor2/some-package"
    assert PackageIndex([PACKAGE1, PACKAGE2]).expandName("some-package") == "vendor2/some-package"


# ----------------------------------------
# select / field access
# ----------------------------------------

@pytest.mark.parametrize(
    ("packageName", "typeFilter", "version", "expected"),
    [
        ("not/exists", None, None, False),
        ("acme/test-lib", None, "1.1.0", True),
        ("test-lib", None, "1.1.0", True),
        ("some-package", None, "0.0.1", True),
        ("some-package", "cotonti-siena-theme", "1.2.3", True),
        ("some-package", PackageTypeFlag.PLUGIN, None, False),
    ],
)
def test_select(index, packageName, typeFilter, version, expected):
    assert index.select(packageName, typeFilter) is expected
    assert index.selected is expected
    assert index.getVersion() == version
    if expected:
        vendor, shortName = index.getFullName().split("/", 1)
        assert index.getName() == shortName
        assert index.getVendor() == vendor
        assert index.version == version


def test_selection_fields(index):
    assert index.select("test-lib")
    assert index.fullName == "acme/test-lib"
    assert index.name == "test-lib"
    assert index.vendor == "acme"
    assert index.type == "library"
    assert index.getType() == "library"
    assert index.field("version") == "1.1.0"
    assert index.field("notificationUrl") == "https://packagist.org/downloads/"
    assert index.field("notExistsProp") is None
    assert index.callGetter("getDescription") == "Test library"
    assert index.callGetter("getNotificationUrl") == "https://packagist.org/downloads/"
    assert index.callGetter("getNotExistsProp") is None
    assert index.callGetter("description") is None
    assert index.callGetter("get") is None


def test_select_is_idempotent_without_force(index):
    assert index.select("some-package")
    selection = index.selection
    assert index.select("Some-Package")
    assert index.selection is selection

    assert index.select("some-package", forceReselect=True)
    assert index.selection is not selection
    assert index.selection == selection


def test_select_with_different_filter_reselects(index):
    assert index.select("some-package")
    assert index.fullName == "vendor2/some-package"
    assert index.select("some-package", PackageTypeFlag.THEME)
    assert index.fullName == "vendor1/some-package"


def test_failed_select_clears_selection_and_records_error():
    errors = ErrorStack(DEFAULT_MESSAGES)
    index = PackageIndex([PACKAGE3], errors=errors)
    assert index.select("test-lib")

    assert index.select("not/exists") is False
    assert not index.selected
    assert index.selection is None
    assert index.fullName is None
    assert index.field("version") is None
    assert index.callGetter("getVersion") is None
    assert errors.getLastError() == 'No package found for given name "not/exists" and type None'


def test_failed_select_is_not_cached(index):
    assert index.select("test-lib", "module") is False
    index.initPackagesData([{**PACKAGE3, "type": "module"}])
    assert index.select("test-lib", "module") is True


def test_resetSelection(index):
    index.select("test-lib")
    index.resetSelection()
    assert not index.selected
    assert index.getName() is None


def test_custom_categories():
    index = PackageIndex(
        [{"name": "wp/seo", "type": "wordpress-plugin"}],
        categories={PackageTypeFlag.PLUGIN: {"wordpress-plugin"}},
    )
    assert index.expandName("seo", PackageTypeFlag.PLUGIN) == "wp/seo"
    assert index.expandName("seo", PackageTypeFlag.OTHER) is None


def test_custom_categories_are_case_insensitive():
    index = PackageIndex(
        [{"name": "wp/seo", "type": "WordPress-Plugin"}],
        categories={PackageTypeFlag.PLUGIN: ["WordPress-Plugin"]},
    )
    assert index.isInstalled("wp/seo", PackageTypeFlag.PLUGIN)
    assert not index.isInstalled("wp/seo", PackageTypeFlag.OTHER)


def test_categories_read_once_per_load(monkeypatch):
    calls: list[int] = []
    realCategories = index_module.packageTypeCategories

    def countingCategories():
        calls.append(1)
        return realCategories()

    monkeypatch.setattr(index_module, "packageTypeCategories", countingCategories)
    index = PackageIndex([PACKAGE1, PACKAGE2, PACKAGE3])
    calls.clear()

    assert len(index.listPackages(PackageTypeFlag.OTHER)) == 2
    assert index.expandName("some-package", PackageTypeFlag.THEME) == "vendor1/some-package"
    assert calls == []

    index.initPackagesData([PACKAGE3])
    assert calls == [1]

"""PackageCache 测试: 两级刷新 + 查询"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from pkgcache.core.cache import PackageCache
from pkgcache.core.exceptions import PackageNotFoundError, RefreshError
from pkgcache.core.models import RefreshLevel


@pytest.fixture()
def tools(fake_tools, make_index_line):
    fake_tools.installed = {
        "openssl-1.0.0_3,2": "security/openssl",
        "bash-4.2.20": "shells/bash",
    }
    fake_tools.index = [
        make_index_line("openssl-1.0.1_1", "security/openssl"),
        make_index_line("bash-4.2.37", "shells/bash"),
        make_index_line("bar-1.0", "lang/bar"),
        make_index_line("bar-1.1", "devel/bar"),
        make_index_line("ruby-1.9.3", "lang/ruby19"),
    ]
    return fake_tools


@pytest.fixture()
def cache(tools) -> PackageCache:
    return PackageCache(tools)


class TestRefresh:
    def test_first_read_does_full_refresh(self, cache, tools) -> None:
        assert cache.level == RefreshLevel.FULL
        assert cache.available_version("ruby") == "1.9.3"
        assert tools.calls["fetch_index"] == 1
        assert tools.calls["list_installed_packages"] == 1
        assert cache.level == RefreshLevel.NONE

    def test_repeated_reads_refresh_once(self, cache, tools) -> None:
        cache.available_version("openssl")
        cache.installed_version("bash")
        cache.available_version("bash")
        assert tools.calls["fetch_index"] == 1
        assert tools.calls["list_installed_packages"] == 1
        assert tools.calls["lookup_origin"] == 2

    def test_installed_only_reload_skips_index(self, cache, tools) -> None:
        cache.refresh()
        cache.reload_installed_only()
        cache.installed_version("bash")
        assert tools.calls["fetch_index"] == 1
        assert tools.calls["list_installed_packages"] == 2

    def test_installed_reload_does_not_downgrade_full(self, cache, tools) -> None:
        cache.refresh()
        cache.reload_full()
        cache.reload_installed_only()
        assert cache.level == RefreshLevel.FULL
        cache.refresh()
        assert tools.calls["fetch_index"] == 2

    def test_installed_refresh_replaces_table(self, cache, tools) -> None:
        assert cache.installed_version("bash") == "4.2.20"
        tools.installed = {"openssl-1.0.0_3,2": "security/openssl"}
        cache.reload_installed_only()
        assert cache.installed_version("bash") is None
        assert cache.installed_version("openssl") == "1.0.0_3,2"

    def test_noise_lines_skipped(self, cache, tools) -> None:
        tools.index.extend(["garbage", "/usr/ports/x/has space-1.0|/usr/ports/x/y", ""])
        tools.installed["not a package"] = "never/looked-up"
        cache.refresh()
        assert cache.stats().index_packages == 5
        assert cache.stats().installed_packages == 2
        assert tools.calls["lookup_origin"] == 2

    def test_ports_prefix_stripped(self, cache) -> None:
        assert cache.resolve_origin("ruby") == "lang/ruby19"

    def test_custom_ports_prefix(self, tools, make_index_line) -> None:
        tools.index = [make_index_line("zsh-5.0", "shells/zsh").replace("/usr/ports/", "/data/ports/")]
        cache = PackageCache(tools, ports_prefix="/data/ports/")
        assert cache.resolve_origin("zsh") == "shells/zsh"

    def test_failed_refresh_keeps_previous_tables(self, cache, tools) -> None:
        cache.refresh()
        tools.fail_fetch = True
        tools.installed = {}
        cache.reload_full()
        with pytest.raises(RefreshError, match="远程索引") as exc:
            cache.available_version("bash")
        assert exc.value.retryable is True
        assert cache.level == RefreshLevel.FULL
        s = cache.stats()
        assert (s.index_packages, s.installed_packages) == (5, 2)

    def test_failed_installed_refresh_is_retried(self, cache, tools) -> None:
        tools.fail_installed = True
        with pytest.raises(RefreshError, match="已安装数据库"):
            cache.refresh()
        tools.fail_installed = False
        assert cache.installed_version("bash") == "4.2.20"


class TestQueries:
    def test_installed_origin_wins_for_available_version(self, tools, make_index_line) -> None:
        tools.installed = {"foo-1.0": "cat/foo"}
        tools.index = [
            make_index_line("foo-1.1", "cat/foo"),
            make_index_line("foo-2.0", "other/foo"),
        ]
        cache = PackageCache(tools)
        assert cache.resolve_origin("foo") == "cat/foo"
        assert cache.available_version("foo") == "1.1"

    def test_candidate_version_alias(self, cache) -> None:
        assert cache.candidate_version("openssl") == cache.available_version("openssl") == "1.0.1_1"

    def test_guessed_origin(self, cache) -> None:
        assert cache.available_version("bar") == "1.0"

    def test_qualified_query_bypasses_name_maps(self, cache, monkeypatch) -> None:
        cache.refresh()
        installed_lookup = MagicMock()
        index_lookup = MagicMock()
        monkeypatch.setattr(cache._installed, "origin_of", installed_lookup)
        monkeypatch.setattr(cache._index, "origins_of", index_lookup)
        assert cache.available_version("devel/bar") == "1.1"
        assert cache.installed_version("shells/bash") == "4.2.20"
        installed_lookup.assert_not_called()
        index_lookup.assert_not_called()

    def test_origin_not_in_index_returns_none(self, cache) -> None:
        assert cache.available_version("misc/nothing") is None

    def test_installed_version_never_consults_index(self, cache) -> None:
        assert cache.installed_version("ruby") is None
        assert cache.installed_version("lang/ruby19") is None

    def test_empty_cache_not_found(self, fake_tools) -> None:
        cache = PackageCache(fake_tools)
        with pytest.raises(PackageNotFoundError):
            cache.available_version("foo")
        assert cache.installed_version("foo") is None

    def test_installed_package(self, cache) -> None:
        rec = cache.installed_package("openssl")
        assert rec is not None
        assert (rec.origin, rec.name, rec.version) == ("security/openssl", "openssl", "1.0.0_3,2")
        assert cache.installed_package("ruby") is None

    def test_duplicate_installed_name_resolves_to_first_origin(self, fake_tools) -> None:
        fake_tools.installed = {
            "libtool-1.5.26": "devel/libtool15",
            "libtool-2.2.6b": "devel/libtool22",
        }
        cache = PackageCache(fake_tools)
        assert cache.installed_version("libtool") == "1.5.26"
        assert cache.installed_package("libtool").origin == "devel/libtool15"
        assert cache.installed_version("devel/libtool22") == "2.2.6b"

    def test_status_of(self, cache) -> None:
        st = cache.status_of("openssl")
        assert st.origin == "security/openssl"
        assert (st.installed_version, st.candidate_version) == ("1.0.0_3,2", "1.0.1_1")
        st = cache.status_of("ruby")
        assert (st.origin, st.installed_version, st.candidate_version) == ("lang/ruby19", None, "1.9.3")

    def test_status_of_refreshes_once(self, cache, tools) -> None:
        cache.status_of("bash")
        assert tools.calls["fetch_index"] == 1
        assert tools.calls["list_installed_packages"] == 1

    def test_stats(self, cache) -> None:
        s = cache.stats()
        assert (s.index_packages, s.installed_packages, s.level) == (0, 0, "full")
        cache.refresh()
        s = cache.stats()
        assert (s.index_packages, s.installed_packages, s.level) == (5, 2, "none")


class TestConcurrency:
    def test_concurrent_readers_share_one_refresh(self, cache, tools) -> None:
        import threading
        import time

        original = tools.list_installed_packages

        def slow_list():
            time.sleep(0.05)
            return original()

        tools.list_installed_packages = slow_list
        results: list[str | None] = []
        threads = [
            threading.Thread(target=lambda: results.append(cache.available_version("bash")))
            for _ in range(8)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert results == ["4.2.37"] * 8
        assert tools.calls["fetch_index"] == 1

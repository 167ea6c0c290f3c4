# SPDX-License-Identifier: MIT
"""Tests for orcabuild.toolchains.composer."""

from __future__ import annotations

import itertools

import pytest

from orcabuild.configure.detect import CompilerId, Linker, ToolchainInfo
from orcabuild.configure.platform import OsFamily
from orcabuild.core.errors import InvalidConfigError, InvalidTargetError
from orcabuild.core.request import BuildConfig, BuildOptions, BuildRequest, BuildTarget
from orcabuild.toolchains.composer import CORE_SOURCES, compose, sources_for
from orcabuild.toolchains.policy import PIE_LINK_DEFAULT, PIE_LINK_LLD

LINUX_CLANG = ToolchainInfo(
    os_family=OsFamily.LINUX,
    compiler_path="clang",
    compiler_id=CompilerId.CLANG,
    compiler_version="17.0.6",
)
LINUX_LLD = ToolchainInfo(
    os_family=OsFamily.LINUX,
    compiler_path="gcc",
    compiler_id=CompilerId.GCC,
    compiler_version="13.2.1",
    linker=Linker.LLD,
)
MAC_CLANG = ToolchainInfo(
    os_family=OsFamily.MAC,
    compiler_path="cc",
    compiler_id=CompilerId.CLANG,
    compiler_version="15.0.0",
)
TOOLCHAINS = [LINUX_CLANG, LINUX_LLD, MAC_CLANG]

BASELINE_ERRORS = [
    "-Werror=implicit-function-declaration",
    "-Werror=implicit-int",
    "-Werror=incompatible-pointer-types",
    "-Werror=int-conversion",
]

ALL_OPTIONS = [
    BuildOptions(protections_enabled=p, pie_enabled=i)
    for p, i in itertools.product([False, True], repeat=2)
]


def request(config: str, target: str, **options: bool) -> BuildRequest:
    return BuildRequest.from_names(config, target, BuildOptions(**options))


def all_requests():
    for config, target, options in itertools.product(BuildConfig, BuildTarget, ALL_OPTIONS):
        yield BuildRequest(config, target, options)


class TestScenarios:
    def test_debug_orca_linux_clang(self):
        fs = compose(LINUX_CLANG, request("debug", "orca"))
        flags = fs.compiler_flags

        for flag in ["-std=c99", "-pipe", "-Wall", *BASELINE_ERRORS]:
            assert flag in flags
        assert "-DDEBUG" in flags
        assert "-ggdb" in flags
        assert "-fsanitize=address" in flags
        assert "-fsanitize=undefined" in flags
        assert "-Og" in flags
        assert fs.sources == CORE_SOURCES + ("cli_main.c",)
        assert fs.libraries == ()
        assert fs.library_flags == []
        assert fs.output_name == "orca"
        assert not any(f.startswith("-fuse-ld") for f in flags)

    def test_release_tui_pie_mac(self):
        fs = compose(MAC_CLANG, request("release", "tui", pie_enabled=True))
        flags = fs.compiler_flags

        assert "-DNDEBUG" in flags
        assert "-O2" in flags
        assert "-g0" in flags
        assert "-ggdb" not in flags
        assert "-fno-stack-protector" in flags
        assert "-fpie" in flags
        assert PIE_LINK_DEFAULT in flags
        assert PIE_LINK_LLD not in flags
        assert "-D_XOPEN_SOURCE_EXTENDED=1" in flags
        assert fs.library_flags == ["-lncurses"]
        assert fs.output_name == "tui"


class TestProperties:
    @pytest.mark.parametrize("toolchain", TOOLCHAINS)
    def test_deterministic(self, toolchain):
        for req in all_requests():
            first = compose(toolchain, req)
            second = compose(toolchain, req)
            assert first == second
            assert first.command("out") == second.command("out")

    @pytest.mark.parametrize("toolchain", TOOLCHAINS)
    def test_debug_sanitizers_release_none(self, toolchain):
        for req in all_requests():
            flags = compose(toolchain, req).compiler_flags
            if req.config is BuildConfig.DEBUG:
                assert "-fsanitize=address" in flags
                assert "-fsanitize=undefined" in flags
                assert "-O2" not in flags
            else:
                assert not any(f.startswith("-fsanitize") for f in flags)

    @pytest.mark.parametrize("toolchain", TOOLCHAINS)
    def test_pie_link_flags_follow_linker(self, toolchain):
        for req in all_requests():
            flags = compose(toolchain, req).compiler_flags
            assert not (PIE_LINK_LLD in flags and PIE_LINK_DEFAULT in flags)
            if not req.options.pie_enabled:
                assert PIE_LINK_LLD not in flags
                assert PIE_LINK_DEFAULT not in flags
                assert "-fpie" not in flags
            elif toolchain.has_lld:
                assert PIE_LINK_LLD in flags
            else:
                assert PIE_LINK_DEFAULT in flags

    @pytest.mark.parametrize("toolchain", TOOLCHAINS)
    def test_stack_protector_disable(self, toolchain):
        for req in all_requests():
            flags = compose(toolchain, req).compiler_flags
            expected = (
                req.config is BuildConfig.RELEASE
                and not req.options.protections_enabled
            )
            assert ("-fno-stack-protector" in flags) == expected

    @pytest.mark.parametrize("toolchain", TOOLCHAINS)
    def test_stack_protector_disable_follows_warnings(self, toolchain):
        flags = compose(toolchain, request("release", "orca")).compiler_flags
        assert flags.index("-fno-stack-protector") > flags.index("-Werror=int-conversion")

    @pytest.mark.parametrize("toolchain", TOOLCHAINS)
    def test_tui_curses_and_charset(self, toolchain):
        for req in all_requests():
            fs = compose(toolchain, req)
            if req.target is BuildTarget.TUI:
                expected = "ncurses" if toolchain.is_mac else "ncursesw"
                assert fs.libraries == (expected,)
                assert "_XOPEN_SOURCE_EXTENDED=1" in fs.defines
            else:
                assert fs.libraries == ()
                assert "_XOPEN_SOURCE_EXTENDED=1" not in fs.defines

    def test_protections(self):
        flags = compose(LINUX_CLANG, request("debug", "orca", protections_enabled=True))
        assert "-D_FORTIFY_SOURCE=2" in flags.compiler_flags
        assert "-fstack-protector-strong" in flags.compiler_flags

    def test_lld_selected(self):
        flags = compose(LINUX_LLD, request("debug", "orca")).compiler_flags
        assert "-fuse-ld=lld" in flags

    def test_lld_pie(self):
        flags = compose(LINUX_LLD, request("release", "tui", pie_enabled=True)).compiler_flags
        assert PIE_LINK_LLD in flags
        assert PIE_LINK_DEFAULT not in flags


class TestPlatformDifferences:
    def test_debug_optimization(self):
        assert compose(MAC_CLANG, request("debug", "orca")).optimization == "-O1"
        assert compose(LINUX_CLANG, request("debug", "orca")).optimization == "-Og"

    def test_release_strip_and_lto_not_on_mac(self):
        """macOS release builds are neither stripped nor LTO'd."""
        mac = compose(MAC_CLANG, request("release", "orca")).compiler_flags
        linux = compose(LINUX_CLANG, request("release", "orca")).compiler_flags
        assert "-flto" in linux
        assert "-s" in linux
        assert "-flto" not in mac
        assert "-s" not in mac

    def test_unknown_os_uses_non_mac_policy(self):
        toolchain = ToolchainInfo(os_family=OsFamily.UNKNOWN, compiler_path="cc")
        fs = compose(toolchain, request("debug", "tui"))
        assert fs.optimization == "-Og"
        assert fs.libraries == ("ncursesw",)


class TestSources:
    def test_core_first(self):
        for target in BuildTarget:
            sources = sources_for(target)
            assert sources[: len(CORE_SOURCES)] == CORE_SOURCES

    def test_entry_points_last(self):
        assert sources_for(BuildTarget.ORCA)[-1] == "cli_main.c"
        assert sources_for(BuildTarget.TUI)[-1] == "tui_main.c"

    def test_source_dir(self):
        sources = sources_for(BuildTarget.ORCA, "src")
        assert sources[0] == "src/gbuffer.c"
        assert sources[-1] == "src/cli_main.c"

    def test_compose_source_dir(self):
        fs = compose(LINUX_CLANG, request("debug", "tui"), source_dir="orca-c")
        assert all(s.startswith("orca-c/") for s in fs.sources)

    def test_compiler_from_toolchain(self):
        assert compose(LINUX_LLD, request("debug", "orca")).compiler == "gcc"


class TestRejectsInvalidRequests:
    def test_invalid_config(self):
        bad = BuildRequest("profile", BuildTarget.ORCA)  # type: ignore[arg-type]
        with pytest.raises(InvalidConfigError):
            compose(LINUX_CLANG, bad)

    def test_invalid_target(self):
        bad = BuildRequest(BuildConfig.DEBUG, "gui")  # type: ignore[arg-type]
        with pytest.raises(InvalidTargetError):
            compose(LINUX_CLANG, bad)

"""Unit tests for BuildConfig resolution."""

from pathlib import Path
from unittest.mock import patch

from conftest import LINUX, MAC_ARM, FakeHost

from ortools_build.compiler import SHIM_FLAGS
from ortools_build.config import BuildConfig
from ortools_build.directives import DirectiveFormat
from ortools_build.host import TargetTriple


def cargo_env(tmp_path, **extra):
    env = {
        "HOST": LINUX,
        "TARGET": LINUX,
        "CARGO_MANIFEST_DIR": str(tmp_path / "crate"),
        "OUT_DIR": str(tmp_path / "out"),
    }
    env.update(extra)
    return env


class TestFromHost:
    """Tests for BuildConfig.from_host()"""

    def test_cargo_environment(self, tmp_path):
        config = BuildConfig.from_host(FakeHost(env=cargo_env(tmp_path)))

        crate = tmp_path / "crate"
        assert config.host == TargetTriple.parse(LINUX)
        assert config.target == TargetTriple.parse(LINUX)
        assert config.manifest_dir == crate
        assert config.out_dir == tmp_path / "out"
        assert config.proto_files == (crate / "src/cp_model.proto", crate / "src/sat_parameters.proto")
        assert config.proto_include_dirs == (crate / "src",)
        assert config.shim_source == crate / "src/cp_sat_wrapper.cpp"
        assert config.archive_name == "cp_sat_wrapper.a"
        assert config.cxx_flags == SHIM_FLAGS
        assert config.link_libs == ("ortools", "protobuf")
        assert config.lib_env_var == "OR_TOOLS_LIB_DIR"
        assert config.include_env_var == "OR_TOOLS_INCLUDE_DIR"
        assert not config.skip_compile
        assert config.cxx == "c++"
        assert config.ar == "ar"
        assert config.directive_format is DirectiveFormat.CARGO

    def test_explicit_arguments_win(self, tmp_path):
        config = BuildConfig.from_host(
            FakeHost(env=cargo_env(tmp_path)),
            manifest_dir=tmp_path / "other",
            out_dir=tmp_path / "elsewhere",
            host_triple=MAC_ARM,
            target_triple=MAC_ARM,
        )
        assert config.target.raw == MAC_ARM
        assert config.manifest_dir == tmp_path / "other"
        assert config.out_dir == tmp_path / "elsewhere"

    def test_target_defaults_to_host(self, tmp_path):
        env = cargo_env(tmp_path)
        del env["TARGET"]
        config = BuildConfig.from_host(FakeHost(env=env))
        assert config.target == config.host

    def test_host_detected_when_unset(self, tmp_path):
        env = cargo_env(tmp_path)
        del env["HOST"]
        del env["TARGET"]
        with patch("ortools_build.config.detect_host_triple", return_value=TargetTriple.parse(MAC_ARM)):
            config = BuildConfig.from_host(FakeHost(env=env))
        assert config.host.raw == MAC_ARM
        assert config.target.raw == MAC_ARM

    def test_out_dir_default(self, tmp_path):
        env = cargo_env(tmp_path)
        del env["OUT_DIR"]
        config = BuildConfig.from_host(FakeHost(env=env))
        assert config.out_dir == tmp_path / "crate" / "target" / "ortools-build"

    def test_manifest_defaults_to_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        env = cargo_env(tmp_path)
        del env["CARGO_MANIFEST_DIR"]
        config = BuildConfig.from_host(FakeHost(env=env))
        assert config.manifest_dir == Path.cwd()

    def test_docs_build_skips_compile(self, tmp_path):
        config = BuildConfig.from_host(FakeHost(env=cargo_env(tmp_path, DOCS_RS="1")))
        assert config.skip_compile

    def test_empty_docs_var_is_unset(self, tmp_path):
        config = BuildConfig.from_host(FakeHost(env=cargo_env(tmp_path, DOCS_RS="")))
        assert not config.skip_compile

    def test_toolchain_from_env(self, tmp_path):
        config = BuildConfig.from_host(FakeHost(env=cargo_env(tmp_path, CXX="clang++", AR="llvm-ar")))
        assert config.cxx == "clang++"
        assert config.ar == "llvm-ar"

    def test_keyword_overrides(self, tmp_path):
        config = BuildConfig.from_host(
            FakeHost(env=cargo_env(tmp_path)),
            directive_format=DirectiveFormat.JSON,
            lib_env_var="MY_LIB",
            cxx="g++-13",
        )
        assert config.directive_format is DirectiveFormat.JSON
        assert config.lib_env_var == "MY_LIB"
        assert config.cxx == "g++-13"


class TestShimDisplayPath:
    def test_relative_to_manifest(self, tmp_path):
        config = BuildConfig.from_host(FakeHost(env=cargo_env(tmp_path)))
        assert config.shim_display_path == "src/cp_sat_wrapper.cpp"

    def test_absolute_outside_manifest(self, tmp_path):
        config = BuildConfig.from_host(
            FakeHost(env=cargo_env(tmp_path)),
            shim_source=tmp_path / "vendor" / "shim.cpp",
        )
        assert config.shim_display_path == str(tmp_path / "vendor" / "shim.cpp")

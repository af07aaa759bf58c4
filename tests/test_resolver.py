import pytest

from godocfriend.errors import ResolutionError
from godocfriend.resolver import GoModuleResolver, find_go_module, locate_source_root


class TestFindGoModule:
    def test_finds_module_in_ancestor(self, tmp_path):
        (tmp_path / "go.mod").write_text("module example.com/demo\n\ngo 1.21\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_go_module(nested) == (tmp_path, "example.com/demo")

    def test_quoted_module_path(self, tmp_path):
        (tmp_path / "go.mod").write_text('// comment\nmodule "example.com/quoted"\n')

        assert find_go_module(tmp_path) == (tmp_path, "example.com/quoted")

    def test_missing_module_directive(self, tmp_path):
        (tmp_path / "go.mod").write_text("go 1.21\n")

        with pytest.raises(ResolutionError):
            find_go_module(tmp_path)


def test_locate_source_root(tmp_path):
    package_dir = tmp_path / "src" / "github.com" / "acme" / "tool"
    package_dir.mkdir(parents=True)

    assert locate_source_root(package_dir) == tmp_path / "src"


class TestCanonicalImportPath:
    def test_from_go_mod(self, tmp_path):
        (tmp_path / "go.mod").write_text("module example.com/demo\n")
        sub = tmp_path / "internal" / "util"
        sub.mkdir(parents=True)
        resolver = GoModuleResolver()

        assert resolver.canonical_import_path(tmp_path) == "example.com/demo"
        assert resolver.canonical_import_path(sub) == "example.com/demo/internal/util"

    def test_from_gopath_layout(self, tmp_path):
        package_dir = tmp_path / "src" / "github.com" / "acme" / "tool"
        package_dir.mkdir(parents=True)

        assert GoModuleResolver().canonical_import_path(package_dir) == "github.com/acme/tool"

    def test_import_base_overrides_go_mod(self, tmp_path):
        (tmp_path / "go.mod").write_text("module example.com/demo\n")
        sub = tmp_path / "sub"
        sub.mkdir()
        resolver = GoModuleResolver(import_base="github.com/acme/tool/", base_dir=tmp_path)

        assert resolver.canonical_import_path(tmp_path) == "github.com/acme/tool"
        assert resolver.canonical_import_path(sub) == "github.com/acme/tool/sub"

    def test_import_base_outside_base_dir(self, tmp_path):
        inside = tmp_path / "inside"
        outside = tmp_path / "outside"
        inside.mkdir()
        outside.mkdir()
        resolver = GoModuleResolver(import_base="example.com/x", base_dir=inside)

        with pytest.raises(ResolutionError):
            resolver.canonical_import_path(outside)

    def test_unresolvable(self, tmp_path):
        with pytest.raises(ResolutionError) as exc_info:
            GoModuleResolver().canonical_import_path(tmp_path)

        assert "bad import path" in str(exc_info.value)


class TestRepositoryUrl:
    def test_known_host_uses_repository_root(self):
        resolver = GoModuleResolver()

        assert resolver.repository_url("github.com/acme/tool/internal/util") == "https://github.com/acme/tool"
        assert resolver.repository_url("gitlab.com/acme/tool") == "https://gitlab.com/acme/tool"

    def test_known_host_with_incomplete_path(self):
        with pytest.raises(ResolutionError):
            GoModuleResolver().repository_url("github.com/acme")

    def test_other_host_uses_full_path(self):
        assert GoModuleResolver().repository_url("example.com/demo/sub") == "https://example.com/demo/sub"

    def test_local_path_has_no_url(self):
        assert GoModuleResolver().repository_url("demo/sub") == ""

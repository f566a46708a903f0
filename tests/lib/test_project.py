"""Tests for TypeScript project resolution."""
from pathlib import Path

import pytest

from testely.lib.domain import Document, LocationStrategy, SuffixConvention
from testely.lib.errors import SourceNotFound, Unsupported
from testely.lib.project import JavaProject, Project, to_source_name, to_test_name


def _files(root: Path) -> set:
    return {p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file()}


class TestNameRewriting:
    def test_to_test_name(self) -> None:
        assert to_test_name("foo.ts", SuffixConvention.SPEC) == "foo.spec.ts"
        assert to_test_name("foo.ts", SuffixConvention.TEST) == "foo.test.ts"

    def test_to_test_name_keeps_component_extension(self) -> None:
        assert to_test_name("Widget.tsx", SuffixConvention.SPEC) == "Widget.spec.tsx"

    def test_to_source_name(self) -> None:
        assert to_source_name("foo.spec.ts") == "foo.ts"
        assert to_source_name("foo.test.ts") == "foo.ts"

    def test_to_source_name_keeps_component_extension(self) -> None:
        assert to_source_name("Widget.spec.tsx") == "Widget.tsx"
        assert to_source_name("Widget.test.tsx") == "Widget.tsx"

    def test_only_trailing_suffix_is_rewritten(self) -> None:
        assert to_source_name("spec.helpers.spec.ts") == "spec.helpers.ts"
        assert to_test_name("my.ts.utils.ts", SuffixConvention.SPEC) == "my.ts.utils.spec.ts"

    def test_non_typescript_name(self) -> None:
        with pytest.raises(Unsupported):
            to_test_name("README.md", SuffixConvention.SPEC)

    def test_extension_case_is_preserved(self) -> None:
        assert to_test_name("Foo.TS", SuffixConvention.SPEC) == "Foo.spec.TS"
        assert to_source_name("Foo.spec.TSX") == "Foo.TSX"


class TestIsTestFile:
    @pytest.mark.parametrize("name", ["x.spec.ts", "x.test.ts", "x.spec.tsx", "x.test.tsx"])
    def test_known_suffixes(self, project, name: str) -> None:
        assert project.is_test_file(Path(name))

    @pytest.mark.parametrize("name", ["x.ts", "x.tsx", "spec.ts", "x.spec.js", "x.specs.ts"])
    def test_source_files(self, project, name: str) -> None:
        assert not project.is_test_file(Path(name))

    def test_independent_of_configured_extension(self, ts_workspace: Path, make_context) -> None:
        """Should detect .spec tests while .test is configured."""
        context = make_context(ts_workspace, LocationStrategy.SAME_DIRECTORY, SuffixConvention.TEST)
        project = context.registry.projects[0]

        assert project.is_test_file(Path("x.spec.ts"))


class TestResponsibleFor:
    def test_scores_typescript_by_distance(self, project, ts_workspace: Path) -> None:
        doc = Document.from_path(ts_workspace / "src/components/Widget.tsx")

        assert project.responsible_for(doc) == 4

    def test_declines_other_languages(self, project, ts_workspace: Path) -> None:
        readme = ts_workspace / "README.md"
        readme.write_text("# app")

        assert project.responsible_for(Document.from_path(readme)) is None

    def test_upper_case_extension_is_resolved(self, project, ts_workspace: Path) -> None:
        """Should resolve a file it claims even when the extension is upper case."""
        source = ts_workspace / "src/Legacy.TS"
        source.write_text("")

        assert project.responsible_for(Document.from_path(source)) is not None
        assert project.get_test_file_path(source) == ts_workspace / "src/Legacy.spec.TS"


class TestGetTestFilePath:
    def test_same_directory(self, project, ts_workspace: Path) -> None:
        result = project.get_test_file_path(ts_workspace / "src/foo.ts")

        assert result == ts_workspace / "src/foo.spec.ts"

    @pytest.mark.parametrize("strategy, expected", [
        (LocationStrategy.SAME_DIRECTORY, "src/foo.spec.ts"),
        (LocationStrategy.SAME_DIRECTORY_NESTED_TEST, "src/__test__/foo.spec.ts"),
        (LocationStrategy.SAME_DIRECTORY_NESTED_TESTS, "src/__tests__/foo.spec.ts"),
        (LocationStrategy.ROOT_TEST_FOLDER_FLAT, "test/foo.spec.ts"),
    ])
    def test_materializes_under_configured_strategy(
        self, ts_workspace: Path, make_context, strategy: LocationStrategy, expected: str
    ) -> None:
        """Should create exactly one empty file where the configured strategy puts it."""
        project = make_context(ts_workspace, strategy).registry.projects[0]
        before = _files(ts_workspace)

        result = project.get_test_file_path(ts_workspace / "src/foo.ts")

        assert result == ts_workspace / expected
        assert result.exists()
        assert result.read_text() == ""
        assert _files(ts_workspace) - before == {expected}

    def test_existing_test_under_other_strategy(self, ts_workspace: Path, make_context, notifier) -> None:
        """Should return the existing test and not create a duplicate."""
        existing = ts_workspace / "src/__tests__/foo.spec.ts"
        existing.parent.mkdir()
        existing.write_text("it('works')")
        project = make_context(ts_workspace, LocationStrategy.SAME_DIRECTORY).registry.projects[0]
        before = _files(ts_workspace)

        result = project.get_test_file_path(ts_workspace / "src/foo.ts")

        assert result == existing
        assert _files(ts_workspace) == before
        assert any(LocationStrategy.SAME_DIRECTORY_NESTED_TESTS.value in info for info in notifier.infos)

    def test_existing_test_with_other_extension(self, ts_workspace: Path, make_context, notifier) -> None:
        existing = ts_workspace / "src/foo.test.ts"
        existing.write_text("")
        project = make_context(ts_workspace, LocationStrategy.SAME_DIRECTORY, SuffixConvention.SPEC).registry.projects[0]

        result = project.get_test_file_path(ts_workspace / "src/foo.ts")

        assert result == existing
        assert not (ts_workspace / "src/foo.spec.ts").exists()
        assert notifier.infos == ["Found test file with extension '.test' instead of configured '.spec'."]

    def test_component_file(self, project, ts_workspace: Path) -> None:
        result = project.get_test_file_path(ts_workspace / "src/components/Widget.tsx")

        assert result == ts_workspace / "src/components/Widget.spec.tsx"

    def test_root_flat_prefers_existing_tests_folder(self, ts_workspace: Path, make_context) -> None:
        (ts_workspace / "tests").mkdir()
        project = make_context(ts_workspace, LocationStrategy.ROOT_TEST_FOLDER_FLAT).registry.projects[0]

        result = project.get_test_file_path(ts_workspace / "src/foo.ts")

        assert result == ts_workspace / "tests/foo.spec.ts"

    def test_root_flat_finds_test_in_either_folder(self, ts_workspace: Path, make_context) -> None:
        (ts_workspace / "test").mkdir()
        (ts_workspace / "tests").mkdir()
        existing = ts_workspace / "tests/foo.spec.ts"
        existing.write_text("")
        project = make_context(ts_workspace, LocationStrategy.ROOT_TEST_FOLDER_FLAT).registry.projects[0]

        assert project.get_test_file_path(ts_workspace / "src/foo.ts") == existing
        assert not (ts_workspace / "test/foo.spec.ts").exists()

    def test_root_nested_is_unsupported(self, ts_workspace: Path, make_context) -> None:
        project = make_context(ts_workspace, LocationStrategy.ROOT_TEST_FOLDER_NESTED).registry.projects[0]
        before = _files(ts_workspace)

        with pytest.raises(Unsupported):
            project.get_test_file_path(ts_workspace / "src/foo.ts")
        assert _files(ts_workspace) == before

    def test_prompts_for_missing_configuration(self, ts_workspace: Path, make_context, chooser) -> None:
        chooser.answers = [LocationStrategy.SAME_DIRECTORY_NESTED_TESTS.value, SuffixConvention.TEST.value]
        project = make_context(ts_workspace).registry.projects[0]

        result = project.get_test_file_path(ts_workspace / "src/foo.ts")

        assert result == ts_workspace / "src/__tests__/foo.test.ts"
        assert len(chooser.prompts) == 2


class TestGetSourceFilePath:
    def test_round_trip(self, project, ts_workspace: Path) -> None:
        test_file = project.get_test_file_path(ts_workspace / "src/foo.ts")

        assert test_file.name == "foo.spec.ts"
        assert project.get_source_file_path(test_file) == ts_workspace / "src/foo.ts"

    def test_nested_tests_folder(self, ts_workspace: Path, make_context) -> None:
        test_file = ts_workspace / "src/components/__tests__/Widget.spec.tsx"
        test_file.parent.mkdir()
        test_file.write_text("")
        project = make_context(ts_workspace, LocationStrategy.SAME_DIRECTORY_NESTED_TESTS).registry.projects[0]

        assert project.get_source_file_path(test_file) == ts_workspace / "src/components/Widget.tsx"

    def test_falls_back_to_other_strategy(self, ts_workspace: Path, make_context, notifier) -> None:
        test_file = ts_workspace / "src/__test__/foo.spec.ts"
        test_file.parent.mkdir()
        test_file.write_text("")
        project = make_context(ts_workspace, LocationStrategy.SAME_DIRECTORY).registry.projects[0]

        assert project.get_source_file_path(test_file) == ts_workspace / "src/foo.ts"
        assert any(LocationStrategy.SAME_DIRECTORY_NESTED_TEST.value in info for info in notifier.infos)

    def test_missing_source_raises_and_creates_nothing(self, project, ts_workspace: Path) -> None:
        orphan = ts_workspace / "src/orphan.spec.ts"
        orphan.write_text("")
        before = _files(ts_workspace)

        with pytest.raises(SourceNotFound):
            project.get_source_file_path(orphan)
        assert _files(ts_workspace) == before

    def test_root_flat_searches_project(self, ts_workspace: Path, make_context) -> None:
        test_file = ts_workspace / "test/Widget.spec.tsx"
        test_file.parent.mkdir()
        test_file.write_text("")
        project = make_context(ts_workspace, LocationStrategy.ROOT_TEST_FOLDER_FLAT).registry.projects[0]

        assert project.get_source_file_path(test_file) == ts_workspace / "src/components/Widget.tsx"

    def test_root_flat_asks_between_candidates(self, ts_workspace: Path, make_context, chooser) -> None:
        (ts_workspace / "lib").mkdir()
        (ts_workspace / "lib/foo.ts").write_text("")
        test_file = ts_workspace / "tests/foo.spec.ts"
        test_file.parent.mkdir()
        test_file.write_text("")
        project = make_context(ts_workspace, LocationStrategy.ROOT_TEST_FOLDER_FLAT).registry.projects[0]
        chooser.answers = ["src/foo.ts"]

        assert project.get_source_file_path(test_file) == ts_workspace / "src/foo.ts"
        assert chooser.prompts[-1][1] == ["lib/foo.ts", "src/foo.ts"]

    def test_root_flat_dismissed_choice(self, ts_workspace: Path, make_context, chooser) -> None:
        (ts_workspace / "lib").mkdir()
        (ts_workspace / "lib/foo.ts").write_text("")
        test_file = ts_workspace / "test/foo.spec.ts"
        test_file.parent.mkdir()
        test_file.write_text("")
        project = make_context(ts_workspace, LocationStrategy.ROOT_TEST_FOLDER_FLAT).registry.projects[0]

        with pytest.raises(SourceNotFound):
            project.get_source_file_path(test_file)

    def test_root_flat_ignores_node_modules(self, ts_workspace: Path, make_context) -> None:
        vendored = ts_workspace / "node_modules/dep/foo.ts"
        vendored.parent.mkdir(parents=True)
        vendored.write_text("")
        test_file = ts_workspace / "test/foo.spec.ts"
        test_file.parent.mkdir()
        test_file.write_text("")
        project = make_context(ts_workspace, LocationStrategy.ROOT_TEST_FOLDER_FLAT).registry.projects[0]

        assert project.get_source_file_path(test_file) == ts_workspace / "src/foo.ts"

    def test_root_flat_takes_bracketed_names_literally(self, ts_workspace: Path, make_context) -> None:
        """Should not read route names like [id].ts as glob patterns."""
        route = ts_workspace / "src/pages/[id].ts"
        route.parent.mkdir()
        route.write_text("")
        (ts_workspace / "src/d.ts").write_text("")
        test_file = ts_workspace / "test/[id].spec.ts"
        test_file.parent.mkdir()
        test_file.write_text("")
        project = make_context(ts_workspace, LocationStrategy.ROOT_TEST_FOLDER_FLAT).registry.projects[0]

        assert project.get_source_file_path(test_file) == route


class TestStubProjects:
    @pytest.mark.parametrize("stub", [Project(), JavaProject()])
    def test_declines_and_refuses(self, stub: Project, tmp_path: Path) -> None:
        doc = Document.from_path(tmp_path / "Main.java")

        assert stub.responsible_for(doc) is None
        with pytest.raises(Unsupported):
            stub.is_test_file(tmp_path / "Main.java")
        with pytest.raises(Unsupported):
            stub.get_test_file_path(tmp_path / "Main.java")
        with pytest.raises(Unsupported):
            stub.get_source_file_path(tmp_path / "MainTest.java")

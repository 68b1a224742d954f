"""Tests for the generation orchestrator and output writers."""

from __future__ import annotations

import json

import pytest

from conftest import EXPECTED_ARTIFACT_COUNT
from reql_codegen.codegen import (
    FAMILY_ORDER,
    CodeGenerator,
    FileSystemWriter,
    GeneratorConfig,
    GeneratorError,
    MemoryWriter,
    RenderError,
    TemplateKind,
    generate_all,
)
from reql_codegen.codegen.core.generator import OutputCategory
from reql_codegen.metadata import MetadataError, MetadataStore


# ---------------------------------------------------------------------------
# Full runs
# ---------------------------------------------------------------------------


@pytest.mark.integration
class TestGenerateAll:
    def test_artifact_count(self, generator, memory_writer):
        result = generator.generate_all()

        assert len(result.artifacts) == EXPECTED_ARTIFACT_COUNT
        assert len(memory_writer.files) == EXPECTED_ARTIFACT_COUNT
        assert result.collisions == []

    def test_family_order(self, generator):
        artifacts = generator.generate_all().artifacts

        assert artifacts[0].file_name == "Version.cs"
        assert artifacts[9].file_name == "ReqlQuery.cs"
        assert artifacts[19].file_name == "GlobalOptions.cs"
        assert [a.file_name for a in artifacts[20:24]] == [
            "ReqlError.cs",
            "ReqlDriverError.cs",
            "ReqlAuthError.cs",
            "ReqlServerError.cs",
        ]
        assert [a.file_name for a in artifacts[24:]] == ["Format.cs", "ReadMode.cs", "Durability.cs"]

    def test_output_layout(self, generator, memory_writer, config):
        generator.generate_all()
        out = config.output_dir

        assert "public enum QueryType" in memory_writer.read(out / "Proto" / "QueryType.cs")
        assert "class Table" in memory_writer.read(out / "Ast" / "Table.cs")
        assert "class GlobalOptions" in memory_writer.read(out / "Model" / "GlobalOptions.cs")
        assert "enum ReadMode" in memory_writer.read(out / "Model" / "ReadMode.cs")
        assert "class ReqlAuthError : ReqlDriverError" in memory_writer.read(out / "ReqlAuthError.cs")
        assert set(config.all_output_dirs()) <= memory_writer.directories

    def test_deterministic(self, config, store):
        first = MemoryWriter()
        second = MemoryWriter()
        CodeGenerator(config, store=store, writer=first).generate_all()
        CodeGenerator(config, store=store, writer=second).generate_all()

        assert first.files == second.files

    def test_clean_removes_stale_files(self, generator, memory_writer, config):
        stale = config.output_dir / "Ast" / "Removed.cs"
        memory_writer.write_file(stale, "old")

        generator.generate_all()
        assert stale not in memory_writer.files

    def test_clean_on_disk(self, config, store):
        stale = config.output_dir / "Ast" / "Removed.cs"
        stale.parent.mkdir(parents=True)
        stale.write_text("old", encoding="utf-8")

        CodeGenerator(config, store=store, writer=FileSystemWriter()).generate_all()

        assert not stale.exists()
        assert (config.output_dir / "Ast" / "Table.cs").exists()
        assert (config.output_dir / "ReqlError.cs").exists()
        assert len(list(config.output_dir.rglob("*.cs"))) == EXPECTED_ARTIFACT_COUNT

    def test_refuses_to_clean_a_tree_holding_metadata(self, metadata_dir, store):
        config = GeneratorConfig(metadata_dir=metadata_dir, output_dir=metadata_dir.parent)
        writer = FileSystemWriter()

        with pytest.raises(GeneratorError, match="contains metadata_dir"):
            CodeGenerator(config, store=store, writer=writer).generate_all()
        assert (metadata_dir / "proto.json").exists()

    def test_refuses_to_clean_the_working_directory(self, tmp_path, monkeypatch, store):
        monkeypatch.chdir(tmp_path)
        keep = tmp_path / "notes.txt"
        keep.write_text("mine", encoding="utf-8")
        config = GeneratorConfig(metadata_dir=tmp_path / "Metadata", output_dir=".")

        with pytest.raises(GeneratorError, match="working directory"):
            CodeGenerator(config, store=store, writer=FileSystemWriter()).generate_all()
        assert keep.read_text(encoding="utf-8") == "mine"

    def test_store_is_loaded_from_metadata_dir(self, config):
        writer = MemoryWriter()
        result = CodeGenerator(config, writer=writer).generate_all()
        assert len(result.artifacts) == EXPECTED_ARTIFACT_COUNT

    def test_convenience_function(self, config):
        writer = MemoryWriter()
        result = generate_all(config, writer=writer)
        assert len(writer.files) == len(result.artifacts) == EXPECTED_ARTIFACT_COUNT

    def test_alias_diagnostics(self, generator):
        result = generator.generate_all()
        messages = [d.message for d in result.diagnostics]

        assert "Alias for FOREACH will be foreach_" in messages
        assert "Alias for DEFAULT will be default_" in messages
        assert "Deprecated: JAVASCRIPT_OLD" in messages


# ---------------------------------------------------------------------------
# Single families
# ---------------------------------------------------------------------------


class TestRunFamily:
    @pytest.mark.parametrize("family", FAMILY_ORDER)
    def test_each_family_runs_alone(self, generator, memory_writer, family):
        result = generator.run(family)
        assert result.family == family
        assert result.artifacts
        assert len(memory_writer.files) == len(result.artifacts)

    def test_single_family_does_not_clean(self, generator, memory_writer, config):
        keep = config.output_dir / "Ast" / "Handwritten.cs"
        memory_writer.write_file(keep, "keep")

        generator.run("exceptions")
        assert memory_writer.read(keep) == "keep"

    def test_unknown_family(self, generator):
        with pytest.raises(ValueError, match="Unknown renderer family"):
            generator.run("nope")

    def test_sanitizer_runs_before_ast_rendering(self, generator, memory_writer, config):
        generator.run("ast")
        text = memory_writer.read(config.output_dir / "Ast" / "Foreach.cs")
        assert 'public const string Alias = "foreach_";' in text

    def test_store_term_table_is_not_mutated(self, generator, store):
        generator.run("ast")
        assert store.get_term_table()["FOREACH"].sharp_alias is None
        assert "sharp_alias" not in store.term_info["FOREACH"]

    def test_reserved_words_come_from_config(self, store, metadata_dir, tmp_path):
        config = GeneratorConfig(
            metadata_dir=metadata_dir,
            output_dir=tmp_path / "out",
            reserved_words={"table"},
        )
        writer = MemoryWriter()
        CodeGenerator(config, store=store, writer=writer).run("ast")

        assert 'Alias = "table_"' in writer.read(config.output_dir / "Ast" / "Table.cs")
        assert "Alias" not in writer.read(config.output_dir / "Ast" / "Foreach.cs")


# ---------------------------------------------------------------------------
# Collisions and failures
# ---------------------------------------------------------------------------


class TestCollisionsAndErrors:
    def test_duplicate_exception_names_collide(self, generator, store):
        store.global_info["exception_hierarchy"] = {"A": {"B": {}}, "C": {"B": {}}}

        result = generator.generate_all()

        assert [a.file_name for a in result.collisions] == ["B.cs"]
        warnings = [d for d in result.diagnostics if d.level == "warning"]
        assert len(warnings) == 1
        assert "collision" in warnings[0].message

    def test_last_writer_wins(self, generator, store, memory_writer, config):
        store.global_info["exception_hierarchy"] = {"A": {"B": {}}, "C": {"B": {}}}
        generator.generate_all()
        assert "class B : C" in memory_writer.read(config.output_dir / "B.cs")

    def test_collision_across_families(self, generator, store):
        # Model/Format.cs and Format.cs are different paths
        store.global_info["exception_hierarchy"] = {"Format": {}}
        assert generator.generate_all().collisions == []

    def test_metadata_error_propagates(self, generator, store, memory_writer):
        del store.protocol["Response"]

        with pytest.raises(MetadataError, match="Response"):
            generator.generate_all()

        # every enum path is resolved before the first one is rendered
        assert memory_writer.files == {}

    @pytest.mark.parametrize(
        "family, document, key",
        [
            ("exceptions", "global_info", "exception_hierarchy"),
            ("ast", "term_info", "DB"),
        ],
    )
    def test_null_metadata_entity_fails_the_family(
        self, generator, store, memory_writer, family, document, key
    ):
        getattr(store, document)[key] = None

        with pytest.raises(MetadataError):
            generator.run(family)
        assert memory_writer.files == {}

    def test_later_family_failure_keeps_earlier_output(self, generator, store, memory_writer):
        store.global_info["optarg_enums"] = ["not", "a", "mapping"]

        with pytest.raises(MetadataError):
            generator.generate_all()

        assert len(memory_writer.files) == EXPECTED_ARTIFACT_COUNT - 3

    def test_render_error_propagates(self, generator, registry, engine):
        engine.add_template("broken.cs.j2", "{{ undefined_name }}")
        registry.register(TemplateKind.EXCEPTION, "ReqlServerError", "broken.cs.j2")

        with pytest.raises(RenderError, match="ReqlServerError"):
            generator.generate_all()

    def test_missing_metadata_dir(self, tmp_path):
        config = GeneratorConfig(metadata_dir=tmp_path / "missing", output_dir=tmp_path / "out")
        with pytest.raises(FileNotFoundError):
            CodeGenerator(config, writer=MemoryWriter()).generate_all()


# ---------------------------------------------------------------------------
# Writers
# ---------------------------------------------------------------------------


class TestWriters:
    def test_memory_writer_clean_is_scoped(self, tmp_path):
        writer = MemoryWriter()
        writer.write_file(tmp_path / "out" / "A.cs", "a")
        writer.write_file(tmp_path / "outside" / "B.cs", "b")

        writer.clean(tmp_path / "out")

        assert list(writer.files) == [tmp_path / "outside" / "B.cs"]

    def test_file_system_writer_overwrites(self, tmp_path):
        writer = FileSystemWriter()
        target = tmp_path / "x" / "A.cs"
        writer.write_file(target, "one")
        writer.write_file(target, "two")
        assert target.read_text(encoding="utf-8") == "two"

    def test_file_system_writer_clean_missing_dir(self, tmp_path):
        FileSystemWriter().clean(tmp_path / "never-created")

    def test_artifact_path(self, config, generator):
        artifact = generator.run("global-options").artifacts[0]
        assert artifact.category == OutputCategory.MODEL
        assert artifact.path(config) == config.output_dir / "Model" / "GlobalOptions.cs"


def test_metadata_dir_round_trip(metadata_dir, store):
    loaded = MetadataStore.from_directory(metadata_dir)
    assert loaded.term_info == store.term_info
    assert json.loads((metadata_dir / "proto.json").read_text(encoding="utf-8")) == store.protocol

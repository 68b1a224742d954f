"""Shared pytest fixtures for the reql-codegen test suite.

Provides:
- A small but complete set of metadata documents
- A metadata directory written to a temporary path
- Configuration pointing at temporary input/output directories
- A CodeGenerator that writes to memory
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

import pytest

from reql_codegen.codegen import CodeGenerator, MemoryWriter, create_default_registry
from reql_codegen.codegen.core.config import GeneratorConfig
from reql_codegen.codegen.core.templates import create_template_engine
from reql_codegen.metadata import MetadataStore


# ---------------------------------------------------------------------------
# Metadata documents
# ---------------------------------------------------------------------------

PROTOCOL: dict[str, Any] = {
    "VersionDummy": {
        "Version": {
            "V0_1": 1063369270,
            "V0_2": 1915781601,
            "V0_3": 1601562686,
            "V0_4": 1074539808,
            "V1_0": 885177795,
        },
        "Protocol": {"PROTOBUF": 656407617, "JSON": 2120839367},
    },
    "Query": {
        "QueryType": {
            "START": 1,
            "CONTINUE": 2,
            "STOP": 3,
            "NOREPLY_WAIT": 4,
            "SERVER_INFO": 5,
        }
    },
    "Frame": {"FrameType": {"POS": 1, "OPT": 2}},
    "Response": {
        "ResponseType": {
            "SUCCESS_ATOM": 1,
            "SUCCESS_SEQUENCE": 2,
            "SUCCESS_PARTIAL": 3,
            "WAIT_COMPLETE": 4,
            "CLIENT_ERROR": 16,
            "COMPILE_ERROR": 17,
            "RUNTIME_ERROR": 18,
        },
        "ResponseNote": {"SEQUENCE_FEED": 1, "ATOM_FEED": 2},
        "ErrorType": {"INTERNAL": 1000000, "NON_EXISTENCE": 3100000},
    },
    "Datum": {
        "DatumType": {
            "R_NULL": 1,
            "R_BOOL": 2,
            "R_JSON": {"note": "wire only"},
        }
    },
    "Term": {
        "TermType": {
            "DATUM": 1,
            "MAKE_ARRAY": 2,
            "MAKE_OBJ": 3,
            "DB": 14,
            "TABLE": 15,
            "FUNCALL": 64,
            "FOREACH": 68,
        }
    },
}

TERM_INFO: dict[str, Any] = {
    "DB": {"include_in": ["T_TOP_LEVEL"]},
    "TABLE": {"include_in": ["T_TOP_LEVEL", "db"]},
    "MAKE_OBJ": {"include_in": ["T_TOP_LEVEL"]},
    "FUNCALL": {"include_in": ["T_TOP_LEVEL"]},
    "FOREACH": {"include_in": ["T_EXPR"]},
    "DEFAULT": {"include_in": ["T_EXPR"]},
    "FILTER": {"include_in": ["T_EXPR"]},
    "LITERAL": {"deprecated": False},
    "JAVASCRIPT_OLD": {"deprecated": True, "include_in": ["T_TOP_LEVEL"]},
}

GLOBAL_INFO: dict[str, Any] = {
    "global_optargs": {
        "durability": "string",
        "noreply": "bool",
        "profile": "bool",
        "db": "T_DB",
        "array_limit": "int",
    },
    "optarg_enums": {
        "--format": ["native", "raw"],
        "--read_mode": ["single", "majority", "outdated"],
        "--durability": ["hard", "soft"],
    },
    "exception_hierarchy": {
        "ReqlError": {
            "ReqlDriverError": {"ReqlAuthError": {}},
            "ReqlServerError": {},
        }
    },
}

# proto enums + (2 synthetic + 8 live terms) + GlobalOptions + 4 exceptions + 3 optarg enums
EXPECTED_ARTIFACT_COUNT = 9 + 10 + 1 + 4 + 3


@pytest.fixture
def metadata_docs() -> dict[str, Any]:
    """Deep copies of the three metadata documents, safe to modify."""
    return {
        "proto.json": copy.deepcopy(PROTOCOL),
        "term_info.json": copy.deepcopy(TERM_INFO),
        "global_info.json": copy.deepcopy(GLOBAL_INFO),
    }


@pytest.fixture
def metadata_dir(tmp_path: Path, metadata_docs: dict[str, Any]) -> Path:
    """Metadata directory holding the three documents."""
    directory = tmp_path / "Metadata"
    directory.mkdir()
    for name, document in metadata_docs.items():
        (directory / name).write_text(json.dumps(document), encoding="utf-8")
    return directory


@pytest.fixture
def store(metadata_docs: dict[str, Any]) -> MetadataStore:
    return MetadataStore(
        protocol=metadata_docs["proto.json"],
        term_info=metadata_docs["term_info.json"],
        global_info=metadata_docs["global_info.json"],
    )


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


@pytest.fixture
def config(tmp_path: Path, metadata_dir: Path) -> GeneratorConfig:
    return GeneratorConfig(metadata_dir=metadata_dir, output_dir=tmp_path / "Generated")


@pytest.fixture
def registry():
    return create_default_registry()


@pytest.fixture
def engine():
    return create_template_engine()


@pytest.fixture
def memory_writer() -> MemoryWriter:
    return MemoryWriter()


@pytest.fixture
def generator(config, store, registry, memory_writer, engine) -> CodeGenerator:
    """CodeGenerator over the in-memory store, writing to memory."""
    return CodeGenerator(
        config,
        store=store,
        registry=registry,
        writer=memory_writer,
        template_engine=engine,
    )

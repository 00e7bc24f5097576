"""
Tests for passage metadata, JSONL loading and configuration.
"""

import json

import pytest

from src.rag import Passage, PassageMetadata, RAGConfig, load_passages
from src.rag.config import DB_TABLE, DOC_TABLE
from src.rag.index import docx_passage_id, pdf_passage_id, table_passage_id
from src.rag.metadata import UNKNOWN_SOURCE, MetadataBuilder, as_metadata


class TestPassageMetadata:
    def test_parse_and_serialize(self):
        raw = "doc:quyche;title:Quy chế đào tạo;section:Điều 16"
        meta = PassageMetadata.parse(raw)
        assert meta.get("title") == "Quy chế đào tạo"
        assert meta.get("section") == "Điều 16"
        assert meta.serialize() == raw

    def test_value_may_contain_colon(self):
        meta = PassageMetadata.parse("section:Điều 14: Đăng ký học tập")
        assert meta.get("section") == "Điều 14: Đăng ký học tập"

    def test_bare_segments_and_blank_input(self):
        meta = PassageMetadata.parse("public.students; ;table:students")
        assert meta.fields == (("", "public.students"), ("table", "students"))
        assert PassageMetadata.parse(None) == PassageMetadata()
        assert not PassageMetadata.parse("")

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("doc:quyche;title:Quy chế đào tạo", "Quy chế đào tạo"),
            ("doc:quyche;section:Điều 16", "quyche"),
            ("section:Điều 31;page:4", "section:Điều 31"),
            ("public.students", "public.students"),
            ("", UNKNOWN_SOURCE),
        ],
    )
    def test_source_name_fallbacks(self, raw, expected):
        assert PassageMetadata.parse(raw).source_name() == expected

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("schema:public;table:students", True),
            ("source:Database;name:lich_thi", True),
            ("doc:quyche;title:Quy chế đào tạo", False),
            ("", False),
        ],
    )
    def test_is_database(self, raw, expected):
        assert PassageMetadata.parse(raw).is_database() is expected

    def test_as_metadata_coerces(self):
        assert as_metadata({"doc": "quyche"}).serialize() == "doc:quyche"
        assert as_metadata("doc:quyche").get("doc") == "quyche"
        meta = PassageMetadata.parse("doc:x")
        assert as_metadata(meta) is meta

    def test_builder_skips_empty_and_strips_separator(self):
        meta = (
            MetadataBuilder()
            .add("doc", "quyche")
            .add("title", "Quy chế; sửa đổi")
            .add("section", None)
            .add("page", "  ")
            .build()
        )
        assert meta.serialize() == "doc:quyche;title:Quy chế, sửa đổi"


class TestPassages:
    def test_ids(self):
        assert docx_passage_id("quyche.docx", 3) == "docx::quyche.docx::3"
        assert pdf_passage_id("nn.pdf", 0) == "pdf::nn.pdf::0"
        assert table_passage_id("public", "students") == "table::public.students"

    def test_table_passage_is_database(self):
        p = Passage.for_table("public", "students", "Bảng sinh viên")
        assert p.id == "table::public.students"
        assert p.metadata.is_database()

    def test_load_passages(self, tmp_path):
        path = tmp_path / "passages.jsonl"
        rows = [
            {"id": "a", "content": "Điều 16", "metadata": "doc:quyche"},
            {"id": "b", "text": "Bảng lịch thi", "metadata": {"table": "lich_thi"}, "embedding": [0.1, 0.2]},
        ]
        path.write_text("\n".join(json.dumps(r, ensure_ascii=False) for r in rows) + "\n\n", encoding="utf-8")

        passages = load_passages(path)

        assert [p.id for p in passages] == ["a", "b"]
        assert passages[0].metadata.get("doc") == "quyche"
        assert passages[0].embedding is None
        assert passages[1].content == "Bảng lịch thi"
        assert passages[1].metadata.is_database()
        assert passages[1].embedding == [0.1, 0.2]

    def test_load_passages_rejects_bad_lines(self, tmp_path):
        path = tmp_path / "bad.jsonl"
        path.write_text('{"id": "a"}\n', encoding="utf-8")
        with pytest.raises(ValueError, match="needs 'id' and 'content'"):
            load_passages(path)

        path.write_text("not json\n", encoding="utf-8")
        with pytest.raises(ValueError, match="invalid JSON"):
            load_passages(path)

    def test_load_passages_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_passages(tmp_path / "missing.jsonl")


class TestConfig:
    def test_defaults(self):
        config = RAGConfig()
        assert config.tables == (DOC_TABLE, DB_TABLE)
        assert config.fanout_policy == "fail"
        assert config.min_vec_score == 0.2
        assert config.min_lex_score == 0.0005

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("RAG_TOP_K", "5")
        monkeypatch.setenv("RAG_TABLES", "kb_docs")
        monkeypatch.setenv("RAG_FANOUT_POLICY", "drop")
        monkeypatch.setenv("RAG_USE_RERANKER", "false")
        monkeypatch.setenv("RAG_STORE_TIMEOUT", "not-a-number")

        config = RAGConfig.from_env()

        assert config.top_k == 5
        assert config.tables == ("kb_docs",)
        assert config.fanout_policy == "drop"
        assert config.use_reranker is False
        assert config.store_timeout == RAGConfig().store_timeout

    def test_invalid_values_rejected(self):
        with pytest.raises(ValueError):
            RAGConfig(fanout_policy="ignore")
        with pytest.raises(ValueError):
            RAGConfig(top_k=0)

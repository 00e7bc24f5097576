"""
Tests for the rule-based re-ranker.
"""

import pytest

from src.rag import Hit, PassageMetadata, RAGConfig, RuleBasedReranker


def _hit(pid: str, content: str, score: float, metadata: str = "") -> Hit:
    return Hit(id=pid, content=content, metadata=PassageMetadata.parse(metadata), score=score)


@pytest.fixture
def reranker() -> RuleBasedReranker:
    return RuleBasedReranker(config=RAGConfig())


def test_empty_input(reranker):
    assert reranker.rerank([], "cảnh báo học vụ là gì") == []


def test_topic_bonus_reorders_candidates(reranker):
    hits = [
        _hit("a", "Quy định chung về tổ chức đào tạo", 0.90),
        _hit("b", "Sinh viên được nghỉ học tạm thời", 0.85),
        _hit("c", "Sinh viên bị cảnh báo học vụ nếu ĐTBHK dưới 0.8", 0.80),
    ]
    ranked = reranker.rerank(hits, "cảnh báo học vụ là gì")

    assert [h.id for h in ranked] == ["c", "a", "b"]
    by_id = {h.id: h for h in ranked}
    # c: overlap (cảnh, báo, học) + "cảnh báo học vụ" + "đtbhk"
    assert by_id["c"].score == pytest.approx(0.80 + 0.06 + 0.20 + 0.10)
    assert by_id["a"].score == pytest.approx(0.90)
    assert by_id["b"].score == pytest.approx(0.85 + 0.02)


def test_rerank_does_not_touch_first_stage_breakdown(reranker):
    hit = Hit(id="c", content="cảnh báo học vụ", score=0.5, vec_score=0.4, meta_boost=0.25)
    (ranked,) = reranker.rerank([hit], "cảnh báo học vụ")
    assert ranked.score > hit.score
    assert ranked.vec_score == 0.4
    assert ranked.meta_boost == 0.25
    assert hit.score == 0.5


def test_more_matching_rules_never_score_lower(reranker):
    question = "tín chỉ tối đa"
    one = _hit("one", "Quy định về tín chỉ tối đa.", 0.5)
    two = _hit("two", "Quy định về tín chỉ tối đa, số tín chỉ đăng ký.", 0.5)

    assert reranker.boost(one, question) == pytest.approx(0.06 + 0.25)
    assert reranker.boost(two, question) == pytest.approx(0.06 + 0.25 + 0.20)
    assert [h.id for h in reranker.rerank([one, two], question)] == ["two", "one"]


def test_several_topics_can_fire(reranker):
    names = {t.name for t in reranker.fired_topics("cảnh báo học vụ khi đăng ký tín chỉ")}
    assert names == {"academic_warning", "credit_registration"}


def test_article_bonus_reads_metadata(reranker):
    hit = _hit("kltn", "Nội dung", 0.3, metadata="doc:quyche;section:Điều 31")
    assert reranker.boost(hit, "khóa luận") == pytest.approx(0.25)


def test_equal_scores_keep_input_order(reranker):
    hits = [_hit(str(i), "nội dung không liên quan", 0.4) for i in range(5)]
    assert [h.id for h in reranker.rerank(hits, "xyz")] == ["0", "1", "2", "3", "4"]


def test_term_overlap_counts_each_long_term_once(reranker):
    # "là" and "gì" are too short; "học" counted once
    assert reranker.term_overlap("học học học", "học là gì học") == pytest.approx(0.02)


def test_generic_bonuses(reranker):
    hit = _hit("g", "Quy trình gồm 3 bước, sinh viên phải nộp đơn theo Điều 5.", 0.1)
    # condition (0.05) + procedure (0.05) + article reference (0.02) + overlap (quy, trình, điều)
    assert reranker.boost(hit, "quy trình và điều kiện") == pytest.approx(0.05 + 0.05 + 0.02 + 0.06)


def test_article_reference_needs_a_number(reranker):
    hit = _hit("x", "Theo điều khoản chung", 0.1)
    assert reranker.boost(hit, "abc") == 0.0

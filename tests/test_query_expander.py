"""
Tests for Vietnamese synonym query expansion.
"""

from src.rag import QueryExpander


def test_question_without_synonym_keys_is_unchanged():
    expander = QueryExpander()
    assert expander.expand("hôm nay trời đẹp") == "hôm nay trời đẹp"
    assert expander.matched_keys("hôm nay trời đẹp") == []


def test_original_tokens_come_first_and_are_kept():
    expander = QueryExpander()
    question = "Điều kiện tốt nghiệp là gì"
    terms = expander.expand_terms(question)

    assert terms[: len(question.split())] == question.split()
    assert len(terms) > len(question.split())


def test_expansion_is_a_superset_of_question_words():
    expander = QueryExpander()
    for question in [
        "số tín chỉ tối thiểu mỗi học kỳ",
        "cảnh báo học vụ là gì",
        "Khi nào bị đình chỉ học tập?",
        "hôm nay thời tiết thế nào",
    ]:
        expanded_words = {w.lower() for w in expander.expand(question).split()}
        assert {w.lower() for w in question.split()} <= expanded_words


def test_synonym_phrases_added_for_matched_key():
    expander = QueryExpander()
    terms = expander.expand_terms("cảnh báo học vụ là gì")

    assert "xử lý học vụ" in terms
    assert "Điều 16" in terms
    assert "ĐTBHK dưới" in terms


def test_overlapping_keys_all_fire_without_duplicates():
    expander = QueryExpander()
    question = "đăng ký tín chỉ tối đa"

    keys = expander.matched_keys(question)
    assert {"tín chỉ", "đăng ký", "tối đa"} <= set(keys)

    terms = expander.expand_terms(question)
    assert terms.count("đăng ký tín chỉ") == 1
    assert terms.count("Điều 14") == 1
    assert "thời gian tối đa" in terms
    assert len({t.lower() for t in terms}) == len(terms)


def test_key_matching_is_case_insensitive_and_first_spelling_wins():
    expander = QueryExpander()
    terms = expander.expand_terms("điểm toeic tối thiểu")

    assert "Nghe-Đọc" in terms
    assert "toeic" in terms
    assert "TOEIC" not in terms


def test_custom_synonym_table():
    expander = QueryExpander(synonyms={"kltn": ("khóa luận tốt nghiệp",)})
    assert expander.expand("Điều kiện làm KLTN") == "Điều kiện làm KLTN khóa luận tốt nghiệp"

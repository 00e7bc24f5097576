"""
First-stage boost tables for hybrid retrieval.

Each table is an ordered list of rules; a passage receives the bonus of the
FIRST rule that matches (most specific rules come first). A rule matches when
every field pattern occurs in the passage field (metadata or content) and its
question condition holds. All matching is case-insensitive substring search,
the same as ILIKE '%pattern%' on the store side.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple


@dataclass(frozen=True)
class BoostRule:
    """One row of a first-match boost table."""

    bonus: float
    field_all: Tuple[str, ...]
    question_any: Tuple[str, ...] = ()
    question_all: Tuple[str, ...] = ()

    def question_matches(self, question: str) -> bool:
        q = question.lower()
        if self.question_any and not any(p.lower() in q for p in self.question_any):
            return False
        return all(p.lower() in q for p in self.question_all)

    def field_matches(self, text: str | None) -> bool:
        if not text:
            return False
        t = text.lower()
        return all(p.lower() in t for p in self.field_all)

    def matches(self, text: str | None, question: str) -> bool:
        return self.question_matches(question) and self.field_matches(text)


def _rule(
    bonus: float,
    field: str | Tuple[str, ...],
    q_any: Tuple[str, ...] | str = (),
    q_all: Tuple[str, ...] = (),
) -> BoostRule:
    field_all = (field,) if isinstance(field, str) else tuple(field)
    question_any = (q_any,) if isinstance(q_any, str) else tuple(q_any)
    return BoostRule(bonus=bonus, field_all=field_all, question_any=question_any, question_all=q_all)


def active_rules(rules: Sequence[BoostRule], question: str) -> Tuple[BoostRule, ...]:
    """Rules whose question condition holds; order is preserved."""
    return tuple(r for r in rules if r.question_matches(question))


def first_match_bonus(rules: Sequence[BoostRule], text: str | None, question: str) -> float:
    for rule in rules:
        if rule.matches(text, question):
            return rule.bonus
    return 0.0


METADATA_RULES: Tuple[BoostRule, ...] = (
    # Cảnh báo học vụ
    _rule(0.25, "cảnh báo học vụ", "cảnh báo"),
    _rule(0.20, "đình chỉ", "đình chỉ"),
    _rule(0.20, "xử lý học vụ", "học vụ"),
    _rule(0.25, "điều 16", ("cảnh báo", "đình chỉ", "học vụ")),
    # Đăng ký tín chỉ
    _rule(0.25, "đăng ký học tập", ("tín chỉ", "đăng ký")),
    _rule(0.25, "điều 14", ("tín chỉ", "đăng ký", "học kỳ hè", "học cải thiện", "học vượt")),
    # Thời gian & học kỳ
    _rule(0.25, "điều 6", ("thời gian", "hoàn thành", "văn bằng", "khóa học")),
    _rule(0.25, "điều 5", ("tuần", "học kỳ", "đánh giá")),
    _rule(0.25, "điều 4", ("tiết", "tín chỉ học tập", "lý thuyết")),
    _rule(0.25, "điều 7", ("chương trình đào tạo", "tổng số tín chỉ")),
    # Khóa luận
    _rule(0.25, "điều 31", ("khóa luận", "kltn", "đồ án")),
    _rule(0.25, ("điều 10", "kltn"), ("hết thời gian", "bảo vệ")),
    # Tốt nghiệp
    _rule(0.25, "điều 32", ("xét tốt nghiệp", "đợt xét", "công nhận tốt nghiệp")),
    _rule(0.25, "điều 33", ("xếp loại", "xuất sắc", "giảm bậc")),
    _rule(0.15, "tốt nghiệp", "tốt nghiệp"),
    # Điểm
    _rule(0.25, "điều 24", ("đtbctl", "điểm trung bình", "điểm i", "điểm m")),
    _rule(0.20, "điều 3", ("học lại", "học phần")),
    # Song ngành
    _rule(0.25, "song ngành", ("song ngành", "ngành thứ hai")),
    # Ngoại ngữ
    _rule(0.20, "ngoại ngữ", ("ngoại ngữ", "tiếng anh", "toeic", "ielts", "tiếng nhật")),
    _rule(0.20, "điều 8", ("chuẩn", "ngoại ngữ", "anh văn")),
)

CONTENT_RULES: Tuple[BoostRule, ...] = (
    # Cảnh báo học vụ
    _rule(0.20, "cảnh báo học vụ", "cảnh báo"),
    _rule(0.20, "đình chỉ học tập", "đình chỉ"),
    _rule(0.10, "đtbhk", ("cảnh báo", "điểm")),
    # Tín chỉ đăng ký
    _rule(0.20, "tín chỉ tối thiểu", ("tín chỉ", "tối thiểu")),
    _rule(0.20, "tín chỉ tối đa", ("tín chỉ", "tối đa")),
    _rule(0.15, "đăng ký học", ("đăng ký", "tín chỉ")),
    _rule(0.20, "số tín chỉ đăng ký", "tín chỉ"),
    _rule(0.25, "12 tín chỉ", "học kỳ hè"),
    _rule(0.20, "học cải thiện", "cải thiện"),
    _rule(0.20, "học vượt", "học vượt"),
    # Thời gian & học kỳ
    _rule(0.20, "thời gian tối đa", ("thời gian", "tối đa")),
    _rule(0.25, "tuần thực học", "tuần"),
    _rule(0.25, "15 tiết", ("tiết", "lý thuyết")),
    _rule(0.20, "50 phút", "tiết"),
    _rule(0.25, ("120", "132"), "tổng số tín chỉ"),
    # Khóa luận
    _rule(0.20, "khóa luận tốt nghiệp", ("khóa luận", "kltn")),
    _rule(0.20, "không nợ quá", q_all=("điều kiện", "kltn")),
    _rule(0.20, "gia hạn", "hết thời gian"),
    # Tốt nghiệp & xếp loại
    _rule(0.20, "đợt xét", "xét tốt nghiệp"),
    _rule(0.25, "xếp loại tốt nghiệp", "xếp loại"),
    _rule(0.25, ("xuất sắc", "giảm"), "xuất sắc"),
    # Điểm
    _rule(0.25, "đtbctl", "đtbctl"),
    _rule(0.20, "điểm i", "điểm i"),
    _rule(0.20, "điểm m", "điểm m"),
    _rule(0.25, "học phần học lại", "học lại"),
    # Song ngành
    _rule(0.25, "ngành thứ hai", ("song ngành", "ngành thứ hai")),
    _rule(0.20, "30 tín chỉ", "song ngành"),
    # Ngoại ngữ
    _rule(0.20, "toeic", "toeic"),
    _rule(0.20, "ielts", "ielts"),
    _rule(0.25, "tiếng nhật", "tiếng nhật"),
    _rule(0.25, "xếp lớp", "xếp lớp"),
    _rule(0.20, "miễn học phần", "miễn"),
    _rule(0.20, "chuẩn đầu ra", "chuẩn"),
    _rule(0.20, "eng01", "anh văn 1"),
    _rule(0.20, "eng02", "anh văn 2"),
    _rule(0.20, "eng03", "anh văn 3"),
    _rule(0.25, ("bậc", "khung năng lực"), "bậc"),
    _rule(0.25, "2 năm", q_all=("thời hạn", "chứng chỉ")),
)

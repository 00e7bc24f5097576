"""
Topic table for the second-stage re-ranker.

A topic fires when the lowercased question contains any of its triggers.
Every bonus of a fired topic is then checked independently and all matching
bonuses add up; several topics can fire for one question.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

CONTENT = "content"
CONTENT_OR_METADATA = "content_or_metadata"


@dataclass(frozen=True)
class SubstringBonus:
    """
    Bonus for a passage field containing a phrase.

    ``any_of``: at least one must be present; ``all_of``: each must also be
    present; ``question_any``: an extra condition on the question itself.
    """

    bonus: float
    any_of: Tuple[str, ...]
    all_of: Tuple[str, ...] = ()
    field: str = CONTENT
    question_any: Tuple[str, ...] = ()

    def applies(self, content: str, metadata: str, question: str) -> bool:
        if self.question_any and not any(q in question for q in self.question_any):
            return False
        if self.field == CONTENT_OR_METADATA:
            def present(p: str) -> bool:
                return p in content or p in metadata
        else:
            def present(p: str) -> bool:
                return p in content
        return any(present(p) for p in self.any_of) and all(present(p) for p in self.all_of)


@dataclass(frozen=True)
class TopicRule:
    name: str
    triggers: frozenset
    bonuses: Tuple[SubstringBonus, ...]

    def fires(self, question: str) -> bool:
        return any(t in question for t in self.triggers)


def _b(bonus: float, *any_of: str, all_of: Tuple[str, ...] = (), question_any: Tuple[str, ...] = ()) -> SubstringBonus:
    return SubstringBonus(bonus=bonus, any_of=any_of, all_of=all_of, question_any=question_any)


def _article(bonus: float, phrase: str) -> SubstringBonus:
    return SubstringBonus(bonus=bonus, any_of=(phrase,), field=CONTENT_OR_METADATA)


TOPIC_RULES: Tuple[TopicRule, ...] = (
    TopicRule(
        name="academic_warning",
        triggers=frozenset({"cảnh báo", "đình chỉ", "học vụ"}),
        bonuses=(
            _article(0.25, "điều 16"),
            _b(0.20, "cảnh báo học vụ"),
            _b(0.20, "đình chỉ học tập"),
            _b(0.10, "đtbhk", "điểm trung bình"),
            _b(0.10, "buộc thôi học"),
        ),
    ),
    TopicRule(
        name="credit_registration",
        triggers=frozenset({"tín chỉ", "đăng ký", "tối thiểu", "tối đa"}),
        bonuses=(
            _article(0.25, "điều 14"),
            _article(0.25, "đăng ký học tập"),
            _b(0.25, "tín chỉ tối thiểu", "tín chỉ tối đa"),
            _b(0.20, "số tín chỉ đăng ký"),
            _b(0.30, "14 ≤", "≤ 24", "14 \\le", "\\le 24", "14 <= n", "n <= 24"),
            _b(0.20, "học kỳ hè", question_any=("hè",)),
        ),
    ),
    TopicRule(
        name="semester_duration",
        triggers=frozenset({"thời gian", "tuần", "tiết", "văn bằng", "khóa học"}),
        bonuses=(
            _article(0.25, "điều 6"),
            _article(0.25, "điều 5"),
            _article(0.25, "điều 4"),
            _b(0.20, "thời gian tối đa"),
            _b(0.25, "tuần thực học"),
            _b(0.25, "15 tiết", "50 phút"),
        ),
    ),
    TopicRule(
        name="curriculum_credits",
        triggers=frozenset({"tổng số tín chỉ", "chương trình đào tạo", "ctđt", "120", "132"}),
        bonuses=(
            _article(0.25, "điều 7"),
            _b(0.30, "120", all_of=("132",)),
        ),
    ),
    TopicRule(
        name="retake_improvement",
        triggers=frozenset({"cải thiện", "học lại", "học vượt"}),
        bonuses=(
            _article(0.25, "điều 14"),
            _article(0.20, "điều 3"),
            _b(0.25, "học cải thiện"),
            _b(0.25, "học phần học lại"),
        ),
    ),
    TopicRule(
        name="grades_gpa",
        triggers=frozenset({"đtbctl", "điểm trung bình", "điểm i", "điểm m", "điểm bl"}),
        bonuses=(
            _article(0.25, "điều 24"),
            _b(0.20, "đtbctl"),
            _b(0.20, "điểm i", "điểm m"),
        ),
    ),
    TopicRule(
        name="thesis",
        triggers=frozenset({"khóa luận", "kltn", "đồ án", "bảo vệ", "luận văn"}),
        bonuses=(
            _article(0.25, "điều 31"),
            _article(0.20, "điều 10"),
            _b(0.20, "khóa luận tốt nghiệp"),
            _b(0.20, "không nợ quá"),
            _b(0.25, "gia hạn", question_any=("hết thời gian",)),
        ),
    ),
    TopicRule(
        name="graduation",
        triggers=frozenset({"tốt nghiệp", "xét tốt nghiệp", "xếp loại", "xuất sắc", "giảm bậc"}),
        bonuses=(
            _article(0.25, "điều 32"),
            _article(0.25, "điều 33"),
            _b(0.20, "đợt xét"),
            _b(0.20, "xếp loại tốt nghiệp"),
            _b(0.25, "xuất sắc", all_of=("giảm",)),
        ),
    ),
    TopicRule(
        name="dual_degree",
        triggers=frozenset({"song ngành", "ngành thứ hai", "văn bằng 2", "bằng kép"}),
        bonuses=(
            _article(0.25, "song ngành"),
            _b(0.25, "ngành thứ hai"),
            _b(0.20, "30 tín chỉ"),
        ),
    ),
    TopicRule(
        name="foreign_language",
        triggers=frozenset({
            "ngoại ngữ", "tiếng anh", "tiếng nhật", "toeic", "ielts", "anh văn",
            "chuẩn đầu ra", "miễn học phần", "xếp lớp", "chứng chỉ", "cttt", "ctc", "cttn",
        }),
        bonuses=(
            _article(0.20, "điều 8"),
            _b(0.20, "toeic"),
            _b(0.20, "ielts"),
            _b(0.25, "tiếng nhật"),
            _b(0.20, "n3", "n4", "n5"),
            _b(0.25, "xếp lớp"),
            _b(0.20, "miễn học phần"),
            _b(0.20, "chuẩn đầu ra"),
            _b(0.15, "eng01", "eng02", "eng03"),
            _b(0.25, "khung năng lực", "cefr", all_of=("bậc",)),
            _b(0.25, "2 năm", question_any=("thời hạn",)),
            _b(0.20, "cttt", "ctc", "cttn"),
            _b(0.25, "450", question_any=("toeic",)),
            _b(0.25, "500", question_any=("toeic",)),
            _b(0.25, "5.0", question_any=("ielts",)),
        ),
    ),
)

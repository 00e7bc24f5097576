"""
Vietnamese academic-regulation synonym table used for lexical query expansion.

Keys are matched case-insensitively as substrings of the question; every
related phrase of a matching key is added to the lexical query. Article
references ("Điều N") point at the regulation clause that governs the topic.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Tuple

_SYNONYMS = {
    # Tốt nghiệp & xếp loại
    "tốt nghiệp": ("tốt nghiệp", "hoàn thành", "ra trường", "cấp bằng", "công nhận tốt nghiệp", "xét tốt nghiệp", "Điều 32", "Điều 33"),
    "xét tốt nghiệp": ("xét tốt nghiệp", "công nhận tốt nghiệp", "điều kiện tốt nghiệp", "đợt xét", "Điều 32"),
    "xếp loại": ("xếp loại", "xếp loại tốt nghiệp", "xuất sắc", "giỏi", "khá", "trung bình", "Điều 33"),
    "xuất sắc": ("xuất sắc", "xếp loại xuất sắc", "giảm bậc", "Điều 33"),
    # Điểm số & ĐTBCTL
    "điểm": ("điểm", "điểm số", "thang điểm", "điểm trung bình", "ĐTBHK", "điểm trung bình học kỳ", "Điều 24"),
    "ĐTBCTL": ("ĐTBCTL", "điểm trung bình chung tích lũy", "điểm trung bình tích lũy", "xếp hạng tốt nghiệp", "Điều 24"),
    "điểm trung bình": ("điểm trung bình", "ĐTBHK", "ĐTBC", "ĐTBCTL", "Điều 24"),
    "điểm I": ("điểm I", "điểm M", "điểm BL", "không tính", "Điều 24"),
    "điểm cuối kỳ": ("điểm cuối kỳ", "điểm giữa kỳ", "thay thế", "điểm thi"),
    # Học phí
    "học phí": ("học phí", "đóng học phí", "miễn giảm học phí", "phí", "hoàn thành học phí"),
    # Tín chỉ & đăng ký
    "tín chỉ": ("tín chỉ", "số tín chỉ", "đăng ký tín chỉ", "tín chỉ tối thiểu", "tín chỉ tối đa", "đăng ký học", "Điều 14", "Điều 4", "Điều 7"),
    "đăng ký": ("đăng ký", "đăng ký học", "đăng ký tín chỉ", "đăng ký học tập", "đăng ký học phần", "Điều 14"),
    "tối thiểu": ("tối thiểu", "ít nhất", "tối đa", "nhiều nhất", "giới hạn", "số tín chỉ đăng ký"),
    "tối đa": ("tối đa", "nhiều nhất", "tối thiểu", "ít nhất", "giới hạn", "số tín chỉ đăng ký", "thời gian tối đa"),
    "học cải thiện": ("học cải thiện", "cải thiện điểm", "học lại", "đăng ký cải thiện", "Điều 14", "Điều 3"),
    "học lại": ("học lại", "học phần học lại", "đăng ký học lại", "Điều 3"),
    "học vượt": ("học vượt", "đăng ký học vượt", "học phần mới", "học kỳ hè", "Điều 14"),
    # Học kỳ & thời gian
    "học kỳ": ("học kỳ", "học kỳ chính", "học kỳ hè", "kỳ học", "semester", "Điều 5"),
    "học kỳ hè": ("học kỳ hè", "kỳ hè", "hè", "12 tín chỉ", "Điều 14"),
    "tuần": ("tuần", "tuần thực học", "tuần học", "Điều 5"),
    "tiết": ("tiết", "tiết học", "tiết lý thuyết", "50 phút", "15 tiết", "Điều 4"),
    "thời gian": ("thời gian", "thời gian tối đa", "thời gian hoàn thành", "Điều 6"),
    "khóa học": ("khóa học", "hoàn thành khóa học", "thời gian khóa học", "Điều 6"),
    "văn bằng": ("văn bằng", "văn bằng 1", "văn bằng 2", "cử nhân", "Điều 6"),
    "chương trình đào tạo": ("chương trình đào tạo", "CTĐT", "chương trình", "Điều 7"),
    # Khóa luận tốt nghiệp
    "khóa luận": ("khóa luận", "luận văn", "đồ án tốt nghiệp", "KLTN", "Điều 31", "Điều 10"),
    "đồ án": ("đồ án", "khóa luận", "đồ án tốt nghiệp", "ĐATN", "Điều 31"),
    "bảo vệ": ("bảo vệ", "bảo vệ khóa luận", "hội đồng bảo vệ", "ra bảo vệ", "Điều 10"),
    "hết thời gian": ("hết thời gian", "gia hạn", "không ra bảo vệ", "Điều 10"),
    # Cảnh báo & xử lý học vụ
    "cảnh báo": ("cảnh báo", "cảnh báo học vụ", "xử lý học vụ", "Điều 16"),
    "cảnh báo học vụ": ("cảnh báo học vụ", "cảnh báo", "xử lý học vụ", "ĐTBHK dưới", "điểm trung bình dưới", "Điều 16"),
    "đình chỉ": ("đình chỉ", "đình chỉ học tập", "buộc thôi học", "thi hộ", "vi phạm kỷ luật", "Điều 16"),
    "đình chỉ học tập": ("đình chỉ học tập", "đình chỉ", "bị đình chỉ", "tạm đình chỉ"),
    "thôi học": ("thôi học", "buộc thôi học", "bị buộc thôi học", "nghỉ học", "Điều 17", "cho thôi học"),
    "buộc thôi học": ("buộc thôi học", "thôi học", "đuổi học", "kỷ luật"),
    "học vụ": ("học vụ", "xử lý học vụ", "cảnh báo học vụ", "quy trình học vụ", "Điều 16"),
    "xử lý học vụ": ("xử lý học vụ", "cảnh báo học vụ", "đình chỉ", "buộc thôi học", "Điều 16"),
    "vi phạm": ("vi phạm", "vi phạm kỷ luật", "kỷ luật", "thi hộ", "gian lận"),
    # Song ngành
    "song ngành": ("song ngành", "ngành thứ hai", "hai ngành", "chương trình thứ hai", "đào tạo song ngành"),
    "ngành thứ hai": ("ngành thứ hai", "song ngành", "chương trình thứ hai", "học thêm ngành"),
    # Ngoại ngữ
    "ngoại ngữ": ("ngoại ngữ", "tiếng Anh", "tiếng Nhật", "TOEIC", "IELTS", "chuẩn ngoại ngữ", "chuẩn đầu ra"),
    "tiếng Anh": ("tiếng Anh", "Anh văn", "ENG01", "ENG02", "ENG03", "English", "ngoại ngữ"),
    "tiếng Nhật": ("tiếng Nhật", "Nhật ngữ", "JLPT", "N3", "Việt - Nhật", "CLC"),
    "TOEIC": ("TOEIC", "điểm TOEIC", "Nghe-Đọc", "Nói-Viết", "450", "500", "600", "chuẩn TOEIC"),
    "IELTS": ("IELTS", "điểm IELTS", "Academic", "General Training", "Indicator"),
    "chuẩn đầu ra": ("chuẩn đầu ra", "chuẩn ngoại ngữ", "xét tốt nghiệp", "miễn học phần"),
    "miễn học phần": ("miễn học phần", "miễn môn", "xét miễn", "điểm miễn", "điểm M"),
    "xếp lớp": ("xếp lớp", "kiểm tra xếp lớp", "thi xếp lớp", "đầu khóa"),
    "chứng chỉ": ("chứng chỉ", "bằng", "chứng chỉ ngoại ngữ", "thời hạn", "2 năm"),
    "chương trình tiên tiến": ("chương trình tiên tiến", "CTTT", "tiên tiến"),
    "chương trình chuẩn": ("chương trình chuẩn", "CTC", "chương trình đại trà"),
    "chương trình tài năng": ("chương trình tài năng", "CTTN", "tài năng"),
    # Điều kiện & quy trình
    "điều kiện": ("điều kiện", "yêu cầu", "tiêu chuẩn", "quy định"),
    "quy trình": ("quy trình", "thủ tục", "cách thức", "hướng dẫn"),
    "công nhận": ("công nhận", "xác nhận", "chấp nhận", "xét công nhận"),
    "đơn vị": ("đơn vị", "phòng", "khoa", "P.ĐTĐH", "chủ trì"),
}

SYNONYMS: Mapping[str, Tuple[str, ...]] = MappingProxyType(_SYNONYMS)

# minerva_gateway/services/gpa.py
from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, Mapping, Optional, Union

GRADE_POINTS: Mapping[str, float] = {
    "A": 4.0,
    "A-": 3.7,
    "B+": 3.3,
    "B": 3.0,
    "B-": 2.7,
    "C+": 2.3,
    "C": 2.0,
    "D": 1.0,
    "F": 0.0,
}

# 本学期在读、尚无成绩的课程
REGISTERED_FLAG = "RW"

_LEADING_NUMBER_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)")


def grade_to_points(grade: Any) -> Optional[float]:
    if not isinstance(grade, str):
        return None
    return GRADE_POINTS.get(grade.strip().upper())


def parse_credit(credit: Any) -> Optional[float]:
    """'3', '3.0', 3, '4 credits' 都能解析；解析不了返回 None"""
    if isinstance(credit, bool):
        return None
    if isinstance(credit, (int, float)):
        value = float(credit)
    elif isinstance(credit, str):
        m = _LEADING_NUMBER_RE.match(credit)
        if not m:
            return None
        value = float(m.group(0))
    else:
        return None
    return value if math.isfinite(value) else None


def aggregate_gpa(courses: Iterable[Mapping[str, Any]]) -> Dict[str, Union[str, float, int]]:
    """
    累计 GPA：sum(point * credit) / sum(credit)

    - grade 为空 / completionFlag == "RW" 的课程不计入
    - grade 或 credit 解析不了的课程直接跳过，不抛异常
    - 没有任何学分时 cumGPA 为 "N/A"
    """
    grade_points = 0.0
    total_credits = 0.0

    for course in courses:
        if not isinstance(course, Mapping):
            continue
        grade = course.get("grade")
        if not grade or course.get("completionFlag") == REGISTERED_FLAG:
            continue

        point = grade_to_points(grade)
        credit = parse_credit(course.get("credit"))
        if point is None or credit is None:
            continue

        grade_points += point * credit
        total_credits += credit

    # 与 JS Number.toFixed(2) 一致：按 float 的精确值四舍五入，3.625 -> 3.63
    cum_gpa = (
        str(Decimal(grade_points / total_credits).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
        if total_credits > 0
        else "N/A"
    )
    return {
        "cumGPA": cum_gpa,
        "totalCredits": int(total_credits) if total_credits.is_integer() else total_credits,
    }

# minerva_gateway/utils/validators.py
"""入参校验：全部是纯函数，失败直接抛 ValidationError，保证不会带着脏参数去调教务系统"""
from __future__ import annotations

import re
from typing import Any, List, Optional

from minerva_gateway.core.errors import ValidationError

SEASONS = ("f", "w", "s")

# 只认 ASCII 数字，且整串匹配（$ 会放过结尾的 \n）
_YEAR_RE = re.compile(r"[0-9]{4}")
_CRN_RE = re.compile(r"[0-9]+")
_COURSE_NUMBER_RE = re.compile(r"[0-9]{1,3}[A-Z]?[0-9]?")


def validate_season(season: Any) -> str:
    if not isinstance(season, str) or season.lower() not in SEASONS:
        raise ValidationError("Valid season is required (f, w, s)")
    return season.lower()


def validate_year(year: Any) -> str:
    # 前端偶尔会直接传数字 2024
    if isinstance(year, int) and not isinstance(year, bool):
        year = str(year)
    if not isinstance(year, str) or not _YEAR_RE.fullmatch(year):
        raise ValidationError("Valid 4-digit year is required")
    return year


def validate_crn(crn: Any) -> List[str]:
    if crn is None or crn == "" or crn == []:
        raise ValidationError("CRN is required")

    items = crn if isinstance(crn, (list, tuple)) else [crn]
    result: List[str] = []
    for item in items:
        if not isinstance(item, str) or not _CRN_RE.fullmatch(item):
            raise ValidationError(f"Invalid CRN format: {item}")
        result.append(item)
    return result


def normalize_department(dep: Any) -> str:
    if not isinstance(dep, str) or not dep.strip():
        raise ValidationError("Department is required")
    return dep.strip().upper()


def validate_course_number(number: Any) -> Optional[str]:
    if number is None or number == "":
        return None
    if not isinstance(number, str) or not _COURSE_NUMBER_RE.fullmatch(number.strip().upper()):
        raise ValidationError("Course number format is invalid")
    return number.strip().upper()

# minerva_gateway/services/demo.py
"""
demo/demo 账号：所有接口直接返回固定数据，不碰教务系统。
既是给前端/审核用的沙盒，也是手工测试时的 fixture。
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

DEMO_IDENTITY = "demo"
DEMO_SECRET = "demo"
DEMO_DISPLAY_NAME = "Demo Student"


def is_demo(identity: Optional[str], secret: Optional[str]) -> bool:
    return identity == DEMO_IDENTITY and secret == DEMO_SECRET


_TRANSCRIPT: Tuple[Dict[str, Any], ...] = (
    {
        "department": "COMP", "courseNumber": "202", "section": "001", "credit": "3",
        "grade": "A", "classAverage": "B+", "term": "Fall", "year": "2023",
        "title": "Foundations of Programming", "completionFlag": None,
    },
    {
        "department": "MATH", "courseNumber": "140", "section": "002", "credit": "3",
        "grade": "B+", "classAverage": "B", "term": "Fall", "year": "2023",
        "title": "Calculus 1", "completionFlag": None,
    },
    {
        "department": "COMP", "courseNumber": "250", "section": "001", "credit": "3",
        "grade": "A-", "classAverage": "B", "term": "Winter", "year": "2024",
        "title": "Introduction to Computer Science", "completionFlag": None,
    },
    {
        "department": "MATH", "courseNumber": "133", "section": "001", "credit": "3",
        "grade": "B", "classAverage": "B-", "term": "Winter", "year": "2024",
        "title": "Linear Algebra and Geometry", "completionFlag": None,
    },
    {
        "department": "COMP", "courseNumber": "206", "section": "001", "credit": "3",
        "grade": None, "classAverage": None, "term": "Fall", "year": "2024",
        "title": "Introduction to Software Systems", "completionFlag": "RW",
    },
)

_COURSES: Tuple[Dict[str, Any], ...] = (
    {
        "crn": "1234", "department": "COMP", "courseNumber": "202", "type": "Lecture",
        "instructor": "J. Smith", "days": ["Monday", "Wednesday"],
        "time": ["10:05-11:25", "10:05-11:25"], "isFull": False, "section": "001",
        "title": "Foundations of Programming",
    },
    {
        "crn": "1235", "department": "COMP", "courseNumber": "202", "type": "Tutorial",
        "instructor": "TBA", "days": ["Friday"], "time": ["13:05-13:55"],
        "isFull": True, "section": "002", "title": "Foundations of Programming",
    },
    {
        "crn": "2345", "department": "COMP", "courseNumber": "206", "type": "Lecture",
        "instructor": "A. Lee", "days": ["Tuesday", "Thursday"],
        "time": ["08:35-09:55", "08:35-09:55"], "isFull": False, "section": "001",
        "title": "Introduction to Software Systems",
    },
)

_REGISTERED: Tuple[Dict[str, Any], ...] = (
    {
        "crn": "2345", "department": "COMP", "courseNumber": "206", "type": "Lecture",
        "instructor": "A. Lee", "days": ["Tuesday", "Thursday"],
        "time": ["08:35-09:55", "08:35-09:55"], "isFull": False, "section": "001",
        "title": "Introduction to Software Systems", "location": "TROTTIER 1100",
        "credits": "3", "status": "Web Registered",
    },
    {
        "crn": "3456", "department": "MATH", "courseNumber": "240", "type": "Lecture",
        "instructor": "P. Martin", "days": ["Monday", "Wednesday", "Friday"],
        "time": ["11:35-12:25", "11:35-12:25", "11:35-12:25"], "isFull": False,
        "section": "001", "title": "Discrete Structures", "location": "BURNSIDE 1B45",
        "credits": "3", "status": "Web Registered",
    },
)

_COURSE_DETAIL: Dict[str, Any] = {
    "crn": "2345", "department": "COMP", "courseNumber": "206", "section": "001",
    "title": "Introduction to Software Systems", "credits": "3",
    "instructor": "A. Lee", "days": ["Tuesday", "Thursday"],
    "time": ["08:35-09:55", "08:35-09:55"], "location": "TROTTIER 1100",
    "capacity": 300, "enrolled": 287, "waitlist": 0,
    "description": "Comprehensive overview of programming in C and Unix tooling.",
}


@dataclass(frozen=True)
class DemoDataset:
    """
    启动时构建一次挂在 app.state 上
    - 每个实例持有模块常量的独立副本，实例之间不共享任何 dict
    - 对外一律返回深拷贝，请求方改返回值不会影响下一次请求
    """

    transcript: Tuple[Dict[str, Any], ...] = field(default_factory=lambda: copy.deepcopy(_TRANSCRIPT))
    courses: Tuple[Dict[str, Any], ...] = field(default_factory=lambda: copy.deepcopy(_COURSES))
    registered: Tuple[Dict[str, Any], ...] = field(default_factory=lambda: copy.deepcopy(_REGISTERED))
    course_detail: Dict[str, Any] = field(default_factory=lambda: copy.deepcopy(_COURSE_DETAIL))

    def get_transcript(self) -> List[Dict[str, Any]]:
        return copy.deepcopy(list(self.transcript))

    def get_courses(self, *, dep: str, number: Optional[str] = None) -> List[Dict[str, Any]]:
        rows = [c for c in self.courses if c["department"] == dep]
        if number:
            rows = [c for c in rows if c["courseNumber"] == number]
        return copy.deepcopy(rows)

    def add_courses(self, *, season: str, year: str, crn: List[str]) -> Dict[str, Any]:
        return {"demo": True, "season": season, "year": year, "added": list(crn)}

    def drop_courses(self, *, season: str, year: str, crn: List[str]) -> Dict[str, Any]:
        return {"demo": True, "season": season, "year": year, "dropped": list(crn)}

    def get_registered_courses(self) -> List[Dict[str, Any]]:
        return copy.deepcopy(list(self.registered))

    def view_course(self, *, crn: List[str]) -> Dict[str, Any]:
        detail = copy.deepcopy(self.course_detail)
        detail["crn"] = crn[0]
        return detail

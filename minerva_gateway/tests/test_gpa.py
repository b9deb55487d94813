from minerva_gateway.services.gpa import aggregate_gpa, grade_to_points, parse_credit


def test_two_courses():
    r = aggregate_gpa([{"grade": "A", "credit": "3"}, {"grade": "B+", "credit": "3"}])
    assert r == {"cumGPA": "3.65", "totalCredits": 6}


def test_registered_course_is_excluded():
    r = aggregate_gpa([{"grade": "A", "credit": "3", "completionFlag": "RW"}])
    assert r == {"cumGPA": "N/A", "totalCredits": 0}


def test_empty_and_ungraded():
    assert aggregate_gpa([])["cumGPA"] == "N/A"
    assert aggregate_gpa([{"grade": None, "credit": "3"}])["cumGPA"] == "N/A"


def test_malformed_records_are_skipped():
    courses = [
        {"grade": "A", "credit": "3"},
        {"grade": "XYZ", "credit": "3"},
        {"grade": "B", "credit": "abc"},
        {"grade": "B"},
        {"credit": "3"},
        "not a record",
        {"grade": 4, "credit": 3},
    ]
    assert aggregate_gpa(courses) == {"cumGPA": "4.00", "totalCredits": 3}


def test_zero_credit_does_not_skew():
    r = aggregate_gpa([{"grade": "A", "credit": "3"}, {"grade": "F", "credit": "0"}])
    assert r == {"cumGPA": "4.00", "totalCredits": 3}


def test_failing_grade_counts():
    r = aggregate_gpa([{"grade": "A", "credit": "3"}, {"grade": "F", "credit": "3"}])
    assert r["cumGPA"] == "2.00"


def test_fractional_credits():
    r = aggregate_gpa([{"grade": "B", "credit": "1.5"}])
    assert r == {"cumGPA": "3.00", "totalCredits": 1.5}


def test_grade_table():
    assert grade_to_points(" A- ") == 3.7
    assert grade_to_points("F") == 0.0
    assert grade_to_points("E") is None
    assert grade_to_points(None) is None


def test_parse_credit():
    assert parse_credit("3") == 3.0
    assert parse_credit("4 credits") == 4.0
    assert parse_credit(2) == 2.0
    assert parse_credit("") is None
    assert parse_credit(True) is None
    assert parse_credit("nan") is None


def test_exact_tie_rounds_half_up():
    # 87 / 24 = 3.625 exactly
    courses = [{"grade": "A", "credit": "3"}] * 5 + [{"grade": "B", "credit": "3"}] * 3
    assert aggregate_gpa(courses) == {"cumGPA": "3.63", "totalCredits": 24}

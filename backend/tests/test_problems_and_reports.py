import pytest
from pydantic import ValidationError

from jeeforces.core.exceptions import BusinessLogicError, MissingFieldError, NoProblemsLeftError
from jeeforces.models.problem import difficulty_label
from jeeforces.schemas.problem import ProblemCreate, ProblemUpdate
from jeeforces.schemas.report import ReportCreate, ReportStatus
from jeeforces.services.problem_service import problem_service
from jeeforces.services.report_service import report_service

from factories import make_problem, make_user


def test_difficulty_labels():
    assert [difficulty_label(d) for d in (1, 2, 3, 4)] == ["Easy", "Medium", "Hard", "Unknown"]


def test_problem_filters(db):
    make_problem(db, title="Circuits", subject="Physics", difficulty=1, tags=["electricity"])
    make_problem(db, title="Aldehydes", subject="Chemistry", difficulty=3, tags=["organic"])

    assert [p.title for p in problem_service.list_problems(db, subject="Chemistry")] == ["Aldehydes"]
    assert [p.title for p in problem_service.list_problems(db, difficulty=1)] == ["Circuits"]
    assert [p.title for p in problem_service.list_problems(db, tag="organic")] == ["Aldehydes"]
    user = make_user(db)
    assert [p.title for p in problem_service.random_problems(db, user.id, ["Physics"])] == ["Circuits"]
    with pytest.raises(NoProblemsLeftError):
        problem_service.random_problems(db, user.id, ["Biology"])


def test_problem_validation():
    payload = {
        "title": "Rotational motion",
        "description": "A disc rolls without slipping down an incline.",
        "difficulty": 2,
        "score": 4,
        "subject": "Physics",
        "options": ["1 s", "2 s"],
        "correctOption": "2 s",
    }
    assert ProblemCreate(**payload).correct_option == "2 s"

    with pytest.raises(ValidationError):
        ProblemCreate(**{**payload, "correctOption": "3 s"})
    with pytest.raises(ValidationError):
        ProblemCreate(**{**payload, "difficulty": 4})
    with pytest.raises(ValidationError):
        ProblemCreate(**{**payload, "options": ["only"]})


def test_report_lifecycle(db):
    reporter = make_user(db, "reporter")
    offender = make_user(db, "offender")

    report = report_service.create_report(
        db, reporter.id, ReportCreate(type="Report", description="Spamming comments", reportedUserId=offender.id)
    )
    assert report.status == "Open"

    listed = report_service.list_reports(db, ReportStatus.OPEN)
    assert listed[0]["reportedUser"]["username"] == "offender"

    closed = report_service.update_status(db, report.id, ReportStatus.CLOSED)
    assert closed["status"] == "Closed"
    assert report_service.list_reports(db, ReportStatus.OPEN) == []


def test_report_validation(db):
    reporter = make_user(db)

    with pytest.raises(MissingFieldError) as exc:
        report_service.create_report(db, reporter.id, ReportCreate(type="Feedback"))
    assert exc.value.message == "Type and description are required."
    with pytest.raises(BusinessLogicError):
        report_service.create_report(db, reporter.id, ReportCreate(type="Praise", description="Nice site"))
    with pytest.raises(BusinessLogicError):
        report_service.create_report(db, reporter.id, ReportCreate(type="Feedback", description="x" * 2001))


def test_problem_update_keeps_answer_consistent(db):
    problem = make_problem(db, correct="B")

    updated, changed = problem_service.update_problem(
        db, problem.id, ProblemUpdate(options=["B", "C"], solution=None, title=None)
    )
    assert changed == ["options", "solution"]
    assert (updated.options, updated.title) == (["B", "C"], "Projectile range")

    with pytest.raises(BusinessLogicError):
        problem_service.update_problem(db, problem.id, ProblemUpdate(options=["X", "Y"]))
    with pytest.raises(ValidationError):
        ProblemUpdate(difficulty=5)

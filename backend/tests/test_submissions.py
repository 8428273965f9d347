from datetime import timedelta

import pytest

from jeeforces.core.exceptions import BusinessLogicError, ContestNotActiveError, MissingFieldError
from jeeforces.models.submission import Submission
from jeeforces.schemas.submission import ContestSubmissionCreate
from jeeforces.services.contest_service import contest_service
from jeeforces.services.submission_service import submission_service

from factories import make_contest, make_problem, make_user


def _answer(problem, contest, *options):
    return ContestSubmissionCreate(problemId=problem.id, contestId=contest.id, selectedOptions=list(options))


def test_contest_answer_is_graded(db):
    user = make_user(db)
    problem = make_problem(db, correct="B", score=4)
    contest = make_contest(db, problems=[problem])
    contest_service.register(db, contest.id, user.id)

    right = submission_service.submit_contest_answer(db, user.id, _answer(problem, contest, "B"))
    wrong = submission_service.submit_contest_answer(db, user.id, _answer(problem, contest, "C"))

    assert (right.verdict, right.score, right.is_final) == ("Accepted", 4, False)
    assert (wrong.verdict, wrong.score) == ("Wrong Answer", 0)


def test_contest_answer_outside_window(db):
    user = make_user(db)
    problem = make_problem(db)
    contest = make_contest(db, problems=[problem], starts_in=timedelta(hours=1))
    contest_service.register(db, contest.id, user.id)

    with pytest.raises(ContestNotActiveError):
        submission_service.submit_contest_answer(db, user.id, _answer(problem, contest, "B"))


def test_contest_answer_requires_registration_and_membership(db):
    user = make_user(db)
    inside = make_problem(db)
    outside = make_problem(db, title="Stoichiometry")
    contest = make_contest(db, problems=[inside])

    with pytest.raises(BusinessLogicError):
        submission_service.submit_contest_answer(db, user.id, _answer(inside, contest, "B"))

    contest_service.register(db, contest.id, user.id)
    with pytest.raises(BusinessLogicError) as exc:
        submission_service.submit_contest_answer(db, user.id, _answer(outside, contest, "B"))
    assert exc.value.message == "Problem does not belong to this contest"


def test_final_submission_is_unique(db):
    user = make_user(db)
    p1 = make_problem(db, correct="A")
    p2 = make_problem(db, title="Mole concept", correct="D")
    contest = make_contest(db, problems=[p1, p2])
    contest_service.register(db, contest.id, user.id)
    submission_service.submit_contest_answer(db, user.id, _answer(p1, contest, "C"))

    result = submission_service.submit_final(db, user.id, [_answer(p1, contest, "A"), _answer(p2, contest, "D")])

    assert result == {"message": "Final submissions saved successfully"}
    finals = db.query(Submission).filter(Submission.is_final.is_(True)).all()
    assert sorted((s.problem_id, s.verdict) for s in finals) == [(p1.id, "Accepted"), (p2.id, "Accepted")]
    assert db.query(Submission).count() == 2

    with pytest.raises(BusinessLogicError) as exc:
        submission_service.submit_final(db, user.id, [_answer(p1, contest, "B")])
    assert exc.value.message == "You have already made a final submission"

    with pytest.raises(BusinessLogicError):
        submission_service.submit_contest_answer(db, user.id, _answer(p2, contest, "A"))


def test_final_submission_after_contest_end(db):
    user = make_user(db)
    problem = make_problem(db)
    contest = make_contest(db, problems=[problem], starts_in=timedelta(hours=-3))

    with pytest.raises(BusinessLogicError) as exc:
        submission_service.submit_final(db, user.id, [_answer(problem, contest, "B")])
    assert exc.value.message == "Contest has ended"


def test_practice_counts_first_correct_solve_once(db):
    user = make_user(db)
    problem = make_problem(db, correct="B")

    wrong = submission_service.submit_practice(db, user.id, problem.id, "A")
    first = submission_service.submit_practice(db, user.id, problem.id, "B")
    repeat = submission_service.submit_practice(db, user.id, problem.id, "B")

    assert wrong == {"success": True, "verdict": "Incorrect", "correctOption": "B"}
    assert first["verdict"] == repeat["verdict"] == "Correct"
    db.refresh(user)
    assert user.problems_solved == 1
    practice = submission_service.list_submissions(db, user.id, final_only=True)
    assert len(practice) == 3
    assert all(entry["contestId"] is None for entry in practice)


def test_practice_requires_fields(db):
    user = make_user(db)
    with pytest.raises(MissingFieldError) as exc:
        submission_service.submit_practice(db, user.id, None, "B")
    assert exc.value.message == "Problem ID and selected option are required"

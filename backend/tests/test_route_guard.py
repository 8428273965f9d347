from jeeforces.core.route_guard import GuardDecision, evaluate, is_guarded
from jeeforces.core.session import SessionIdentity

USER = SessionIdentity(id=1, username="alice", role="user")
ADMIN = SessionIdentity(id=2, username="root", role="admin")


def test_signed_in_users_leave_auth_pages():
    assert evaluate("/sign-in", USER) is GuardDecision.REDIRECT_DASHBOARD
    assert evaluate("/sign-up", ADMIN) is GuardDecision.REDIRECT_DASHBOARD


def test_anonymous_users_see_auth_pages():
    assert evaluate("/sign-in", None) is GuardDecision.ALLOW
    assert evaluate("/sign-up", None) is GuardDecision.ALLOW


def test_admin_pages_send_non_admins_to_dashboard():
    for path in ("/admin", "/admin/reports", "/contests/create", "/problems/create"):
        assert evaluate(path, None) is GuardDecision.REDIRECT_DASHBOARD
        assert evaluate(path, USER) is GuardDecision.REDIRECT_DASHBOARD
        assert evaluate(path, ADMIN) is GuardDecision.ALLOW


def test_member_pages_send_anonymous_users_to_sign_in():
    for path in ("/dashboard", "/dashboard/settings", "/practice", "/agent", "/revise"):
        assert evaluate(path, None) is GuardDecision.REDIRECT_SIGN_IN
        assert evaluate(path, USER) is GuardDecision.ALLOW


def test_public_pages_are_allowed():
    assert evaluate("/contests", None) is GuardDecision.ALLOW
    assert evaluate("/problems/12", USER) is GuardDecision.ALLOW


def test_decision_locations():
    assert GuardDecision.REDIRECT_SIGN_IN.location == "/sign-in"
    assert GuardDecision.REDIRECT_DASHBOARD.location == "/dashboard"
    assert GuardDecision.ALLOW.location is None


def test_matcher_covers_only_guarded_pages():
    assert is_guarded("/dashboard")
    assert is_guarded("/dashboard/contests")
    assert is_guarded("/admin/reports")
    assert is_guarded("/agent/chat")
    assert is_guarded("/contests/create")
    assert not is_guarded("/contests")
    assert not is_guarded("/contests/5")
    assert not is_guarded("/practice/history")
    assert not is_guarded("/api/contests")

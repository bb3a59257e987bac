import datetime as dt
import json

import pytest

import navigation as nav
from admin import AdminConsole, round_half_up
from auth import Session
from errors import AccessDeniedError, NotFoundError, ValidationError
from models import Progress, Submission
from seed import initialize_demo_data


def test_every_admin_operation_requires_admin(user_app):
    admin = user_app.admin
    calls = [
        lambda: admin.add_challenge("technical", "Q", "A", "2026-03-20"),
        admin.list_users,
        lambda: admin.change_user_role(2, "admin", confirmed=True),
        admin.export_users,
        admin.generate_reports,
        admin.list_student_reports,
        admin.load_analytics,
    ]
    for call in calls:
        with pytest.raises(AccessDeniedError):
            call()
    assert user_app.repo.find_user(2).role == "user"


def test_add_technical_challenge(admin_app):
    before = admin_app.analytics
    c = admin_app.add_challenge("technical", "Reverse a string", "olleh", "2026-03-20")
    assert c.type == "coding"
    assert c.expected_output == "olleh"
    assert c.options is None
    assert c.created_by == "admin@dailychallenge.com"
    assert admin_app.repo.challenges()[-1].id == c.id
    assert admin_app.analytics.total_challenges == len(admin_app.repo.challenges())
    assert before is None or before.total_challenges < admin_app.analytics.total_challenges


def test_add_mcq_challenge_needs_four_options(admin_app):
    count = len(admin_app.repo.challenges())
    with pytest.raises(ValidationError):
        admin_app.admin.add_challenge("non-technical", "Q?", "A", "2026-03-20", ["a", "b", " ", "d"])
    with pytest.raises(ValidationError):
        admin_app.admin.add_challenge("non-technical", "Q?", "A", "2026-03-20", None)
    assert len(admin_app.repo.challenges()) == count

    c = admin_app.admin.add_challenge("non-technical", "Q?", "C", "2026-03-20", ["a", "b", "c", "d"])
    assert c.type == "mcq" and c.options == ["a", "b", "c", "d"]


@pytest.mark.parametrize("question,answer,date", [
    ("", "A", "2026-03-20"),
    ("Q", "", "2026-03-20"),
    ("Q", "A", ""),
    ("Q", "A", "next tuesday"),
])
def test_add_challenge_required_fields(admin_app, question, answer, date):
    assert admin_app.add_challenge("technical", question, answer, date) is None
    assert admin_app.pop_notices()[-1].level == "error"


def test_list_users_defaults_missing_progress(admin_app):
    admin_app.signup("Nova", "nova@example.com", "secret1")
    admin_app.pop_notices()
    new_id = admin_app.repo.users()[-1].id
    admin_app.repo.store.remove_item(f"progress_{new_id}")
    rows = {r.user.email: r for r in admin_app.admin.list_users()}
    assert rows["nova@example.com"].total_score == 0
    assert rows["admin@dailychallenge.com"].toggle_role == "user"
    assert rows["user@example.com"].toggle_role == "admin"


def test_change_role_unknown_id_changes_nothing(admin_app):
    before = admin_app.repo.store.get_item("users")
    with pytest.raises(NotFoundError):
        admin_app.admin.change_user_role(424242, "admin", confirmed=True)
    assert admin_app.repo.store.get_item("users") == before
    assert admin_app.request_role_change(424242, "admin") is None
    assert admin_app.pop_notices()[-1].message == "User not found"


def test_change_role_needs_confirmation(admin_app):
    assert admin_app.admin.change_user_role(2, "admin", confirmed=False) is None
    assert admin_app.repo.find_user(2).role == "user"

    admin_app.request_role_change(2, "admin")
    assert admin_app.confirm_role_change(False) is None
    assert admin_app.repo.find_user(2).role == "user"


def test_change_role_flips_only_target(admin_app):
    admin_app.request_role_change(3, "admin")
    assert admin_app.pending_role_change.old_role == "user"
    user = admin_app.confirm_role_change(True)
    assert user.role == "admin"
    roles = {u.id: u.role for u in admin_app.repo.users()}
    assert roles == {1: "admin", 2: "user", 3: "admin"}
    assert admin_app.session.user.role == "admin"
    assert "role changed from user to admin" in admin_app.pop_notices()[-1].message


def test_demoting_self_updates_live_session(admin_app):
    admin_app.request_role_change(1, "user")
    admin_app.confirm_role_change(True)
    assert admin_app.session.user.role == "user"
    assert admin_app.repo.current_user(admin_app.client_id).role == "user"
    assert not admin_app.nav.admin_link_visible
    assert admin_app.nav.current_page == nav.DASHBOARD
    assert admin_app.show_admin() is False
    assert admin_app.nav.current_page == nav.ACCESS_DENIED


def test_export_users_is_dated_and_complete(admin_app):
    filename, data = admin_app.export_users()
    assert filename == "users_export_2026-03-14.json"
    records = json.loads(data)
    assert [r["email"] for r in records] == [u.email for u in admin_app.repo.users()]
    assert records[0]["password"] == "admin123"


def test_reports_cover_only_standard_users(admin_app):
    sub = Submission(challenge_id=1, type="mcq", answer="B", is_correct=True, points=10,
                     submitted_at="2026-03-01T10:00:00+00:00")
    admin_app.repo.save_progress(2, Progress(total_score=25, submissions=[sub, sub]))
    admin_app.repo.save_progress(3, Progress(total_score=40))
    reports = {r.user.id: r for r in admin_app.generate_reports()}
    assert set(reports) == {2, 3}
    assert reports[2].submission_count == 2
    assert reports[2].average_score == 13  # 12.5 rounds half up
    assert reports[3].average_score == 0
    assert admin_app.pop_notices()[-1].level == "success"


def test_analytics_counts(admin_app):
    a = admin_app.load_analytics()
    assert (a.total_users, a.admin_users, a.regular_users) == (3, 1, 2)
    assert a.active_today == 1  # floor(2 * 0.6)
    assert a.total_challenges == 4
    assert a.completion_rate == 33


def test_analytics_with_no_users(admin_app):
    admin_app.repo.save_users([])
    a = admin_app.admin.load_analytics()
    assert a.total_users == 0 and a.completion_rate == 0


def test_admin_tabs_load_their_data(admin_app):
    admin_app.show_admin()
    assert admin_app.show_admin_tab("users")
    assert len(admin_app.user_rows) == 3
    assert admin_app.show_admin_tab("reports")
    assert len(admin_app.reports) == 2
    assert admin_app.show_admin_tab("bogus") is False
    assert admin_app.nav.admin_tab == "reports"


@pytest.mark.parametrize("x,expected", [(0.5, 1), (1.5, 2), (2.5, 3), (33.33, 33), (0, 0)])
def test_round_half_up(x, expected):
    assert round_half_up(x) == expected


def test_export_filename_uses_configured_zone(repo):
    def late():
        return dt.datetime(2026, 3, 14, 23, 30, tzinfo=dt.timezone.utc)

    session = Session(repo, late)
    initialize_demo_data(repo, now=late())
    session.login("admin@dailychallenge.com", "admin123")
    filename, _ = AdminConsole(repo, session, late, "Asia/Tokyo").export_users()
    assert filename == "users_export_2026-03-15.json"


def test_export_runs_only_on_request(admin_app):
    admin_app.show_admin()
    admin_app.show_admin_tab("users")
    admin_app.show_admin_tab("users")
    assert admin_app.export is None
    assert admin_app.pop_notices() == []

    filename, _ = admin_app.export_users()
    assert admin_app.export[0] == filename
    assert "exported" in admin_app.pop_notices()[-1].message
    admin_app.logout()
    assert admin_app.export is None

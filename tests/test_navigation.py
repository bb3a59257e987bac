import navigation as nav
from controller import DailyChallengeApp
from navigation import Navigator
from store import JsonFileStore, Repository


def test_unknown_page_is_rejected_and_state_kept():
    n = Navigator(current_page=nav.DASHBOARD, navbar_visible=True)
    assert n.show_page("nowhere", authenticated=True) is False
    assert n.current_page == nav.DASHBOARD
    assert n.navbar_visible


def test_public_pages_hide_navbar_even_when_signed_in():
    n = Navigator(navbar_visible=True)
    assert n.show_page(nav.SIGNUP, authenticated=True)
    assert n.current_page == nav.SIGNUP
    assert not n.navbar_visible


def test_protected_page_without_session_redirects_to_login():
    n = Navigator()
    assert n.show_page(nav.SCORE, authenticated=False) is False
    assert n.current_page == nav.LOGIN
    assert not n.navbar_visible


def test_role_conditional_chrome():
    n = Navigator()
    n.show_page(nav.DASHBOARD, authenticated=True, is_admin=True)
    assert n.navbar_visible and n.admin_link_visible and n.admin_card_visible
    n.show_page(nav.CHALLENGES, authenticated=True, is_admin=False)
    assert n.navbar_visible and not n.admin_link_visible and not n.admin_card_visible


def test_entry_points_redirect_when_signed_out(app):
    for entry in (app.show_dashboard, app.show_challenges, app.show_overall_score,
                  app.open_compiler, app.show_admin):
        app.nav.current_page = nav.SIGNUP
        assert entry() is False
        assert app.nav.current_page == nav.LOGIN


def test_admin_login_reaches_console(app):
    app.login("admin@dailychallenge.com", "admin123")
    assert app.nav.current_page == nav.DASHBOARD
    assert app.stats["name"] == "Admin User"
    assert app.show_admin()
    assert app.nav.current_page == nav.ADMIN
    assert app.nav.admin_tab == "challenges"
    assert app.analytics is not None


def test_standard_user_is_sent_to_access_denied(user_app):
    assert user_app.show_admin() is False
    assert user_app.nav.current_page == nav.ACCESS_DENIED
    assert any("Access denied" in n.message for n in user_app.pop_notices())


def test_admin_tab_requires_admin(user_app):
    assert user_app.show_admin_tab("users") is None
    assert user_app.nav.current_page == nav.ACCESS_DENIED


def test_logout_returns_to_login(admin_app):
    admin_app.logout()
    assert admin_app.nav.current_page == nav.LOGIN
    assert not admin_app.nav.navbar_visible
    assert not admin_app.nav.admin_link_visible
    assert admin_app.repo.current_user(admin_app.client_id) is None


def test_saved_session_resumes_on_start(app):
    app.login("user@example.com", "user123")
    again = DailyChallengeApp(app.repo, clock=app.clock, tz="UTC", client_id=app.client_id).start()
    assert again.user.email == "user@example.com"
    assert again.nav.current_page == nav.DASHBOARD


def test_other_clients_do_not_inherit_a_login(tmp_path, clock):
    repo = Repository(JsonFileStore(str(tmp_path / "store.json")))
    first = DailyChallengeApp(repo, clock=clock, tz="UTC", client_id="tab-a").start()
    first.login("admin@dailychallenge.com", "admin123")

    second = DailyChallengeApp(Repository(JsonFileStore(str(tmp_path / "store.json"))),
                               clock=clock, tz="UTC").start()
    assert second.user is None
    assert second.nav.current_page == nav.LOGIN
    assert second.show_admin() is False
    assert second.nav.current_page == nav.LOGIN

    reloaded = DailyChallengeApp(repo, clock=clock, tz="UTC", client_id="tab-a").start()
    assert reloaded.user.email == "admin@dailychallenge.com"


def test_logout_only_clears_own_client(app):
    other = DailyChallengeApp(app.repo, clock=app.clock, tz="UTC", client_id="tab-b").start()
    other.login("user@example.com", "user123")
    app.login("admin@dailychallenge.com", "admin123")
    app.logout()
    assert app.repo.current_user(app.client_id) is None
    assert app.repo.current_user("tab-b").email == "user@example.com"

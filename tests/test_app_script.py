from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

from seed import initialize_demo_data
from store import JsonFileStore, Repository

SCRIPT = str(Path(__file__).resolve().parent.parent / "app.py")


@pytest.fixture
def store_file(tmp_path, monkeypatch):
    path = tmp_path / "store.json"
    monkeypatch.setenv("DAILY_CHALLENGE_STORE", str(path))
    return path


@pytest.fixture
def saved_admin(store_file):
    repo = Repository(JsonFileStore(str(store_file)))
    initialize_demo_data(repo)
    repo.set_current_user(repo.find_user(1), "tab-admin")
    return repo


def test_first_run_seeds_store_and_shows_login(store_file):
    at = AppTest.from_file(SCRIPT, default_timeout=30).run()
    assert not at.exception
    assert at.text_input(key="login_email") is not None
    assert [u.email for u in Repository(JsonFileStore(str(store_file))).users()][0] == "admin@dailychallenge.com"


def test_saved_admin_session_lands_on_dashboard(saved_admin):
    at = AppTest.from_file(SCRIPT, default_timeout=30)
    at.query_params["client"] = "tab-admin"
    at.run()
    assert not at.exception
    assert any("Welcome back, Admin User" in m.value for m in at.markdown)
    assert any(b.label == "🛠️ Admin Console" for b in at.button)


def test_new_client_does_not_resume_saved_admin(saved_admin):
    at = AppTest.from_file(SCRIPT, default_timeout=30).run()
    assert not at.exception
    assert at.text_input(key="login_email") is not None
    assert not any(b.label == "🛠️ Admin Console" for b in at.button)
    assert saved_admin.current_user("tab-admin").email == "admin@dailychallenge.com"

import os

import pytest

AppTest = pytest.importorskip("streamlit.testing.v1").AppTest

APP_PATH = os.path.join(os.path.dirname(__file__), '..', 'src', 'coating_quote', 'ui', 'app_streamlit.py')


@pytest.fixture
def app():
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.run()
    return at


def test_default_quote_shows_first_step_done(app):
    assert not app.exception
    assert app.sidebar.button[0].label.startswith("✅")


def test_progress_follows_edit_in_same_run(app):
    app.number_input[0].set_value(5.0).run()

    assert app.error[0].value == "Length must be at least 10mm"
    assert app.sidebar.button[0].label == "➡️ 1. Dimensions"

    app.number_input[0].set_value(1000.0).run()
    assert app.sidebar.button[0].label.startswith("✅")

import json
from pathlib import Path

from streamlit.testing.v1 import AppTest

from bookcast.storage.key_store import GEMINI_KEYS, LANGUAGE_PREF, MODEL_PREF

APP_PATH = str(Path(__file__).resolve().parent.parent / "bookcast" / "ui" / "streamlit_app.py")


def _app() -> AppTest:
    app = AppTest.from_file(APP_PATH, default_timeout=30)
    app.run()
    assert not app.exception
    return app


def test_typed_keys_apply_before_saving(no_env_keys) -> None:
    app = _app()

    app.text_area(key="gemini_keys_input").input("typed-key-1\ntyped-key-2").run()

    inputs = app.session_state["pipeline"].inputs
    assert inputs.gemini_keys == "typed-key-1\ntyped-key-2"
    assert not Path(no_env_keys.key_store_path).exists()


def test_save_persists_keys_and_preferences(no_env_keys) -> None:
    app = _app()

    app.text_area(key="gemini_keys_input").input("saved-key").run()
    app.button(key="save_config").click().run()

    stored = json.loads(Path(no_env_keys.key_store_path).read_text(encoding="utf-8"))
    assert stored[GEMINI_KEYS] == "saved-key"
    assert stored[MODEL_PREF] == app.session_state["pipeline"].inputs.model
    assert LANGUAGE_PREF in stored


def test_stored_preferences_are_restored_at_startup(no_env_keys) -> None:
    Path(no_env_keys.key_store_path).write_text(
        json.dumps({GEMINI_KEYS: "stored-key", MODEL_PREF: "gpt-4o-mini", LANGUAGE_PREF: "en"}),
        encoding="utf-8"
    )

    app = _app()

    inputs = app.session_state["pipeline"].inputs
    assert inputs.gemini_keys == "stored-key"
    assert inputs.model == "gpt-4o-mini"
    assert inputs.language == "en"

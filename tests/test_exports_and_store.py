import csv
import io
import json
from pathlib import Path

from bookcast.core.models import ScriptBlock, StoryBlock
from bookcast.core.pipeline import PipelineInputs
from bookcast.exporters.csv_export import (
    BOM,
    export_prompts,
    export_script,
    export_story,
    to_csv,
)
from bookcast.storage.key_store import GEMINI_KEYS, LANGUAGE_PREF, MODEL_PREF, OPENAI_KEYS, KeyStore


def test_csv_document_format() -> None:
    document = to_csv([["STT", "Prompt"], ["1", "a"]])

    assert document == BOM + '"STT","Prompt"\r\n"1","a"'


def test_csv_round_trips_quotes_commas_and_newlines() -> None:
    rows = [
        ["STT", "Chapter", "Review Script"],
        ["1", 'He said "hello", then left', "line one\nline two"],
        ["2", "", "Tiếng Việt; có dấu"],
    ]

    document = to_csv(rows)
    parsed = list(csv.reader(io.StringIO(document[len(BOM):], newline="")))

    assert parsed == rows
    assert '""hello""' in document


def test_exports_name_files_after_the_title() -> None:
    story = [StoryBlock(index=1, title="Part 1 (Upload)", content="Once upon a time")]
    script = [ScriptBlock(index=0, chapter="Hook", text="Hello")]

    story_name, story_doc = export_story(story, "Đắc Nhân Tâm")
    script_name, script_doc = export_script(script, "Đắc Nhân Tâm")
    prompts_name, prompts_doc = export_prompts(["misty forest"], "Đắc Nhân Tâm")

    assert story_name == "story_dac-nhan-tam.csv"
    assert script_name == "review_dac-nhan-tam.csv"
    assert prompts_name == "prompts_dac-nhan-tam.csv"
    assert story_doc.startswith(BOM + '"STT","Chapter","Story Content"\r\n')
    assert '"0","Hook","Hello"' in script_doc
    assert '"1","misty forest"' in prompts_doc


def test_empty_collections_export_nothing() -> None:
    assert export_story([], "Title") is None
    assert export_script([], "Title") is None
    assert export_prompts([], "Title") is None


def test_key_store_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "keys.json"
    store = KeyStore(str(path))
    store.set(GEMINI_KEYS, "key1\nkey2")
    store.set(OPENAI_KEYS, "sk-1")

    assert store.save()

    reloaded = KeyStore(str(path))
    values = reloaded.load()
    assert values == {GEMINI_KEYS: "key1\nkey2", OPENAI_KEYS: "sk-1"}
    assert reloaded.get(GEMINI_KEYS) == "key1\nkey2"


def test_key_store_defaults_to_settings_path(no_env_keys) -> None:
    store = KeyStore()

    assert store.path == Path(no_env_keys.key_store_path)
    assert store.load() == {}
    assert store.get(GEMINI_KEYS) == ""


def test_key_store_ignores_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "keys.json"
    path.write_text("{not json", encoding="utf-8")

    assert KeyStore(str(path)).load() == {}


def test_key_store_drops_non_string_values(tmp_path: Path) -> None:
    path = tmp_path / "keys.json"
    path.write_text(json.dumps({GEMINI_KEYS: "k", "count": 3}), encoding="utf-8")

    assert KeyStore(str(path)).load() == {GEMINI_KEYS: "k"}


def test_key_store_round_trips_keys_and_preferences(tmp_path: Path) -> None:
    path = tmp_path / "keys.json"
    typed = PipelineInputs(
        model="gpt-4o-mini",
        language="en",
        frame_ratio="16:9",
        gemini_keys="g1\ng2",
        openai_keys="sk-1"
    )
    store = KeyStore(str(path))
    store.capture_from(typed)
    assert store.save()

    restored = PipelineInputs()
    reloaded = KeyStore(str(path))
    reloaded.load()
    reloaded.restore_into(restored)

    assert restored.model == "gpt-4o-mini"
    assert restored.language == "en"
    assert restored.frame_ratio == "16:9"
    assert restored.gemini_keys == "g1\ng2"
    assert restored.openai_keys == "sk-1"
    assert reloaded.get(MODEL_PREF) == "gpt-4o-mini"


def test_restore_keeps_defaults_for_missing_preferences(tmp_path: Path) -> None:
    path = tmp_path / "keys.json"
    path.write_text(json.dumps({GEMINI_KEYS: "g1", LANGUAGE_PREF: "en"}), encoding="utf-8")
    inputs = PipelineInputs(model="gemini-3-flash-preview")

    store = KeyStore(str(path))
    store.load()
    store.restore_into(inputs)

    assert inputs.gemini_keys == "g1"
    assert inputs.language == "en"
    assert inputs.model == "gemini-3-flash-preview"
    assert inputs.openai_keys == ""

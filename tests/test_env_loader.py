from __future__ import annotations

import os

from world_cases.env_loader import load_dotenv_if_present


def _unset(monkeypatch, name):
    # setenv first so teardown removes whatever the loader applied
    monkeypatch.setenv(name, "placeholder")
    monkeypatch.delenv(name)


def test_missing_file_is_ignored(tmp_path):
    assert load_dotenv_if_present(str(tmp_path / ".env")) == {}


def test_values_are_applied(tmp_path, monkeypatch):
    _unset(monkeypatch, "WORLD_CASES_OUTPUT_PREFIX")
    _unset(monkeypatch, "WORLD_CASES_S3_BUCKET")
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# local overrides\n"
        "\n"
        "export WORLD_CASES_OUTPUT_PREFIX='site/data'\n"
        'WORLD_CASES_S3_BUCKET="my-bucket"\n'
        "not a pair\n",
        encoding="utf-8",
    )

    applied = load_dotenv_if_present(str(env_file))

    assert applied == {
        "WORLD_CASES_OUTPUT_PREFIX": "site/data",
        "WORLD_CASES_S3_BUCKET": "my-bucket",
    }
    assert os.environ["WORLD_CASES_S3_BUCKET"] == "my-bucket"


def test_existing_variables_win(tmp_path, monkeypatch):
    monkeypatch.setenv("WORLD_CASES_LOG_LEVEL", "DEBUG")
    env_file = tmp_path / ".env"
    env_file.write_text("WORLD_CASES_LOG_LEVEL=WARNING\n", encoding="utf-8")

    assert load_dotenv_if_present(str(env_file)) == {}
    assert os.environ["WORLD_CASES_LOG_LEVEL"] == "DEBUG"

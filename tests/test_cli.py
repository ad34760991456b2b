"""
Tests for the command-line interface.

See catmind/cli.py for implementation.
"""

import json

import pytest

import catmind.config
from catmind.cli import main


def test_cli_graph_writes_markdown(tmp_path, capsys):
    output = tmp_path / "graph.md"

    main(["graph", "--output", str(output)])

    assert "```mermaid" in output.read_text(encoding="utf-8")
    assert "generated successfully" in capsys.readouterr().out


def test_cli_graph_prints_without_output(capsys):
    main(["graph"])

    assert "graph TD" in capsys.readouterr().out


def test_cli_run_simulates_and_saves(tmp_path, capsys):
    save = tmp_path / "tanuki.json"

    main(["run", "--seconds", "2", "--seed", "1", "--toy", "450", "300", "--save", str(save)])

    out = capsys.readouterr().out
    assert "Tanuki enters the room" in out
    assert "Tanuki -> " in out
    state = json.loads(save.read_text(encoding="utf-8"))
    assert set(state) >= {"bonding", "playfulness", "fear", "personality", "preferences"}


def test_cli_run_resumes_saved_cat(tmp_path, capsys):
    save = tmp_path / "mike.json"
    save.write_text(json.dumps({"bonding": 0.9, "playfulness": 0.1, "fear": -0.5}), encoding="utf-8")

    main(["run", "--seconds", "0.1", "--seed", "2", "--name", "Mike", "--state", str(save)])

    assert "hearts 9/10" in capsys.readouterr().out


def test_cli_requires_command():
    with pytest.raises(SystemExit):
        main([])


def test_cli_run_uses_config_file(tmp_path, capsys, monkeypatch):
    # load_config replaces the module-level config; restore it afterwards
    monkeypatch.setattr(catmind.config, "config", catmind.config.config)
    behavior = tmp_path / "behavior.yaml"
    behavior.write_text(
        "emotion_calculation:\n"
        "  safety:\n"
        "    inputs: [fear]\n"
        "    weights: [-1.0]\n"
        "actions:\n"
        "  sit:\n"
        "    inputs: [safety]\n"
        "    weights: [1.0]\n"
        "    duration: 500\n",
        encoding="utf-8"
    )
    app_config = tmp_path / "config.yaml"
    app_config.write_text(
        f"behavior:\n  path: {behavior}\nlogging:\n  level: WARNING\n",
        encoding="utf-8"
    )

    main(["run", "--config", str(app_config), "--seconds", "1", "--seed", "3"])

    out = capsys.readouterr().out
    assert "Tanuki -> sit" in out
    assert "-> run_away" not in out

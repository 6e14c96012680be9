"""Tests for the idea library and the command-line entry point."""

import json
import logging

import pytest

from ideasphere.library import DEFAULT_LIBRARY_PATH, IdeaLibrary
from ideasphere.main import build_parser, main
from ideasphere.model import Idea


class TestIdeaFromMapping:

    def test_full_entry(self):
        idea = Idea.from_mapping({"id": "x1", "phrase": " Tides ", "category": "Sea", "description": "Moon pull"})
        assert idea == Idea("x1", "Tides", "Sea", "Moon pull")

    def test_missing_id_derived_from_position(self):
        assert Idea.from_mapping({"phrase": "Waves"}, 3).id == "3-Waves"

    @pytest.mark.parametrize("payload", [{"category": "x"}, {"phrase": "   "}, "text", None])
    def test_rejects_bad_entries(self, payload):
        with pytest.raises(ValueError):
            Idea.from_mapping(payload)


class TestIdeaLibrary:

    def test_bundled_sample(self):
        library = IdeaLibrary.load()
        assert library.path == DEFAULT_LIBRARY_PATH
        assert library.start == "Innovation"
        assert library.names() == ["Innovation", "Dreams", "Play"]
        assert len(library.ideas_for("Innovation")) == 8

    def test_sample_phrases_lead_to_topics(self):
        """Some phrases in the sample are topics themselves, so recentering leads on."""
        library = IdeaLibrary.load()
        phrases = {idea.phrase for ideas in library.topics.values() for idea in ideas}
        assert phrases & set(library.names())

    def test_case_insensitive_lookup(self):
        library = IdeaLibrary.load()
        assert library.ideas_for("dreams") == library.ideas_for("Dreams")

    def test_unknown_topic_is_empty(self, caplog):
        library = IdeaLibrary.load()
        with caplog.at_level(logging.WARNING, logger="ideasphere.library"):
            assert library.ideas_for("Quasars") == ()
        assert "Quasars" in caplog.text

    def test_start_defaults_to_first_topic(self):
        library = IdeaLibrary.from_mapping({"topics": {"B": [], "A": [{"phrase": "a"}]}})
        assert library.start == "B"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            IdeaLibrary.load(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("[", encoding="utf-8")
        with pytest.raises(ValueError):
            IdeaLibrary.load(path)

    @pytest.mark.parametrize("payload", [[], {"topics": []}, {"topics": {"A": {"phrase": "x"}}}])
    def test_bad_structure(self, payload):
        with pytest.raises(ValueError):
            IdeaLibrary.from_mapping(payload)


class TestMain:

    def test_parser_defaults(self):
        args = build_parser().parse_args([])
        assert args.backend == "auto"
        assert args.log_level == "INFO"
        assert not args.headless

    def test_headless_run(self):
        assert main(["--headless", "--log-level", "WARNING"]) == 0

    def test_headless_with_files(self, tmp_path):
        ideas = tmp_path / "ideas.json"
        ideas.write_text(json.dumps({"topics": {"Solo": [{"phrase": "One"}]}}), encoding="utf-8")
        cfg = tmp_path / "cfg.json"
        cfg.write_text(json.dumps({"layout": {"radius": 200}}), encoding="utf-8")
        argv = ["--ideas", str(ideas), "--config", str(cfg), "--log-level", "WARNING"]
        assert main(argv, headless=True) == 0

    def test_missing_library_returns_2(self, tmp_path):
        assert main(["--headless", "--ideas", str(tmp_path / "none.json"), "--log-level", "ERROR"]) == 2

    def test_bad_config_returns_2(self, tmp_path):
        cfg = tmp_path / "cfg.json"
        cfg.write_text("{", encoding="utf-8")
        assert main(["--headless", "--config", str(cfg), "--log-level", "ERROR"]) == 2

"""
Tests for the command line interface.
"""

import json

import pytest

from skillmatch import __version__
from skillmatch.app import main


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Run every CLI test from an empty directory with default settings."""
    monkeypatch.chdir(tmp_path)
    for var in (
        "SKILLMATCH_ONTOLOGY",
        "SKILLMATCH_NAMESPACE",
        "SKILLMATCH_POLICY",
        "SKILLMATCH_LOG_LEVEL",
        "SKILLMATCH_LOG_DIR",
        "SKILLMATCH_FETCH_TIMEOUT",
    ):
        monkeypatch.delenv(var, raising=False)


class TestCli:
    def test_version(self, capsys):
        main(["--version"])
        assert capsys.readouterr().out.strip() == __version__

    def test_match_text_output(self, capsys, batch_file, owl_file):
        main(["match", "--input", str(batch_file), "--ontology", str(owl_file)])
        out = capsys.readouterr().out
        assert "== exact ==" in out
        assert "Matching per Skill: [0.5]" in out
        assert "Done. pairs=3 scored=3 failed=0 mean=0.5000" in out

    def test_match_json_and_output_file(self, capsys, tmp_path, batch_file, owl_file):
        out_file = tmp_path / "results" / "scores.json"
        main([
            "match", "--input", str(batch_file), "--ontology", str(owl_file),
            "--output", str(out_file), "--json", "--workers", "2",
        ])
        printed = json.loads(capsys.readouterr().out)
        saved = json.loads(out_file.read_text())
        assert printed == saved
        assert [r["total"] for r in saved["results"]] == [1.0, 0.5, 0.0]

    def test_match_policy_from_env(self, capsys, monkeypatch, tmp_path, owl_file):
        batch = tmp_path / "batch.json"
        batch.write_text(json.dumps({
            "offersAndResumes": [{"offerSkills": ["java"], "resumeSkills": ["spring", "jakarta-ee"]}]
        }))
        monkeypatch.setenv("SKILLMATCH_POLICY", "symmetric")
        main(["match", "--input", str(batch), "--ontology", str(owl_file), "--json"])
        assert json.loads(capsys.readouterr().out)["results"][0]["total"] == 0.5

    def test_match_missing_ontology_exits(self, tmp_path, batch_file):
        with pytest.raises(SystemExit) as exc_info:
            main(["match", "--input", str(batch_file), "--ontology", str(tmp_path / "missing.owl")])
        assert "Ontology unavailable" in str(exc_info.value.code)

    def test_match_missing_input_exits(self, tmp_path, owl_file):
        with pytest.raises(SystemExit) as exc_info:
            main(["match", "--input", str(tmp_path / "none.json"), "--ontology", str(owl_file)])
        assert "not found" in str(exc_info.value.code)

    def test_score(self, capsys, owl_file):
        main(["score", "--offer", "Java,SQL", "--resume", "programming-language,sql", "--ontology", str(owl_file)])
        out = capsys.readouterr().out
        assert "Matching per Skill: [0.5, 1.0]" in out
        assert "Calculated Total Score: 0.7500" in out

    def test_score_without_offer_skills_exits(self, owl_file):
        with pytest.raises(SystemExit):
            main(["score", "--offer", " , ", "--ontology", str(owl_file)])

    def test_related(self, capsys, owl_file):
        main(["related", "--skill", "Java", "--ontology", str(owl_file)])
        out = capsys.readouterr().out
        assert "SuperClasses: programming-language" in out
        assert "SubClasses: jakarta-ee, spring" in out

    def test_related_unknown_skill(self, capsys, owl_file):
        main(["related", "--skill", "cobol", "--ontology", str(owl_file)])
        assert "not a class" in capsys.readouterr().out

    def test_validate_ok(self, capsys, batch_file):
        main(["validate", "--input", str(batch_file)])
        assert capsys.readouterr().out.strip() == "Valid"

    def test_validate_errors(self, capsys, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps({"offersAndResumes": [{"offerSkills": "java"}]}))
        with pytest.raises(SystemExit) as exc_info:
            main(["validate", "--input", str(bad)])
        assert exc_info.value.code == 2
        assert "pair 1:" in capsys.readouterr().out

    def test_bad_env_setting_exits(self, monkeypatch, batch_file):
        monkeypatch.setenv("SKILLMATCH_FETCH_TIMEOUT", "abc")
        with pytest.raises(SystemExit) as exc_info:
            main(["validate", "--input", str(batch_file)])
        assert "Invalid configuration" in str(exc_info.value.code)

    def test_bad_log_level_flag_exits(self, batch_file):
        with pytest.raises(SystemExit) as exc_info:
            main(["--log-level", "verbose", "validate", "--input", str(batch_file)])
        assert "Invalid configuration" in str(exc_info.value.code)
        assert "verbose" in str(exc_info.value.code)

"""
Testy wczytywania modeli z JSON.
"""

import json
import pathlib

import pytest

from production_model import ModelFormatError, UnknownFactError, load_model, load_model_dict

MODELS = pathlib.Path(__file__).resolve().parent.parent / "models"


class TestLoadModel:

    def test_concert_model_loads(self):
        model = load_model(MODELS / "koncert.json")
        assert model.name == "koncert"
        assert len(model.registry) == 8
        assert [f.name for f in model.inputs] == ["iść na koncert"]
        assert [r.rule_id for r in model.rules] == [f"R{i}" for i in range(1, 8)]

    def test_vocabulary_defaults_to_used_names(self):
        model = load_model_dict({
            "inputs": ["A"],
            "rules": [{"if": ["A"], "then": ["B"]}],
        })
        assert model.registry.names == ("A", "B")
        assert model.rules[0].conditions == (model.registry.get("A"),)

    def test_explicit_vocabulary_rejects_unknown_names(self):
        with pytest.raises(UnknownFactError) as exc:
            load_model_dict({
                "vocabulary": ["A"],
                "inputs": ["A"],
                "rules": [{"if": ["A"], "then": ["B"]}],
            })
        assert exc.value.name == "B"

    def test_repeat_is_applied(self):
        model = load_model_dict({
            "inputs": ["A"],
            "repeat": {"B": 3},
            "rules": [{"if": ["A"], "then": ["B"]}],
        })
        assert model.registry.get("B").repeat == 3

    def test_effect_runs_repeat_times(self):
        calls = []
        model = load_model_dict(
            {
                "inputs": ["A"],
                "repeat": {"B": 3},
                "rules": [{"if": ["A"], "then": ["B"]}],
            },
            effect=lambda name, names: calls.append(name),
        )
        assert model.solver().run_to_completion()
        assert calls == ["B", "B", "B"]

    def test_name_defaults_to_file_stem(self, tmp_path):
        path = tmp_path / "moj_model.json"
        path.write_text(json.dumps({"inputs": [], "rules": []}), encoding="utf-8")
        assert load_model(path).name == "moj_model"

    def test_loaded_model_solves(self):
        outcome = load_model(MODELS / "bez_biletow.json").solver().run_to_completion()
        assert not outcome
        assert outcome.unsatisfied == (1, 2)


class TestModelFormatErrors:

    @pytest.mark.parametrize("raw, path", [
        ([], "/"),
        ({"inputs": "A"}, "/inputs"),
        ({"inputs": [1]}, "/inputs/0"),
        ({"rules": {}}, "/rules"),
        ({"rules": ["A"]}, "/rules/0"),
        ({"rules": [{"if": ["A"]}]}, "/rules/0"),
        ({"rules": [{"id": 5, "then": ["A"]}]}, "/rules/0/id"),
        ({"rules": [{"then": ["A"]}], "repeat": {"A": 0}}, "/repeat/A"),
    ])
    def test_bad_structure_reports_path(self, raw, path):
        with pytest.raises(ModelFormatError) as exc:
            load_model_dict(raw)
        assert exc.value.path == path

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "zly.json"
        path.write_text("{nie json", encoding="utf-8")
        with pytest.raises(ModelFormatError):
            load_model(path)

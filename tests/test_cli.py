import json

import pytest
from click.testing import CliRunner

from tagsel._cli import main

FEATURES = [
    {
        "name": "login",
        "tags": ["@auth"],
        "scenarios": [
            {"name": "valid password", "line": 5, "tags": ["@smoke", "@env=dev,qa"]},
            {"name": "locked account", "line": 12, "tags": [{"line": 11, "name": "@slow"}]},
        ],
    },
    {
        "name": "search",
        "scenarios": [
            {"name": "by title", "line": 3, "tags": ["@smoke", "@env=prod"]},
            {"name": "untagged", "line": 9},
        ],
    },
]


@pytest.fixture
def features_file(tmp_path):
    path = tmp_path / "features.json"
    path.write_text(json.dumps(FEATURES))
    return str(path)


def run(*args, **kwargs):
    return CliRunner().invoke(main, list(args), catch_exceptions=False, **kwargs)


class TestSelection:
    def test_no_filter_selects_everything(self, features_file):
        result = run(features_file)

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "login: valid password",
            "login: locked account",
            "search: by title",
            "search: untagged",
        ]

    def test_selector(self, features_file):
        result = run('--selector', "anyOf('@smoke') && valuesFor('@env').isAnyOf('qa')", features_file)

        assert result.exit_code == 0
        assert result.output.splitlines() == ["login: valid password"]

    def test_feature_tags_are_inherited(self, features_file):
        result = run('-s', "anyOf('@auth') && not('@slow')", features_file)

        assert result.output.splitlines() == ["login: valid password"]

    def test_legacy_tags(self, features_file):
        result = run('-t', '@smoke,@slow', '-t', '~@auth', features_file)

        assert result.exit_code == 0
        assert result.output.splitlines() == ["search: by title"]

    def test_legacy_tags_from_environment(self, features_file):
        result = run(features_file, env={'TAGSEL_TAGS': '@auth ~@smoke'})

        assert result.output.splitlines() == ["login: locked account"]

    def test_selector_from_environment(self, features_file):
        result = run(features_file, env={'TAGSEL_SELECTOR': "not('@smoke', '@slow')"})

        assert result.output.splitlines() == ["search: untagged"]

    def test_json_output(self, features_file):
        result = run('--json', '-s', "anyOf('@auth')", features_file)

        assert result.exit_code == 0
        assert json.loads(result.output) == [
            {
                "feature": "login",
                "name": "valid password",
                "line": 5,
                "tags": [
                    {"line": 0, "name": "@auth"},
                    {"line": 0, "name": "@env=dev,qa"},
                    {"line": 0, "name": "@smoke"},
                ],
            },
            {
                "feature": "login",
                "name": "locked account",
                "line": 12,
                "tags": [
                    {"line": 0, "name": "@auth"},
                    {"line": 11, "name": "@slow"},
                ],
            },
        ]


class TestErrors:
    def test_invalid_selector(self, features_file):
        result = CliRunner().invoke(main, ['-s', "anyOf('@smoke'", features_file])

        assert result.exit_code == 2
        assert "Error parsing tag expression" in result.output

    def test_selector_and_tags(self, features_file):
        result = CliRunner().invoke(main, ['-s', "anyOf('@a')", '-t', '@a', features_file])

        assert result.exit_code == 2
        assert "cannot be used together" in result.output

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[{")

        result = CliRunner().invoke(main, [str(path)])

        assert result.exit_code == 1
        assert "error parsing" in result.output

    def test_invalid_tag(self, tmp_path):
        path = tmp_path / "features.json"
        path.write_text(json.dumps([{"name": "f", "tags": [42]}]))

        result = CliRunner().invoke(main, [str(path)])

        assert result.exit_code == 1
        assert "don't know how to interpret tag 42" in result.output

    def test_missing_file(self, tmp_path):
        result = CliRunner().invoke(main, [str(tmp_path / "missing.json")])

        assert result.exit_code == 2

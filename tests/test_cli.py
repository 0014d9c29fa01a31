import json
from pathlib import Path

import yaml
from typer.testing import CliRunner

from recordstore.cli import app, import_record_type
from recordstore.database import Database
from recordstore.persistence import dump, load
from sample_records import Person

runner = CliRunner()

PERSON = "sample_records:Person"


def _write_people(tmp_path: Path) -> Path:
    db = Database("people", Person, save_path=tmp_path / "people.rdb", strict_duplicates=True)
    db.extend(
        [
            Person(name="Lister", age=62),
            Person(name="Cat", age=10),
            Person(name="Kryten", age=3000),
        ]
    )
    return dump(db)


def test_import_record_type() -> None:
    assert import_record_type(PERSON) is Person


def test_inspect(tmp_path: Path) -> None:
    path = _write_people(tmp_path)
    result = runner.invoke(app, ["inspect", str(path)])
    assert result.exit_code == 0
    assert "people" in result.output
    assert "Records:    3" in result.output
    assert "Strict:     True" in result.output


def test_inspect_missing_file(tmp_path: Path) -> None:
    result = runner.invoke(app, ["inspect", str(tmp_path / "nope.rdb")])
    assert result.exit_code == 1


def test_inspect_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "junk.rdb"
    path.write_bytes(b"junk")
    result = runner.invoke(app, ["inspect", str(path)])
    assert result.exit_code == 1


def test_list(tmp_path: Path) -> None:
    path = _write_people(tmp_path)
    result = runner.invoke(app, ["list", str(path), "--record-type", PERSON])
    assert result.exit_code == 0
    names = sorted(json.loads(line)["name"] for line in result.output.splitlines())
    assert names == ["Cat", "Kryten", "Lister"]


def test_list_bad_record_type(tmp_path: Path) -> None:
    path = _write_people(tmp_path)
    result = runner.invoke(app, ["list", str(path), "--record-type", "sample_records:Nope"])
    assert result.exit_code == 1
    result = runner.invoke(app, ["list", str(path), "--record-type", "sample_records"])
    assert result.exit_code == 1


def test_list_wrong_record_type(tmp_path: Path) -> None:
    path = _write_people(tmp_path)
    result = runner.invoke(app, ["list", str(path), "--record-type", "sample_records:Pet"])
    assert result.exit_code == 1


def test_query(tmp_path: Path) -> None:
    path = _write_people(tmp_path)
    result = runner.invoke(app, ["query", str(path), "age", "62", "-t", PERSON])
    assert result.exit_code == 0
    assert json.loads(result.output) == {"name": "Lister", "age": 62}

    result = runner.invoke(app, ["query", str(path), "age", "999", "-t", PERSON])
    assert result.exit_code == 1

    result = runner.invoke(app, ["query", str(path), "height", "1", "-t", PERSON])
    assert result.exit_code == 1


def test_init_with_config(tmp_path: Path) -> None:
    config_file = tmp_path / "store.yaml"
    with open(config_file, "w") as f:
        yaml.dump({"base_dir": str(tmp_path / "dbs"), "strict_duplicates": True}, f)

    result = runner.invoke(app, ["--config", str(config_file), "init", "crew", "-t", PERSON])
    assert result.exit_code == 0

    target = tmp_path / "dbs" / "crew.rdb"
    db = load(target, Person)
    assert db.label == "crew"
    assert db.strict_duplicates is True
    assert db.save_path == str(target)
    assert len(db) == 0

    result = runner.invoke(app, ["--config", str(config_file), "init", "crew", "-t", PERSON])
    assert result.exit_code == 1


def test_init_explicit_path(tmp_path: Path) -> None:
    target = tmp_path / "crew.bin"
    result = runner.invoke(
        app, ["init", "crew", "-t", PERSON, "--save-path", str(target), "--no-strict"]
    )
    assert result.exit_code == 0
    assert load(target, Person).strict_duplicates is False


def test_bad_config(tmp_path: Path) -> None:
    result = runner.invoke(app, ["--config", str(tmp_path / "missing.yaml"), "inspect", "x"])
    assert result.exit_code == 1

import json
from pathlib import Path

import pytest

from dcc.model import DiagnosticRecord, Family, FamilyDescriptor
from dcc.persistence import PersistenceError
from dcc.storage import JsonDirectoryPersistence


def _family(prefix: str, *ids: str) -> Family:
    return Family(
        descriptor=FamilyDescriptor(
            prefix=prefix,
            repo="runtime",
            description=f"{prefix} diagnostics",
            pattern=f"^{prefix}\\d{{4}}$",
        ),
        records=tuple(DiagnosticRecord(id=value, category="Analyzer") for value in ids),
    )


def test_pers_001_writes_one_file_per_family_and_index_last(tmp_path: Path) -> None:
    output_dir = tmp_path / "errors"
    persistence = JsonDirectoryPersistence(output_dir=output_dir)

    result = persistence.persist([_family("SYSLIB", "SYSLIB0001", "SYSLIB1001"), _family("EF")])

    assert result.files == ["syslib.json", "ef.json", "index.json"]
    assert result.family_count == 2
    assert result.record_count == 2
    assert result.location == str(output_dir)

    syslib = json.loads((output_dir / "syslib.json").read_text(encoding="utf-8"))
    assert syslib["prefix"] == "SYSLIB"
    assert syslib["repo"] == "runtime"
    assert syslib["diagnostics"] == [
        {"id": "SYSLIB0001", "category": "Analyzer"},
        {"id": "SYSLIB1001", "category": "Analyzer"},
    ]
    ef = json.loads((output_dir / "ef.json").read_text(encoding="utf-8"))
    assert ef["diagnostics"] == []

    index = json.loads((output_dir / "index.json").read_text(encoding="utf-8"))
    assert index["version"] == "1.0"
    assert index["generated_at"] == syslib["generated_at"]
    assert index["prefixes"]["SYSLIB"]["file"] == "syslib.json"
    assert index["prefixes"]["SYSLIB"]["count"] == 2
    assert index["prefixes"]["EF"]["count"] == 0


def test_pers_002_non_ascii_messages_are_written_verbatim(tmp_path: Path) -> None:
    family = Family(
        descriptor=_family("CS").descriptor,
        records=(DiagnosticRecord(id="CS0001", message="Opérateur « + » invalide"),),
    )

    JsonDirectoryPersistence(output_dir=tmp_path).persist([family])

    assert "Opérateur « + » invalide" in (tmp_path / "cs.json").read_text(encoding="utf-8")


def test_pers_003_unwritable_output_raises_persistence_error(tmp_path: Path) -> None:
    blocker = tmp_path / "occupied"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(PersistenceError):
        JsonDirectoryPersistence(output_dir=blocker).persist([_family("EF")])


def test_pers_004_failed_write_leaves_no_partial_output(tmp_path: Path) -> None:
    output_dir = tmp_path / "errors"
    (output_dir / "ef.json.partial").mkdir(parents=True)

    with pytest.raises(PersistenceError):
        JsonDirectoryPersistence(output_dir=output_dir).persist(
            [_family("SYSLIB", "SYSLIB0001"), _family("EF", "EF1001")]
        )

    assert sorted(path.name for path in output_dir.iterdir()) == ["ef.json.partial"]


def test_pers_005_rewrite_replaces_previous_output(tmp_path: Path) -> None:
    persistence = JsonDirectoryPersistence(output_dir=tmp_path)
    persistence.persist([_family("EF", "EF1001")])

    persistence.persist([_family("EF", "EF1001", "EF1002")])

    document = json.loads((tmp_path / "ef.json").read_text(encoding="utf-8"))
    assert [record["id"] for record in document["diagnostics"]] == ["EF1001", "EF1002"]
    assert sorted(path.name for path in tmp_path.iterdir()) == ["ef.json", "index.json"]

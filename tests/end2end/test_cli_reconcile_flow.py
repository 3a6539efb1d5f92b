from __future__ import annotations

import json
from typing import TYPE_CHECKING

from formbridge import cli
from formbridge.settings import Settings

if TYPE_CHECKING:
    from pathlib import Path


def test_validate_then_fix_through_cli(monkeypatch, tmp_path: Path) -> None:
    source = tmp_path / "pdf.json"
    source.write_text(
        json.dumps(
            [
                {"_id": "1", "name": "email", "type": "text", "required": True},
                {"_id": "2", "name": "agree", "type": "checkbox"},
            ],
        ),
        encoding="utf-8",
    )
    target = tmp_path / "bubble.json"
    target.write_text(json.dumps([{"name": "email", "type": "email"}]), encoding="utf-8")
    store_dir = tmp_path / "store"
    validate_report = tmp_path / "validate.json"
    fix_report = tmp_path / "fix.json"

    monkeypatch.setattr("formbridge.cli.get_settings", lambda: Settings(log_json=False))

    common = ["--source", str(source), "--target", str(target), "--template", "signup", "--store-dir", str(store_dir)]
    monkeypatch.setattr("sys.argv", ["formbridge", "validate", *common, "--output", str(validate_report), "--strict"])
    assert cli.main() == 1

    validated = json.loads(validate_report.read_text(encoding="utf-8"))
    assert validated["summary"]["errors"] == 1
    assert [finding["type"] for finding in validated["findings"]] == ["constraint_mismatch", "missing_field"]

    monkeypatch.setattr("sys.argv", ["formbridge", "fix", *common, "--output", str(fix_report), "--apply"])
    assert cli.main() == 0

    fixed = json.loads(fix_report.read_text(encoding="utf-8"))
    assert fixed["applied"] is True
    assert [result["message"] for result in fixed["results"]] == ["Field constraints updated", "Bubble field created"]
    assert fixed["findings"] == []
    assert (store_dir / "signup.mapping.json").is_file()

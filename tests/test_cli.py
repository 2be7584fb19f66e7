from __future__ import annotations

import json
from pathlib import Path

import pytest

from valueclinic.cli import main


def _w(p: Path, rel: str, content: str) -> None:
    f = p / rel
    f.parent.mkdir(parents=True, exist_ok=True)
    f.write_text(content, encoding="utf-8")


@pytest.fixture
def chart(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    _w(tmp_path, "values.yaml", "a: 1\nb: 2\n")
    _w(tmp_path, "values-dev.yaml", "c: 3\n")
    _w(tmp_path, "mychart/templates/cm.yaml", "a: {{ .Values.a }}\n")
    return tmp_path / "mychart"


def test_prints_unused_values_with_default_values_file(chart: Path, capsys) -> None:
    main(["--chart", str(chart)])
    out = capsys.readouterr().out.splitlines()
    assert out == ["Unused values in values.yaml:", ".Values.b"]


def test_override_values(chart: Path, capsys) -> None:
    main(["--chart", str(chart), "--dev-values", "values-dev.yaml"])
    out = capsys.readouterr().out.splitlines()
    assert out[1:] == [".Values.b", ".Values.c"]


def test_no_unused_values_is_reported_explicitly(chart: Path, capsys) -> None:
    _w(chart, "templates/more.yaml", "{{ .Values.b }}")
    main(["--chart", str(chart)])
    assert capsys.readouterr().out.strip() == "No unused values found."


def test_missing_chart_prints_usage(chart: Path, capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code != 0
    assert "usage:" in capsys.readouterr().err


def test_unreadable_values_file_fails(chart: Path, capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--chart", str(chart), "--values", "missing.yaml"])
    assert exc.value.code == 1
    err = capsys.readouterr().err
    assert "missing.yaml" in err
    assert "error while reading" in err


def test_missing_templates_directory_fails(chart: Path, tmp_path: Path, capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--chart", str(tmp_path / "nochart")])
    assert exc.value.code == 1
    assert "templates" in capsys.readouterr().err


def test_fail_on_unused(chart: Path) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--chart", str(chart), "--fail-on-unused"])
    assert exc.value.code == 1


def test_white_list_and_output(chart: Path, tmp_path: Path, capsys) -> None:
    main(["--chart", str(chart), "--white-list", "b", "--output", "out"])
    out = capsys.readouterr().out
    assert "No unused values found." in out
    report = json.loads((tmp_path / "out" / "unused_values.json").read_text(encoding="utf-8"))
    assert report["ignored"] == [".Values.b"]


def test_config_file_supplies_chart(chart: Path, tmp_path: Path, capsys) -> None:
    _w(tmp_path, "valueclinic.yaml", f"chart: {chart.name}\ndev_values: [values-dev.yaml]\n")
    main([])
    assert capsys.readouterr().out.splitlines()[1:] == [".Values.b", ".Values.c"]


def test_init_and_show_config(chart: Path, tmp_path: Path, capsys) -> None:
    main(["--init"])
    assert (tmp_path / "valueclinic.yaml").exists()
    with pytest.raises(SystemExit):
        main(["--init"])
    main(["--show-config", "--chart", "x"])
    out = capsys.readouterr().out
    assert "chart:          x" in out


def test_self_referencing_values_file_fails(chart: Path, tmp_path: Path, capsys) -> None:
    _w(tmp_path, "values.yaml", "a: &x\n  b: 1\n  c: *x\n")
    with pytest.raises(SystemExit) as exc:
        main(["--chart", str(chart)])
    assert exc.value.code == 1
    assert "error while reading" in capsys.readouterr().err


def test_invalid_yaml_values_file_fails(chart: Path, tmp_path: Path, capsys) -> None:
    _w(tmp_path, "values.yaml", "a: [1, 2\n")
    with pytest.raises(SystemExit) as exc:
        main(["--chart", str(chart)])
    assert exc.value.code == 1
    assert "failed to parse values file" in capsys.readouterr().err


def test_unknown_graph_format_fails_before_writing(chart: Path, tmp_path: Path, capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--chart", str(chart), "--graph", "--format", "bogus", "--output", "out"])
    assert exc.value.code != 0
    assert "bogus" in capsys.readouterr().err
    assert not (tmp_path / "out").exists()


def test_unwritable_output_directory_fails(chart: Path, tmp_path: Path, capsys) -> None:
    # a regular file where the output directory should go
    _w(tmp_path, "out", "not a directory")
    with pytest.raises(SystemExit) as exc:
        main(["--chart", str(chart), "--output", "out"])
    assert exc.value.code == 1
    assert "error while writing report" in capsys.readouterr().err


def test_header_is_constant_for_other_values_file(chart: Path, tmp_path: Path, capsys) -> None:
    _w(tmp_path, "other.yaml", "z: 1\n")
    main(["--chart", str(chart), "--values", "other.yaml"])
    assert capsys.readouterr().out.splitlines() == ["Unused values in values.yaml:", ".Values.z"]

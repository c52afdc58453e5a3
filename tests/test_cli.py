import csv
import subprocess
import sys


def _run(*args):
    cmd = [sys.executable, "-m", "ltr_reconcile.cli", *map(str, args)]
    return subprocess.run(cmd, check=False, capture_output=True, text=True)


def test_cli_writes_reconciled_gff(tmp_path, primary_gff_path, secondary_gff_path):
    out = tmp_path / "combined.gff3"
    report = tmp_path / "reports" / "groups.tsv"
    filtered = tmp_path / "reports" / "filtered.tsv"
    svg_dir = tmp_path / "postcards"

    result = _run(
        primary_gff_path,
        secondary_gff_path,
        "-o",
        out,
        "--report",
        report,
        "--filtered",
        filtered,
        "--svg-dir",
        svg_dir,
    )

    assert result.returncode == 0, result.stderr
    assert "All part best combined\n3 2 2 7\n" in result.stderr
    assert "Done." in result.stderr

    lines = out.read_text().splitlines()
    assert lines[:3] == [
        "##gff-version 3",
        "##sequence-region chr1 1 60000",
        "##sequence-region chr2 1 10000",
    ]
    parents = [line.split("\t") for line in lines if "\trepeat_region\t" in line]
    assert [(cols[0], cols[3], cols[4]) for cols in parents] == [
        ("chr1", "120", "480"),
        ("chr1", "1100", "1900"),
        ("chr1", "5000", "6000"),
        ("chr1", "30000", "31000"),
        ("chr2", "100", "800"),
        ("chr2", "2000", "2600"),
        ("chr10", "300", "900"),
    ]
    assert "ID=LTR_retrotransposon1;Parent=repeat_region1;ltr_similarity=99.10" in out.read_text()
    assert '"' not in out.read_text()

    with report.open() as handle:
        assert len(list(csv.DictReader(handle, delimiter="\t"))) == 2
    with filtered.open() as handle:
        assert len(list(csv.DictReader(handle, delimiter="\t"))) == 3
    assert sorted(path.name for path in svg_dir.iterdir()) == [
        "chr1.repeat_region1_120_480.svg",
        "chr1.repeat_region2_1100_1900.svg",
    ]


def test_cli_streams_to_stdout(primary_gff_path, secondary_gff_path):
    result = _run(primary_gff_path, secondary_gff_path, "-q")

    assert result.returncode == 0, result.stderr
    assert result.stdout.startswith("##gff-version 3\n")
    assert result.stderr.splitlines() == ["All part best combined", "3 2 2 7"]


def test_cli_reports_malformed_input(tmp_path, primary_gff_path):
    broken = tmp_path / "broken.gff3"
    broken.write_text("##gff-version 3\nchr1\tLTRharvest\trepeat_region\t100\t500\t.\t+\t.\tName=x\n")

    result = _run(primary_gff_path, broken)

    assert result.returncode == 1
    assert "repeat_region without an ID attribute" in result.stderr

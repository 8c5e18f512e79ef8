import pytest

from fragments_to_sam.cli import build_parser, main

GENOME = "chr1\t248956422\nchr2\t198295559\n"
FRAGMENTS = (
    "chr1\t100\t150\tAAACCCAAGAAACACT-1\t2\n"
    "chr1\t200\t100\tINVERTED\t1\n"
    "chr2\t0\t30\tAAACCCAAGAAACACT-2\t1\n"
)


def test_defaults():
    args = build_parser().parse_args(["-f", "frags.tsv.gz", "-g", "genome.tsv"])
    assert args.output == "-"
    assert args.mode == "paired-end"
    assert args.output_format == "sam"
    assert not args.strict


def test_paired_end_to_stdout(write_file, capsys):
    genome = write_file("genome.tsv", GENOME)
    fragments = write_file("fragments.tsv.gz", FRAGMENTS)

    assert main(["--fragments", str(fragments), "--genome", str(genome)]) == 0

    records = [l for l in capsys.readouterr().out.splitlines() if not l.startswith("@")]
    assert records == [
        "AAACCCAAGAAACACT-1\t67\tchr1\t101\t255\t50M\t=\t101\t0\t*\t*",
        "AAACCCAAGAAACACT-1\t147\tchr1\t101\t255\t50M\t=\t101\t0\t*\t*",
        "AAACCCAAGAAACACT-2\t67\tchr2\t1\t255\t30M\t=\t1\t0\t*\t*",
        "AAACCCAAGAAACACT-2\t147\tchr2\t1\t255\t30M\t=\t1\t0\t*\t*",
    ]


def test_reverse_only(write_file, capsys):
    genome = write_file("genome.tsv", GENOME)
    fragments = write_file("fragments.tsv", FRAGMENTS)

    assert main(["-f", str(fragments), "-g", str(genome), "--mode", "reverse-only"]) == 0

    records = [l for l in capsys.readouterr().out.splitlines() if not l.startswith("@")]
    assert [r.split("\t")[1] for r in records] == ["16", "16"]


def test_strict_mode_fails_on_malformed_line(write_file, capsys):
    genome = write_file("genome.tsv", GENOME)
    fragments = write_file("fragments.tsv", FRAGMENTS)

    assert main(["-f", str(fragments), "-g", str(genome), "--strict"]) == 1


def test_bad_genome_fails_before_header(write_file, capsys):
    genome = write_file("genome.tsv", "chr1\t248956422\nchr1\t10\n")
    fragments = write_file("fragments.tsv", FRAGMENTS)

    assert main(["-f", str(fragments), "-g", str(genome)]) == 1
    assert capsys.readouterr().out == ""


def test_missing_file_fails(tmp_path, write_file):
    genome = write_file("genome.tsv", GENOME)
    assert main(["-f", str(tmp_path / "missing.tsv"), "-g", str(genome)]) == 1


def test_bam_output(write_file, tmp_path):
    import pysam

    genome = write_file("genome.tsv", GENOME)
    fragments = write_file("fragments.tsv", FRAGMENTS)
    output = tmp_path / "out.bam"

    argv = ["-f", str(fragments), "-g", str(genome), "-o", str(output), "--output-format", "bam"]
    assert main(argv) == 0

    with pysam.AlignmentFile(str(output), "rb") as alignments:
        assert [r.flag for r in alignments] == [67, 147, 67, 147]


def test_undecodable_fragment_line_is_skipped(write_file, tmp_path, capsys):
    genome = write_file("genome.tsv", GENOME)
    fragments = tmp_path / "fragments.tsv"
    fragments.write_bytes(b"chr1\t1\t5\tA\nchr1\t1\t5\t\xff\xfeBAD\nchr1\t1\t5\tC\n")

    assert main(["-f", str(fragments), "-g", str(genome), "--mode", "forward-only"]) == 0

    records = [l for l in capsys.readouterr().out.splitlines() if not l.startswith("@")]
    assert [r.split("\t")[0] for r in records] == ["A", "C"]


def test_truncated_gzip_fragments_fail(write_file, tmp_path):
    import gzip

    genome = write_file("genome.tsv", GENOME)
    data = gzip.compress(FRAGMENTS.encode() * 200)
    fragments = tmp_path / "fragments.tsv.gz"
    fragments.write_bytes(data[: len(data) // 2])

    assert main(["-f", str(fragments), "-g", str(genome)]) == 1


def test_undecodable_genome_fails(write_file, tmp_path, capsys):
    genome = tmp_path / "genome.tsv"
    genome.write_bytes(b"chr\xff1\t248956422\n")
    fragments = write_file("fragments.tsv", FRAGMENTS)

    assert main(["-f", str(fragments), "-g", str(genome)]) == 1
    assert capsys.readouterr().out == ""


def test_negative_log_every_is_rejected():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["-f", "a.tsv", "-g", "g.tsv", "--log-every", "-1"])
    args = build_parser().parse_args(["-f", "a.tsv", "-g", "g.tsv", "--log-every", "0"])
    assert args.log_every == 0

import io

import pytest

from solve_cli import build_parser, main
from tests.data import SAMPLE_CORNER_PRODUCT, SAMPLE_ROUGHNESS, SAMPLE_TILES


@pytest.fixture
def tile_file(tmp_path):
    path = tmp_path / "tiles.txt"
    path.write_text(SAMPLE_TILES, encoding="utf-8")
    return str(path)


def test_default_answer_is_roughness(tile_file, capsys):
    assert main([tile_file]) == 0
    assert capsys.readouterr().out.strip() == str(SAMPLE_ROUGHNESS)


def test_corner_answer(tile_file, capsys):
    assert main([tile_file, "--answer", "corners", "--engine", "backtrack"]) == 0
    assert capsys.readouterr().out.strip() == str(SAMPLE_CORNER_PRODUCT)


def test_show_image_goes_to_stderr(tile_file, capsys):
    assert main([tile_file, "--show-image"]) == 0
    captured = capsys.readouterr()
    assert captured.out.strip() == str(SAMPLE_ROUGHNESS)
    assert len(captured.err.splitlines()) == 24


def test_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(SAMPLE_TILES))
    assert main(["-", "--answer", "corners"]) == 0
    assert capsys.readouterr().out.strip() == str(SAMPLE_CORNER_PRODUCT)


def test_bad_input_exits_nonzero(tmp_path, capsys):
    path = tmp_path / "bad.txt"
    path.write_text("Tile 1:\n##\n", encoding="utf-8")
    assert main([str(path)]) == 1
    assert capsys.readouterr().err.startswith("error: ")


def test_unknown_engine_rejected_by_parser():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--engine", "annealing"])

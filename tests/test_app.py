import os

import pytest

import app as app_module
from tests.data import SAMPLE_CORNER_PRODUCT, SAMPLE_ROUGHNESS, SAMPLE_TILES


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(app_module, "BASE_DIR", str(tmp_path))
    app_module.app.config["TESTING"] = True
    with app_module.app.test_client() as c:
        yield c


def test_index_serves_upload_form(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert b"<textarea name='tiles'" in resp.data


def test_solve_json_body(client, tmp_path):
    resp = client.post("/solve", json={"tiles": SAMPLE_TILES, "engine": "backtrack"})
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["ok"] is True
    assert data["geom"] == 3
    assert data["corner_product"] == SAMPLE_CORNER_PRODUCT
    assert data["roughness"] == SAMPLE_ROUGHNESS
    assert data["motif_count"] == 2

    assert os.path.exists(tmp_path / data["placement_filename"])
    assert os.path.exists(tmp_path / data["image_filename"])
    assert os.path.exists(tmp_path / data["html_filename"])

    latest = client.get("/result/latest").get_json()
    assert latest["corner_product"] == SAMPLE_CORNER_PRODUCT


def test_solve_form_corners_only(client):
    resp = client.post("/solve", data={"tiles": SAMPLE_TILES, "part": "corners"})
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["corner_product"] == SAMPLE_CORNER_PRODUCT
    assert data["roughness"] is None


def test_solve_raw_body(client):
    resp = client.post("/solve?part=corners", data=SAMPLE_TILES, content_type="text/plain")
    assert resp.status_code == 200
    assert resp.get_json()["corner_product"] == SAMPLE_CORNER_PRODUCT


def test_bad_input_is_unprocessable(client):
    resp = client.post("/solve", json={"tiles": "Tile x:\n#"})
    assert resp.status_code == 422
    data = resp.get_json()
    assert data["ok"] is False
    assert data["reason"].startswith("TileParseError")
    assert client.get("/result/latest").get_json()["ok"] is False


def test_progress_is_never_cached(client):
    client.post("/solve", json={"tiles": SAMPLE_TILES})
    resp = client.get("/progress3")
    assert resp.status_code == 200
    assert resp.headers["Cache-Control"] == "no-store, max-age=0"
    assert resp.headers["Pragma"] == "no-cache"
    snap = resp.get_json()
    assert snap["done"] is True
    assert snap["result_url"] == "/result/latest"
    assert "elapsed_start" not in snap



ONE_TILE = "\n".join(["Tile 7:"] + ["." * 10] * 10)


def test_downloads_serve_current_run(client):
    client.post("/solve", json={"tiles": SAMPLE_TILES})

    placement = client.get("/download/placement")
    assert placement.status_code == 200
    assert len(placement.data.decode().splitlines()) == 9

    image = client.get("/download/image")
    assert image.status_code == 200
    assert len(image.data.decode().splitlines()) == 24

    html = client.get("/download/html")
    assert html.status_code == 200
    assert b"<svg" in html.data


def test_corners_only_run_drops_previous_image(client, tmp_path):
    client.post("/solve", json={"tiles": SAMPLE_TILES})
    assert client.get("/download/image").status_code == 200

    data = client.post("/solve", json={"tiles": ONE_TILE, "part": "corners"}).get_json()
    assert data["corner_product"] == 7 ** 4
    assert data["image_filename"] == ""
    assert data["html_filename"] == ""
    assert client.get("/download/image").status_code == 404
    assert client.get("/download/html").status_code == 404

    placement = client.get("/download/placement")
    assert placement.data.decode().startswith("7 ")


def test_failed_run_leaves_nothing_to_download(client):
    client.post("/solve", json={"tiles": SAMPLE_TILES})
    client.post("/solve", json={"tiles": "Tile x:\n#"})
    for kind in ("placement", "image", "html"):
        assert client.get(f"/download/{kind}").status_code == 404


def test_downloads_follow_base_dir(client, tmp_path, monkeypatch):
    client.post("/solve", json={"tiles": SAMPLE_TILES, "part": "corners"})
    other = tmp_path / "elsewhere"
    other.mkdir()
    monkeypatch.setattr(app_module, "BASE_DIR", str(other))
    assert client.get("/download/placement").status_code == 404

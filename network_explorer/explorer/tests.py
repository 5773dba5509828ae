import json
import shutil
from io import StringIO
from pathlib import Path
from unittest.mock import patch

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.core.management import CommandError, call_command
from django.test import Client, override_settings

from api.network_api.errors import RetrievalFailure
from explorer import views

CATALOG = Path(__file__).resolve().parent.parent / "networks"


@pytest.fixture
def client():
    return Client()


@pytest.fixture(autouse=True)
def clean_workspaces():
    views.WORKSPACES.clear()
    yield
    views.WORKSPACES.clear()


def upload(client, text, name="path.gml"):
    return client.post("/api/graph/load/", {"file": SimpleUploadedFile(name, text.encode("utf-8"))})


def post_json(client, url, body):
    return client.post(url, data=json.dumps(body), content_type="application/json")


def test_index_renders(client):
    response = client.get("/")
    assert response.status_code == 200
    assert b"Network Explorer" in response.content


def test_upload_runs_pipeline(client, path_graph_text):
    response = upload(client, path_graph_text)
    body = response.json()

    assert response.status_code == 200
    assert body["ok"] is True
    assert body["meta"] == {"node_count": 3, "edge_count": 2, "filename": "path.gml", "source": "gml"}
    assert body["analysis"]["metrics"]["display"]["average_degree"] == "1.33"
    assert body["analysis"]["metrics"]["display"]["density"] == "0.6667"
    assert body["graph_id"] in views.WORKSPACES
    assert client.session["active_graph_id"] == body["graph_id"]


def test_upload_requires_file(client):
    response = client.post("/api/graph/load/", {})
    assert response.status_code == 400
    assert response.json()["ok"] is False


def test_upload_rejects_unknown_extension(client):
    response = upload(client, "a,b", name="edges.csv")
    assert response.status_code == 400
    assert response.json()["error"] == "UnsupportedFile"


@override_settings(MAX_UPLOAD_BYTES=10)
def test_upload_rejects_large_files(client, path_graph_text):
    response = upload(client, path_graph_text)
    assert response.status_code == 413


def test_upload_only_accepts_post(client):
    assert client.get("/api/graph/load/").status_code == 405


def test_degenerate_graph_reports_undefined_metrics(client):
    body = upload(client, "node [ id 1 ]").json()
    metrics = body["analysis"]["metrics"]

    assert metrics["values"]["density"] is None
    assert metrics["display"]["density"] == "undefined"
    assert metrics["undefined"]["density"].startswith("DegenerateGraph")
    assert body["analysis"]["distribution"]["exponent"] is None


def test_load_from_catalog(client, tmp_path):
    shutil.copy(CATALOG / "star.gml", tmp_path / "star.gml")
    with override_settings(NETWORKS_DIR=tmp_path):
        response = post_json(client, "/api/graph/load-catalog/", {"name": "star.gml"})

    body = response.json()
    assert response.status_code == 200
    assert body["meta"]["node_count"] == 5
    assert body["analysis"]["metrics"]["values"]["max_degree"] == 4


@pytest.mark.parametrize("name, status", [
    ("../settings.py", 400),
    ("..", 400),
    ("", 400),
    ("absent.gml", 404),
])
def test_catalog_rejects_bad_names(client, tmp_path, name, status):
    with override_settings(NETWORKS_DIR=tmp_path):
        response = post_json(client, "/api/graph/load-catalog/", {"name": name})
    assert response.status_code == status


def test_catalog_requires_json_object(client):
    response = client.post("/api/graph/load-catalog/", data="[1]", content_type="application/json")
    assert response.status_code == 400


def test_catalog_retrieval_failure(client, tmp_path):
    (tmp_path / "broken.gml").write_text("node [ id 1 ]", encoding="utf-8")
    with override_settings(NETWORKS_DIR=tmp_path), patch(
        "api.network_api.datasource_common.base.BaseDatasourcePlugin._read_source",
        side_effect=RetrievalFailure("disk error"),
    ):
        response = post_json(client, "/api/graph/load-catalog/", {"name": "broken.gml"})

    assert response.status_code == 502
    assert response.json()["error"] == "RetrievalFailure"


def test_analysis_endpoint(client, path_graph_text):
    graph_id = upload(client, path_graph_text).json()["graph_id"]

    response = client.get(f"/api/graph/{graph_id}/analysis/")
    assert response.status_code == 200
    assert response.json()["analysis"]["metrics"]["values"]["node_count"] == 3

    assert client.get("/api/graph/unknown/analysis/").status_code == 404


def test_neighbors_endpoint(client, path_graph_text):
    graph_id = upload(client, path_graph_text).json()["graph_id"]

    response = post_json(client, "/api/graph/neighbors/", {"graph_id": graph_id, "node_id": 2})
    body = response.json()
    assert response.status_code == 200
    assert body["neighbors"] == ["1", "2", "3"]
    assert len(body["edges"]) == 2

    missing = post_json(client, "/api/graph/neighbors/", {"graph_id": graph_id, "node_id": "42"})
    assert missing.status_code == 404

    no_node = post_json(client, "/api/graph/neighbors/", {"graph_id": graph_id})
    assert no_node.status_code == 400


def test_render_endpoint(client, path_graph_text):
    graph_id = upload(client, path_graph_text).json()["graph_id"]

    response = client.get("/api/render/", {"graph_id": graph_id})
    assert response.status_code == 200
    assert b"networkSVG" in response.content


def test_render_endpoint_log_scale(client, path_graph_text):
    graph_id = upload(client, path_graph_text).json()["graph_id"]

    response = client.get("/api/render/", {"graph_id": graph_id, "log_scale": "1"})
    assert b'id="logScaleToggle" checked' in response.content


def test_new_selection_discards_previous_graph(client, path_graph_text):
    first = upload(client, path_graph_text).json()["graph_id"]
    second = upload(client, "node [ id a ]").json()["graph_id"]

    assert first not in views.WORKSPACES
    assert second in views.WORKSPACES
    assert client.get(f"/api/graph/{first}/analysis/").status_code == 404


def test_other_sessions_keep_their_graphs(path_graph_text):
    alice, bob = Client(), Client()
    kept = upload(alice, path_graph_text).json()["graph_id"]
    upload(bob, path_graph_text)

    assert kept in views.WORKSPACES


def test_render_endpoint_errors(client, path_graph_text):
    graph_id = upload(client, path_graph_text).json()["graph_id"]

    assert client.get("/api/render/").status_code == 400
    assert client.get("/api/render/", {"graph_id": "nope"}).status_code == 404
    assert client.get("/api/render/", {"graph_id": graph_id, "visualizer_id": "matrix"}).status_code == 400


def test_analyze_gml_command_prints_metrics():
    out = StringIO()
    call_command("analyze_gml", str(CATALOG / "sample.gml"), stdout=out)
    output = out.getvalue()

    assert "Average Degree" in output
    assert "Density          0.8333" in output
    assert "Undeclared ids referenced by edges: 9" in output


def test_analyze_gml_command_json():
    out = StringIO()
    call_command("analyze_gml", str(CATALOG / "star.gml"), "--json", stdout=out)
    payload = json.loads(out.getvalue())
    assert payload["metrics"]["values"]["edge_count"] == 4


def test_analyze_gml_command_rejects_unknown_extension(tmp_path):
    with pytest.raises(CommandError):
        call_command("analyze_gml", str(tmp_path / "edges.csv"))

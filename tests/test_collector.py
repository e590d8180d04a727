"""End-to-end tests for model loading, metric computation and CLI."""

import json

import pytest
import yaml

from oometrics.__main__ import main
from oometrics.collector import collect_metrics, compute_project_metrics, write_output
from oometrics.config import load_config
from oometrics.model_loader import build_model


SHOP_UNITS = [
    {
        "namespace": "Shop.Core",
        "file": "Core/Entity.cs",
        "classes": [
            {
                "name": "Entity",
                "abstract": True,
                "loc": 20,
                "sloc": 15,
                "fields": [{"name": "Id", "access": "protected"}],
                "methods": [
                    {"name": "Validate", "access": "public", "virtual": True,
                     "accessed_fields": ["Id"], "flow": [{"kind": "if"}],
                     "halstead": {"n1": 6, "n2": 8, "eta1": 4, "eta2": 5}},
                ],
            },
            {"name": "IRepository", "interface": True, "methods": [{"name": "Save", "parameters": 1}]},
        ],
    },
    {
        "namespace": "Shop.Orders",
        "file": "Orders/Order.cs",
        "classes": [
            {
                "name": "Order",
                "base": "Entity",
                "access": "public",
                "loc": 60,
                "sloc": 48,
                "comment_lines": 6,
                "coupled_types": ["Customer", "List<OrderLine>"],
                "fields": [{"name": "_lines"}, {"name": "_customer"}],
                "methods": [
                    {"name": "Validate", "access": "public", "override": True,
                     "accessed_fields": ["_lines"], "flow": [{"kind": "foreach", "body": {"kind": "if"}}]},
                    {"name": "Total", "access": "public", "accessed_fields": ["_lines"],
                     "external_calls": ["OrderLine.Amount"],
                     "halstead": {"n1": 12, "n2": 15, "eta1": 6, "eta2": 8}},
                    {"name": "Owner", "accessed_fields": ["_customer"]},
                ],
            },
            {
                "name": "OrderLine",
                "fields": [{"name": "_amount"}],
                "methods": [{"name": "Amount", "access": "public", "accessed_fields": ["_amount"]}],
            },
            {
                "name": "OrderRepository",
                "interfaces": ["IRepository"],
                "methods": [{"name": "Save", "access": "public", "parameters": 1, "used_types": ["Order"]}],
            },
        ],
    },
]


@pytest.fixture
def shop_dir(tmp_path):
    models = tmp_path / "models"
    models.mkdir()
    for i, unit in enumerate(SHOP_UNITS):
        (models / f"unit{i}.yaml").write_text(yaml.safe_dump(unit), encoding="utf-8")
    return tmp_path


class TestComputeProjectMetrics:
    def test_shop_model(self):
        pm = compute_project_metrics(build_model(SHOP_UNITS), project_name="Shop")
        by_name = {cm.class_name: cm for cm in pm.class_metrics}

        assert pm.total_classes == 4
        assert pm.total_interfaces == 1
        assert by_name["Order"].dit == 2
        assert by_name["Entity"].noc == 1
        assert by_name["Order"].lcom4 == 2
        assert by_name["Order"].mpc == 1
        assert by_name["Order"].inherited_field_count == 1
        assert by_name["OrderRepository"].cbo == 2
        assert [p.package_name for p in pm.package_metrics] == ["Shop.Core", "Shop.Orders"]
        assert 0.0 <= pm.pf <= 1.0
        assert pm.halstead is not None

    def test_idempotent(self):
        classes = build_model(SHOP_UNITS)
        first = compute_project_metrics(classes).to_dict()
        second = compute_project_metrics(classes).to_dict()
        assert first == second

    def test_workers_match_sequential(self):
        classes = build_model(SHOP_UNITS)
        sequential = compute_project_metrics(classes).to_dict()
        threaded = compute_project_metrics(classes, workers=4).to_dict()
        assert sequential == threaded

    def test_empty_model(self):
        pm = compute_project_metrics([])
        assert pm.total_classes == 0
        assert pm.average_wmc == 0.0
        assert pm.ahf == 1.0
        assert pm.package_metrics == []


class TestCollect:
    def test_collect_and_write(self, shop_dir, capsys):
        config = load_config(repo_root=str(shop_dir))
        result = collect_metrics(config, [str(shop_dir / "models")], verbose=False)
        assert result.error_count == 0
        assert len(result.classes) == 5
        assert result.project_metrics.project_name == shop_dir.name

        written = write_output(result, config, verbose=False)
        out = shop_dir / "analysis" / "metrics_output"
        assert (out / "raw" / "class_metrics.json").exists()
        assert (out / "raw" / "package_metrics.csv").exists()
        assert (out / "project_summary.md").exists()
        assert len(written) == 7

        summary = json.loads((out / "project_summary.json").read_text(encoding="utf-8"))
        assert "classes" not in summary
        assert summary["total_classes"] == 4

    def test_bad_file_is_skipped(self, shop_dir, capsys):
        (shop_dir / "models" / "broken.yaml").write_text("classes: [{loc: 3}]\n", encoding="utf-8")
        config = load_config(repo_root=str(shop_dir))
        result = collect_metrics(config, [str(shop_dir / "models")], verbose=False)
        assert result.error_count == 1
        assert len(result.classes) == 5
        assert "Load error" in capsys.readouterr().err

    def test_no_classes(self, tmp_path, capsys):
        config = load_config(repo_root=str(tmp_path))
        result = collect_metrics(config, [str(tmp_path)], verbose=False)
        assert result.project_metrics is None
        assert write_output(result, config, verbose=False) == []


class TestCLI:
    def test_main(self, shop_dir, capsys):
        code = main([
            str(shop_dir / "models"),
            "--root", str(shop_dir),
            "--format", "json",
            "--output", "out",
            "--workers", "2",
            "--project-name", "Shop",
            "-q",
        ])
        assert code == 0
        summary = json.loads((shop_dir / "out" / "project_summary.json").read_text(encoding="utf-8"))
        assert summary["project_name"] == "Shop"
        assert not (shop_dir / "out" / "project_summary.md").exists()

    def test_missing_model_path(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.yaml"), "--root", str(tmp_path), "-q"]) == 1
        assert "model path not found" in capsys.readouterr().err

    def test_no_classes_fails(self, tmp_path, capsys):
        empty = tmp_path / "empty.yaml"
        empty.write_text("", encoding="utf-8")
        assert main([str(empty), "--root", str(tmp_path), "-q"]) == 1

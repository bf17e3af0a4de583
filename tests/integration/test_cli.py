import json
import logging
from pathlib import Path

import pytest

from cli.main import main
from sgdnet.data.mnist import build_offline_fixture


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            handler.close()
            root.removeHandler(handler)
    root.setLevel(level)


def test_cli_preset_run(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    main(["--preset", "xor-cpu", "--epochs", "2", "--quiet"])
    run_dir = Path("runs/xor-cpu")
    assert (run_dir / "metrics.jsonl").exists()
    assert (run_dir / "manifest.json").exists()
    assert (run_dir / "params.npz").exists()
    payload = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert payload["epochs"] == 2
    assert payload["eval_total"] == 4


def test_cli_idx_files_with_override(tmp_path, capsys):
    images, labels = build_offline_fixture(tmp_path / "mnist", count=50)
    override = tmp_path / "override.json"
    override.write_text(json.dumps({"data": {"options": {"train_size": 40, "test_size": 10}}}))
    log_file = tmp_path / "train.log"
    main(
        [
            "--images", str(images),
            "--labels", str(labels),
            "--config", str(override),
            "--layers", "784,10",
            "--epochs", "1",
            "--seed", "3",
            "--run-dir", str(tmp_path / "run"),
            "--log-file", str(log_file),
            "--dump-config", str(tmp_path / "resolved.json"),
        ]
    )
    resolved = json.loads((tmp_path / "resolved.json").read_text())
    assert resolved["data"]["name"] == "mnist_idx"
    assert resolved["model"] == {"layers": [784, 10]}
    payload = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert payload["eval_total"] == 10
    assert "Completed epoch 1" in log_file.read_text()


def test_cli_list_presets(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--list-presets"])
    assert excinfo.value.code == 0
    assert "mnist-idx" in capsys.readouterr().out.split()

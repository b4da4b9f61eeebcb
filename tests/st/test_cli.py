"""CLI 命令测试"""

from __future__ import annotations

import io
import json
import tarfile
from pathlib import Path

import pytest
from click.testing import CliRunner

import sbuild.cli as cli_mod
from sbuild.cli import main
from sbuild.services.workspace import WorkspaceManager


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_mod, "setup_logging", lambda **kw: None)


def _tar_bytes() -> bytes:
    buf = io.BytesIO()
    data = b"hello"
    with tarfile.open(fileobj=buf, mode="w") as tf:
        info = tarfile.TarInfo("etc/motd")
        info.size = len(data)
        tf.addfile(info, io.BytesIO(data))
    return buf.getvalue()


class TestParseCommand:
    def test_valid(self) -> None:
        result = CliRunner().invoke(main, ["parse", "//owner/container:tag"])
        assert result.exit_code == 0
        assert "owner/" in result.output
        assert ":tag" in result.output
        assert "singularity-hub.org/api/container/owner/container:tag" in result.output

    def test_invalid(self) -> None:
        result = CliRunner().invoke(main, ["parse", "//bad ref"])
        assert result.exit_code == 1
        assert "不是合法的 shub 引用" in result.output


class TestPullCommand:
    @pytest.fixture()
    def registry(self, stub_urlopen, make_response):
        manifest = {"image": "https://files.example.com/img.tar", "name": "o/c"}

        def route(url: str):
            if "singularity-hub.org" in url:
                return make_response(json.dumps(manifest).encode())
            return make_response(_tar_bytes())

        return stub_urlopen(route)

    def test_pull_and_clean(self, registry, tmp_path: Path) -> None:
        result = CliRunner().invoke(
            main, ["pull", "shub://o/c", "--workspace-dir", str(tmp_path)],
        )
        assert result.exit_code == 0, result.output
        assert "镜像:" in result.output
        assert list(tmp_path.iterdir()) == []

    def test_pull_keep_and_unpack(self, registry, tmp_path: Path) -> None:
        result = CliRunner().invoke(
            main, ["pull", "shub://o/c", "--workspace-dir", str(tmp_path), "--keep", "--unpack"],
        )
        assert result.exit_code == 0, result.output
        assert "(tar)" in result.output
        [ws] = list(tmp_path.iterdir())
        assert (ws / "rootfs" / "etc" / "motd").read_bytes() == b"hello"

    def test_pull_unknown_prefix(self) -> None:
        result = CliRunner().invoke(main, ["pull", "oras://o/c"])
        assert result.exit_code == 1
        assert "不支持的来源类型" in result.output

    def test_pull_registry_error(self, stub_urlopen, tmp_path: Path) -> None:
        import urllib.error
        stub_urlopen(urllib.error.HTTPError("u", 404, "Not Found", None, None))
        result = CliRunner().invoke(
            main, ["pull", "shub://o/c", "--workspace-dir", str(tmp_path)],
        )
        assert result.exit_code == 1
        assert "REGISTRY_STATUS" in result.output
        assert list(tmp_path.iterdir()) == []


class TestCleanCommand:
    @pytest.fixture()
    def leftovers(self, tmp_path: Path) -> list[Path]:
        mgr = WorkspaceManager(str(tmp_path))
        kept = [Path(mgr.new_workspace("sbuild-shub").path) for _ in range(2)]
        (tmp_path / "unrelated").mkdir()
        return kept

    def test_clean_removes_labelled_workspaces(self, leftovers, tmp_path: Path) -> None:
        result = CliRunner().invoke(main, ["clean", "--workspace-dir", str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert "已清理 2 个工作空间" in result.output
        assert not any(p.exists() for p in leftovers)
        assert (tmp_path / "unrelated").exists()

    def test_dry_run_lists_only(self, leftovers, tmp_path: Path) -> None:
        result = CliRunner().invoke(
            main, ["clean", "--workspace-dir", str(tmp_path), "--dry-run"],
        )
        assert result.exit_code == 0, result.output
        for p in leftovers:
            assert str(p) in result.output
            assert p.exists()
        assert "unrelated" not in result.output

    def test_empty_label_rejected(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(
            main, ["clean", "--workspace-dir", str(tmp_path), "--label", ""],
        )
        assert result.exit_code == 1
        assert "--label" in result.output

    def test_pull_keep_then_clean(self, stub_urlopen, make_response, tmp_path: Path) -> None:
        manifest = {"image": "https://files.example.com/img.tar", "name": "o/c"}
        stub_urlopen(lambda url: make_response(
            json.dumps(manifest).encode() if "singularity-hub.org" in url else _tar_bytes()
        ))
        runner = CliRunner()
        pulled = runner.invoke(main, ["pull", "shub://o/c", "--workspace-dir", str(tmp_path), "--keep"])
        assert pulled.exit_code == 0, pulled.output
        assert len(list(tmp_path.iterdir())) == 1

        cleaned = runner.invoke(main, ["clean", "--workspace-dir", str(tmp_path)])
        assert cleaned.exit_code == 0, cleaned.output
        assert list(tmp_path.iterdir()) == []

"""
Tests for the taxonomy sync command
Version: 1.0
"""

import json
import sys

import pytest

from scripts.sync_taxonomy import main, sync


@pytest.fixture
def files(tmp_path, taxonomy_document):
    taxonomy_path = tmp_path / "taxonomy.json"
    taxonomy_path.write_text(json.dumps(taxonomy_document), encoding="utf-8")
    return taxonomy_path, tmp_path / "data.json"


def write_tools(path, records):
    path.write_text(json.dumps({"tools": records}), encoding="utf-8")


VIDEO_TOOL = {"id": "v1", "title": "Launch Recap", "type": "Video", "function": "Media Relations"}


class TestSync:

    @pytest.mark.asyncio
    async def test_unreadable_taxonomy(self, tmp_path):
        data_path = tmp_path / "data.json"
        write_tools(data_path, [])

        assert await sync(tmp_path / "missing.json", data_path, write=True, dry_run=False) == 1

    @pytest.mark.asyncio
    async def test_consistent_leaves_file_alone(self, files):
        taxonomy_path, data_path = files
        write_tools(data_path, [{"id": "t1", "title": "A", "type": "GPT", "function": "Brand & Voice"}])
        before = taxonomy_path.read_text(encoding="utf-8")

        assert await sync(taxonomy_path, data_path, write=True, dry_run=False) == 0
        assert taxonomy_path.read_text(encoding="utf-8") == before

    @pytest.mark.asyncio
    async def test_report_only_without_write(self, files):
        taxonomy_path, data_path = files
        write_tools(data_path, [VIDEO_TOOL])
        before = taxonomy_path.read_text(encoding="utf-8")

        assert await sync(taxonomy_path, data_path, write=False, dry_run=False) == 0
        assert taxonomy_path.read_text(encoding="utf-8") == before

    @pytest.mark.asyncio
    async def test_write_declares_missing_type(self, files):
        taxonomy_path, data_path = files
        write_tools(data_path, [VIDEO_TOOL])

        assert await sync(taxonomy_path, data_path, write=True, dry_run=False) == 0

        written = json.loads(taxonomy_path.read_text(encoding="utf-8"))
        assert "Video" in [t["id"] for t in written["structure"]["types"]]
        assert written["version"] == "2.0.0"

    @pytest.mark.asyncio
    async def test_dry_run_prints_instead_of_writing(self, files, capsys):
        taxonomy_path, data_path = files
        write_tools(data_path, [VIDEO_TOOL])
        before = taxonomy_path.read_text(encoding="utf-8")

        assert await sync(taxonomy_path, data_path, write=True, dry_run=True) == 0

        assert taxonomy_path.read_text(encoding="utf-8") == before
        out = capsys.readouterr().out
        printed = json.loads(out[out.index("{"):])
        assert "Video" in [t["id"] for t in printed["structure"]["types"]]


class TestMain:

    def test_usage_on_wrong_arguments(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["sync_taxonomy", "only-one.json", "--write"])

        assert main() == 2
        assert "Usage" in capsys.readouterr().out

    def test_runs_sync(self, monkeypatch, files):
        taxonomy_path, data_path = files
        write_tools(data_path, [VIDEO_TOOL])
        monkeypatch.setattr(sys, "argv", ["sync_taxonomy", str(taxonomy_path), str(data_path), "--write"])

        assert main() == 0
        assert "Video" in taxonomy_path.read_text(encoding="utf-8")

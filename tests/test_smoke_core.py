from __future__ import annotations

import dataclasses
import inspect
import unittest
from pathlib import Path

import netcmp
import netcmp.cli as cli
import netcmp.table as table
from netcmp.config import tomllib
from netcmp.progress import build_statusbar


class TestSmokeCore(unittest.TestCase):
    def test_version_consistency(self) -> None:
        pyproject_path = Path(__file__).resolve().parents[1] / "pyproject.toml"
        data = tomllib.loads(pyproject_path.read_text(encoding="utf-8"))
        self.assertEqual(data["project"]["version"], netcmp.__version__)

    def test_console_script_points_at_main(self) -> None:
        pyproject_path = Path(__file__).resolve().parents[1] / "pyproject.toml"
        data = tomllib.loads(pyproject_path.read_text(encoding="utf-8"))
        self.assertEqual(data["project"]["scripts"]["netcmp"], "netcmp.cli:main")

    def test_counters_live_on_run_state(self) -> None:
        source = inspect.getsource(table)
        self.assertNotIn("global ", source)
        self.assertIn("localhost_skipped", inspect.getsource(table.ComparisonState))
        self.assertEqual(
            [f.name for f in dataclasses.fields(table.ComparisonState)],
            ["localhost_skipped", "rows_ingested", "files_read", "sources", "connections"],
        )

    def test_statusbar_label_names_the_file(self) -> None:
        bar = build_statusbar(Path("captures") / "host-a", enabled=False)
        self.assertEqual(bar.label, "Reading host-a")
        self.assertFalse(bar.enabled)

    def test_parser_requires_files_positionally(self) -> None:
        args = cli.build_parser().parse_args(["-d", "a", "b", "c"])
        self.assertTrue(args.debug)
        self.assertEqual(args.files, ["a", "b", "c"])
        self.assertIsNone(cli.build_parser().parse_args(["a", "b"]).debug)


if __name__ == "__main__":
    unittest.main()

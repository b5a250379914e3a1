from __future__ import annotations

import os
import tempfile
import unittest

import gotoscript_lang
from gotoscript_lang import CompileOptions, load_options


class ConfigTests(unittest.TestCase):
    def _write_config(self, td: str, text: str) -> str:
        path = os.path.join(td, "gotoscript.toml")
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path

    def test_defaults(self) -> None:
        options = load_options(environ={})
        self.assertEqual(options, CompileOptions())
        self.assertFalse(options.line_markers)

    def test_toml_then_env_then_overrides(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = self._write_config(td, "[gotoscript]\nline_markers = true\n")
            self.assertTrue(load_options(path, environ={}).line_markers)
            self.assertFalse(
                load_options(path, environ={"GOTOSCRIPT_LINE_MARKERS": "0"}).line_markers
            )
            options = load_options(
                path,
                environ={"GOTOSCRIPT_LINE_MARKERS": "0"},
                line_markers=True,
                source_name="map.gts",
            )
            self.assertTrue(options.line_markers)
            self.assertEqual(options.source_name, "map.gts")

    def test_env_truthy_values(self) -> None:
        for raw in ("1", "true", "YES", " on "):
            with self.subTest(raw=raw):
                env = {"GOTOSCRIPT_LINE_MARKERS": raw}
                self.assertTrue(load_options(environ=env).line_markers)

    def test_none_overrides_are_ignored(self) -> None:
        options = load_options(environ={"GOTOSCRIPT_LINE_MARKERS": "1"}, line_markers=None)
        self.assertTrue(options.line_markers)

    def test_unknown_key_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = self._write_config(td, "[gotoscript]\noptimize = true\n")
            with self.assertRaises(gotoscript_lang.ConfigError) as ctx:
                load_options(path, environ={})
            self.assertIn("optimize", str(ctx.exception))

    def test_wrong_type_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = self._write_config(td, '[gotoscript]\nline_markers = "yes"\n')
            with self.assertRaises(gotoscript_lang.ConfigError):
                load_options(path, environ={})

    def test_invalid_toml_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = self._write_config(td, "[gotoscript\n")
            with self.assertRaises(gotoscript_lang.ConfigError):
                load_options(path, environ={})

    def test_missing_file_rejected(self) -> None:
        with self.assertRaises(gotoscript_lang.ConfigError):
            load_options(os.path.join(tempfile.gettempdir(), "no_such_config.toml"), environ={})


if __name__ == "__main__":
    unittest.main(verbosity=2)

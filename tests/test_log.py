"""Unit tests for ocirelease.log."""

from __future__ import annotations

import io
import unittest
from unittest.mock import patch

from ocirelease import log


class TestFormatElapsed(unittest.TestCase):
    """Tests for _format_elapsed()."""

    def test_seconds(self):
        self.assertEqual(log._format_elapsed(5.0), "5.0s")

    def test_under_one_second(self):
        self.assertEqual(log._format_elapsed(0.5), "0.5s")

    def test_exactly_60(self):
        self.assertEqual(log._format_elapsed(60.0), "1m0.0s")

    def test_minutes_and_seconds(self):
        self.assertEqual(log._format_elapsed(90.5), "1m30.5s")


class TestColor(unittest.TestCase):

    def test_c_empty_without_color(self):
        log.set_color(False)
        self.assertEqual(log._c("red"), "")

    def test_c_with_color(self):
        log.set_color(True)
        self.assertEqual(log._c("red"), "\033[31m")
        self.assertEqual(log._c("nonexistent"), "")


class TestOutput(unittest.TestCase):

    def test_info_to_stdout(self):
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            log.info("hello")
        self.assertEqual(out.getvalue(), "[info] hello\n")

    def test_warn_to_stderr(self):
        with patch("sys.stderr", new_callable=io.StringIO) as err:
            log.warn("careful")
        self.assertEqual(err.getvalue(), "[warn] careful\n")

    def test_error_to_stderr(self):
        with patch("sys.stderr", new_callable=io.StringIO) as err:
            log.error("boom")
        self.assertEqual(err.getvalue(), "[error] boom\n")

    def test_step_header(self):
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            log.step("Build the image")
        self.assertEqual(out.getvalue(), "=== Build the image ===\n")


class TestSecrets(unittest.TestCase):

    @patch.dict("os.environ", {}, clear=True)
    def test_redact_registered(self):
        log.add_secret("ghs_token")
        self.assertEqual(log.redact("password ghs_token here"), "password *** here")

    @patch.dict("os.environ", {}, clear=True)
    def test_redact_longest_first(self):
        log.add_secret("abc")
        log.add_secret("abcdef")
        self.assertEqual(log.redact("xabcdefx"), "x***x")

    def test_empty_secret_ignored(self):
        log.add_secret("")
        log.add_secret(None)
        self.assertEqual(log.redact("text"), "text")

    @patch.dict("os.environ", {}, clear=True)
    def test_info_is_redacted(self):
        log.add_secret("hunter2")
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            log.info("$ git -c header=hunter2 fetch")
        self.assertNotIn("hunter2", out.getvalue())
        self.assertIn("***", out.getvalue())

    @patch.dict("os.environ", {"GITHUB_ACTIONS": "true"}, clear=True)
    def test_add_mask_on_github(self):
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            log.add_secret("ghs_token")
            log.add_secret("ghs_token")
        self.assertEqual(out.getvalue(), "::add-mask::ghs_token\n")

    def test_github_check_matches_ci_detection(self):
        from ocirelease.ci import detect
        from ocirelease.ci.github import GitHubCI
        for value in ("true", "1", ""):
            with self.subTest(value=value), \
                    patch.dict("os.environ", {"GITHUB_ACTIONS": value}, clear=True):
                self.assertEqual(log._on_github(), isinstance(detect(), GitHubCI))

    @patch.dict("os.environ", {}, clear=True)
    def test_no_add_mask_locally(self):
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            log.add_secret("ghs_token")
        self.assertEqual(out.getvalue(), "")


class TestGroup(unittest.TestCase):

    @patch.dict("os.environ", {"GITHUB_ACTIONS": "true"}, clear=True)
    def test_github_group(self):
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            with log.group("Build the image"):
                log.info("inside")
        self.assertEqual(
            out.getvalue(),
            "::group::Build the image\n[info] inside\n::endgroup::\n",
        )

    @patch.dict("os.environ", {"GITHUB_ACTIONS": "true"}, clear=True)
    def test_github_group_closed_on_error(self):
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            with self.assertRaises(RuntimeError):
                with log.group("Push"):
                    raise RuntimeError("x")
        self.assertTrue(out.getvalue().endswith("::endgroup::\n"))

    @patch.dict("os.environ", {}, clear=True)
    def test_local_group_is_step(self):
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            with log.group("Login"):
                pass
        self.assertEqual(out.getvalue(), "=== Login ===\n")


class TestTimers(unittest.TestCase):

    def test_unknown_timer(self):
        with patch("sys.stderr", new_callable=io.StringIO):
            self.assertEqual(log.timer_stop("never-started"), "??s")

    @patch("ocirelease.log.time.monotonic", side_effect=[10.0, 12.5])
    def test_elapsed(self, _mock_time):
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            log.timer_start("build")
            self.assertEqual(log.timer_stop("build"), "2.5s")
        self.assertIn("build completed in 2.5s", out.getvalue())


if __name__ == "__main__":
    unittest.main()

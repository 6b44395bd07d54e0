"""Unit tests for ocirelease.engine."""

from __future__ import annotations

import subprocess
import unittest
from unittest.mock import patch

from ocirelease import engine, log


def _done(returncode: int = 0, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestRun(unittest.TestCase):
    """Tests for the _run() internal helper."""

    @patch("ocirelease.engine.subprocess.run")
    def test_captures_output(self, mock_run):
        mock_run.return_value = _done(stdout="ok\n")
        result = engine._run(["docker", "ps"])
        self.assertEqual(result.stdout, "ok\n")
        self.assertTrue(mock_run.call_args.kwargs["capture_output"])

    @patch("ocirelease.engine.subprocess.run")
    def test_raises_on_failure(self, mock_run):
        mock_run.return_value = _done(returncode=1, stderr="denied")
        with self.assertRaises(engine.EngineError) as ctx:
            engine._run(["docker", "push", "x"])
        self.assertEqual(ctx.exception.returncode, 1)
        self.assertIn("denied", str(ctx.exception))

    @patch("ocirelease.engine.subprocess.run")
    def test_check_false(self, mock_run):
        mock_run.return_value = _done(returncode=1)
        self.assertEqual(engine._run(["docker", "x"], check=False).returncode, 1)

    @patch("ocirelease.engine.subprocess.run", side_effect=FileNotFoundError)
    def test_missing_executable(self, _mock_run):
        with self.assertRaises(engine.EngineError) as ctx:
            engine._run(["docker", "ps"])
        self.assertEqual(ctx.exception.returncode, 127)

    @patch("ocirelease.engine.subprocess.run")
    def test_quiet_suppresses_log(self, mock_run):
        mock_run.return_value = _done()
        with patch("ocirelease.engine.log") as mock_log:
            engine._run(["docker", "ps"], quiet=True)
            mock_log.info.assert_not_called()

    def test_error_message_redacted(self):
        log.add_secret("s3cret")
        err = engine.EngineError(["git", "-c", "x=s3cret"], 1, "bad s3cret")
        self.assertNotIn("s3cret", str(err))


class TestCommands(unittest.TestCase):

    @patch("ocirelease.engine.subprocess.run")
    def test_login_uses_stdin(self, mock_run):
        mock_run.return_value = _done()
        engine.login("docker", "ghcr.io", "octocat", "ghs_token")
        cmd = mock_run.call_args[0][0]
        self.assertEqual(
            cmd, ["docker", "login", "ghcr.io", "-u", "octocat", "--password-stdin"]
        )
        self.assertNotIn("ghs_token", cmd)
        self.assertEqual(mock_run.call_args.kwargs["input"], "ghs_token")

    @patch("ocirelease.engine.subprocess.run")
    def test_login_failure(self, mock_run):
        mock_run.return_value = _done(returncode=1, stderr="unauthorized")
        with self.assertRaises(engine.EngineError):
            engine.login("docker", "ghcr.io", "octocat", "bad")

    @patch("ocirelease.engine._run")
    def test_compose_build_default(self, mock_run):
        engine.compose_build("docker")
        mock_run.assert_called_once_with(["docker", "compose", "build"], capture=False)

    @patch("ocirelease.engine._run")
    def test_compose_build_with_file(self, mock_run):
        engine.compose_build("podman", "compose.prod.yaml")
        mock_run.assert_called_once_with(
            ["podman", "compose", "-f", "compose.prod.yaml", "build"], capture=False
        )

    @patch("ocirelease.engine._run")
    def test_push(self, mock_run):
        engine.push("docker", "ghcr.io/blockfrost/blockfrost-platform:latest")
        mock_run.assert_called_once_with(
            ["docker", "push", "ghcr.io/blockfrost/blockfrost-platform:latest"],
            capture=False,
        )

    @patch("ocirelease.engine.subprocess.run")
    def test_image_exists(self, mock_run):
        mock_run.return_value = _done()
        self.assertTrue(engine.image_exists("docker", "img:latest"))
        mock_run.return_value = _done(returncode=1)
        self.assertFalse(engine.image_exists("docker", "img:latest"))

    @patch("ocirelease.engine.shutil.which", return_value=None)
    def test_available(self, _mock_which):
        self.assertFalse(engine.available("docker"))

    @patch("ocirelease.engine.shutil.which", return_value=None)
    def test_require_missing(self, _mock_which):
        with self.assertRaises(engine.EngineError) as ctx:
            engine.require("podman")
        self.assertEqual(ctx.exception.returncode, 127)

    @patch("ocirelease.engine.shutil.which", return_value="/usr/bin/docker")
    def test_require_present(self, _mock_which):
        engine.require("docker")


if __name__ == "__main__":
    unittest.main()

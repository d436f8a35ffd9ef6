"""
Integration tests that run snippetstore_cli.py as a separate process.
"""
import os
import subprocess
import sys

import pytest


def run_cli(repo_root, home, *args, extra_env=None):
    env = {k: v for k, v in os.environ.items() if not k.startswith("SNIPPETSTORE_")}
    env.pop("XDG_CONFIG_HOME", None)
    env["HOME"] = str(home)
    if extra_env:
        env.update(extra_env)
    return subprocess.run(
        [sys.executable, str(repo_root / "snippetstore_cli.py"), *args],
        cwd=home,
        env=env,
        capture_output=True,
        text=True
    )


@pytest.mark.integration
def test_full_workflow(repo_root, tmp_path):
    """Store a snippet, read it back and list it in separate invocations."""
    home = tmp_path / "h"
    home.mkdir()

    result = run_cli(repo_root, home, "new", "-n", "foo.txt", "-c", "hello")
    print(f"\nnew STDOUT:\n{result.stdout}\nnew STDERR:\n{result.stderr}")
    assert result.returncode == 0, result.stderr
    assert (home / ".local/share/snippetstore/foo.txt").read_text() == "hello"

    result = run_cli(repo_root, home, "read", "foo.txt")
    assert result.returncode == 0, result.stderr
    assert "hello" in result.stdout

    result = run_cli(repo_root, home, "list")
    assert result.returncode == 0, result.stderr
    assert any(line.endswith(": foo.txt") for line in result.stdout.splitlines())


@pytest.mark.integration
def test_init_survives_between_invocations(repo_root, tmp_path):
    home = tmp_path / "h"
    home.mkdir()
    target = tmp_path / "chosen"

    assert run_cli(repo_root, home, "init", str(target)).returncode == 0
    assert run_cli(repo_root, home, "new", "-n", "kept", "-c", "value").returncode == 0

    assert (target / "kept").read_text() == "value"
    assert not (home / ".local/share/snippetstore").exists()


@pytest.mark.integration
def test_error_goes_to_stderr(repo_root, tmp_path):
    home = tmp_path / "h"
    home.mkdir()

    result = run_cli(repo_root, home, "read", "missing")

    assert result.returncode != 0
    assert "not found" in result.stderr
    assert "Snippets content:" not in result.stdout


@pytest.mark.integration
def test_read_output_is_not_altered_when_piped(repo_root, tmp_path):
    home = tmp_path / "h"
    home.mkdir()
    content = "\x1b[31mred\x1b[0m"

    assert run_cli(repo_root, home, "new", "-n", "colored", "-c", content).returncode == 0
    result = run_cli(repo_root, home, "read", "colored")

    assert result.returncode == 0, result.stderr
    assert result.stdout == "Snippets content:\n" + content


@pytest.mark.integration
@pytest.mark.skipif(os.name != "posix", reason="raw argv bytes need POSIX")
def test_undecodable_argument_reports_error(repo_root, tmp_path):
    home = tmp_path / "h"
    home.mkdir()
    env = {k: v for k, v in os.environ.items() if not k.startswith("SNIPPETSTORE_")}
    env.pop("XDG_CONFIG_HOME", None)
    env["HOME"] = str(home)

    result = subprocess.run(
        [os.fsencode(sys.executable), os.fsencode(repo_root / "snippetstore_cli.py"),
         b"new", b"-n", b"bad", b"-c", b"b\xff"],
        cwd=home,
        env=env,
        capture_output=True
    )

    stderr = result.stderr.decode("utf-8", errors="replace")
    assert result.returncode == 1, stderr
    assert "Error:" in stderr
    assert "Traceback" not in stderr

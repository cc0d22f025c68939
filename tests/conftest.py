"""Pytest fixtures for shellscribe tests."""

import textwrap

import pytest

from shellscribe import parse_lines


def script_lines(text: str) -> list[str]:
    """Dedent a triple-quoted script and split it into lines."""
    return textwrap.dedent(text).strip("\n").splitlines()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """
    Keep tests away from the developer's configuration.

    Runs every test from an empty directory with no user config and no
    debug override.
    """
    monkeypatch.delenv("SHELLSCRIBE_DEBUG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def extract():
    """
    Extract docblocks from an inline script.

    Example:
        def test_brief(extract):
            result = extract('''
                # @brief Says hi
                hi() {
            ''')
            assert result[1].function_brief == "Says hi"
    """

    def _extract(text: str, config=None, file_name=None):
        return parse_lines(script_lines(text), config=config, file_name=file_name)

    return _extract


@pytest.fixture
def write_script(tmp_path):
    """Write a dedented script below tmp_path and return its path."""

    def _write(name: str, text: str):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(text).lstrip("\n"))
        return path

    return _write


DEPLOY_SCRIPT = """
    #!/usr/bin/env bash
    # @file deploy.sh
    # @brief Deployment helpers
    # @description Functions used by the
    #   release pipeline.
    # @author Jane Doe <jane@example.com>
    # @version 1.2.0
    # @license MIT

    # @description Builds the project.
    # @arg $1 string Target name
    # @exitcode 0 Success
    # @exitcode 1 Build failed
    build() {
      make "$1"
    }

    # @brief Deploys.
    function deploy {
      :
    }
"""


@pytest.fixture
def deploy_script():
    return DEPLOY_SCRIPT

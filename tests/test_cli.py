"""Test suite for the ssm-env command line."""
import os
import sys
from argparse import Namespace
from pathlib import Path
from unittest import mock

import pytest

from ssm_env.cli import main as cli
from ssm_env.cli.validators import validate_command, validate_parameter_path
from ssm_env.parameters.domains import preferences
from ssm_env.parameters.domains.errors import FetchPageError
from ssm_env.parameters.domains.models import Parameter
from ssm_env.parameters.workflows import env_loader


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep the CLI away from the real config and preferences files."""
    fake_home = tmp_path / "home"
    fake_home.mkdir()
    monkeypatch.setattr(Path, "home", lambda: fake_home)
    fake_config_dir = fake_home / ".config" / "ssm-env"
    monkeypatch.setattr(preferences, "PREFERENCES_DIR", fake_config_dir)
    monkeypatch.setattr(preferences, "PREFERENCES_FILE", fake_config_dir / "preferences.json")
    monkeypatch.delenv("SSM_ENV_PATH", raising=False)
    return fake_home


class FakeSSMClient:
    def __init__(self, pages):
        self.pages = pages

    def iter_pages(self, path, with_decryption=True):
        for page in self.pages:
            if isinstance(page, Exception):
                raise page
            yield page


@pytest.fixture
def fake_store(monkeypatch):
    """Replace the default AWS client with canned pages."""
    def install(pages):
        monkeypatch.setattr(env_loader, "_default_client", lambda: FakeSSMClient(pages))
    return install


def run_main(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["ssm-env", *argv])
    with pytest.raises(SystemExit) as exc_info:
        cli.main()
        raise SystemExit(0)
    return exc_info.value.code


class TestValidators:
    """Test suite for CLI validators."""

    @pytest.mark.parametrize("path", ["", "/", "/my-app/prod", "/my-app/prod/"])
    def test_valid_paths(self, path):
        validate_parameter_path(path)

    def test_path_without_leading_slash(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            validate_parameter_path("my-app/prod")

        assert exc_info.value.code == 2
        assert "forward slash" in capsys.readouterr().err

    def test_missing_command(self):
        with pytest.raises(SystemExit) as exc_info:
            validate_command([])

        assert exc_info.value.code == 2


class TestListCommand:
    """Test suite for 'ssm-env list'."""

    def test_prints_sorted_names_without_values(self, fake_store, capsys):
        fake_store([[
            Parameter("/my-app/prod/DB_PORT", "5432"),
            Parameter("/my-app/prod/DB_HOST", "db1"),
            Parameter("/my-app/prod/EMPTY", ""),
        ]])

        cli.cmd_list(Namespace(path="/my-app/prod"))

        out = capsys.readouterr().out
        assert out.splitlines() == ["DB_HOST", "DB_PORT"]
        assert "db1" not in out
        assert "5432" not in out

    def test_does_not_touch_process_environment(self, fake_store, monkeypatch):
        monkeypatch.setenv("SSM_ENV_TEST_VAR", "old")
        fake_store([[Parameter("/my-app/prod/SSM_ENV_TEST_VAR", "value")]])

        cli.cmd_list(Namespace(path="/my-app/prod"))

        assert os.environ["SSM_ENV_TEST_VAR"] == "old"

    def test_uses_env_var_path(self, fake_store, monkeypatch, capsys):
        monkeypatch.setenv("SSM_ENV_PATH", "/from-env")
        fake_store([[Parameter("/from-env/TOKEN", "t")]])

        cli.cmd_list(Namespace(path=None))

        assert capsys.readouterr().out.splitlines() == ["TOKEN"]

    def test_fetch_error_exits_with_runtime_error(self, fake_store, monkeypatch, capsys):
        fake_store([FetchPageError("/my-app/prod/", 1, RuntimeError("AccessDenied"))])

        code = run_main(monkeypatch, "list", "/my-app/prod")

        assert code == 1
        assert "AccessDenied" in capsys.readouterr().err

    def test_invalid_path_exits_with_usage_error(self, monkeypatch):
        assert run_main(monkeypatch, "list", "my-app/prod") == 2


@pytest.fixture
def recorded_execvp(monkeypatch):
    """Record the exec call and the variable it would have seen."""
    calls = []

    def fake_execvp(file, args):
        calls.append((file, args, os.environ.get("SSM_ENV_TEST_VAR")))

    monkeypatch.setattr(cli.os, "execvp", fake_execvp)
    return calls


class TestExecCommand:
    """Test suite for 'ssm-env exec'."""

    def test_path_option_loads_then_execs(self, fake_store, recorded_execvp, monkeypatch):
        monkeypatch.setenv("SSM_ENV_TEST_VAR", "old")
        fake_store([[Parameter("/my-app/prod/SSM_ENV_TEST_VAR", "from-ssm")]])

        code = run_main(monkeypatch, "exec", "-p", "/my-app/prod", "--", "true")

        assert code == 0
        assert recorded_execvp == [("true", ["true"], "from-ssm")]
        assert os.environ["SSM_ENV_TEST_VAR"] == "from-ssm"

    def test_positional_path_loads_then_execs(self, fake_store, recorded_execvp, monkeypatch):
        monkeypatch.setenv("SSM_ENV_TEST_VAR", "old")
        fake_store([[Parameter("/my-app/prod/SSM_ENV_TEST_VAR", "from-ssm")]])

        code = run_main(monkeypatch, "exec", "/my-app/prod", "--", "python", "app.py", "--port", "80")

        assert code == 0
        assert recorded_execvp == [("python", ["python", "app.py", "--port", "80"], "from-ssm")]

    def test_env_var_path_without_separator(self, fake_store, recorded_execvp, monkeypatch):
        monkeypatch.setenv("SSM_ENV_TEST_VAR", "old")
        monkeypatch.setenv("SSM_ENV_PATH", "/my-app/prod")
        fake_store([[Parameter("/my-app/prod/SSM_ENV_TEST_VAR", "from-ssm")]])

        code = run_main(monkeypatch, "exec", "python", "app.py")

        assert code == 0
        assert recorded_execvp == [("python", ["python", "app.py"], "from-ssm")]

    def test_load_failure_does_not_exec(self, fake_store, recorded_execvp, monkeypatch, capsys):
        fake_store([FetchPageError("/my-app/prod/", 1, RuntimeError("throttled"))])

        code = run_main(monkeypatch, "exec", "-p", "/my-app/prod", "--", "true")

        assert code == 1
        assert "throttled" in capsys.readouterr().err
        assert recorded_execvp == []

    def test_no_path_runs_command_without_loading(self, recorded_execvp, monkeypatch):
        monkeypatch.setattr(env_loader, "_default_client", mock.Mock(side_effect=AssertionError("should not connect")))

        code = run_main(monkeypatch, "exec", "--", "true")

        assert code == 0
        assert [call[:2] for call in recorded_execvp] == [("true", ["true"])]

    def test_missing_command_exits_with_usage_error(self, recorded_execvp, monkeypatch, capsys):
        code = run_main(monkeypatch, "exec", "-p", "/my-app/prod")

        assert code == 2
        assert "No command given" in capsys.readouterr().err
        assert recorded_execvp == []

    def test_two_paths_exit_with_usage_error(self, recorded_execvp, monkeypatch, capsys):
        code = run_main(monkeypatch, "exec", "-p", "/my-app/prod", "/other", "--", "true")

        assert code == 2
        assert "at most one parameter path" in capsys.readouterr().err
        assert recorded_execvp == []

    def test_split_exec_args(self):
        assert cli._split_exec_args(None, ["/a", "--", "run"]) == ("/a", ["run"])
        assert cli._split_exec_args("/a", ["--", "run", "--", "x"]) == ("/a", ["run", "--", "x"])
        assert cli._split_exec_args(None, ["run", "-x"]) == (None, ["run", "-x"])


class TestMain:
    """Test suite for argument routing."""

    def test_no_command_shows_help(self, monkeypatch, capsys):
        assert run_main(monkeypatch) == 2
        assert "usage" in capsys.readouterr().out.lower()

    def test_version(self, monkeypatch, capsys):
        assert run_main(monkeypatch, "version") == 0
        assert cli.VERSION in capsys.readouterr().out

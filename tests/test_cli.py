import textwrap
from pathlib import Path

from typer.testing import CliRunner

from microtest.cli import app

runner = CliRunner()


def _script(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "suite.py"
    path.write_text(textwrap.dedent(body))
    return path


PASSING = """\
    from microtest import Test, check

    Test("Addition").run(lambda: check(1 + 2 == 3))
"""

MIXED = """\
    from microtest import Test, check

    Test("Addition").run(lambda: check(1 + 2 == 3))
    Test("Failed Test").run(lambda: check(0 == 1))
"""


def test_run_passing_script(tmp_path):
    script = _script(tmp_path, PASSING)
    result = runner.invoke(app, ["run", str(script)])

    assert result.exit_code == 0
    assert "[✓] Addition\n" in result.output
    assert "1 passed, 0 failed" in result.output


def test_run_reports_failures_without_failing_by_default(tmp_path):
    script = _script(tmp_path, MIXED)
    result = runner.invoke(app, ["run", str(script)])

    assert result.exit_code == 0
    assert "[x] Failed Test\n\nAssertion failed: 0 == 1\n" in result.output
    assert f"{script} (4)\n" in result.output
    assert "1 passed, 1 failed" in result.output


def test_strict_exits_non_zero_on_failure(tmp_path):
    script = _script(tmp_path, MIXED)
    result = runner.invoke(app, ["run", str(script), "--strict"])
    assert result.exit_code == 1


def test_strict_passes_when_all_tests_pass(tmp_path):
    script = _script(tmp_path, PASSING)
    result = runner.invoke(app, ["run", str(script), "--strict"])
    assert result.exit_code == 0


def test_strict_from_config_file(tmp_path):
    script = _script(tmp_path, MIXED)
    config = tmp_path / "microtest.yaml"
    config.write_text("strict: true\n")

    result = runner.invoke(app, ["run", str(script), "--config", str(config)])
    assert result.exit_code == 1


def test_color_always_keeps_escape_codes(tmp_path):
    script = _script(tmp_path, PASSING)
    result = runner.invoke(app, ["run", str(script), "--color", "always"])

    assert result.exit_code == 0
    assert "\x1b[32m[✓]\x1b[0m Addition" in result.output


def test_color_never_overrides_config(tmp_path):
    script = _script(tmp_path, PASSING)
    config = tmp_path / "microtest.yaml"
    config.write_text("color: always\n")

    result = runner.invoke(
        app, ["run", str(script), "--config", str(config), "--color", "never"]
    )
    assert "\x1b[" not in result.output


def test_invalid_color_is_rejected(tmp_path):
    script = _script(tmp_path, PASSING)
    result = runner.invoke(app, ["run", str(script), "--color", "rainbow"])
    assert result.exit_code != 0


def test_run_missing_script():
    result = runner.invoke(app, ["run", "nonexistent_suite.py"])
    assert result.exit_code == 1


def test_run_missing_config(tmp_path):
    script = _script(tmp_path, PASSING)
    result = runner.invoke(app, ["run", str(script), "--config", "missing.yaml"])
    assert result.exit_code == 1


def test_run_invalid_config(tmp_path):
    script = _script(tmp_path, PASSING)
    config = tmp_path / "microtest.yaml"
    config.write_text("colour: never\n")

    result = runner.invoke(app, ["run", str(script), "--config", str(config)])
    assert result.exit_code == 1


def test_run_malformed_yaml_config(tmp_path):
    script = _script(tmp_path, PASSING)
    config = tmp_path / "microtest.yaml"
    config.write_text("color: [always\n")

    result = runner.invoke(app, ["run", str(script), "--config", str(config)])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)


def test_run_list_yaml_config(tmp_path):
    script = _script(tmp_path, PASSING)
    config = tmp_path / "microtest.yaml"
    config.write_text("- strict: true\n")

    result = runner.invoke(app, ["run", str(script), "--config", str(config)])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)


def test_log_file_option_expands_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("MICROTEST_LOG_DIR", str(tmp_path / "env"))
    script = _script(tmp_path, PASSING)

    result = runner.invoke(
        app, ["run", str(script), "--log-file", "${MICROTEST_LOG_DIR}/cli.log"]
    )

    assert result.exit_code == 0
    assert "Running test 'Addition'" in (tmp_path / "env" / "cli.log").read_text()


def test_log_file_option_with_missing_variable(tmp_path, monkeypatch):
    monkeypatch.delenv("MICROTEST_UNSET", raising=False)
    script = _script(tmp_path, PASSING)

    result = runner.invoke(
        app, ["run", str(script), "--log-file", "${MICROTEST_UNSET}/cli.log"]
    )

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "[✓] Addition" not in result.output


def test_script_errors_propagate(tmp_path):
    script = _script(
        tmp_path,
        """\
        from microtest import Test

        def body():
            raise RuntimeError("unexpected")

        Test("Crash").run(body)
        """,
    )
    result = runner.invoke(app, ["run", str(script)])

    assert result.exit_code == 1
    assert isinstance(result.exception, RuntimeError)
    assert "[x] Crash" not in result.output


def test_log_file_receives_runner_events(tmp_path):
    script = _script(tmp_path, MIXED)
    log_file = tmp_path / "logs" / "debug.log"

    result = runner.invoke(app, ["run", str(script), "--log-file", str(log_file)])

    assert result.exit_code == 0
    content = log_file.read_text()
    assert "Running test 'Addition'" in content
    assert "Test 'Failed Test' iter-0: assertion failed" in content
    assert "finished: 2 test(s) run" in content


def test_init_writes_example_files(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["init"])

    assert result.exit_code == 0
    assert (tmp_path / "microtest" / "test_example.py").exists()
    assert (tmp_path / "microtest" / "microtest.yaml").exists()


def test_init_with_custom_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["init", "--dir", "my-tests"])
    assert result.exit_code == 0
    assert (tmp_path / "my-tests" / "test_example.py").exists()


def test_init_skips_existing_example(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    existing = tmp_path / "microtest" / "test_example.py"
    existing.parent.mkdir()
    existing.write_text("# mine\n")

    result = runner.invoke(app, ["init"])

    assert result.exit_code == 0
    assert "skipping" in result.output
    assert existing.read_text() == "# mine\n"


def test_init_example_runs(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    runner.invoke(app, ["init"])

    result = runner.invoke(
        app,
        [
            "run",
            "microtest/test_example.py",
            "--config",
            "microtest/microtest.yaml",
        ],
    )

    assert result.exit_code == 0
    assert "[✓] Addition" in result.output
    assert "[✓] Repeated (mean " in result.output
    assert "2 passed, 0 failed" in result.output
    assert (tmp_path / "microtest" / "debug.log").exists()

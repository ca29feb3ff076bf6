from __future__ import annotations

import json

import pytest

from cstr_enum.cli import main

from conftest import CONSTANTS_SOURCE


@pytest.fixture
def constants_file(tmp_path):
    path = tmp_path / "constants.py"
    path.write_text(CONSTANTS_SOURCE, encoding="utf-8")
    return path


def test_generate_to_file(constants_file, tmp_path, capsys):
    output = tmp_path / "constants_cstr.py"

    assert main(["generate", str(constants_file), "-o", str(output)]) == 0

    code = output.read_text(encoding="utf-8")
    assert "def constants_as_cstr(value: Constants) -> bytes:" in code
    assert "from constants import Constants" in code
    assert "saved to" in capsys.readouterr().out


def test_generate_to_stdout(constants_file, capsys):
    assert main(["generate", str(constants_file)]) == 0

    assert "constants_from_cstr" in capsys.readouterr().out


def test_generate_c_with_alias(constants_file, tmp_path):
    output = tmp_path / "constants_cstr.h"

    assert main(["generate", str(constants_file), "-l", "h", "-o", str(output)]) == 0

    assert "#ifndef CONSTANTS_CSTR_H" in output.read_text(encoding="utf-8")


def test_generate_options(constants_file, tmp_path):
    output = tmp_path / "out.py"

    args = [
        "generate",
        str(constants_file),
        "-o",
        str(output),
        "--module",
        "pkg.constants",
        "--no-attach",
        "--no-comments",
    ]
    assert main(args) == 0

    code = output.read_text(encoding="utf-8")
    assert "from pkg.constants import Constants" in code
    assert "Constants.as_cstr =" not in code
    assert '"""' not in code


def test_config_file(constants_file, tmp_path):
    config = tmp_path / "cstr.json"
    config.write_text(json.dumps({"reverse_suffix": "parse"}), encoding="utf-8")
    output = tmp_path / "out.py"

    args = ["generate", str(constants_file), "--config", str(config), "-o", str(output)]
    assert main(args) == 0

    assert "def constants_parse(data: bytes)" in output.read_text(encoding="utf-8")


def test_bad_config_file(constants_file, tmp_path, capsys):
    config = tmp_path / "cstr.json"
    config.write_text("{", encoding="utf-8")

    assert main(["generate", str(constants_file), "--config", str(config)]) == 1

    assert "Configuration error" in capsys.readouterr().err


def test_diagnostic_output(tmp_path, capsys):
    path = tmp_path / "bad.py"
    path.write_text(
        "from cstr_enum import AsCStr, derive\n"
        "\n"
        "@derive(AsCStr)\n"
        "class Plain:\n"
        "    Apple = 1\n",
        encoding="utf-8",
    )

    assert main(["generate", str(path)]) == 1

    err = capsys.readouterr().err.splitlines()
    assert err[0] == (
        f"{path}:4:1: error[NonEnumTarget]: "
        "target must be an enum or a SumType: `Plain` is not a sum type"
    )
    assert err[1] == "4 | class Plain:"
    assert err[2].startswith("  | ^")


def test_check_mode(constants_file, tmp_path, capsys):
    output = tmp_path / "constants_cstr.py"
    base = ["generate", str(constants_file), "-o", str(output)]

    assert main(base + ["--check"]) == 1
    assert "does not exist" in capsys.readouterr().err

    assert main(base) == 0
    assert main(base + ["--check"]) == 0

    output.write_text(output.read_text(encoding="utf-8") + "# edited\n", encoding="utf-8")
    assert main(base + ["--check"]) == 1
    assert "out of date" in capsys.readouterr().err


def test_check_mode_with_crlf_line_endings(constants_file, tmp_path):
    config = tmp_path / "crlf.json"
    config.write_text(json.dumps({"line_ending": "\r\n"}), encoding="utf-8")
    output = tmp_path / "constants_cstr.py"
    base = ["generate", str(constants_file), "-o", str(output), "--config", str(config)]

    assert main(base) == 0
    assert b"\r\n" in output.read_bytes()
    assert main(base + ["--check"]) == 0

    output.write_bytes(output.read_bytes().replace(b"\r\n", b"\n"))
    assert main(base + ["--check"]) == 1


def test_check_requires_output(constants_file, capsys):
    assert main(["generate", str(constants_file), "--check"]) == 1
    assert "--check requires --output" in capsys.readouterr().err


def test_missing_source(tmp_path, capsys):
    assert main(["generate", str(tmp_path / "missing.py")]) == 1
    assert "File not found" in capsys.readouterr().err


def test_syntax_error_in_source(tmp_path, capsys):
    path = tmp_path / "broken.py"
    path.write_text("class (:\n", encoding="utf-8")

    assert main(["generate", str(path)]) == 1
    assert "Invalid Python" in capsys.readouterr().err


def test_unsupported_language(constants_file, capsys):
    assert main(["generate", str(constants_file), "-l", "go"]) == 1
    assert "Unsupported language" in capsys.readouterr().err


def test_generation_failure_is_reported(tmp_path, capsys):
    path = tmp_path / "nothing.py"
    path.write_text(
        "from enum import Enum\n"
        "from cstr_enum import AsCStr, derive\n"
        "\n"
        "@derive(AsCStr)\n"
        "class Nothing(Enum):\n"
        "    pass\n",
        encoding="utf-8",
    )

    assert main(["generate", str(path), "-l", "c"]) == 1
    assert "declares no variants" in capsys.readouterr().err


def test_warnings_and_verbose(tmp_path, capsys):
    path = tmp_path / "fruit.py"
    path.write_text(
        "from enum import Enum\n"
        "from typing import Annotated\n"
        "from cstr_enum import FromCStr, cstr, derive\n"
        "\n"
        "@derive(FromCStr)\n"
        "class Fruit(Enum):\n"
        '    Apple: Annotated[int, cstr(name="fruit")] = 1\n'
        '    Pear: Annotated[int, cstr(name="fruit")] = 2\n',
        encoding="utf-8",
    )

    assert main(["generate", str(path), "-o", str(tmp_path / "out.py"), "--verbose"]) == 0

    err = capsys.readouterr().err
    assert "Warnings" in err
    assert "Fruit.Pear" in err
    assert "Type Count" in err


def test_languages(capsys):
    assert main(["languages"]) == 0

    out = capsys.readouterr().out
    assert "python" in out
    assert "CGenerator" in out


def test_language_info(capsys):
    assert main(["language-info", "py"]) == 0
    assert "PythonGenerator" in capsys.readouterr().out

    assert main(["language-info", "cobol"]) == 1
    assert "not supported" in capsys.readouterr().err


def test_log_file(constants_file, tmp_path):
    log_file = tmp_path / "cstr.log"

    args = ["--log-level", "info", "--log-file", str(log_file), "generate"]
    assert main(args + [str(constants_file), "-o", str(tmp_path / "out.py")]) == 0

    assert "Resolved 2 invocation(s)" in log_file.read_text(encoding="utf-8")


def test_subcommand_is_required(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([])

    assert excinfo.value.code == 2

from __future__ import annotations

import os
from pathlib import Path

from services.licensed import add_path, is_on_path, set_output


def test_add_path_prepends_directory_and_records_it_for_later_steps(tmp_path: Path) -> None:
    github_path = tmp_path / "github_path"
    environ = {"PATH": os.pathsep.join(["/usr/bin", "/bin"]), "GITHUB_PATH": str(github_path)}

    added = add_path(tmp_path / "bin", environ)

    assert added is True
    assert environ["PATH"].split(os.pathsep) == [str(tmp_path / "bin"), "/usr/bin", "/bin"]
    assert github_path.read_text(encoding="utf-8").splitlines() == [str(tmp_path / "bin")]


def test_add_path_is_a_no_op_when_directory_already_present(tmp_path: Path) -> None:
    github_path = tmp_path / "github_path"
    install_dir = tmp_path / "bin"
    original = os.pathsep.join(["/usr/bin", str(install_dir)])
    environ = {"PATH": original, "GITHUB_PATH": str(github_path)}

    assert add_path(install_dir, environ) is False
    assert add_path(str(install_dir) + os.sep, environ) is False

    assert environ["PATH"] == original
    assert not github_path.exists()


def test_add_path_twice_leaves_single_entry() -> None:
    environ = {"PATH": "/usr/bin"}

    add_path("/opt/licensed", environ)
    add_path("/opt/licensed", environ)

    assert environ["PATH"].split(os.pathsep).count("/opt/licensed") == 1


def test_is_on_path_matches_whole_entries_only() -> None:
    environ = {"PATH": os.pathsep.join(["/opt/licensed-old", "/usr/bin"])}

    assert is_on_path("/usr/bin", environ)
    assert not is_on_path("/opt/licensed", environ)


def test_add_path_handles_empty_path() -> None:
    environ: dict[str, str] = {}

    add_path("/opt/licensed", environ)

    assert environ["PATH"] == "/opt/licensed"


def test_set_output_appends_delimited_value(tmp_path: Path) -> None:
    output = tmp_path / "github_output"
    environ = {"GITHUB_OUTPUT": str(output)}

    set_output("version", "v4.3.0", environ)

    lines = output.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("version<<ghadelimiter_")
    assert lines[1] == "v4.3.0"
    assert lines[2] == lines[0].split("<<", 1)[1]


def test_set_output_without_runner_file_is_ignored() -> None:
    set_output("version", "v4.3.0", {})

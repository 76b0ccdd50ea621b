"""tldresolve command line tests."""

import json
import sys
from pathlib import Path

import pytest

from tldresolve.cli import main

FAKE_SUFFIX_LIST = str(
    Path(__file__).parent / "fixtures" / "fake_suffix_list_fixture.dat"
)


def test_cli_no_input(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test CLI without args."""
    monkeypatch.setattr(sys, "argv", ["tldresolve"])
    with pytest.raises(SystemExit) as ex:
        main()

    assert ex.value.code == 1


def test_cli_parses_args(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test CLI with nonsense args."""
    monkeypatch.setattr(sys, "argv", ["tldresolve", "--some", "nonsense"])
    with pytest.raises(SystemExit) as ex:
        main()

    assert ex.value.code == 2


def test_cli_posargs(
    capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test CLI with basic, positional args."""
    monkeypatch.setattr(
        sys,
        "argv",
        [
            "tldresolve",
            "--suffix_list_url",
            FAKE_SUFFIX_LIST,
            "example.com",
            "bbc.co.uk",
            "forums.bbc.co.uk",
        ],
    )

    main()

    stdout, stderr = capsys.readouterr()
    assert not stderr
    assert stdout == " example com\n bbc co.uk\nforums bbc co.uk\n"


def test_cli_ignore_private(
    capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test CLI with private suffixes, and ignoring them."""
    monkeypatch.setattr(
        sys,
        "argv",
        ["tldresolve", "--suffix_list_url", FAKE_SUFFIX_LIST, "username.github.io"],
    )
    main()
    stdout, _ = capsys.readouterr()
    assert stdout == " username github.io\n"

    monkeypatch.setattr(
        sys,
        "argv",
        [
            "tldresolve",
            "--suffix_list_url",
            FAKE_SUFFIX_LIST,
            "--ignore_private",
            "username.github.io",
        ],
    )
    main()
    stdout, _ = capsys.readouterr()
    assert stdout == "username github io\n"


def test_cli_errors(
    capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test CLI reports unresolvable hostnames and keeps going."""
    monkeypatch.setattr(
        sys,
        "argv",
        [
            "tldresolve",
            "--suffix_list_url",
            FAKE_SUFFIX_LIST,
            "co.uk",
            "bad..hostname",
            "example.com",
        ],
    )
    with pytest.raises(SystemExit) as ex:
        main()

    assert ex.value.code == 1
    stdout, stderr = capsys.readouterr()
    assert stdout == " example com\n"
    assert stderr == "co.uk: is_public_suffix\nbad..hostname: invalid_hostname\n"


def test_cli_json_output(
    capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test CLI with --json option."""
    monkeypatch.setattr(
        sys,
        "argv",
        ["tldresolve", "--suffix_list_url", FAKE_SUFFIX_LIST, "--json", "www.bbc.co.uk"],
    )

    main()

    stdout, stderr = capsys.readouterr()
    assert not stderr
    assert json.loads(stdout) == {
        "host": "www",
        "domain": "bbc",
        "tld": "co.uk",
        "tld_type": "icann",
        "registered_domain": "bbc.co.uk",
    }

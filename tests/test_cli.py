from pathlib import Path

import pytest
from colorama import Fore

import maid
from toml_maid import CONFIG_FILE

UNFORMATTED = "b = 'x'\na = 1\n"
FORMATTED = 'a = 1\nb = "x"\n'


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "Cargo.toml").write_text(UNFORMATTED, encoding="utf-8")
    return tmp_path


class TestArguments:
    def test_defaults(self) -> None:
        args = maid.parse_args([])
        assert args.files == []
        assert args.folder == []
        assert args.check is False
        assert args.silent is False

    def test_repeated_folder(self) -> None:
        args = maid.parse_args(["--folder", "a", "--folder", "b", "-c", "-s", "x.toml"])
        assert args.folder == ["a", "b"]
        assert args.files == ["x.toml"]
        assert args.check is True
        assert args.silent is True


class TestMain:
    def test_formats_current_directory(self, workdir: Path) -> None:
        assert maid.main(["-s"]) == 0
        assert (workdir / "Cargo.toml").read_text(encoding="utf-8") == FORMATTED

    def test_check_fails(self, workdir: Path) -> None:
        assert maid.main(["--check", "Cargo.toml"]) == 2
        assert (workdir / "Cargo.toml").read_text(encoding="utf-8") == UNFORMATTED

    def test_check_passes_after_format(self, workdir: Path) -> None:
        maid.main(["-s", "Cargo.toml"])
        assert maid.main(["-s", "--check", "Cargo.toml"]) == 0

    def test_missing_file(self, workdir: Path) -> None:
        assert maid.main(["-s", "missing.toml"]) == 3

    def test_parse_error(self, workdir: Path) -> None:
        (workdir / "broken.toml").write_text("a = \n", encoding="utf-8")
        assert maid.main(["-s", "broken.toml"]) == 1

    def test_config_error(self, workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (workdir / CONFIG_FILE).write_text("keys = 'name'\n", encoding="utf-8")

        assert maid.main([]) == 4
        assert "Invalid configuration" in capsys.readouterr().err
        assert (workdir / "Cargo.toml").read_text(encoding="utf-8") == UNFORMATTED

    def test_config_is_applied(self, workdir: Path) -> None:
        (workdir / CONFIG_FILE).write_text("keys = ['b']\n", encoding="utf-8")

        assert maid.main(["-s", "--folder", str(workdir)]) == 0
        assert (workdir / "Cargo.toml").read_text(encoding="utf-8") == 'b = "x"\na = 1\n'

    def test_config_warning_is_printed(self, workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (workdir / CONFIG_FILE).write_text("keys = ['a', 'a']\n", encoding="utf-8")

        assert maid.main(["-s", "Cargo.toml"]) == 0
        assert f"{Fore.YELLOW}Duplicate entries in 'keys'" in capsys.readouterr().err

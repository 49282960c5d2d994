"""File driver: read, format, then check or write back each document."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, NotRequired, TypedDict

from .config import ProcessedConfig
from .document import TomlDocument
from .errors import IoError, ParseError, TomlMaidError
from .logger import Logger, LoggerConfig
from .reader import ReaderConfig, TomlReader
from .scanner import find_files_recursively
from .utils import resolve_config
from .writer import TomlWriter

EXIT_OK = 0
EXIT_PARSE_ERROR = 1
EXIT_CHECK_FAILED = 2
EXIT_IO_ERROR = 3
EXIT_CONFIG_ERROR = 4


class FileOutcome(Enum):
    UNCHANGED = "unchanged"
    OVERWRITTEN = "overwritten"
    CHECK_PASSED = "check_passed"
    CHECK_FAILED = "check_failed"

    @property
    def label(self) -> str:
        return OUTCOME_LABELS[self]


OUTCOME_LABELS = {
    FileOutcome.UNCHANGED: "Unchanged",
    FileOutcome.OVERWRITTEN: "Overwritten",
    FileOutcome.CHECK_PASSED: "Check succeed",
    FileOutcome.CHECK_FAILED: "Check fails",
}


class MaidOptions(TypedDict):
    logger: NotRequired[LoggerConfig]
    reader: NotRequired[ReaderConfig]


class MaidOptionsRequired(TypedDict):
    logger: LoggerConfig
    reader: ReaderConfig


DEFAULT_OPTIONS: MaidOptionsRequired = {"logger": {}, "reader": {}}


@dataclass
class RunReport:
    outcomes: dict[Path, FileOutcome] = field(default_factory=dict)
    errors: dict[Path, TomlMaidError] = field(default_factory=dict)

    @property
    def exit_code(self) -> int:
        codes = [EXIT_OK]
        codes.extend(EXIT_CHECK_FAILED for outcome in self.outcomes.values() if outcome is FileOutcome.CHECK_FAILED)
        for error in self.errors.values():
            codes.append(EXIT_IO_ERROR if isinstance(error, IoError) else EXIT_PARSE_ERROR)
        return max(codes)


class Maid:
    """Formats TOML files with one resolved configuration."""

    def __init__(self, config: ProcessedConfig | None = None, options: MaidOptions | None = None):
        self.config = config or ProcessedConfig()
        self.options = resolve_config(options or {}, DEFAULT_OPTIONS)
        self.logger = Logger(config=self.options["logger"]).logger
        self.formatter = self.config.formatter()
        self.writer = TomlWriter()

    def format_document(self, document: TomlDocument) -> TomlDocument:
        return TomlDocument(
            root=self.formatter.format_table(document.root),
            trailing=document.trailing.rstrip(),
        )

    def format_text(self, text: str) -> str:
        document = TomlReader(text, self.options["reader"]).read()
        output = self.writer.render(self.format_document(document))
        return f"{output.strip()}\n"

    def process_file(self, path: str | Path, check: bool = False, verbose: bool = False) -> FileOutcome:
        """Format one file.

        In check mode the file is only compared with its formatted version.
        Otherwise it is rewritten when formatting changes it.
        """
        path = Path(path)
        absolute = path.resolve()
        try:
            text = path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise IoError(absolute, str(exc)) from exc

        try:
            output = self.format_text(text)
        except ParseError as exc:
            raise exc.with_path(absolute) from exc

        if check:
            outcome = FileOutcome.CHECK_PASSED if output == text else FileOutcome.CHECK_FAILED
        elif output == text:
            outcome = FileOutcome.UNCHANGED
        else:
            self._write(path, output)
            outcome = FileOutcome.OVERWRITTEN

        if outcome is FileOutcome.CHECK_FAILED:
            level = logging.WARNING
        else:
            level = logging.INFO if verbose else logging.DEBUG
        self.logger.log(level, f"{outcome.label}: {absolute}", extra={"outcome": outcome})
        return outcome

    def run(
        self,
        files: Iterable[str | Path] = (),
        folders: Iterable[str | Path] = (),
        check: bool = False,
        verbose: bool = False,
    ) -> RunReport:
        """Process every file and every TOML file found in ``folders``.

        Without files or folders the current directory is scanned. A file that
        cannot be read or parsed is reported and skipped.
        """
        paths = [Path(path) for path in files]
        folders = [Path(folder) for folder in folders]
        if not paths and not folders:
            folders = [Path.cwd()]
        for folder in folders:
            paths.extend(find_files_recursively(folder, "toml", self.config.excludes))

        report = RunReport()
        for path in paths:
            try:
                report.outcomes[path] = self.process_file(path, check=check, verbose=verbose)
            except (IoError, ParseError) as exc:
                self.logger.error(str(exc))
                report.errors[path] = exc
        return report

    def _write(self, path: Path, text: str) -> None:
        """Replace ``path`` atomically so a failed write leaves the original intact."""
        temporary: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                "wb", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
            ) as handle:
                temporary = Path(handle.name)
                handle.write(text.encode("utf-8"))
            shutil.copymode(path, temporary)
            os.replace(temporary, path)
        except OSError as exc:
            if temporary is not None:
                temporary.unlink(missing_ok=True)
            raise IoError(path.resolve(), str(exc)) from exc


__all__ = [
    "EXIT_OK",
    "EXIT_PARSE_ERROR",
    "EXIT_CHECK_FAILED",
    "EXIT_IO_ERROR",
    "EXIT_CONFIG_ERROR",
    "FileOutcome",
    "Maid",
    "MaidOptions",
    "RunReport",
]

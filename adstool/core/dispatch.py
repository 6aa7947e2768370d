# core/dispatch.py
import os
from dataclasses import dataclass
from typing import Iterable, List, Optional

from adstool.core.ads import enumerate_streams, get_backend
from adstool.core.config import AdsConfig
from adstool.core.errors import AdsError, NotFoundError
from adstool.core.extract import extract_streams
from adstool.core.remover import remove_streams
from adstool.core.results import FileReport
from adstool.core.writer import add_stream
from adstool.utils.immutable_logger import append_log


@dataclass(frozen=True)
class StreamRequest:
    """At most one operation per request; none means list only."""
    extract: bool = False
    add_file: Optional[str] = None
    remove_all: bool = False
    remove_stream: Optional[str] = None

    def __post_init__(self):
        chosen = [m for m, on in (("extract", self.extract),
                                  ("add", self.add_file is not None),
                                  ("remove_all", self.remove_all),
                                  ("remove_stream", self.remove_stream is not None)) if on]
        if len(chosen) > 1:
            raise ValueError(f"only one operation may be requested, got: {', '.join(chosen)}")

    @property
    def mode(self) -> str:
        if self.extract:
            return "extract"
        if self.add_file is not None:
            return "add"
        if self.remove_all:
            return "remove_all"
        if self.remove_stream is not None:
            return "remove_stream"
        return "list"


def process_file(path: str, request: StreamRequest, config: Optional[AdsConfig] = None,
                 backend=None) -> FileReport:
    config = config or AdsConfig.from_env()
    backend = backend or get_backend()
    report = FileReport(path=path)

    if os.path.isdir(path):
        report.skipped = True
        append_log({"event": "file_skipped", "path": path, "reason": "directory"})
        return report
    if not os.path.isfile(path):
        report.error = NotFoundError("file not found", path=path)
        append_log({"event": "operation_error", "operation": "list", "path": path, "error": str(report.error)})
        return report

    try:
        report.streams = enumerate_streams(path, backend)
    except AdsError as e:
        report.error = e
        append_log({"event": "operation_error", "operation": "list", "path": path, "error": str(e)})
        return report
    append_log({"event": "streams_listed", "path": path,
                "streams": [s.to_dict() for s in report.streams]})

    mode = request.mode
    if mode == "extract":
        report.operation = extract_streams(path, config.output_dir, backend)
    elif mode == "add":
        report.operation = add_stream(path, request.add_file, backend)
    elif mode == "remove_all":
        report.operation = remove_streams(path, None, backend)
    elif mode == "remove_stream":
        report.operation = remove_streams(path, request.remove_stream, backend)
    return report


def process_batch(paths: Iterable[str], request: StreamRequest, config: Optional[AdsConfig] = None,
                  backend=None, on_report=None) -> List[FileReport]:
    """
    Run process_file over each path in turn. `on_report` is called with each
    FileReport as soon as it is ready.
    """
    config = config or AdsConfig.from_env()
    backend = backend or get_backend()
    reports = []
    for path in paths:
        rep = process_file(path, request, config, backend)
        reports.append(rep)
        if on_report is not None:
            on_report(rep)
    return reports

# core/writer.py
import os
import shutil

from adstool.core.ads import enumerate_streams, get_backend
from adstool.core.errors import AdsError, IOFailure, NotFoundError
from adstool.core.results import OperationReport, Outcome, StreamOutcome
from adstool.utils.immutable_logger import append_log


def add_stream(path: str, source: str, backend=None) -> OperationReport:
    """
    Embed `source` into `path` as a stream named after the source's base name.
    Never overwrites a stream of the same name. Write failures are fatal and
    any partially written stream is left in place.
    """
    backend = backend or get_backend()
    host = os.path.basename(path)
    name = os.path.basename(source)
    report = OperationReport(operation="add", host_file=host)

    def fail(err):
        report.error = err
        append_log({"event": "operation_error", "operation": "add", "path": path,
                    "source": source, "error": str(err)})
        return report

    if not os.path.isfile(source):
        return fail(NotFoundError("source file not found", path=source))

    try:
        # NTFS stream names are case-insensitive
        existing = {r.stream_name.casefold() for r in enumerate_streams(path, backend) if not r.is_primary}
    except AdsError as e:
        return fail(e)

    if name.casefold() in existing:
        report.outcomes.append(StreamOutcome(name, Outcome.ALREADY_EXISTS, message="The stream already exists."))
        return report

    message = f"Adding {source} to {host}:{name}..."
    try:
        with open(source, "rb") as src, backend.open_stream(path, name, "wb") as dst:
            shutil.copyfileobj(src, dst)
            copied = src.tell()
    except FileNotFoundError as e:
        return fail(NotFoundError("file disappeared during write", path=e.filename or source, cause=e))
    except OSError as e:
        return fail(IOFailure("cannot write stream", path=path, stream_name=name, cause=e))
    except AdsError as e:
        return fail(e)

    report.outcomes.append(StreamOutcome(name, Outcome.ADDED, message=message))
    append_log({"event": "stream_added", "path": path, "stream": name, "source": source,
                "length": copied})
    return report

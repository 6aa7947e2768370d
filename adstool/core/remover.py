# core/remover.py
import os
from typing import Optional

from adstool.core.ads import enumerate_streams, get_backend, named_streams
from adstool.core.errors import AdsError, IOFailure
from adstool.core.results import OperationReport, Outcome, StreamOutcome
from adstool.utils.immutable_logger import append_log


def remove_streams(path: str, stream_name: Optional[str] = None, backend=None) -> OperationReport:
    """
    Delete the named stream, or every non-primary stream when no name is given.
    The primary stream is never deleted. A failed deletion does not stop the others.
    """
    backend = backend or get_backend()
    host = os.path.basename(path)
    report = OperationReport(operation="remove_all" if stream_name is None else "remove_stream", host_file=host)

    try:
        records = named_streams(enumerate_streams(path, backend))
    except AdsError as e:
        report.error = e
        append_log({"event": "operation_error", "operation": report.operation, "path": path, "error": str(e)})
        return report

    if stream_name is not None:
        # records holds only non-primary streams, so naming the primary never matches
        records = [r for r in records if r.stream_name == stream_name]
        if not records:
            report.outcomes.append(StreamOutcome(stream_name, Outcome.NOT_EXISTS,
                                                 message=f"The stream {stream_name} does not exist."))
            return report

    for rec in records:
        message = f"Removing data stream {rec.stream_name}..."
        try:
            backend.remove_stream(path, rec.stream_name)
        except OSError as e:
            err = IOFailure("cannot delete stream", path=path, stream_name=rec.stream_name, cause=e)
            report.outcomes.append(StreamOutcome(rec.stream_name, Outcome.FAILED,
                                                 message=f"{message} {err}", error=err))
            append_log({"event": "stream_error", "operation": report.operation, "path": path,
                        "stream": rec.stream_name, "error": str(err)})
            continue
        except AdsError as e:
            report.outcomes.append(StreamOutcome(rec.stream_name, Outcome.FAILED,
                                                 message=f"{message} {e}", error=e))
            continue
        report.outcomes.append(StreamOutcome(rec.stream_name, Outcome.REMOVED, message=message))
        append_log({"event": "stream_removed", "path": path, "stream": rec.stream_name, "length": rec.length})
    return report

# core/extract.py
# Copy every named stream of a host file out to standalone files.
import os
import shutil

from adstool.core.ads import enumerate_streams, get_backend, named_streams
from adstool.core.config import DEFAULT_OUTPUT_DIR
from adstool.core.errors import AdsError, DirectoryCreateError, IOFailure, NameCollisionError
from adstool.core.results import OperationReport, Outcome, StreamOutcome
from adstool.utils.immutable_logger import append_log


def output_name(host_file: str, stream_name: str) -> str:
    return f"{host_file}_{stream_name.replace(':', '')}"


def extract_streams(path: str, output_dir: str = DEFAULT_OUTPUT_DIR, backend=None) -> OperationReport:
    """
    Write each non-primary stream to <output_dir>/<host>_<stream>.
    Existing targets are skipped, never overwritten. A failed read only
    fails that stream; a directory that cannot be created aborts everything.
    """
    backend = backend or get_backend()
    host = os.path.basename(path)
    report = OperationReport(operation="extract", host_file=host)

    try:
        records = named_streams(enumerate_streams(path, backend))
    except AdsError as e:
        report.error = e
        append_log({"event": "operation_error", "operation": "extract", "path": path, "error": str(e)})
        return report

    try:
        os.makedirs(output_dir, exist_ok=True)
    except OSError as e:
        report.error = DirectoryCreateError("cannot create output directory", path=output_dir, cause=e)
        append_log({"event": "operation_error", "operation": "extract", "path": path,
                    "error": str(report.error)})
        return report

    written = set()
    for rec in records:
        target = os.path.join(output_dir, output_name(host, rec.stream_name))
        if target in written:
            err = NameCollisionError(f"output name {os.path.basename(target)} already used in this run",
                                     path=path, stream_name=rec.stream_name)
            report.outcomes.append(StreamOutcome(rec.stream_name, Outcome.FAILED,
                                                 message=str(err), target=target, error=err))
            append_log({"event": "stream_error", "operation": "extract", "path": path,
                        "stream": rec.stream_name, "error": str(err)})
            continue

        if os.path.exists(target):
            report.outcomes.append(StreamOutcome(
                rec.stream_name, Outcome.ALREADY_EXTRACTED,
                message=f"{target} has already been extracted.", target=target))
            continue
        written.add(target)

        message = f"Extracting {host}:{rec.stream_name} to {target}..."
        try:
            with backend.open_stream(path, rec.stream_name, "rb") as src, open(target, "ab") as dst:
                shutil.copyfileobj(src, dst)
        except OSError as e:
            err = IOFailure("cannot read stream", path=path, stream_name=rec.stream_name, cause=e)
            report.outcomes.append(StreamOutcome(rec.stream_name, Outcome.FAILED,
                                                 message=f"{message} {err}", target=target, error=err))
            append_log({"event": "stream_error", "operation": "extract", "path": path,
                        "stream": rec.stream_name, "error": str(err)})
            continue
        except AdsError as e:
            report.outcomes.append(StreamOutcome(rec.stream_name, Outcome.FAILED,
                                                 message=f"{message} {e}", target=target, error=e))
            continue

        report.outcomes.append(StreamOutcome(rec.stream_name, Outcome.EXTRACTED, message=message, target=target))
        append_log({"event": "stream_extracted", "path": path, "stream": rec.stream_name,
                    "length": rec.length, "target": target})
    return report

# cli/main.py
import click

from adstool import __version__
from adstool.core.ads import get_backend
from adstool.core.config import AdsConfig
from adstool.core.dispatch import StreamRequest, process_batch
from adstool.core.reports import generate_reports
from adstool.core.results import Outcome
from adstool.utils.immutable_logger import append_log, configure, log_file, verify_log, write_error


def _read_paths(files, stdin):
    for f in files:
        if f == "-":
            for line in stdin:
                line = line.strip()
                if line:
                    yield line
        else:
            yield f


def _print_report(rep):
    if rep.skipped:
        click.echo(f"Skipping directory {rep.path}.")
        return
    if rep.error is not None and not rep.streams:
        click.secho(f"[!] {rep.error}", fg="red", err=True)
        return

    click.echo("")
    click.echo(f"{'HostFile':<32} {'StreamName':<40} {'Length':>12}")
    click.echo(f"{'-' * 8:<32} {'-' * 10:<40} {'-' * 6:>12}")
    for s in rep.streams:
        click.echo(f"{s.host_file:<32} {s.stream_name:<40} {s.length:>12}")
    click.echo("")

    op = rep.operation
    if op is None:
        return
    for o in op.outcomes:
        if o.outcome is Outcome.FAILED:
            click.secho(f"[!] {o.message}", fg="red", err=True)
        elif o.outcome in (Outcome.ALREADY_EXISTS, Outcome.ALREADY_EXTRACTED, Outcome.NOT_EXISTS):
            click.secho(o.message, fg="yellow")
        else:
            click.echo(o.message)
    if op.error is not None:
        click.secho(f"[!] {op.error}", fg="red", err=True)


@click.command()
@click.argument("files", nargs=-1)
@click.option("--extract", "-x", is_flag=True, default=False, help="Extract every named stream to the output directory")
@click.option("--output-directory", "-o", type=click.Path(file_okay=False), default=None,
              help="Where extracted streams are written (default: ADSOutput)")
@click.option("--add-file", "-a", type=click.Path(), default=None, help="Embed this file as a stream named after it")
@click.option("--remove-all", is_flag=True, default=False, help="Remove every named stream")
@click.option("--remove-stream", "-r", default=None, help="Remove the stream with this exact name")
@click.option("--report", "report_name", default=None, help="Also write JSON/HTML reports with this basename")
@click.option("--verify-log", "verify_log_only", is_flag=True, default=False, help="Check the audit log signatures and exit")
@click.version_option(__version__, prog_name="adstool")
@click.pass_context
def main(ctx, files, extract, output_directory, add_file, remove_all, remove_stream, report_name, verify_log_only):
    """List, extract, add or remove NTFS alternate data streams of FILES.

    Use '-' to read paths from standard input, one per line.
    """
    config = AdsConfig.from_env()
    configure(config)
    if verify_log_only:
        bad = verify_log()
        if bad:
            click.secho(f"[!] {len(bad)} tampered or unreadable line(s) in {log_file()}: "
                        f"{', '.join(str(n + 1) for n in bad)}", fg="red", err=True)
            ctx.exit(1)
        click.echo(f"Audit log {log_file()} verified.")
        return
    if not files:
        raise click.UsageError("Missing argument 'FILES...'.", ctx=ctx)

    try:
        request = StreamRequest(extract=extract, add_file=add_file,
                                remove_all=remove_all, remove_stream=remove_stream)
    except ValueError as e:
        raise click.UsageError(str(e), ctx=ctx)

    if output_directory:
        config.output_dir = output_directory
    append_log({"event": "run_start", "mode": request.mode, "files": list(files)})

    stdin = click.get_text_stream("stdin")
    reports = process_batch(_read_paths(files, stdin), request, config,
                            backend=get_backend(), on_report=_print_report)

    if report_name:
        out = generate_reports(reports, out_basename=report_name, reports_dir=config.reports_dir)
        click.echo(f"Reports generated: {out}")

    failed = [r for r in reports if not r.ok]
    append_log({"event": "run_complete", "mode": request.mode, "total": len(reports), "failed": len(failed)})
    if write_error() is not None:
        click.secho(f"[!] Audit log not written: {write_error()}", fg="yellow", err=True)
    if failed:
        ctx.exit(1)


if __name__ == "__main__":
    main()

"""Neo CD overlay - apply an AS .p patch stream to a 512 KiB system ROM."""
from __future__ import annotations

from pathlib import Path

import click

from overlay_core.errors import IoOpenFailure, OverlayError
from overlay_core.image import OverlayImage
from overlay_core.protocol import BASE_ADDRESS, check_platform
from overlay_core.records import PatchRecord, PatchStream
from overlay_apply.report import write_report

EXIT_FAILURE = 1


def _open(path: Path, mode: str):
    try:
        return open(path, mode)
    except OSError as e:
        raise IoOpenFailure(f"One of the specified files can't be opened: {path} ({e.strerror})") from e


def overlay_file(
    pfile: Path,
    topatch: Path,
    patched: Path,
    base_address: int = BASE_ADDRESS,
    little_endian: bool = False,
    verbose: bool = False,
    report: Path | None = None,
) -> int:
    """Overlay PFILE onto TOPATCH and write PATCHED. Returns bytes overlaid.

    The output is only created once the magic has been accepted. After
    that, whatever has been applied is written out even if a later record
    fails; the error is then re-raised.
    """
    check_platform()

    with _open(pfile, "rb") as fp, _open(topatch, "rb") as fin:
        image = OverlayImage(fin.read(), base_address=base_address)
        stream = PatchStream(fp, little_endian=little_endian)

        applied: list[PatchRecord] = []
        with _open(patched, "wb") as fout:
            try:
                for rec in stream:
                    image.apply(rec)
                    applied.append(rec)
                    if verbose:
                        click.echo(f"P - Start:{rec.start_address:06X} Length:{rec.length:04X}")
            finally:
                fout.write(image.data)
                if report is not None:
                    write_report(applied, report, base_address)

    return image.total


class AddressType(click.ParamType):
    name = "address"

    def convert(self, value, param, ctx):
        if isinstance(value, int):
            return value
        try:
            return int(value, 0)
        except ValueError:
            self.fail(f"{value!r} is not a valid address", param, ctx)


class OverlayCommand(click.Command):
    # Wrong argument count exits 1, like every other failure.
    def parse_args(self, ctx, args):
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = EXIT_FAILURE
            raise


@click.command(cls=OverlayCommand)
@click.argument("pfile", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("topatch", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("patched", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--base-address", type=AddressType(), default=BASE_ADDRESS, show_default=hex(BASE_ADDRESS),
              help="Address that maps to offset 0 of the image")
@click.option("--little-endian", is_flag=True, help="Decode record address/length fields little-endian")
@click.option("-v", "--verbose", is_flag=True, help="Print each record as it is applied")
@click.option("--report", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Write a per-record Parquet report")
def main(
    pfile: Path,
    topatch: Path,
    patched: Path,
    base_address: int,
    little_endian: bool,
    verbose: bool,
    report: Path | None,
) -> None:
    """Overlay PFILE onto TOPATCH, writing PATCHED."""
    try:
        total = overlay_file(
            pfile,
            topatch,
            patched,
            base_address=base_address,
            little_endian=little_endian,
            verbose=verbose,
            report=report,
        )
    except OverlayError as e:
        # Fail closed with a single-line reason.
        click.echo(f"FATAL: {e}")
        raise SystemExit(EXIT_FAILURE)

    click.echo(f"Overlaid {total} bytes.")


if __name__ == "__main__":
    main()

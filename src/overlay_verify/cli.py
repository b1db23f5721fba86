import json
from pathlib import Path
import click
from overlay_apply.cli import AddressType
from overlay_core.protocol import BASE_ADDRESS
from .logic import verify_image

@click.group()
def main():
    pass

@main.command("image")
@click.argument("pfile", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("image", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--source", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Unpatched image the output must match once overlaid")
@click.option("--base-address", type=AddressType(), default=BASE_ADDRESS)
@click.option("--little-endian", is_flag=True)
def image_cmd(pfile: Path, image: Path, source: Path | None, base_address: int, little_endian: bool):
    result = verify_image(pfile, image, source=source, base_address=base_address, little_endian=little_endian)
    click.echo(json.dumps(result, sort_keys=True, separators=(",", ":"), ensure_ascii=False))
    if result["status"] != "PASS":
        raise SystemExit(1)

if __name__ == "__main__":
    main()

from pathlib import Path
from overlay_core.errors import OverlayError
from overlay_core.image import OverlayImage
from overlay_core.protocol import BASE_ADDRESS
from overlay_core.records import iter_records
from .const import ERRORS

def _fail(errors: list, code: str, **extra) -> dict:
    errors.append({"code": code, "message": ERRORS[code], **extra})
    return {"status": "FAIL", "error_count": len(errors), "errors": errors}

def _diff(a: bytes, b: bytes) -> tuple[int, int]:
    """First differing offset and number of differing bytes."""
    first = -1
    count = 0
    for i, (x, y) in enumerate(zip(a, b)):
        if x != y:
            count += 1
            if first == -1:
                first = i
    return first, count

def _read(path: Path, errors: list):
    try:
        return path.read_bytes()
    except OSError as e:
        _fail(errors, "E_IO_OPEN", path=str(path), detail=e.strerror)
        return None

def verify_image(
    pfile: Path,
    image_path: Path,
    source: Path | None = None,
    base_address: int = BASE_ADDRESS,
    little_endian: bool = False,
) -> dict:
    errors = []

    for p in [pfile, image_path] + ([source] if source is not None else []):
        if not p.exists():
            return _fail(errors, "E_IO_OPEN", path=str(p))

    image_bytes = _read(image_path, errors)
    if image_bytes is None:
        return {"status": "FAIL", "error_count": len(errors), "errors": errors}

    try:
        image = OverlayImage(image_bytes, base_address=base_address)
        with open(pfile, "rb") as f:
            records = list(iter_records(f, little_endian=little_endian))
        image.apply_all(records)
    except OverlayError as e:
        return _fail(errors, e.code, detail=str(e))

    # An image that already carries the overlay is unchanged by re-applying it.
    first, count = _diff(image_bytes, image.data)
    if count:
        return _fail(errors, "E_OVERLAY_MISSING", first_offset=first, differing_bytes=count)

    if source is not None:
        source_bytes = _read(source, errors)
        if source_bytes is None:
            return {"status": "FAIL", "error_count": len(errors), "errors": errors}
        try:
            expected = OverlayImage(source_bytes, base_address=base_address)
        except OverlayError as e:
            return _fail(errors, e.code, path=str(source), detail=str(e))
        expected.apply_all(records)
        first, count = _diff(expected.data, image_bytes)
        if count:
            return _fail(errors, "E_IMAGE_MISMATCH", first_offset=first, differing_bytes=count)

    return {"status": "PASS", "error_count": 0, "errors": [], "records": len(records), "bytes": image.total}

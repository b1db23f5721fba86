ERRORS = {
  "E_IO_OPEN": "Input file cannot be opened",
  "E_IMAGE_SIZE": "Image is not exactly 512 KiB",
  "E_MAGIC": "Patch stream magic word invalid",
  "E_TRUNCATED_HEADER": "Patch stream ends inside a record header",
  "E_TRUNCATED_PAYLOAD": "Patch stream ends inside a record payload",
  "E_RECORD_TYPE": "Unknown record type in patch stream",
  "E_OUT_OF_RANGE": "Record address falls outside the image",
  "E_OVERLAY_MISSING": "Image does not contain the overlaid records",
  "E_IMAGE_MISMATCH": "Image differs from source with overlay applied",
}

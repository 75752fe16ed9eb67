import time

# ----------------------------
# Filename repair
# ----------------------------

def fallback_filename() -> str:
    return f"file_{int(time.time() * 1000)}"

def fix_filename_encoding(name: str) -> str:
    """
    Repair a multipart filename whose UTF-8 bytes were read back as Latin-1.

    Best-effort guess: if every character fits in one Latin-1 byte and those
    bytes form valid UTF-8, the UTF-8 reading is returned. A name that really
    is Latin-1 and also happens to be valid UTF-8 gets "repaired" too; there is
    no way to tell the two apart from the name alone.
    """
    try:
        raw = name.encode("latin-1")
    except UnicodeEncodeError:
        # Characters above U+00FF: already decoded properly.
        return name
    except Exception:
        return fallback_filename()

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return name

def clean_upload_name(raw_name: str) -> str:
    """Normalized, single path segment to store an upload under."""
    name = fix_filename_encoding(raw_name)

    # Some browsers send the full client path.
    name = name.replace("\\", "/").rsplit("/", 1)[-1]
    name = name.replace("\x00", "").strip()

    if name in ("", ".", ".."):
        return fallback_filename()
    return name

def format_bytes(num: int) -> str:
    """Human-readable file sizes."""
    units = ["B", "KB", "MB", "GB", "TB"]
    size = float(num)
    for unit in units:
        if size < 1024 or unit == units[-1]:
            if unit == "B":
                return f"{int(size)} {unit}"
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{num} B"

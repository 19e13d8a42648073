"""Strip the SEF trailer from panorama files."""
from __future__ import annotations

import glob
import os
from typing import BinaryIO, Iterable

import click

from sampan_core.errors import TrailerError
from sampan_core.protocol import EOI
from sampan_strip.trailer import resolve_payload_length

_WILDCARDS = ("*", "?", "[")


def extract_payload(f: BinaryIO, length: int) -> bytes:
    f.seek(0)
    return f.read(length)


def terminate(payload: bytes) -> bytes:
    """Append the JPEG end-of-image marker unless the payload already ends with it."""
    if payload[-len(EOI):] != EOI:
        return payload + EOI
    return payload


def _mb(n: int) -> float:
    return n / 1_000_000


def _percent(part: int, whole: int) -> int:
    if whole == 0:
        return 0
    return round(100 * part / whole)


def convert_file(
    input_path: str,
    output_path: str,
    silent: bool = False,
    dry_run: bool = False,
    force: bool = False,
) -> dict:
    """Strip one file.

    Trailer errors are reported and the file is left untouched, counting as
    fully extracted. I/O errors propagate.
    """
    result = {
        "input": str(input_path),
        "output": str(output_path),
        "status": "SKIPPED",
        "total": 0,
        "extracted": 0,
        "entries": 0,
        "code": None,
        "message": None,
    }

    with open(input_path, "rb") as f:
        total = os.fstat(f.fileno()).st_size
        result["total"] = result["extracted"] = total

        try:
            count, smallest_offset = resolve_payload_length(f, total, force)
        except TrailerError as e:
            # Reported even when silent.
            click.echo(f"{input_path}: {e}")
            result.update(e.as_dict())
            return result

        result["entries"] = count
        result["extracted"] = smallest_offset

        if not silent:
            click.echo(
                f"{input_path} -> {output_path}\n"
                f"  Extracting {_mb(smallest_offset):.1f} of {_mb(total):.1f} MB "
                f"({_percent(smallest_offset, total)} %)"
            )

        if dry_run:
            result["status"] = "DRY_RUN"
            return result

        # Read fully before opening the output so in-place conversion is safe.
        jpeg_data = terminate(extract_payload(f, smallest_offset))

    with open(output_path, "wb") as out:
        out.write(jpeg_data)

    result["status"] = "STRIPPED"
    return result


def convert_files(
    inputs: Iterable[str],
    output_path: str | None = None,
    in_place: bool = False,
    silent: bool = False,
    dry_run: bool = False,
    force: bool = False,
) -> tuple[list[dict], int, int]:
    """Convert every input and return (results, total bytes, extracted bytes)."""
    results: list[dict] = []
    total = extracted = 0

    for input_path in inputs:
        if in_place:
            out = input_path
        elif dry_run:
            out = output_path or ".test.jpg"
        else:
            out = output_path
        res = convert_file(input_path, out, silent=silent, dry_run=dry_run, force=force)
        results.append(res)
        total += res["total"]
        extracted += res["extracted"]

    return results, total, extracted


def expand_inputs(patterns: Iterable[str]) -> list[str]:
    """Expand wildcard arguments the shell left alone. `**` recurses."""
    paths: list[str] = []
    for pattern in patterns:
        if os.path.exists(pattern) or not any(c in pattern for c in _WILDCARDS):
            paths.append(pattern)
            continue
        matches = sorted(p for p in glob.glob(pattern, recursive=True) if os.path.isfile(p))
        # Keep unmatched patterns so opening them fails loudly.
        paths.extend(matches or [pattern])
    return paths

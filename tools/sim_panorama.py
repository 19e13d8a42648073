import random
import struct
from pathlib import Path

from sampan_core.protocol import (
    MAGIC_FOOTER,
    MAGIC_HEADER,
    FOOTER_FMT,
    HEADER_FMT,
    HEADER_LEN,
    ENTRY_FMT,
    ENTRY_LEN,
    DATA_FMT,
    EOI,
)

SOI = b"\xff\xd8"

# Entry types seen in panorama trailers
ENTRY_TYPES = [0x0A01, 0x0A20, 0x0A30, 0x0AA1]


def build_trailer(entries: list[tuple[int, int]], version: int = 106) -> bytes:
    """Pack header, descriptors and footer for (type, data_offset) entries."""
    count = len(entries)
    header = struct.pack(HEADER_FMT, MAGIC_HEADER, version, count)
    descriptors = b"".join(struct.pack(ENTRY_FMT, t, off) for t, off in entries)
    footer = struct.pack(FOOTER_FMT, HEADER_LEN + count * ENTRY_LEN, MAGIC_FOOTER)
    return header + descriptors + footer


def build_panorama(
    jpeg: bytes,
    blocks: list[tuple[int, bytes]],
    version: int = 106,
    corrupt: bool = False,
) -> bytes:
    """Append SEF data blocks and trailer to `jpeg`.

    Each block is (type, body); data offsets count back from the trailer header.
    With `corrupt` the first block records a type that differs from its descriptor.
    """
    data = b""
    starts = []
    for t, body in blocks:
        starts.append(len(data))
        data += struct.pack(DATA_FMT, t) + body

    entries = []
    for i, ((t, _), start) in enumerate(zip(blocks, starts)):
        recorded = t + 1 if corrupt and i == 0 else t
        entries.append((recorded, len(data) - start))

    return jpeg + data + build_trailer(entries, version)


def generate_panorama(output_dir: str, entries: int = 2, version: int = 106,
                      corrupt: bool = False, eoi: bool = True) -> Path:
    body = bytes(random.getrandbits(8) for _ in range(random.randint(2000, 4000)))
    jpeg = SOI + body + (EOI if eoi else b"")

    blocks = []
    for _ in range(entries):
        t = random.choice(ENTRY_TYPES)
        blocks.append((t, bytes(random.getrandbits(8) for _ in range(random.randint(16, 256)))))

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    path = out / f"pano-{random.getrandbits(32):08x}.jpg"
    path.write_bytes(build_panorama(jpeg, blocks, version=version, corrupt=corrupt))

    print(f"GENERATED: {path} ({len(jpeg)} JPEG bytes)")
    return path


if __name__ == "__main__":
    import sys

    # Usage:
    #   python tools/sim_panorama.py OUT_DIR [--entries N] [--version V] [--corrupt] [--no-eoi]

    args = [a for a in sys.argv[1:] if a]

    def pop_flag(arg_list: list[str], flag: str) -> tuple[bool, list[str]]:
        """Remove a boolean flag from an argv-style list."""
        if flag in arg_list:
            return True, [a for a in arg_list if a != flag]
        return False, arg_list

    def pop_int(arg_list: list[str], flag: str, default: int) -> tuple[int, list[str]]:
        if flag not in arg_list:
            return default, arg_list
        i = arg_list.index(flag)
        if i + 1 >= len(arg_list):
            raise SystemExit(f"{flag} requires a value")
        return int(arg_list[i + 1]), arg_list[:i] + arg_list[i + 2:]

    corrupt, args = pop_flag(args, "--corrupt")
    no_eoi, args = pop_flag(args, "--no-eoi")
    entries, args = pop_int(args, "--entries", 2)
    version, args = pop_int(args, "--version", 106)

    out = args[0] if len(args) > 0 else "panoramas"
    generate_panorama(out, entries=entries, version=version, corrupt=corrupt, eoi=not no_eoi)

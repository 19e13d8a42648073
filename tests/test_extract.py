import struct

import pyarrow.parquet as pq

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
from sampan_strip.extract import convert_file, convert_files, expand_inputs, terminate
from sampan_strip.report import write_report

SOI = b"\xff\xd8"


def panorama_bytes(jpeg: bytes, types: list[int], version: int = 106) -> bytes:
    """`jpeg` followed by one 16-byte data block per type and the SEF trailer."""
    blocks = [struct.pack(DATA_FMT, t) + bytes(12) for t in types]
    data = b"".join(blocks)
    entries = [(t, len(data) - i * 16) for i, t in enumerate(types)]
    trailer = (
        struct.pack(HEADER_FMT, MAGIC_HEADER, version, len(types))
        + b"".join(struct.pack(ENTRY_FMT, t, off) for t, off in entries)
        + struct.pack(FOOTER_FMT, HEADER_LEN + len(types) * ENTRY_LEN, MAGIC_FOOTER)
    )
    return jpeg + data + trailer


def test_terminate():
    assert terminate(b"\xff\xd8abc") == b"\xff\xd8abc" + EOI
    assert terminate(b"\xff\xd8abc" + EOI) == b"\xff\xd8abc" + EOI
    assert terminate(b"") == EOI
    assert terminate(b"\xd9") == b"\xd9" + EOI


def test_convert_strips_trailer(tmp_path):
    jpeg = SOI + bytes(range(256)) * 4 + EOI
    src = tmp_path / "pano.jpg"
    src.write_bytes(panorama_bytes(jpeg, [0x0A01, 0x0A20, 0x0A30]))
    dst = tmp_path / "out.jpg"

    res = convert_file(str(src), str(dst), silent=True)

    assert res["status"] == "STRIPPED"
    assert res["entries"] == 3
    assert res["total"] == src.stat().st_size
    assert res["extracted"] == len(jpeg)
    assert dst.read_bytes() == jpeg


def test_convert_appends_missing_eoi(tmp_path):
    jpeg = SOI + bytes(500)
    src = tmp_path / "pano.jpg"
    src.write_bytes(panorama_bytes(jpeg, [0x0A01]))
    dst = tmp_path / "out.jpg"

    res = convert_file(str(src), str(dst), silent=True)

    assert res["extracted"] == len(jpeg)
    out = dst.read_bytes()
    assert out == jpeg + EOI
    assert out[-2:] == EOI


def test_convert_zero_entries_copies_whole_file(tmp_path):
    jpeg = SOI + bytes(100) + EOI
    src = tmp_path / "pano.jpg"
    src.write_bytes(panorama_bytes(jpeg, []))
    dst = tmp_path / "out.jpg"

    res = convert_file(str(src), str(dst), silent=True)

    assert res["extracted"] == res["total"]
    # Whole file kept, ending in the SEFT footer, so EOI is appended.
    assert dst.read_bytes() == src.read_bytes() + EOI


def test_convert_in_place(tmp_path):
    jpeg = SOI + bytes(300) + EOI
    src = tmp_path / "pano.jpg"
    src.write_bytes(panorama_bytes(jpeg, [0x0A01, 0x0AA1]))

    convert_file(str(src), str(src), silent=True)

    assert src.read_bytes() == jpeg


def test_dry_run_writes_nothing(tmp_path, capsys):
    jpeg = SOI + bytes(300) + EOI
    src = tmp_path / "pano.jpg"
    src.write_bytes(panorama_bytes(jpeg, [0x0A01]))
    dst = tmp_path / "out.jpg"

    res = convert_file(str(src), str(dst), dry_run=True)

    assert res["status"] == "DRY_RUN"
    assert res["extracted"] == len(jpeg)
    assert not dst.exists()
    assert f"{src} -> {dst}" in capsys.readouterr().out


def test_not_panorama_is_skipped(tmp_path, capsys):
    src = tmp_path / "plain.jpg"
    src.write_bytes(SOI + bytes(100) + EOI)
    dst = tmp_path / "out.jpg"

    res = convert_file(str(src), str(dst), silent=True, force=True)

    assert res["status"] == "SKIPPED"
    assert res["code"] == "E_NOT_PANORAMA"
    assert res["extracted"] == res["total"] == 104
    assert not dst.exists()
    # Errors are printed even when silent.
    assert "not a Samsung panorama" in capsys.readouterr().out


def test_type_mismatch_is_skipped_unless_forced(tmp_path):
    jpeg = SOI + bytes(300) + EOI
    data = bytearray(panorama_bytes(jpeg, [0x0A01]))
    data[len(jpeg) + 2:len(jpeg) + 4] = struct.pack("<H", 0x0A02)
    src = tmp_path / "pano.jpg"
    src.write_bytes(bytes(data))
    dst = tmp_path / "out.jpg"

    res = convert_file(str(src), str(dst), silent=True)
    assert res["code"] == "E_TYPE_MISMATCH"
    assert not dst.exists()

    res = convert_file(str(src), str(dst), silent=True, force=True)
    assert res["status"] == "STRIPPED"
    assert dst.read_bytes() == jpeg


def test_convert_files_totals(tmp_path):
    jpeg = SOI + bytes(1000) + EOI
    a = tmp_path / "a.jpg"
    a.write_bytes(panorama_bytes(jpeg, [0x0A01]))
    b = tmp_path / "b.jpg"
    b.write_bytes(SOI + bytes(50) + EOI)

    results, total, extracted = convert_files([str(a), str(b)], dry_run=True, silent=True)

    assert [r["status"] for r in results] == ["DRY_RUN", "SKIPPED"]
    assert total == a.stat().st_size + b.stat().st_size
    assert extracted == len(jpeg) + b.stat().st_size


def test_expand_inputs(tmp_path):
    (tmp_path / "sub").mkdir()
    for name in ["a.jpg", "b.jpg", "sub/c.jpg", "sub/d.png"]:
        (tmp_path / name).write_bytes(b"x")

    assert expand_inputs([str(tmp_path / "*.jpg")]) == [str(tmp_path / "a.jpg"), str(tmp_path / "b.jpg")]
    assert str(tmp_path / "sub" / "c.jpg") in expand_inputs([str(tmp_path / "**" / "*.jpg")])
    assert expand_inputs([str(tmp_path / "a.jpg")]) == [str(tmp_path / "a.jpg")]
    assert expand_inputs([str(tmp_path / "*.gif")]) == [str(tmp_path / "*.gif")]


def test_write_report(tmp_path):
    jpeg = SOI + bytes(1000) + EOI
    a = tmp_path / "a.jpg"
    a.write_bytes(panorama_bytes(jpeg, [0x0A01]))
    b = tmp_path / "b.jpg"
    b.write_bytes(SOI + bytes(50) + EOI)
    results, _, _ = convert_files([str(a), str(b)], dry_run=True, silent=True)

    out = tmp_path / "reports" / "run.parquet"
    write_report(results, out)

    table = pq.read_table(out).to_pydict()
    assert table["status"] == ["DRY_RUN", "SKIPPED"]
    assert table["extracted"] == [len(jpeg), 54]
    assert table["code"] == [None, "E_NOT_PANORAMA"]


def test_write_report_empty(tmp_path):
    out = tmp_path / "run.parquet"
    write_report([], out)
    assert not out.exists()

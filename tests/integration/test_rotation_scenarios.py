"""End-to-end rotation scenarios: many records, restarts and concurrent writers."""

import logging
import threading
from pathlib import Path

from lfshook import Level, LfsHandler, LfsHook, PathMap, TextFormatter
from lfshook.rotating_log import RotatingFile
from tests.conftest import make_record


def _backups(path: Path) -> list[Path]:
    return sorted(path.parent.glob(f"{path.name}.*"))


def test_thousand_error_records_keep_five_backups(tmp_path: Path) -> None:
    dirname = tmp_path / "logs"
    hook = LfsHook(
        PathMap(
            {
                Level.INFO: dirname / "info.log",
                Level.ERROR: dirname / "error.log",
                Level.DEBUG: dirname / "debug.log",
            }
        ),
        TextFormatter(),
        1024,  # max file size 1 KiB
        5,  # max backup count
    )
    logger = logging.getLogger("lfshook-tests.scenario")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    handler = LfsHandler(hook)
    logger.addHandler(handler)
    try:
        for _ in range(1024):
            logger.error("this is err!")
            logger.debug("this is debug")
            logger.info("this is info")
    finally:
        logger.removeHandler(handler)
        handler.close()

    for name in ("error.log", "debug.log", "info.log"):
        base = dirname / name
        backups = _backups(base)
        record_size = max(
            len(line) for file in [base, *backups] for line in file.read_bytes().splitlines(keepends=True)
        )
        assert [b.name for b in backups] == [f"{name}.{i}" for i in range(1, 6)]
        assert base.stat().st_size <= 1024 + record_size
        for backup in backups:
            assert 1024 < backup.stat().st_size <= 1024 + record_size


def test_newest_backup_is_generation_one(tmp_path: Path) -> None:
    path = tmp_path / "seq.log"
    hook = LfsHook(str(path), TextFormatter(disable_timestamp=True), max_file_size=20, max_backups=3)

    for i in range(12):
        hook.fire(make_record(f"record-{i:02d}"))
    hook.close()

    numbers = [int(line.split("record-")[1][:2]) for line in path.read_text().splitlines()]
    previous_min = min(numbers)
    for backup in (tmp_path / "seq.log.1", tmp_path / "seq.log.2", tmp_path / "seq.log.3"):
        content = [int(line.split("record-")[1][:2]) for line in backup.read_text().splitlines()]
        assert max(content) < previous_min
        previous_min = min(content)
    assert not (tmp_path / "seq.log.4").exists()


def test_restart_accounts_for_existing_size(tmp_path: Path) -> None:
    path = tmp_path / "resume.log"
    first = LfsHook(str(path), TextFormatter(disable_timestamp=True), max_file_size=100, max_backups=2)
    for _ in range(6):
        first.fire(make_record("x" * 20))
    first.close()
    assert (tmp_path / "resume.log.1").exists()

    path.write_bytes(b"p" * 150)
    second = LfsHook(str(path), TextFormatter(disable_timestamp=True), max_file_size=100, max_backups=2)
    second.fire(make_record("after restart"))
    second.close()

    assert (tmp_path / "resume.log.1").read_bytes() == b"p" * 150
    assert path.read_text() == 'level=info msg="after restart"\n'


def test_concurrent_writers_never_interleave(tmp_path: Path) -> None:
    path = tmp_path / "shared.log"
    hook = LfsHook(
        {Level.ERROR: path, Level.WARNING: path},
        TextFormatter(disable_timestamp=True),
        max_file_size=4096,
        max_backups=50,
    )
    writers, per_writer = 8, 200
    barrier = threading.Barrier(writers)

    def work(worker: int) -> None:
        level = logging.ERROR if worker % 2 else logging.WARNING
        barrier.wait()
        for i in range(per_writer):
            hook.fire(make_record(f"worker{worker}-{i:04d}-" + "z" * 40, level))

    threads = [threading.Thread(target=work, args=(n,)) for n in range(writers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    hook.close()

    lines: list[str] = []
    for file in [path, *_backups(path)]:
        lines.extend(file.read_text().splitlines())
    assert len(lines) == writers * per_writer
    for line in lines:
        assert line.startswith("level=")
        assert line.endswith("z" * 40)
        assert line.count("level=") == 1


def test_tracked_length_matches_disk_after_many_rotations(tmp_path: Path) -> None:
    path = tmp_path / "track.log"
    handle = RotatingFile(str(path), max_file_size=64, max_backups=4)

    written_since_rotation = 0
    for i in range(200):
        data = f"{i}:".encode() + b"." * (i % 13) + b"\n"
        rotated = handle.length > 64
        n = handle.write(data)
        written_since_rotation = n if rotated else written_since_rotation + n
        assert handle.length == written_since_rotation
    handle.close()

    assert handle.length == path.stat().st_size
    assert len(_backups(path)) == 4

# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import shutil
from datetime import date
from pathlib import PurePosixPath
from unittest.mock import MagicMock, patch

import pytest
from conftest import FakeClock, make_folder

from recsync.core.error import LocalIOError, TransferError
from recsync.properties.states import FolderState, VerificationOutcome
from recsync.sync import SyncScheduler
from recsync.transfer import FolderTransfer
from recsync.verify import FolderVerifier, VerificationResult

REMOTE_ROOT = PurePosixPath("/srv/recordings")


def _scheduler(settings, remote, today=date(2024, 6, 5), **kwargs):
    return SyncScheduler(
        settings,
        FolderVerifier(settings, remote),
        FolderTransfer(settings, remote),
        FakeClock(today, **kwargs),
        poll_interval=60,
    )


def test_already_synced_folder_is_deleted_without_transfer(settings, remote):
    files = {"10-00-00.mp3": b"a", "10-02-00.mp3": b"b"}
    make_folder(settings.local_root, "20240601", files)
    remote.put(REMOTE_ROOT / "20240601", files)

    report = _scheduler(settings, remote).runCycle()

    assert not (settings.local_root / "20240601").exists()
    assert remote.callsOf("copy") == []
    assert report.processed[0].states == [
        FolderState.PENDING,
        FolderState.PRE_VERIFIED,
        FolderState.DELETED,
    ]


def test_missing_folder_is_transferred_verified_and_deleted(settings, remote):
    files = {"10-00-00.mp3": b"audio"}
    make_folder(settings.local_root, "20240601", files)

    report = _scheduler(settings, remote).runCycle()

    assert remote.callsOf("copy") == [str(settings.local_root / "20240601")]
    assert remote.files[REMOTE_ROOT / "20240601" / "10-00-00.mp3"] == b"audio"
    assert not (settings.local_root / "20240601").exists()
    assert report.processed[0].states == [
        FolderState.PENDING,
        FolderState.PRE_UNVERIFIED,
        FolderState.TRANSFERRING,
        FolderState.POST_VERIFIED,
        FolderState.DELETED,
    ]


def test_mismatch_fixed_by_transfer_is_deleted(settings, remote):
    make_folder(settings.local_root, "20240601", {"10-00-00.mp3": b"abcd"})
    remote.put(REMOTE_ROOT / "20240601", {"10-00-00.mp3": b"abce"})

    report = _scheduler(settings, remote).runCycle()

    assert report.foldersIn(FolderState.DELETED) == ["20240601"]
    assert not (settings.local_root / "20240601").exists()


def test_mismatch_not_fixed_by_transfer_is_retained(settings, remote):
    make_folder(settings.local_root, "20240601", {"10-00-00.mp3": b"abcd"})
    remote.put(REMOTE_ROOT / "20240601", {"10-00-00.mp3": b"abce"})
    remote.corrupt_on_copy = lambda content: content[:-1] + b"!"

    report = _scheduler(settings, remote).runCycle()

    assert (settings.local_root / "20240601" / "10-00-00.mp3").read_bytes() == b"abcd"
    folder_report = report.processed[0]
    assert folder_report.states[-2:] == [
        FolderState.POST_UNVERIFIED,
        FolderState.RETAINED,
    ]
    assert folder_report.verification.outcome == VerificationOutcome.DIGEST_MISMATCH


def test_todays_folder_and_later_are_untouched(settings, remote):
    for name in ("20240601", "20240602", "20240603", "20240604"):
        make_folder(settings.local_root, name, {"10-00-00.mp3": name.encode()})

    report = _scheduler(settings, remote, today=date(2024, 6, 3)).runCycle()

    assert [r.folder for r in report.processed] == ["20240601", "20240602"]
    assert report.not_eligible == ["20240603", "20240604"]
    assert (settings.local_root / "20240603" / "10-00-00.mp3").exists()
    assert (settings.local_root / "20240604" / "10-00-00.mp3").exists()
    touched = remote.callsOf("list") + remote.callsOf("digest") + remote.callsOf("copy")
    assert not any("20240603" in t or "20240604" in t for t in touched)


def test_folders_are_processed_oldest_first(settings, remote):
    for name in ("20240103", "20240101", "20240102"):
        make_folder(settings.local_root, name, {"10-00-00.mp3": b"x"})

    report = _scheduler(settings, remote, today=date(2024, 1, 5)).runCycle()

    assert [r.folder for r in report.processed] == ["20240101", "20240102", "20240103"]
    assert remote.callsOf("copy") == [
        str(settings.local_root / name) for name in ("20240101", "20240102", "20240103")
    ]
    assert report.foldersIn(FolderState.DELETED) == ["20240101", "20240102", "20240103"]


def test_folder_is_deleted_only_right_after_successful_verification(settings, remote):
    make_folder(settings.local_root, "20240601", {"a.mp3": b"a"})
    make_folder(settings.local_root, "20240602", {"a.mp3": b"b"})
    remote.corrupt_on_copy = lambda content: content if content == b"a" else b"?"

    events = []
    verifier = FolderVerifier(settings, remote)
    original_verify = verifier.verify

    def recording_verify(folder):
        result = original_verify(folder)
        events.append(("verify", folder, bool(result)))
        return result

    verifier.verify = recording_verify
    scheduler = SyncScheduler(
        settings,
        verifier,
        FolderTransfer(settings, remote),
        FakeClock(date(2024, 6, 5)),
    )

    real_rmtree = shutil.rmtree

    def recording_rmtree(path, *args, **kwargs):
        events.append(("delete", path.name, None))
        real_rmtree(path, *args, **kwargs)

    with patch("recsync.sync.scheduler.shutil.rmtree", side_effect=recording_rmtree):
        scheduler.runCycle()

    for i, event in enumerate(events):
        if event[0] == "delete":
            assert events[i - 1] == ("verify", event[1], True)

    assert ("delete", "20240601", None) in events
    assert ("delete", "20240602", None) not in events
    assert (settings.local_root / "20240602").exists()


def test_folder_with_unsynced_nested_file_is_retained(settings, remote):
    folder = make_folder(settings.local_root, "20240601", {"10-00-00.mp3": b"a"})
    (folder / "late").mkdir()
    (folder / "late" / "10-02-00.mp3").write_bytes(b"b")
    remote.put(REMOTE_ROOT / "20240601", {"10-00-00.mp3": b"a"})
    remote.fail_copy = True

    report = _scheduler(settings, remote).runCycle()

    assert (folder / "late" / "10-02-00.mp3").read_bytes() == b"b"
    assert report.processed[0].state == FolderState.RETAINED
    assert report.processed[0].verification.file == "late/10-02-00.mp3"


def test_nested_files_are_transferred_before_deletion(settings, remote):
    folder = make_folder(settings.local_root, "20240601", {"10-00-00.mp3": b"a"})
    (folder / "late").mkdir()
    (folder / "late" / "10-02-00.mp3").write_bytes(b"b")
    remote.put(REMOTE_ROOT / "20240601", {"10-00-00.mp3": b"a"})

    report = _scheduler(settings, remote).runCycle()

    assert remote.callsOf("copy") == [str(folder)]
    assert remote.files[REMOTE_ROOT / "20240601" / "late" / "10-02-00.mp3"] == b"b"
    assert not folder.exists()
    assert report.processed[0].states[1] == FolderState.PRE_UNVERIFIED
    assert report.processed[0].state == FolderState.DELETED


def test_transfer_error_retains_folder(settings, remote):
    make_folder(settings.local_root, "20240601", {"a.mp3": b"a"})
    remote.fail_copy = True

    report = _scheduler(settings, remote).runCycle()

    assert (settings.local_root / "20240601").exists()
    assert report.processed[0].states == [
        FolderState.PENDING,
        FolderState.PRE_UNVERIFIED,
        FolderState.TRANSFERRING,
        FolderState.POST_UNVERIFIED,
        FolderState.RETAINED,
    ]
    # no verification after a failed copy
    assert remote.callsOf("list") == [str(REMOTE_ROOT / "20240601")]


def test_transfer_error_does_not_stop_the_cycle(settings, remote):
    make_folder(settings.local_root, "20240601", {"a.mp3": b"a"})
    make_folder(settings.local_root, "20240602", {"a.mp3": b"a"})
    transfer = MagicMock()
    transfer.copy.side_effect = TransferError("scp failed")

    scheduler = SyncScheduler(
        settings,
        FolderVerifier(settings, remote),
        transfer,
        FakeClock(date(2024, 6, 5)),
    )
    report = scheduler.runCycle()

    assert report.foldersIn(FolderState.RETAINED) == ["20240601", "20240602"]


def test_failed_deletion_is_logged_and_retained(settings, remote):
    files = {"a.mp3": b"a"}
    make_folder(settings.local_root, "20240601", files)
    remote.put(REMOTE_ROOT / "20240601", files)

    with (
        patch(
            "recsync.sync.scheduler.shutil.rmtree",
            side_effect=PermissionError("denied"),
        ),
        patch("recsync.sync.scheduler.logger") as mock_logger,
    ):
        report = _scheduler(settings, remote).runCycle()

    assert report.processed[0].states[-2:] == [
        FolderState.PRE_VERIFIED,
        FolderState.RETAINED,
    ]
    mock_logger.error.assert_called_once()
    assert "Could not delete local folder" in mock_logger.error.call_args[0][0]


def test_failed_deletion_is_recovered_in_the_next_cycle(settings, remote):
    files = {"a.mp3": b"a"}
    make_folder(settings.local_root, "20240601", files)
    scheduler = _scheduler(settings, remote)

    with patch(
        "recsync.sync.scheduler.shutil.rmtree", side_effect=PermissionError("denied")
    ):
        scheduler.runCycle()

    report = scheduler.runCycle()

    assert report.processed[0].states == [
        FolderState.PENDING,
        FolderState.PRE_VERIFIED,
        FolderState.DELETED,
    ]
    assert remote.callsOf("copy") == [str(settings.local_root / "20240601")]


def test_unreachable_remote_postpones_remaining_folders(settings, remote):
    for name in ("20240601", "20240602", "20240610"):
        make_folder(settings.local_root, name, {"a.mp3": b"a"})
    remote.unreachable = True

    report = _scheduler(settings, remote).runCycle()

    assert [r.folder for r in report.processed] == ["20240601"]
    assert report.processed[0].state == FolderState.RETAINED
    assert report.postponed == ["20240602"]
    assert report.not_eligible == ["20240610"]
    assert remote.callsOf("copy") == []
    assert all(
        (settings.local_root / name).exists()
        for name in ("20240601", "20240602", "20240610")
    )


def test_non_directory_entries_are_ignored(settings, remote):
    (settings.local_root / "notes.txt").write_text("not a day-folder")
    make_folder(settings.local_root, "20240601", {"a.mp3": b"a"})

    report = _scheduler(settings, remote).runCycle()

    assert [r.folder for r in report.processed] == ["20240601"]
    assert (settings.local_root / "notes.txt").exists()


def test_unlistable_local_root_is_fatal(settings, remote, tmp_path):
    settings_missing = type(settings)(
        local_root=tmp_path / "missing",
        remote_host=settings.remote_host,
        remote_root=settings.remote_root,
    )

    with pytest.raises(LocalIOError, match="Could not list local root"):
        _scheduler(settings_missing, remote).runCycle()


def test_stop_request_postpones_remaining_folders(settings, remote):
    for name in ("20240601", "20240602"):
        make_folder(settings.local_root, name, {"a.mp3": b"a"})
    scheduler = _scheduler(settings, remote)
    scheduler._clock.stop()

    report = scheduler.runCycle()

    assert report.processed == []
    assert report.postponed == ["20240601", "20240602"]


def test_run_repeats_cycles_until_stopped(settings, remote):
    scheduler = _scheduler(settings, remote, max_sleeps=3)

    with patch.object(scheduler, "runCycle") as mock_cycle:
        scheduler.run()

    assert mock_cycle.call_count == 3
    assert scheduler._clock.sleeps == [60, 60, 60]


def test_run_picks_up_new_folders_between_cycles(settings, remote):
    scheduler = _scheduler(settings, remote, max_sleeps=2)
    clock = scheduler._clock
    original_sleep = clock.sleep

    def sleep_and_record_new_day(seconds):
        if not clock.sleeps:
            make_folder(settings.local_root, "20240604", {"a.mp3": b"a"})
        return original_sleep(seconds)

    clock.sleep = sleep_and_record_new_day
    scheduler.run()

    assert not (settings.local_root / "20240604").exists()
    assert remote.files[REMOTE_ROOT / "20240604" / "a.mp3"] == b"a"


def test_pre_verification_result_is_reported(settings, remote):
    make_folder(settings.local_root, "20240601", {"a.mp3": b"a"})
    verifier = MagicMock()
    verifier.verify.return_value = VerificationResult(
        "20240601", VerificationOutcome.VERIFIED
    )
    scheduler = SyncScheduler(
        settings, verifier, MagicMock(), FakeClock(date(2024, 6, 5))
    )

    report = scheduler.runCycle()

    verifier.verify.assert_called_once_with("20240601")
    assert report.processed[0].verification.outcome == VerificationOutcome.VERIFIED
    assert report.today == "20240605"

import pytest

from trvs.core.folder_swap import FolderSwap
from trvs.core.program_manager import ProgramManager
from trvs.core.version_swapper import VersionSwapper


class RecordingGuard:
    def __init__(self, events):
        self.events = events

    def ensure_no_game_running(self, game_dir=None):
        self.events.append(("guard", game_dir))


def make_swapper(context, events=None):
    events = events if events is not None else []
    return VersionSwapper(context, ProgramManager(context.console), RecordingGuard(events)), events


def test_copy_runs_guard_first(make_context, game_dir, tmp_path, monkeypatch):
    context = make_context()
    src = tmp_path / "src"
    src.mkdir()
    (src / "tomb.exe").write_bytes(b"v2")
    swapper, events = make_swapper(context)

    from trvs.utils import file_io

    real_copy = file_io.copy_directory

    def recording_copy(src_dir, dest_dir, recursive):
        events.append(("copy", dest_dir))
        real_copy(src_dir, dest_dir, recursive)

    monkeypatch.setattr(file_io, "copy_directory", recording_copy)
    swapper.try_copying_directory(str(src), str(game_dir))

    assert events == [("guard", str(game_dir)), ("copy", str(game_dir))]
    assert (game_dir / "tomb.exe").read_bytes() == b"v2"


def test_copy_failure_exits_with_code_3(make_context, make_console, tmp_path, game_dir):
    console = make_console("")
    swapper, _ = make_swapper(make_context(console=console))

    with pytest.raises(SystemExit) as exc_info:
        swapper.try_copying_directory(str(tmp_path / "missing"), str(game_dir))

    assert exc_info.value.code == 3
    assert "Failed to copy files!" in console.output
    assert "session's log file" in console.output


def test_delete_files_success(make_context, game_dir):
    swapper, events = make_swapper(make_context())
    target = game_dir / "old.dll"
    target.write_text("x")

    assert swapper.try_deleting_files([str(target)]) is True
    assert not target.exists()
    assert events == [("guard", str(game_dir))]


def test_non_critical_delete_failure_returns_false(make_context, game_dir):
    swapper, _ = make_swapper(make_context())
    assert swapper.try_deleting_files([str(game_dir / "missing.dll")]) is False
    assert swapper.try_deleting_directories([str(game_dir / "missing_dir")]) is False


def test_critical_delete_failure_exits_with_code_3(make_context, make_console, game_dir):
    console = make_console("", "")
    swapper, _ = make_swapper(make_context(console=console))

    with pytest.raises(SystemExit) as exc_info:
        swapper.try_deleting_files([str(game_dir / "missing.dll")], critical=True)
    assert exc_info.value.code == 3
    assert "Failed to delete files!" in console.output

    with pytest.raises(SystemExit) as exc_info:
        swapper.try_deleting_directories([str(game_dir / "missing")], critical=True)
    assert exc_info.value.code == 3
    assert "Failed to delete directories!" in console.output


def test_delete_directories_recursive(make_context, game_dir):
    swapper, _ = make_swapper(make_context())
    (game_dir / "OLD" / "deep").mkdir(parents=True)
    (game_dir / "OLD" / "deep" / "file").write_text("x")

    assert swapper.try_deleting_directories([str(game_dir / "OLD")], recursive=True) is True
    assert not (game_dir / "OLD").exists()


def test_swap_versions_runs_plan(make_context):
    swapper, _ = make_swapper(make_context())
    seen = []
    swapper.swap_versions(seen.append)
    assert seen == [swapper]


def test_folder_swap_copies_chosen_version(make_context, make_console, game_dir, tmp_path):
    versions = tmp_path / "versions"
    (versions / "Multipatch" / "DATA").mkdir(parents=True)
    (versions / "Multipatch" / "tomb.exe").write_bytes(b"multipatch")
    (versions / "Multipatch" / "DATA" / "LEVEL1.PHD").write_bytes(b"mp level")
    (versions / "ATI").mkdir()
    (versions / "ATI" / "tomb.exe").write_bytes(b"ati")
    (versions / "notes.txt").write_text("not a version")

    (game_dir / "tomb.exe").write_bytes(b"original")
    (game_dir / "glide2x.dll").write_bytes(b"leftover")

    console = make_console("9", "2")
    context = make_context(console=console, cleanup_files=("glide2x.dll", "not_there.dll"))
    swapper, events = make_swapper(context)

    swapper.swap_versions(FolderSwap(context))

    assert (game_dir / "tomb.exe").read_bytes() == b"multipatch"
    assert (game_dir / "DATA" / "LEVEL1.PHD").read_bytes() == b"mp level"
    assert not (game_dir / "glide2x.dll").exists()
    assert "1: ATI" in console.output
    assert "2: Multipatch" in console.output
    assert "Please enter a number from 1 to 2." in console.output
    assert events == [("guard", str(game_dir)), ("guard", str(game_dir))]


def test_folder_swap_without_versions_exits_with_code_3(make_context, make_console):
    console = make_console("")
    context = make_context(console=console)
    swapper, _ = make_swapper(context)

    with pytest.raises(SystemExit) as exc_info:
        swapper.swap_versions(FolderSwap(context))
    assert exc_info.value.code == 3

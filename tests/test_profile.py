import os

import pytest

from trvs.core.profile import ProfileError, load_profile, profile_from_dict


def test_profile_keeps_audit_order_and_resolves_versions_dir(tmp_path):
    path = tmp_path / "profile.yaml"
    path.write_text(
        "abbreviation: TR3\n"
        "game_exe: tomb3.exe\n"
        "packaged_files:\n"
        "  z_last_alphabetically.dll: D41D8CD98F00B204E9800998ECF8427E\n"
        "  a_first_alphabetically.dll: 900150983cd24fb0d6963f7d28e17f72\n"
        "game_files: [tomb3.exe, data.bin]\n"
    )

    profile = load_profile(str(path))

    assert list(profile.packaged_files) == ["z_last_alphabetically.dll", "a_first_alphabetically.dll"]
    assert profile.packaged_files["z_last_alphabetically.dll"] == "d41d8cd98f00b204e9800998ecf8427e"
    assert profile.game_files == ("tomb3.exe", "data.bin")
    assert profile.versions_dir == os.path.join(str(tmp_path), "versions")
    assert profile.latest_release_link == "https://github.com/TombRunners/tr3-version-swapper/releases/latest"


def test_missing_profile_file(tmp_path):
    with pytest.raises(ProfileError):
        load_profile(str(tmp_path / "profile.yaml"))


@pytest.mark.parametrize(
    "data",
    [
        {"game_exe": "tomb.exe"},
        {"abbreviation": "TR1"},
        {"abbreviation": "TR1", "game_exe": "tomb.exe", "packaged_files": ["a"]},
        {"abbreviation": "TR1", "game_exe": "tomb.exe", "packaged_files": {"a": "not-a-hash"}},
        {"abbreviation": "TR1", "game_exe": "tomb.exe", "game_files": "tomb.exe"},
        ["not", "a", "mapping"],
    ],
)
def test_malformed_profiles(data):
    with pytest.raises(ProfileError):
        profile_from_dict(data)

"""
File IO - Hashing, file audits and the copy/delete primitives used by version swaps
"""
import hashlib
import logging
import os
import shutil
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

HASH_CHUNK_SIZE = 1024 * 1024


def compute_md5_hash(file_path: str) -> str:
    """
    Computes a file's MD5 hash by streaming its content.

    Args:
        file_path: File to hash

    Returns:
        Lowercase hexadecimal MD5 digest

    Raises:
        FileNotFoundError: The file or one of its parent directories is missing
    """
    md5 = hashlib.md5()
    try:
        with open(file_path, "rb") as f:
            for chunk in iter(lambda: f.read(HASH_CHUNK_SIZE), b""):
                md5.update(chunk)
    except (FileNotFoundError, NotADirectoryError) as e:
        raise FileNotFoundError(f'File "{file_path}" not found!') from e
    return md5.hexdigest()


def find_missing_file(file_names: Iterable[str], directory: str) -> Optional[str]:
    """
    Checks that all `file_names` exist in `directory`.

    Returns:
        The name of the first missing file, or None if no files are missing
    """
    for file_name in file_names:
        if not os.path.isfile(os.path.join(directory, file_name)):
            return file_name
    return None


def copy_directory(src_dir: str, dest_dir: str, recursive: bool) -> None:
    """
    Copies from `src_dir` to `dest_dir`, overwriting files of the same name.

    Args:
        src_dir: Source directory
        dest_dir: Destination directory, created if absent
        recursive: Whether or not to copy subdirectories
    """
    os.makedirs(dest_dir, exist_ok=True)

    subdirs = []
    with os.scandir(src_dir) as entries:
        for entry in entries:
            if entry.is_file():
                shutil.copy2(entry.path, os.path.join(dest_dir, entry.name))
                logger.debug(f"Copied {entry.path} to {dest_dir}")
            elif entry.is_dir():
                subdirs.append(entry)

    if recursive:
        for subdir in subdirs:
            copy_directory(subdir.path, os.path.join(dest_dir, subdir.name), True)


def delete_files(files: Iterable[str]) -> None:
    """Deletes `files`, stopping at the first failure."""
    for file_path in files:
        os.remove(file_path)
        logger.debug(f"Deleted file: {file_path}")


def delete_directories(dirs: Iterable[str], recursive: bool = False) -> None:
    """
    Deletes `dirs`, stopping at the first failure.

    Args:
        dirs: Paths of directories to delete
        recursive: Whether to delete the files and subdirectories inside each directory;
            otherwise each directory must already be empty
    """
    for dir_path in dirs:
        if recursive:
            shutil.rmtree(dir_path)
        else:
            os.rmdir(dir_path)
        logger.debug(f"Deleted directory: {dir_path}")

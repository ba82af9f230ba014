"""Input discovery, output directory and file management utilities."""
import io
import os
import zipfile
from typing import List

PROGRAM_EXTENSION = '.nc'


def find_program_files(directory: str, extension: str = PROGRAM_EXTENSION) -> List[str]:
    """
    List program files in a directory, oldest modification first.

    Args:
        directory: Directory to scan (not recursive)
        extension: File extension to match, case-insensitive

    Returns:
        Absolute paths sorted by ascending modification time
    """
    directory = os.path.abspath(directory)
    paths = []
    for entry in os.scandir(directory):
        if entry.is_file() and entry.name.lower().endswith(extension.lower()):
            paths.append(entry.path)
    return sorted(paths, key=lambda path: (os.path.getmtime(path), path))


def read_program_file(file_path: str) -> str:
    """
    Read a program file.

    Args:
        file_path: Path to the program file

    Returns:
        File content
    """
    with open(file_path, 'r', encoding='utf-8') as f:
        return f.read()


def create_setup_directory(base_path: str, folder_name: str) -> str:
    """
    Create the output directory for one setup.

    Args:
        base_path: Directory the merged programs are written under
        folder_name: e.g. ``Setup 1 - Top``

    Returns:
        Full path to the created directory
    """
    directory = os.path.join(base_path, folder_name)
    os.makedirs(directory, exist_ok=True)
    return directory


def write_merged_file(directory: str, filename: str, content: str) -> str:
    """
    Write a merged program, replacing any file of the same name.

    Args:
        directory: Setup output directory
        filename: Merged program file name
        content: Program text

    Returns:
        Full path to the written file
    """
    file_path = os.path.join(directory, filename)
    with open(file_path, 'w', encoding='utf-8', newline='\n') as f:
        f.write(content)
    return file_path


def package_for_download(directory: str) -> bytes:
    """
    Create a zip archive of the merged output.

    Args:
        directory: Directory holding the setup folders

    Returns:
        Bytes of the zip archive
    """
    buffer = io.BytesIO()

    with zipfile.ZipFile(buffer, 'w', zipfile.ZIP_DEFLATED) as zf:
        for root, dirs, files in os.walk(directory):
            for file in sorted(files):
                file_path = os.path.join(root, file)
                # Use paths relative to the output root in the archive
                arcname = os.path.relpath(file_path, directory)
                zf.write(file_path, arcname)

    buffer.seek(0)
    return buffer.read()

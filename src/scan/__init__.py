"""Source file discovery."""

from scan.files import find_go_files, is_denied, is_go_source

__all__ = ["find_go_files", "is_denied", "is_go_source"]

"""Parsing utilities for Go source files."""

from parse.go_imports import ImportSpec, extract_import_specs, import_names_for
from parse.scopes import PackageRef, collect_package_refs, find_package_declaration
from parse.syntax_tree import SourceFile, load_source_file, parse_source

__all__ = [
    "ImportSpec",
    "PackageRef",
    "SourceFile",
    "collect_package_refs",
    "extract_import_specs",
    "find_package_declaration",
    "import_names_for",
    "load_source_file",
    "parse_source",
]

"""
Utility functions for local search
"""
import os
from typing import List


def format_file_size(size_bytes: float) -> str:
    """
    Format file size in human readable format

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string
    """
    if size_bytes == 0:
        return "0 B"

    size_names = ["B", "KB", "MB", "GB", "TB"]
    i = 0

    while size_bytes >= 1024 and i < len(size_names) - 1:
        size_bytes /= 1024.0
        i += 1

    return f"{size_bytes:.1f} {size_names[i]}"


def shorten(text: str, width: int) -> str:
    """Cut text to width, keeping both ends and marking the gap"""
    if len(text) <= width:
        return text
    if width <= 3:
        return text[:width]
    head = (width - 3) // 2
    tail = width - 3 - head
    return text[:head] + "..." + text[len(text) - tail:]


def split_csv_option(values: List[str]) -> List[str]:
    """
    Flatten repeatable CLI values that may also be comma separated

    Args:
        values: Raw option values, e.g. ["py,js", "md"]

    Returns:
        Individual non-empty items, e.g. ["py", "js", "md"]
    """
    items = []
    for value in values:
        items.extend(part.strip() for part in value.split(",") if part.strip())
    return items


def validate_directory(directory: str) -> bool:
    """
    Validate if directory exists and is accessible

    Args:
        directory: Directory path to validate

    Returns:
        True if directory is valid, False otherwise
    """
    return (
        os.path.exists(directory) and
        os.path.isdir(directory) and
        os.access(directory, os.R_OK)
    )

"""
Ranking and rendering of search results
"""
import csv
import json
from dataclasses import asdict
from typing import Any, Dict, Iterable, List, Optional

from local_search.core.models import ResultRecord
from local_search.utils.helpers import format_file_size, shorten


CSV_FIELDS = ["score", "name", "extension", "size_kb", "last_modified", "hit_kind", "path", "snippet"]


def rank_results(records: Iterable[ResultRecord], limit: Optional[int] = None) -> List[ResultRecord]:
    """
    Order results by score, newest first among equal scores

    Args:
        records: Accepted result records
        limit: Maximum number of records to keep

    Returns:
        Sorted, truncated list
    """
    ranked = sorted(records, key=lambda r: (r.score, r.last_modified), reverse=True)
    if limit is not None:
        ranked = ranked[:limit]
    return ranked


def record_to_dict(record: ResultRecord, show_snippet: bool = True) -> Dict[str, Any]:
    data = asdict(record)
    data["hit_kind"] = record.hit_kind.value
    data["last_modified"] = record.last_modified.isoformat(timespec="seconds")
    if not show_snippet:
        data["snippet"] = None
    return data


def render_json(records: List[ResultRecord], show_snippet: bool = True) -> str:
    return json.dumps([record_to_dict(r, show_snippet) for r in records], indent=2)


def render_table(records: List[ResultRecord], show_snippet: bool = True, path_width: int = 60) -> str:
    """
    Render results as a fixed-width text table

    Args:
        records: Ranked records
        show_snippet: Print the content snippet under each content hit
        path_width: Width of the path column

    Returns:
        Table text without a trailing newline
    """
    header = f"{'Score':>5}  {'Kind':<7}  {'Size':>9}  {'Modified':<16}  Path"
    lines = [header, "-" * (len(header) + path_width - 4)]
    for record in records:
        lines.append(
            f"{record.score:>5}  {record.hit_kind.value:<7}  "
            f"{format_file_size(record.size_kb * 1024):>9}  "
            f"{record.last_modified.strftime('%Y-%m-%d %H:%M'):<16}  "
            f"{shorten(record.path, path_width)}"
        )
        if show_snippet and record.snippet:
            lines.append(f"{'':>5}  {record.snippet}")
    return "\n".join(lines)


def render_list(records: List[ResultRecord], show_snippet: bool = True) -> str:
    blocks = []
    for i, record in enumerate(records, 1):
        block = [
            f"{i}. {record.name}",
            f"   Path: {record.path}",
            f"   Score: {record.score} ({record.hit_kind.value})",
            f"   Size: {format_file_size(record.size_kb * 1024)}",
            f"   Modified: {record.last_modified.isoformat(sep=' ', timespec='seconds')}",
        ]
        if show_snippet and record.snippet:
            block.append(f"   Snippet: {record.snippet}")
        blocks.append("\n".join(block))
    return "\n\n".join(blocks)


def write_csv(records: List[ResultRecord], file_path: str, show_snippet: bool = True) -> None:
    """
    Export results to a CSV file

    Raises:
        OSError: If the file cannot be written
    """
    with open(file_path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for record in records:
            writer.writerow(record_to_dict(record, show_snippet))

import time
from pathlib import Path
from datetime import datetime

from planview_checker.logger import LOGS_DIR, REPORTS_DIR

# only files written by init_logger are candidates for deletion
LOG_PATTERN = "log_*.txt"
REPORT_PATTERN = "report_*.txt"


def cleanup_old_logs(log_dir=LOGS_DIR, report_dir=REPORTS_DIR, days_old=7, verbose=False):
    """
    Clean up log and report files older than specified number of days.

    Args:
        log_dir (str): Directory containing log files
        report_dir (str): Directory containing report files
        days_old (int): Files older than this many days will be deleted
        verbose (bool): Print details about cleanup process

    Returns:
        dict: Summary of cleanup results
    """
    results = {
        'logs_deleted': 0,
        'reports_deleted': 0,
        'errors': []
    }

    cutoff_time = time.time() - (days_old * 24 * 60 * 60)

    if verbose:
        cutoff_date = datetime.fromtimestamp(cutoff_time).strftime('%Y-%m-%d %H:%M:%S')
        print(f"Cleaning up files older than {days_old} days (before {cutoff_date})")

    targets = (
        ('logs_deleted', Path(log_dir), LOG_PATTERN, "log"),
        ('reports_deleted', Path(report_dir), REPORT_PATTERN, "report"),
    )
    for key, directory, pattern, file_type in targets:
        if directory.exists():
            results[key] = _clean_directory(directory, pattern, cutoff_time, file_type, verbose, results['errors'])

    if verbose:
        print(f"Cleanup complete: {results['logs_deleted']} logs, {results['reports_deleted']} reports deleted")
        if results['errors']:
            print(f"Errors encountered: {len(results['errors'])}")

    return results


def _clean_directory(directory, pattern, cutoff_time, file_type, verbose, error_list):
    """Delete files matching pattern whose mtime is before cutoff_time."""
    deleted_count = 0

    try:
        candidates = [p for p in directory.glob(pattern) if p.is_file()]
    except OSError as e:
        error_list.append(f"Could not access directory {directory}: {e}")
        return 0

    for file_path in candidates:
        try:
            file_mtime = file_path.stat().st_mtime
            if file_mtime >= cutoff_time:
                continue
            if verbose:
                file_date = datetime.fromtimestamp(file_mtime).strftime('%Y-%m-%d %H:%M:%S')
                print(f"Deleting old {file_type}: {file_path.name} (modified: {file_date})")
            file_path.unlink()
            deleted_count += 1
        except OSError as e:
            error_msg = f"Could not delete {file_path}: {e}"
            error_list.append(error_msg)
            if verbose:
                print(f"Error: {error_msg}")

    return deleted_count

import os
import time

from planview_checker.log_cleaner import cleanup_old_logs


def _age(path, days):
    stamp = time.time() - days * 24 * 60 * 60
    os.utime(path, (stamp, stamp))


def test_only_old_log_and_report_files_are_deleted(tmp_path):
    logs = tmp_path / "logs"
    reports = tmp_path / "reports"
    logs.mkdir()
    reports.mkdir()

    old_log = logs / "log_20240101_000000.txt"
    new_log = logs / "log_20240301_000000.txt"
    old_other = logs / "notes.txt"
    old_report = reports / "report_20240101_000000.txt"
    for path in (old_log, new_log, old_other, old_report):
        path.write_text("x", encoding="utf-8")
    _age(old_log, 10)
    _age(old_other, 10)
    _age(old_report, 30)

    results = cleanup_old_logs(log_dir=str(logs), report_dir=str(reports), days_old=7)

    assert results == {"logs_deleted": 1, "reports_deleted": 1, "errors": []}
    assert not old_log.exists()
    assert not old_report.exists()
    assert new_log.exists()
    assert old_other.exists()


def test_missing_directories_are_ignored(tmp_path):
    results = cleanup_old_logs(log_dir=str(tmp_path / "a"), report_dir=str(tmp_path / "b"))
    assert results == {"logs_deleted": 0, "reports_deleted": 0, "errors": []}


def test_verbose_cleanup_prints_progress(tmp_path, capsys):
    logs = tmp_path / "logs"
    logs.mkdir()
    old_log = logs / "log_old.txt"
    old_log.write_text("x", encoding="utf-8")
    _age(old_log, 8)

    cleanup_old_logs(log_dir=str(logs), report_dir=str(tmp_path / "reports"), verbose=True)

    out = capsys.readouterr().out
    assert "Deleting old log: log_old.txt" in out
    assert "1 logs, 0 reports deleted" in out

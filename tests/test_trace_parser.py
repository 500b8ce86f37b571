"""
Tests for trace parsing and generation.
"""
import pytest

from simulation.engine import JobSpec
from utils.trace_parser import TraceFormatError, TraceParser


def test_three_field_lines_get_sequential_ids():
    lines = ["# comment", "", "0,8,3", "1,4,1", "3,9,2"]
    jobs = TraceParser.parse_lines(lines)
    assert jobs == [JobSpec(0, 0, 8, 3), JobSpec(1, 1, 4, 1), JobSpec(2, 3, 9, 2)]


def test_four_field_lines_keep_explicit_ids():
    jobs = TraceParser.parse_lines(["10, 0, 2.5, 1", "20, 1.5, 3, 0"])
    assert jobs == [JobSpec(10, 0, 2.5, 1), JobSpec(20, 1.5, 3, 0)]


@pytest.mark.parametrize("lines, bad_line", [
    (["0,1,0", "1,2"], 2),
    (["0,1,0", "x,1,0"], 2),
    (["0,0,1"], 1),
    (["-1,2,1"], 1),
    (["0,1,0", "# c", "0,2,0"], 3),
    (["1,0,1,0", "1,1,1,0"], 2),
    (["0,1,1.5"], 1),
    (["nan,5,0"], 1),
    (["0,inf,0"], 1),
    (["0,1,0", "2,1,-inf,0"], 2),
    (["0,1,0", "1,nan,0"], 2),
])
def test_invalid_lines_report_line_number(lines, bad_line):
    with pytest.raises(TraceFormatError) as excinfo:
        TraceParser.parse_lines(lines)
    assert excinfo.value.line_number == bad_line


def test_save_and_parse_file(tmp_path, capsys):
    path = tmp_path / "trace.csv"
    jobs = [JobSpec(3, 0, 5, 1), JobSpec(4, 2, 1, 0)]
    TraceParser.save_jobs_to_file(jobs, str(path))
    assert TraceParser.parse_file(str(path)) == jobs


def test_missing_file_raises():
    with pytest.raises(FileNotFoundError):
        TraceParser.parse_file("/nonexistent/trace.csv")


def test_random_jobs_have_unique_arrivals_and_are_seeded():
    jobs = TraceParser.generate_random_jobs(num_jobs=10, max_arrival=20, seed=5)
    assert len({job.arrival_time for job in jobs}) == 10
    assert all(job.running_time >= 1 for job in jobs)
    assert jobs == TraceParser.generate_random_jobs(num_jobs=10, max_arrival=20, seed=5)


def test_random_jobs_need_room_for_arrivals():
    with pytest.raises(ValueError):
        TraceParser.generate_random_jobs(num_jobs=5, max_arrival=2)

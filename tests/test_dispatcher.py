"""
Tests for the dispatcher: core assignment, preemption and statistics.
"""
import pytest

from kernel.dispatcher import Dispatcher, SchedulerError
from kernel.job import JobState
from schedulers.schemes import SchedulingScheme


def assert_partition(dispatcher, live_ids):
    """Every live job is on exactly one core or in the queue, never both."""
    running = [job_id for job_id in dispatcher.running_job_ids() if job_id is not None]
    waiting = dispatcher.waiting_job_ids()
    placed = running + waiting
    assert len(placed) == len(set(placed)), "job placed twice"
    assert set(placed) == set(live_ids)


def test_fcfs_single_core_scenario():
    """Job 2 waits for job 1, then runs when core 0 frees up."""
    d = Dispatcher(1, SchedulingScheme.FCFS)
    assert d.on_job_arrival(1, 0, 5, 0) == 0
    assert d.on_job_arrival(2, 1, 2, 0) is None
    assert_partition(d, {1, 2})

    assert d.on_job_finished(0, 1, 5) == 2
    assert_partition(d, {2})
    assert d.on_job_finished(0, 2, 7) is None
    assert_partition(d, set())

    # job 1: wait 0, turnaround 5, response 0
    # job 2: wait (7-1)-2=4, turnaround 6, response 5-1=4
    assert d.average_wait_time() == pytest.approx(2.0)
    assert d.average_turnaround_time() == pytest.approx(5.5)
    assert d.average_response_time() == pytest.approx(2.0)


def test_idle_cores_filled_lowest_index_first():
    d = Dispatcher(3, SchedulingScheme.FCFS)
    assert d.on_job_arrival(1, 0, 10, 0) == 0
    assert d.on_job_arrival(2, 1, 10, 0) == 1
    assert d.on_job_finished(0, 1, 2) is None
    assert d.on_job_arrival(3, 3, 10, 0) == 0
    assert d.on_job_arrival(4, 4, 10, 0) == 2


def test_fcfs_never_preempts_and_keeps_arrival_order():
    d = Dispatcher(1, SchedulingScheme.FCFS)
    d.on_job_arrival(1, 0, 100, 9)
    assert d.on_job_arrival(2, 1, 1, 0) is None
    assert d.on_job_arrival(3, 2, 1, 0) is None
    assert d.waiting_job_ids() == [2, 3]
    assert d.on_job_finished(0, 1, 100) == 2
    assert d.on_job_finished(0, 2, 101) == 3


def test_sjf_picks_shortest_then_earliest_arrival():
    d = Dispatcher(1, SchedulingScheme.SJF)
    assert d.on_job_arrival(1, 0, 10, 0) == 0
    assert d.on_job_arrival(2, 1, 5, 0) is None
    assert d.on_job_arrival(3, 2, 3, 0) is None
    assert d.on_job_arrival(4, 3, 3, 0) is None

    assert d.on_job_finished(0, 1, 10) == 3
    assert d.on_job_finished(0, 3, 13) == 4
    assert d.on_job_finished(0, 4, 16) == 2
    assert d.on_job_finished(0, 2, 21) is None


def test_pri_smallest_priority_wins_without_preemption():
    d = Dispatcher(1, SchedulingScheme.PRI)
    assert d.on_job_arrival(1, 0, 4, 2) == 0
    assert d.on_job_arrival(2, 1, 4, 3) is None
    assert d.on_job_arrival(3, 2, 4, 1) is None
    assert d.on_job_arrival(4, 3, 4, 1) is None
    assert d.running_job_ids() == [1]
    assert d.waiting_job_ids() == [3, 4, 2]


def test_psjf_preempts_longer_running_job():
    """B (3 units) preempts A, which re-enters the queue with 8 remaining."""
    d = Dispatcher(1, SchedulingScheme.PSJF)
    assert d.on_job_arrival(1, 0, 10, 0) == 0
    assert d.on_job_arrival(2, 2, 3, 0) == 0

    assert d.running_job_ids() == [2]
    waiting = d.queue.peek_front()
    assert waiting.job_id == 1
    assert waiting.remaining_time == 8
    assert waiting.used_time == 2
    assert waiting.state is JobState.WAITING
    assert_partition(d, {1, 2})

    assert d.on_job_finished(0, 2, 5) == 1


def test_psjf_equal_remaining_does_not_preempt():
    d = Dispatcher(1, SchedulingScheme.PSJF)
    d.on_job_arrival(1, 0, 10, 0)
    assert d.on_job_arrival(2, 5, 5, 0) is None
    assert d.running_job_ids() == [1]


def test_psjf_victim_is_longest_remaining_core():
    d = Dispatcher(2, SchedulingScheme.PSJF)
    assert d.on_job_arrival(1, 0, 10, 0) == 0
    assert d.on_job_arrival(2, 1, 10, 0) == 1
    # at t=2: job 1 has 8 left, job 2 has 9 left
    assert d.on_job_arrival(3, 2, 2, 0) == 1
    assert d.running_job_ids() == [1, 3]
    assert d.waiting_job_ids() == [2]


def test_ppri_preempts_least_urgent_core():
    d = Dispatcher(2, SchedulingScheme.PPRI)
    d.on_job_arrival(1, 0, 10, 5)
    d.on_job_arrival(2, 1, 10, 2)
    assert d.on_job_arrival(3, 2, 10, 1) == 0
    assert d.running_job_ids() == [3, 2]


def test_psjf_victim_tie_prefers_later_arrival():
    d = Dispatcher(2, SchedulingScheme.PSJF)
    d.on_job_arrival(1, 0, 10, 0)
    d.on_job_arrival(2, 1, 9, 0)
    # at t=2 both running jobs have 8 left; job 2 arrived later
    assert d.on_job_arrival(3, 2, 2, 0) == 1
    assert d.running_job_ids() == [1, 3]
    assert d.waiting_job_ids() == [2]


def test_ppri_victim_tie_prefers_later_arrival():
    d = Dispatcher(2, SchedulingScheme.PPRI)
    d.on_job_arrival(1, 0, 10, 5)
    d.on_job_arrival(2, 1, 10, 5)
    assert d.on_job_arrival(3, 2, 10, 1) == 1
    assert d.running_job_ids() == [1, 3]


def test_ppri_equal_priority_queues_new_job():
    d = Dispatcher(1, SchedulingScheme.PPRI)
    d.on_job_arrival(1, 0, 10, 3)
    assert d.on_job_arrival(2, 1, 10, 3) is None
    assert d.on_job_arrival(3, 2, 10, 4) is None
    assert d.waiting_job_ids() == [2, 3]


def test_round_robin_cycles_three_jobs():
    """A job whose quantum expires goes behind every waiting job."""
    d = Dispatcher(1, SchedulingScheme.RR)
    assert d.on_job_arrival(1, 0, 4, 0) == 0
    assert d.on_job_arrival(2, 1, 4, 0) is None
    assert d.on_job_arrival(3, 2, 4, 0) is None

    assert d.on_quantum_expired(0, 2) == 2
    assert d.waiting_job_ids() == [3, 1]
    assert d.on_quantum_expired(0, 4) == 3
    assert d.waiting_job_ids() == [1, 2]
    assert d.on_quantum_expired(0, 6) == 1
    assert d.waiting_job_ids() == [2, 3]
    assert_partition(d, {1, 2, 3})


def test_quantum_expiry_with_empty_queue_returns_same_job():
    d = Dispatcher(1, SchedulingScheme.RR)
    d.on_job_arrival(7, 0, 10, 0)
    assert d.on_quantum_expired(0, 2) == 7
    assert d.cores[0].used_time == 2
    assert d.cores[0].remaining_time == 8


def test_refresh_updates_running_jobs_lazily():
    d = Dispatcher(2, SchedulingScheme.FCFS)
    d.on_job_arrival(1, 0, 10, 0)
    d.on_job_arrival(2, 4, 10, 0)
    job = d.cores[0]
    assert job.used_time == 4
    assert job.remaining_time == 6
    assert job.last_start_time == 4


def test_first_dispatch_latency_recorded_once():
    d = Dispatcher(1, SchedulingScheme.RR)
    d.on_job_arrival(1, 0, 4, 0)
    d.on_job_arrival(2, 1, 4, 0)
    d.on_quantum_expired(0, 2)
    job = d.cores[0]
    assert job.job_id == 2
    assert job.first_dispatch_latency == 1

    d.on_quantum_expired(0, 4)
    d.on_quantum_expired(0, 6)
    assert d.cores[0] is job
    assert job.first_dispatch_latency == 1


def test_wait_equals_turnaround_minus_service():
    d = Dispatcher(1, SchedulingScheme.PSJF)
    d.on_job_arrival(1, 0, 10, 0)
    d.on_job_arrival(2, 2, 3, 0)
    d.on_job_finished(0, 2, 5)
    d.on_job_finished(0, 1, 13)
    stats = d.stats
    assert stats.total_wait == pytest.approx(stats.total_turnaround - (10 + 3))


def test_averages_are_zero_without_jobs_and_idempotent():
    d = Dispatcher(1, SchedulingScheme.FCFS)
    assert d.average_wait_time() == 0
    assert d.average_turnaround_time() == 0
    assert d.average_response_time() == 0

    d.on_job_arrival(1, 0, 3, 0)
    d.on_job_arrival(2, 1, 3, 0)
    d.on_job_finished(0, 1, 3)
    d.on_job_finished(0, 2, 6)
    assert d.average_wait_time() == d.average_wait_time()


def test_show_queue_lists_waiting_then_running():
    d = Dispatcher(1, SchedulingScheme.FCFS)
    d.on_job_arrival(1, 0, 5, 0)
    d.on_job_arrival(2, 1, 5, 0)
    d.on_job_arrival(3, 2, 5, 0)
    assert d.show_queue() == "2(-1) 3(-1) 1(0)"
    assert d.snapshot() == {'scheme': 'FCFS', 'cores': [1], 'waiting': [2, 3], 'completed': 0}


def test_invalid_construction():
    with pytest.raises(ValueError):
        Dispatcher(0, SchedulingScheme.FCFS)
    with pytest.raises(ValueError):
        Dispatcher(2, "FCFS")


def test_contract_violations_fail_fast():
    d = Dispatcher(1, SchedulingScheme.RR)
    with pytest.raises(ValueError):
        d.on_job_arrival(1, 0, 0, 0)
    with pytest.raises(SchedulerError):
        d.on_job_finished(0, 1, 1)
    with pytest.raises(SchedulerError):
        d.on_quantum_expired(0, 1)

    d.on_job_arrival(1, 0, 5, 0)
    with pytest.raises(ValueError):
        d.on_job_arrival(1, 1, 5, 0)
    with pytest.raises(ValueError):
        d.on_job_finished(1, 1, 5)
    with pytest.raises(ValueError):
        d.on_quantum_expired(-1, 2)
    with pytest.raises(SchedulerError):
        d.on_job_finished(0, 99, 5)


@pytest.mark.parametrize("time, running_time", [
    (float("nan"), 5),
    (float("inf"), 5),
    (0, float("nan")),
    (0, float("inf")),
])
def test_non_finite_arrival_values_rejected(time, running_time):
    d = Dispatcher(1, SchedulingScheme.PSJF)
    with pytest.raises(ValueError):
        d.on_job_arrival(1, time, running_time, 0)
    assert d.running_job_ids() == [None]


def test_calls_after_shutdown_raise():
    d = Dispatcher(1, SchedulingScheme.FCFS)
    d.on_job_arrival(1, 0, 5, 0)
    d.shutdown()
    assert d.is_shut_down
    assert d.running_job_ids() == [None]
    with pytest.raises(SchedulerError):
        d.on_job_arrival(2, 1, 5, 0)
    with pytest.raises(SchedulerError):
        d.shutdown()

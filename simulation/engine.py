"""
이벤트 기반 시뮬레이션 드라이버

작업 트레이스를 시간 순서대로 디스패처에 전달하고,
코어별 실행 구간(Gantt Chart)과 작업별 결과를 기록한다.
"""

import math
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, List, Optional, Sequence

from kernel.dispatcher import Dispatcher
from kernel.job import Number
from schedulers.schemes import SchedulingScheme

# 기본 설정
DEFAULT_CORES = 1
DEFAULT_QUANTUM = 2

# 부동소수점 시간 비교 허용 오차
EPSILON = 1e-9


@dataclass(frozen=True)
class JobSpec:
    """트레이스의 작업 한 줄"""
    job_id: int
    arrival_time: Number
    running_time: Number
    priority: int = 0


@dataclass
class GanttEntry:
    """Gantt Chart 엔트리 (코어 하나의 연속 실행 구간)"""
    core: int
    job_id: int
    start_time: Number
    end_time: Number


@dataclass
class JobResult:
    """작업별 결과"""
    job_id: int
    arrival_time: Number
    running_time: Number
    priority: int
    start_time: Number
    finish_time: Number
    waiting_time: Number
    turnaround_time: Number
    response_time: Number


def validate_jobs(jobs: Sequence[JobSpec]):
    """트레이스 검증: ID와 도착 시간은 유일, 시간 값은 유한, 실행 시간은 양수"""
    seen_ids = set()
    seen_arrivals = set()
    for job in jobs:
        # NaN은 모든 비교를 통과하므로 먼저 걸러낸다
        if not math.isfinite(job.arrival_time) or not math.isfinite(job.running_time):
            raise ValueError(f"times must be finite numbers: job {job.job_id}")
        if job.job_id in seen_ids:
            raise ValueError(f"duplicate job id: {job.job_id}")
        if job.arrival_time in seen_arrivals:
            raise ValueError(f"duplicate arrival time: {job.arrival_time} (job {job.job_id})")
        if job.arrival_time < 0:
            raise ValueError(f"arrival time must be non-negative: job {job.job_id}")
        if job.running_time <= 0:
            raise ValueError(f"running time must be positive: job {job.job_id}")
        seen_ids.add(job.job_id)
        seen_arrivals.add(job.arrival_time)


class Simulator:
    """
    시뮬레이션 드라이버
    단일 시뮬레이션 시계를 유지하며 이벤트를 디스패처에 전달한다
    """

    def __init__(self, jobs: Sequence[JobSpec], num_cores: int = DEFAULT_CORES,
                 scheme: SchedulingScheme = SchedulingScheme.FCFS,
                 quantum: Number = DEFAULT_QUANTUM):
        validate_jobs(jobs)
        if scheme is SchedulingScheme.RR and not (math.isfinite(quantum) and quantum > 0):
            raise ValueError(f"quantum must be positive for RR: {quantum}")

        self.jobs = sorted(jobs, key=lambda j: j.arrival_time)
        self.num_cores = num_cores
        self.scheme = scheme
        self.quantum = quantum
        self.name = scheme.description

        self.dispatcher = Dispatcher(num_cores, scheme)
        self.current_time: Number = 0

        # 코어별 실행 상태 (디스패처와 독립적으로 추적)
        self.core_jobs: List[Optional[int]] = [None] * num_cores
        self.run_start: List[Number] = [0] * num_cores
        self.quantum_start: List[Number] = [0] * num_cores
        self.previous_jobs: List[Optional[int]] = [None] * num_cores

        self.specs: Dict[int, JobSpec] = {job.job_id: job for job in self.jobs}
        self.remaining: Dict[int, Number] = {}
        self.first_start: Dict[int, Number] = {}
        self.finish_time: Dict[int, Number] = {}

        self.context_switches = 0
        self.preemptions = 0
        self.cpu_busy_time: Number = 0

        self.gantt_chart: List[GanttEntry] = []
        self.event_log: List[str] = []
        self.trace_queue = False

    def log_event(self, message: str):
        """이벤트 로그 기록"""
        log_entry = f"[T={self.current_time:3}] {message}"
        self.event_log.append(log_entry)

    def _log_queue(self):
        if self.trace_queue:
            self.log_event(f"Queue: {self.dispatcher.show_queue()}")

    def add_to_gantt_chart(self, core: int, job_id: int, start: Number, end: Number):
        """Gantt Chart에 엔트리 추가 (같은 코어에서 이어지는 같은 작업은 병합)"""
        if end - start <= EPSILON:
            return
        for entry in reversed(self.gantt_chart):
            if entry.core != core:
                continue
            if entry.job_id == job_id and abs(entry.end_time - start) <= EPSILON:
                entry.end_time = end
                return
            break
        self.gantt_chart.append(GanttEntry(core, job_id, start, end))

    # ------------------------------------------------------------------
    # 코어 상태 전이
    # ------------------------------------------------------------------

    def _stop(self, core: int) -> Optional[int]:
        """코어의 현재 실행 구간 종료"""
        job_id = self.core_jobs[core]
        if job_id is None:
            return None
        elapsed = self.current_time - self.run_start[core]
        self.add_to_gantt_chart(core, job_id, self.run_start[core], self.current_time)
        self.cpu_busy_time += elapsed
        self.remaining[job_id] -= elapsed
        self.core_jobs[core] = None
        return job_id

    def _start(self, core: int, job_id: int):
        """코어에서 작업 실행 시작"""
        previous = self.previous_jobs[core]
        if previous is not None and previous != job_id:
            self.context_switches += 1
            self.log_event(f"Context Switch on core {core}: J{previous} → J{job_id}")
        self.previous_jobs[core] = job_id

        self.core_jobs[core] = job_id
        self.run_start[core] = self.current_time
        self.quantum_start[core] = self.current_time
        self.first_start.setdefault(job_id, self.current_time)
        self.log_event(f"J{job_id} → Running on core {core}")

    def _completion_time(self, core: int) -> Number:
        job_id = self.core_jobs[core]
        return self.run_start[core] + self.remaining[job_id]

    def next_event_time(self, pending: Deque[JobSpec]) -> Optional[Number]:
        """다음 이벤트 시각 (없으면 None)"""
        candidates = []
        if pending:
            candidates.append(pending[0].arrival_time)
        for core in range(self.num_cores):
            if self.core_jobs[core] is None:
                continue
            candidates.append(self._completion_time(core))
            if self.scheme is SchedulingScheme.RR:
                candidates.append(self.quantum_start[core] + self.quantum)
        return min(candidates) if candidates else None

    # ------------------------------------------------------------------
    # 이벤트 처리
    # ------------------------------------------------------------------

    def handle_job_finished(self, core: int):
        """작업 완료 처리"""
        job_id = self._stop(core)
        self.finish_time[job_id] = self.current_time
        self.log_event(f"J{job_id} → Finished on core {core}")

        next_id = self.dispatcher.on_job_finished(core, job_id, self.current_time)
        if next_id is not None:
            self._start(core, next_id)
        else:
            self.log_event(f"Core {core} → Idle")
        self._log_queue()

    def handle_quantum_expired(self, core: int):
        """타임 퀀텀 만료 처리"""
        job_id = self._stop(core)
        self.log_event(f"J{job_id} quantum expired on core {core}")

        next_id = self.dispatcher.on_quantum_expired(core, self.current_time)
        if next_id is not None:
            self._start(core, next_id)
        self._log_queue()

    def handle_job_arrival(self, spec: JobSpec):
        """작업 도착 처리"""
        self.remaining[spec.job_id] = spec.running_time
        self.log_event(f"J{spec.job_id} arrived (run={spec.running_time}, pri={spec.priority})")

        core = self.dispatcher.on_job_arrival(spec.job_id, self.current_time,
                                              spec.running_time, spec.priority)
        if core is None:
            self.log_event(f"J{spec.job_id} → Waiting Queue")
        else:
            preempted = self._stop(core)
            if preempted is not None:
                self.preemptions += 1
                self.log_event(f"J{preempted} preempted by J{spec.job_id} → Waiting Queue")
            self._start(core, spec.job_id)
        self._log_queue()

    def step(self, pending: Deque[JobSpec]) -> bool:
        """
        다음 시각의 이벤트를 모두 처리

        Returns:
            처리할 이벤트가 남아있는지 여부
        """
        next_time = self.next_event_time(pending)
        if next_time is None:
            return False
        self.current_time = next_time

        # 1. 작업 완료
        for core in range(self.num_cores):
            if self.core_jobs[core] is not None \
                    and self._completion_time(core) <= self.current_time + EPSILON:
                self.handle_job_finished(core)

        # 2. 타임 퀀텀 만료 (RR)
        if self.scheme is SchedulingScheme.RR:
            for core in range(self.num_cores):
                if self.core_jobs[core] is not None \
                        and self.quantum_start[core] + self.quantum <= self.current_time + EPSILON:
                    self.handle_quantum_expired(core)

        # 3. 작업 도착
        while pending and pending[0].arrival_time <= self.current_time + EPSILON:
            self.handle_job_arrival(pending.popleft())

        return True

    def run(self, verbose: bool = False) -> Dict:
        """
        시뮬레이션 실행

        Args:
            verbose: 상세 로그 출력 여부 (대기 큐 상태 포함)

        Returns:
            시뮬레이션 결과 딕셔너리
        """
        self.trace_queue = verbose
        self.log_event(f"===== {self.name} Scheduling Started ({self.num_cores} cores) =====")

        pending: Deque[JobSpec] = deque(self.jobs)
        while self.step(pending):
            pass

        self.log_event(f"===== {self.name} Scheduling Completed =====")

        if verbose:
            for log in self.event_log:
                print(log)

        results = self.get_results()
        self.dispatcher.shutdown()
        return results

    def build_job_results(self) -> List[JobResult]:
        results = []
        for job_id in sorted(self.finish_time):
            spec = self.specs[job_id]
            finish = self.finish_time[job_id]
            turnaround = finish - spec.arrival_time
            results.append(JobResult(
                job_id=job_id,
                arrival_time=spec.arrival_time,
                running_time=spec.running_time,
                priority=spec.priority,
                start_time=self.first_start[job_id],
                finish_time=finish,
                waiting_time=turnaround - spec.running_time,
                turnaround_time=turnaround,
                response_time=self.first_start[job_id] - spec.arrival_time,
            ))
        return results

    def get_results(self) -> Dict:
        """
        시뮬레이션 결과 반환

        Returns:
            결과 딕셔너리 (통계, Gantt Chart, 로그, 작업별 결과)
        """
        statistics = self.dispatcher.stats.calculate_averages()
        makespan = self.current_time
        capacity = makespan * self.num_cores
        statistics.update({
            'cpu_utilization': (self.cpu_busy_time / capacity * 100) if capacity > 0 else 0,
            'context_switches': self.context_switches,
            'preemptions': self.preemptions,
            'makespan': makespan,
        })

        return {
            'algorithm': self.name,
            'scheme': self.scheme.value,
            'cores': self.num_cores,
            'statistics': statistics,
            'gantt_chart': self.gantt_chart,
            'event_log': self.event_log,
            'jobs': self.build_job_results()
        }


def run_simulation(jobs: Sequence[JobSpec], num_cores: int = DEFAULT_CORES,
                   scheme: SchedulingScheme = SchedulingScheme.FCFS,
                   quantum: Number = DEFAULT_QUANTUM, verbose: bool = False) -> Dict:
    """트레이스 하나를 주어진 기법으로 시뮬레이션"""
    return Simulator(jobs, num_cores, scheme, quantum).run(verbose=verbose)

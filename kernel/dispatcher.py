"""
디스패처: 코어 배정 및 선점 결정

외부 드라이버가 시뮬레이션 시간과 함께 이벤트(도착, 완료, 타임 퀀텀 만료)를 전달하면
어느 작업이 어느 코어를 차지할지 결정하고 통계를 누적한다.
실제 실행은 하지 않는다.
"""

import math
from typing import Dict, List, Optional

from schedulers.schemes import SchedulingScheme
from .job import Job, JobState, Number
from .ordered_queue import OrderedQueue
from .stats import StatsAccumulator


class SchedulerError(RuntimeError):
    """디스패처 사용 규약 위반 (호출자 버그)"""


class Dispatcher:
    """
    스케줄러 코어
    고정된 개수의 코어, 대기 큐, 기법별 비교 함수를 소유한다
    """

    def __init__(self, num_cores: int, scheme: SchedulingScheme):
        """
        디스패처 초기화

        Args:
            num_cores: 코어 수 (양수). 코어는 0, 1, ..., num_cores-1 로 불린다
            scheme: 스케줄링 기법
        """
        if isinstance(num_cores, bool) or not isinstance(num_cores, int) or num_cores <= 0:
            raise ValueError(f"num_cores must be a positive integer: {num_cores!r}")
        if not isinstance(scheme, SchedulingScheme):
            raise ValueError(f"scheme must be a SchedulingScheme: {scheme!r}")

        self.num_cores = num_cores
        self.scheme = scheme
        self.cores: List[Optional[Job]] = [None] * num_cores
        self.queue: OrderedQueue[Job] = OrderedQueue(scheme.comparator)
        self.stats = StatsAccumulator()
        self._known_ids: Dict[int, Job] = {}
        self._closed = False

    # ------------------------------------------------------------------
    # 내부 도우미
    # ------------------------------------------------------------------

    def _ensure_open(self):
        if self._closed:
            raise SchedulerError("Dispatcher has been shut down")

    def _check_core(self, core_id: int):
        if isinstance(core_id, bool) or not isinstance(core_id, int) \
                or core_id < 0 or core_id >= self.num_cores:
            raise ValueError(f"core index out of range: {core_id!r} (cores={self.num_cores})")

    def refresh_running_jobs(self, now: Number):
        """실행 중인 모든 작업의 사용 시간/남은 시간을 현재 시각 기준으로 갱신"""
        for job in self.cores:
            if job is not None:
                job.advance(now)

    def _install(self, core_id: int, job: Job, now: Number):
        job.dispatch(now)
        self.cores[core_id] = job

    def _enqueue(self, job: Job) -> int:
        job.state = JobState.WAITING
        return self.queue.insert(job)

    def _dispatch_next(self, core_id: int, now: Number) -> Optional[int]:
        """대기 큐의 맨 앞 작업을 코어에 배치"""
        next_job = self.queue.pop_front()
        if next_job is None:
            return None
        self._install(core_id, next_job, now)
        return next_job.job_id

    def _select_victim(self) -> int:
        """
        선점 대상 코어 선택
        순위 값이 가장 나쁜 작업의 코어, 같으면 더 늦게 도착한 작업의 코어
        """
        rank = self.scheme.rank_key
        victim = 0
        for core_id in range(1, self.num_cores):
            current = self.cores[core_id]
            worst = self.cores[victim]
            if rank(current) > rank(worst):
                victim = core_id
            elif rank(current) == rank(worst) and current.arrival_time > worst.arrival_time:
                victim = core_id
        return victim

    # ------------------------------------------------------------------
    # 이벤트 진입점
    # ------------------------------------------------------------------

    def on_job_arrival(self, job_id: int, time: Number, running_time: Number,
                       priority: int) -> Optional[int]:
        """
        새 작업 도착

        유휴 코어가 여러 개면 번호가 가장 낮은 코어에 배정한다.
        선점형 기법에서는 가장 나쁜 실행 작업보다 새 작업이 엄격히 나을 때만 선점한다.

        Args:
            job_id: 작업 ID (전역적으로 유일)
            time: 현재 시뮬레이션 시간
            running_time: 총 실행 필요 시간
            priority: 우선순위 (낮을수록 높은 우선순위)

        Returns:
            작업이 배정된 코어 번호 (선점이면 희생 코어 번호)
            None: 스케줄링 변경 없음
        """
        self._ensure_open()
        if not math.isfinite(time):
            raise ValueError(f"time must be finite: {time!r}")
        if not math.isfinite(running_time) or running_time <= 0:
            raise ValueError(f"running_time must be positive: {running_time!r}")
        if job_id in self._known_ids:
            raise ValueError(f"duplicate job id: {job_id!r}")

        new_job = Job(job_id, time, running_time, priority)
        self._known_ids[job_id] = new_job

        self.refresh_running_jobs(time)

        for core_id, occupant in enumerate(self.cores):
            if occupant is None:
                self._install(core_id, new_job, time)
                return core_id

        if not self.scheme.preemptive:
            self._enqueue(new_job)
            return None

        victim_core = self._select_victim()
        victim = self.cores[victim_core]
        rank = self.scheme.rank_key
        if rank(victim) <= rank(new_job):
            self._enqueue(new_job)
            return None

        self._enqueue(victim)
        self._install(victim_core, new_job, time)
        return victim_core

    def on_job_finished(self, core_id: int, job_id: Optional[int], time: Number) -> Optional[int]:
        """
        작업 완료

        Args:
            core_id: 작업이 있던 코어 번호
            job_id: 완료된 작업 ID (None이면 검증 생략)
            time: 현재 시뮬레이션 시간

        Returns:
            해당 코어에서 다음에 실행할 작업 ID
            None: 코어 유휴
        """
        self._ensure_open()
        self._check_core(core_id)

        finished = self.cores[core_id]
        if finished is None:
            raise SchedulerError(f"core {core_id} has no running job")
        if job_id is not None and finished.job_id != job_id:
            raise SchedulerError(
                f"core {core_id} runs job {finished.job_id}, not job {job_id}")

        finished.advance(time)
        finished.state = JobState.FINISHED
        self.stats.record(finished, time)

        self.cores[core_id] = None
        del self._known_ids[finished.job_id]

        return self._dispatch_next(core_id, time)

    def on_quantum_expired(self, core_id: int, time: Number) -> Optional[int]:
        """
        타임 퀀텀 만료 (RR)

        코어의 작업을 대기 큐로 되돌리고 맨 앞 작업을 배치한다.
        큐가 비어있었다면 같은 작업이 다시 배치된다.

        Returns:
            해당 코어에서 다음에 실행할 작업 ID
            None: 코어 유휴
        """
        self._ensure_open()
        self._check_core(core_id)

        self.refresh_running_jobs(time)

        expired = self.cores[core_id]
        if expired is None:
            raise SchedulerError(f"quantum expired on idle core {core_id}")

        self._enqueue(expired)
        self.cores[core_id] = None

        return self._dispatch_next(core_id, time)

    # ------------------------------------------------------------------
    # 통계 및 상태 조회
    # ------------------------------------------------------------------

    def average_wait_time(self) -> float:
        """평균 대기 시간 (모든 작업 완료 후 유효)"""
        return self.stats.average_wait_time()

    def average_turnaround_time(self) -> float:
        """평균 반환 시간 (모든 작업 완료 후 유효)"""
        return self.stats.average_turnaround_time()

    def average_response_time(self) -> float:
        """평균 응답 시간 (모든 작업 완료 후 유효)"""
        return self.stats.average_response_time()

    def running_job_ids(self) -> List[Optional[int]]:
        return [job.job_id if job is not None else None for job in self.cores]

    def waiting_job_ids(self) -> List[int]:
        return [job.job_id for job in self.queue]

    def snapshot(self) -> Dict:
        """
        현재 상태 스냅샷 반환

        Returns:
            코어별 실행 작업, 대기 큐 순서, 완료 작업 수
        """
        return {
            'scheme': self.scheme.value,
            'cores': self.running_job_ids(),
            'waiting': self.waiting_job_ids(),
            'completed': self.stats.total_jobs,
        }

    def show_queue(self) -> str:
        """
        디버그용 큐 상태 문자열
        대기 작업은 예약 순서대로 id(-1), 실행 중인 작업은 id(코어 번호)
        """
        parts = [f"{job.job_id}(-1)" for job in self.queue]
        parts.extend(f"{job.job_id}({core_id})"
                     for core_id, job in enumerate(self.cores) if job is not None)
        return " ".join(parts)

    def shutdown(self):
        """디스패처가 소유한 모든 자원 해제 (마지막 호출)"""
        self._ensure_open()
        self.queue.clear()
        self.cores = [None] * self.num_cores
        self._known_ids.clear()
        self._closed = True

    @property
    def is_shut_down(self) -> bool:
        return self._closed

"""
작업(Job) 및 작업 상태 관리 모듈
"""

from enum import Enum
from typing import Optional, Union

Number = Union[int, float]


class JobState(Enum):
    """작업 상태"""
    WAITING = "Waiting"
    RUNNING = "Running"
    FINISHED = "Finished"


class Job:
    """
    스케줄링 단위 작업
    디스패처가 도착부터 완료까지 단독으로 소유한다
    """

    def __init__(self, job_id: int, arrival_time: Number, needed_time: Number, priority: int):
        """
        작업 초기화

        Args:
            job_id: 호출자가 부여한 작업 ID
            arrival_time: 도착 시간 (작업 간 유일)
            needed_time: 총 필요 실행 시간
            priority: 우선순위 (낮을수록 높은 우선순위)
        """
        self.job_id = job_id
        self.arrival_time = arrival_time
        self.needed_time = needed_time
        self.priority = priority

        # 실행 시간 추적
        self.used_time: Number = 0
        self.remaining_time: Number = needed_time
        self.last_start_time: Number = arrival_time

        # 첫 배치 시점의 응답 지연 (한 번만 기록)
        self.first_dispatch_latency: Optional[Number] = None

        self.state = JobState.WAITING

    def dispatch(self, now: Number):
        """코어에 배치 (최초 배치라면 응답 지연 기록)"""
        if self.first_dispatch_latency is None:
            self.first_dispatch_latency = now - self.arrival_time
        self.last_start_time = now
        self.state = JobState.RUNNING

    def advance(self, now: Number):
        """마지막 시작 이후 실행된 시간을 반영"""
        self.used_time += now - self.last_start_time
        self.remaining_time = self.needed_time - self.used_time
        self.last_start_time = now

    def response_latency(self) -> Number:
        """응답 지연 (아직 배치되지 않았다면 0)"""
        return self.first_dispatch_latency if self.first_dispatch_latency is not None else 0

    def __repr__(self):
        return f"J{self.job_id}[{self.state.value}]"

    def __str__(self):
        return f"Job {self.job_id}: State={self.state.value}, Priority={self.priority}, " \
               f"Remaining={self.remaining_time}"

"""
스케줄링 통계 누적 모듈
"""

from typing import Dict

from .job import Job, Number


class StatsAccumulator:
    """완료된 작업의 대기/반환/응답 시간 누적"""

    def __init__(self):
        self.total_jobs = 0
        self.total_wait = 0.0
        self.total_turnaround = 0.0
        self.total_response = 0.0

    def record(self, job: Job, finish_time: Number):
        """
        완료된 작업의 통계 반영

        대기 시간 = 반환 시간 - 필요 실행 시간
        응답 시간 = 최초 배치 시점의 지연 (작업당 한 번)
        """
        turnaround = finish_time - job.arrival_time
        self.total_jobs += 1
        self.total_wait += turnaround - job.needed_time
        self.total_turnaround += turnaround
        self.total_response += job.response_latency()

    def average_wait_time(self) -> float:
        if self.total_jobs == 0:
            return 0.0
        return self.total_wait / self.total_jobs

    def average_turnaround_time(self) -> float:
        if self.total_jobs == 0:
            return 0.0
        return self.total_turnaround / self.total_jobs

    def average_response_time(self) -> float:
        if self.total_jobs == 0:
            return 0.0
        return self.total_response / self.total_jobs

    def calculate_averages(self) -> Dict[str, float]:
        """평균 계산"""
        return {
            'avg_waiting_time': self.average_wait_time(),
            'avg_turnaround_time': self.average_turnaround_time(),
            'avg_response_time': self.average_response_time(),
        }

"""
작업 트레이스 파서 및 작업 생성 모듈
"""

import math
import random
from typing import List, Optional

from simulation.engine import JobSpec


class TraceFormatError(ValueError):
    """트레이스 파일 형식 오류"""

    def __init__(self, line_number: int, message: str):
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number


def _parse_number(text: str):
    """정수 우선, 실패하면 실수로 변환"""
    try:
        return int(text)
    except ValueError:
        return float(text)


class TraceParser:
    """트레이스 파일 파서"""

    @staticmethod
    def parse_file(filename: str) -> List[JobSpec]:
        """
        파일에서 작업 정보 읽기

        파일 형식 (둘 중 하나):
            도착시간,실행시간,우선순위          → 작업 ID는 파일 순서대로 0, 1, 2, ...
            작업ID,도착시간,실행시간,우선순위

        Args:
            filename: 입력 파일 경로

        Returns:
            작업 리스트

        Raises:
            TraceFormatError: 형식 오류 (줄 번호 포함)
            FileNotFoundError: 파일 없음
        """
        with open(filename, 'r', encoding='utf-8') as f:
            return TraceParser.parse_lines(f)

    @staticmethod
    def parse_lines(lines) -> List[JobSpec]:
        """문자열 줄 목록에서 작업 리스트 생성"""
        jobs = []
        next_id = 0
        seen_ids = set()
        seen_arrivals = set()

        for line_number, raw in enumerate(lines, 1):
            line = raw.strip()

            # 주석 및 빈 줄 제거
            if not line or line.startswith('#'):
                continue

            parts = [part.strip() for part in line.split(',')]
            try:
                values = [_parse_number(part) for part in parts]
            except ValueError:
                raise TraceFormatError(line_number, f"숫자 필드 변환 오류: {line}") from None

            if len(values) == 3:
                job_id = next_id
                arrival_time, running_time, priority = values
            elif len(values) == 4:
                job_id, arrival_time, running_time, priority = values
            else:
                raise TraceFormatError(
                    line_number, f"3개 또는 4개 필드가 필요하지만 {len(values)}개가 있습니다")

            if not isinstance(job_id, int) or not isinstance(priority, int):
                raise TraceFormatError(line_number, "작업 ID와 우선순위는 정수여야 합니다")
            if not math.isfinite(arrival_time) or not math.isfinite(running_time):
                raise TraceFormatError(line_number, f"시간 값은 유한한 숫자여야 합니다: {line}")
            if arrival_time < 0:
                raise TraceFormatError(line_number, f"도착 시간은 0 이상이어야 합니다: {arrival_time}")
            if running_time <= 0:
                raise TraceFormatError(line_number, f"실행 시간은 양수여야 합니다: {running_time}")

            if job_id in seen_ids:
                raise TraceFormatError(line_number, f"중복된 작업 ID: {job_id}")
            if arrival_time in seen_arrivals:
                raise TraceFormatError(line_number, f"중복된 도착 시간: {arrival_time}")
            seen_ids.add(job_id)
            seen_arrivals.add(arrival_time)

            jobs.append(JobSpec(job_id, arrival_time, running_time, priority))
            next_id = job_id + 1

        return jobs

    @staticmethod
    def generate_random_jobs(num_jobs: int = 10,
                             max_arrival: int = 30,
                             max_burst: int = 10,
                             max_priority: int = 5,
                             seed: Optional[int] = None) -> List[JobSpec]:
        """
        랜덤 작업 생성 (도착 시간은 서로 다름)

        Args:
            num_jobs: 생성할 작업 수
            max_arrival: 최대 도착 시간
            max_burst: 최대 실행 시간
            max_priority: 최대 우선순위 값
            seed: 랜덤 시드

        Returns:
            작업 리스트
        """
        if num_jobs > max_arrival + 1:
            raise ValueError("max_arrival must allow a unique arrival time per job")

        rng = random.Random(seed)
        arrivals = sorted(rng.sample(range(max_arrival + 1), num_jobs))

        return [
            JobSpec(job_id, arrival, rng.randint(1, max_burst), rng.randint(0, max_priority))
            for job_id, arrival in enumerate(arrivals)
        ]

    @staticmethod
    def save_jobs_to_file(jobs: List[JobSpec], filename: str):
        """
        작업 리스트를 파일로 저장 (4필드 형식)

        Args:
            jobs: 저장할 작업 리스트
            filename: 출력 파일 경로
        """
        with open(filename, 'w', encoding='utf-8') as f:
            f.write("# CPU Scheduling Kernel Trace\n")
            f.write("# Format: JobID,ArrivalTime,RunningTime,Priority\n\n")

            for job in jobs:
                f.write(f"{job.job_id},{job.arrival_time},{job.running_time},{job.priority}\n")

        print(f"{len(jobs)}개의 작업을 {filename}에 저장했습니다")

    @staticmethod
    def print_job_summary(jobs: List[JobSpec]):
        """작업 요약 정보 출력"""
        print("\n" + "="*60)
        print("작업 요약")
        print("="*60)
        print(f"{'ID':<6} {'도착시간':>10} {'실행시간':>10} {'우선순위':>10}")
        print("-"*60)

        for job in sorted(jobs, key=lambda j: j.arrival_time):
            print(f"{job.job_id:<6} {job.arrival_time:>10} {job.running_time:>10} {job.priority:>10}")

        print("="*60)
        total = sum(job.running_time for job in jobs)
        print(f"전체 작업: {len(jobs)}개, 총 실행 시간: {total}\n")

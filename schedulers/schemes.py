"""
스케줄링 기법 정의
- FCFS (First-Come, First-Served)
- RR (Round Robin)
- SJF / PSJF (Shortest Job First - 비선점 / 선점)
- PRI / PPRI (Priority - 비선점 / 선점)

각 기법은 대기 큐의 비교 함수와 선점 여부, 희생 코어 선택 기준을 결정한다.
"""

from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Optional

if TYPE_CHECKING:
    from kernel.job import Job, Number


def _cmp(a: 'Number', b: 'Number') -> int:
    return (a > b) - (a < b)


def fcfs_compare(a: 'Job', b: 'Job') -> int:
    """도착 시간 오름차순"""
    return _cmp(a.arrival_time, b.arrival_time)


def rr_compare(a: 'Job', b: 'Job') -> int:
    """항상 기존 원소들 뒤에 삽입 (FIFO)"""
    return 1


def sjf_compare(a: 'Job', b: 'Job') -> int:
    """남은 시간 오름차순, 같으면 먼저 도착한 작업"""
    result = _cmp(a.remaining_time, b.remaining_time)
    if result == 0:
        return _cmp(a.arrival_time, b.arrival_time)
    return result


def pri_compare(a: 'Job', b: 'Job') -> int:
    """우선순위 값 오름차순, 같으면 먼저 도착한 작업"""
    result = _cmp(a.priority, b.priority)
    if result == 0:
        return _cmp(a.arrival_time, b.arrival_time)
    return result


def _remaining_key(job: 'Job') -> 'Number':
    return job.remaining_time


def _priority_key(job: 'Job') -> 'Number':
    return job.priority


class SchedulingScheme(Enum):
    """스케줄링 기법 (초기화 시 한 번 선택, 이후 불변)"""
    FCFS = "FCFS"
    RR = "RR"
    SJF = "SJF"
    PSJF = "PSJF"
    PRI = "PRI"
    PPRI = "PPRI"

    @property
    def comparator(self) -> Callable[['Job', 'Job'], int]:
        return _COMPARATORS[self]

    @property
    def preemptive(self) -> bool:
        """도착 이벤트로 실행 중인 작업을 선점할 수 있는지"""
        return self in (SchedulingScheme.PSJF, SchedulingScheme.PPRI)

    @property
    def rank_key(self) -> Optional[Callable[['Job'], 'Number']]:
        """희생 코어 선택 기준 (값이 클수록 나쁨), 비선점 기법은 None"""
        if self is SchedulingScheme.PSJF:
            return _remaining_key
        if self is SchedulingScheme.PPRI:
            return _priority_key
        return None

    @property
    def description(self) -> str:
        return SCHEME_DESCRIPTIONS[self]

    @classmethod
    def parse(cls, name: str) -> 'SchedulingScheme':
        """이름으로 기법 조회 (대소문자 무시)"""
        key = name.strip().upper()
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown scheduling scheme: {name}") from None


_COMPARATORS: Dict[SchedulingScheme, Callable[['Job', 'Job'], int]] = {
    SchedulingScheme.FCFS: fcfs_compare,
    SchedulingScheme.RR: rr_compare,
    SchedulingScheme.SJF: sjf_compare,
    SchedulingScheme.PSJF: sjf_compare,
    SchedulingScheme.PRI: pri_compare,
    SchedulingScheme.PPRI: pri_compare,
}

SCHEME_DESCRIPTIONS: Dict[SchedulingScheme, str] = {
    SchedulingScheme.FCFS: "FCFS (First-Come, First-Served)",
    SchedulingScheme.RR: "Round Robin",
    SchedulingScheme.SJF: "SJF (Shortest Job First)",
    SchedulingScheme.PSJF: "PSJF (Preemptive Shortest Job First)",
    SchedulingScheme.PRI: "Priority (Non-preemptive)",
    SchedulingScheme.PPRI: "Priority (Preemptive)",
}

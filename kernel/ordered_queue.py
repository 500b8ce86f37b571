"""
비교 함수 기반 정렬 대기 큐
스케줄링 정책과 무관한 범용 컨테이너: 순서는 전적으로 비교 함수가 결정한다
"""

from typing import Callable, Generic, Iterator, List, Optional, TypeVar

T = TypeVar('T')

Comparator = Callable[[T, T], int]


class OrderedQueue(Generic[T]):
    """
    정렬 대기 큐

    cmp(a, b) < 0 이면 a가 b보다 앞에 온다.
    비교 결과가 같은 원소들은 삽입 순서를 유지한다 (안정 정렬).
    """

    def __init__(self, comparator: Comparator):
        self._compare = comparator
        self._items: List[T] = []

    def insert(self, item: T) -> int:
        """
        원소 삽입

        앞에서부터 탐색하여 cmp(item, e) < 0 인 첫 원소 e 바로 앞에 넣는다.
        그런 원소가 없으면 맨 뒤에 붙인다.

        Returns:
            삽입된 위치 (0부터 시작)
        """
        for index, existing in enumerate(self._items):
            if self._compare(item, existing) < 0:
                self._items.insert(index, item)
                return index

        self._items.append(item)
        return len(self._items) - 1

    def peek_front(self) -> Optional[T]:
        """맨 앞 원소 조회 (비어있으면 None)"""
        if not self._items:
            return None
        return self._items[0]

    def pop_front(self) -> Optional[T]:
        """맨 앞 원소 제거 후 반환 (비어있으면 None)"""
        if not self._items:
            return None
        return self._items.pop(0)

    def at(self, position: int) -> Optional[T]:
        """해당 위치의 원소 (범위 밖이면 None)"""
        if position < 0 or position >= len(self._items):
            return None
        return self._items[position]

    def remove_all_matching(self, item: T) -> int:
        """
        동일 객체(is)인 원소를 모두 제거
        비교 함수는 사용하지 않는다

        Returns:
            제거된 원소 개수
        """
        kept = [existing for existing in self._items if existing is not item]
        removed = len(self._items) - len(kept)
        self._items = kept
        return removed

    def remove_at(self, position: int) -> Optional[T]:
        """해당 위치의 원소 제거 후 반환, 뒤 원소들은 한 칸씩 당겨진다"""
        if position < 0 or position >= len(self._items):
            return None
        return self._items.pop(position)

    def size(self) -> int:
        return len(self._items)

    def clear(self):
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def __contains__(self, item) -> bool:
        return any(existing is item for existing in self._items)

    def __repr__(self):
        return f"OrderedQueue({self._items!r})"

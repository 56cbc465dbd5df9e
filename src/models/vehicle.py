"""
주차장 내 차량을 나타내는 모델 클래스

차량은 도착 시점에 중립 상태로 생성되고, 대기열 진입/이탈, 주차/출차 전이를
거쳐 보관(archive) 상태로 끝납니다. 모든 전이는 현재 상태를 검사하며, 허용되지
않는 전이는 아무것도 바꾸지 않고 예외를 발생시킵니다.
"""
from typing import Dict, Optional, Set
from dataclasses import dataclass, field
from enum import Enum

from src.config import MAXIMUM_QUEUE_TIME, MINIMUM_STAY
from src.models.exceptions import (
    IllegalTransition, InvalidArrival, InvalidDuration, InvalidTiming
)


class VehicleCategory(Enum):
    """차량 유형 (값은 상태 표기 코드)"""
    REGULAR_CAR = "C"
    SMALL_CAR = "S"
    MOTORCYCLE = "M"

    @property
    def code(self) -> str:
        return self.value


class VehicleState(Enum):
    """차량 생애주기 상태"""
    NEUTRAL = "neutral"    # 도착 직후
    QUEUED = "queued"      # 대기열
    DEQUEUED = "dequeued"  # 대기열 이탈 직후 (주차 또는 보관 대기)
    PARKED = "parked"      # 주차 중
    ARCHIVED = "archived"  # 종료


# 상태별 허용 전이
TRANSITIONS: Dict[VehicleState, Set[VehicleState]] = {
    VehicleState.NEUTRAL: {VehicleState.QUEUED, VehicleState.PARKED, VehicleState.ARCHIVED},
    VehicleState.QUEUED: {VehicleState.DEQUEUED},
    VehicleState.DEQUEUED: {VehicleState.PARKED, VehicleState.ARCHIVED},
    VehicleState.PARKED: {VehicleState.ARCHIVED},
    VehicleState.ARCHIVED: set(),
}


@dataclass(eq=False)
class Vehicle:
    """주차장에 도착한 차량 한 대"""
    vehicle_id: str  # 차량 ID (C12, S40, M7 형식)
    category: VehicleCategory  # 차량 유형
    arrival_time: int  # 도착 시각 (틱, 0보다 커야 함)
    intended_duration: Optional[int] = None  # 도착 시 희망한 주차 시간
    space: Optional[VehicleCategory] = None  # 실제 점유한 주차면 유형 (주차장이 관리)
    _state: VehicleState = field(default=VehicleState.NEUTRAL, init=False, repr=False)
    _parking_time: int = field(default=0, init=False, repr=False)
    _departure_time: int = field(default=0, init=False, repr=False)
    _exit_queue_time: int = field(default=0, init=False, repr=False)
    _satisfied: bool = field(default=False, init=False, repr=False)
    _was_parked: bool = field(default=False, init=False, repr=False)
    _was_queued: bool = field(default=False, init=False, repr=False)
    _rejected: bool = field(default=False, init=False, repr=False)

    def __post_init__(self):
        """초기화 이후 값 검증"""
        if not isinstance(self.category, VehicleCategory):
            try:
                self.category = VehicleCategory(self.category)
            except ValueError:
                raise ValueError(f"Unknown vehicle category: {self.category!r}") from None

        if self.arrival_time <= 0:
            raise InvalidArrival(
                f"Vehicle {self.vehicle_id}: arrival time must be positive, got {self.arrival_time}"
            )

    # ------------------------------------------------------------------
    # 상태 전이
    # ------------------------------------------------------------------
    def _require(self, target: VehicleState) -> None:
        if target not in TRANSITIONS[self._state]:
            raise IllegalTransition(
                f"Vehicle {self.vehicle_id}: illegal transition "
                f"{self._state.value} -> {target.value}"
            )

    def check_queued_entry(self) -> None:
        """대기열 진입 가능 여부를 검사합니다 (상태 변경 없음)."""
        self._require(VehicleState.QUEUED)

    def enter_queued_state(self) -> None:
        """
        대기열 상태로 전이합니다.

        Raises:
            IllegalTransition: 이미 대기 중이거나 주차 중인 경우
        """
        self.check_queued_entry()
        self._state = VehicleState.QUEUED
        self._was_queued = True

    def exit_queued_state(self, exit_time: int, max_queue_time: int = MAXIMUM_QUEUE_TIME) -> None:
        """
        대기열에서 이탈합니다.

        대기 시간(exit_time - arrival_time)이 max_queue_time 이상이면
        불만족 처리됩니다.

        Args:
            exit_time: 대기열 이탈 시각
            max_queue_time: 최대 허용 대기 시간

        Raises:
            IllegalTransition: 대기 중이 아니거나 주차 중인 경우
            InvalidTiming: exit_time이 도착 시각보다 늦지 않은 경우
        """
        self._require(VehicleState.DEQUEUED)
        if exit_time <= self.arrival_time:
            raise InvalidTiming(
                f"Vehicle {self.vehicle_id}: queue exit at {exit_time} "
                f"is not later than arrival at {self.arrival_time}"
            )

        self._state = VehicleState.DEQUEUED
        self._exit_queue_time = exit_time
        if exit_time - self.arrival_time >= max_queue_time:
            self._satisfied = False

    def check_parked_entry(self, parking_time: int, intended_duration: int,
                           minimum_stay: int = MINIMUM_STAY) -> None:
        """주차 가능 여부를 검사합니다 (상태 변경 없음)."""
        self._require(VehicleState.PARKED)
        if parking_time < 0:
            raise InvalidTiming(
                f"Vehicle {self.vehicle_id}: parking time must not be negative, got {parking_time}"
            )
        if intended_duration < minimum_stay:
            raise InvalidDuration(
                f"Vehicle {self.vehicle_id}: intended duration {intended_duration} "
                f"is below the minimum stay {minimum_stay}"
            )

    def enter_parked_state(self, parking_time: int, intended_duration: int,
                           minimum_stay: int = MINIMUM_STAY) -> None:
        """
        주차 상태로 전이합니다.

        Args:
            parking_time: 주차 시각
            intended_duration: 주차 예정 시간 (parking_time + intended_duration = 출차 예정 시각)
            minimum_stay: 최소 주차 시간

        Raises:
            IllegalTransition: 이미 주차 중이거나 대기 중인 경우
            InvalidTiming: parking_time < 0
            InvalidDuration: intended_duration < minimum_stay
        """
        self.check_parked_entry(parking_time, intended_duration, minimum_stay)
        self._state = VehicleState.PARKED
        self._parking_time = parking_time
        self._departure_time = parking_time + intended_duration
        self._satisfied = True
        self._was_parked = True

    def exit_parked_state(self, departure_time: int) -> None:
        """
        출차합니다. 출차한 차량은 보관 상태가 됩니다.

        Raises:
            IllegalTransition: 주차 중이 아니거나 대기 중인 경우
            InvalidTiming: departure_time < parking_time
        """
        if self._state is not VehicleState.PARKED:
            raise IllegalTransition(
                f"Vehicle {self.vehicle_id}: cannot leave the car park while {self._state.value}"
            )
        if departure_time < self._parking_time:
            raise InvalidTiming(
                f"Vehicle {self.vehicle_id}: departure at {departure_time} "
                f"precedes parking at {self._parking_time}"
            )

        self._state = VehicleState.ARCHIVED
        self._departure_time = departure_time

    def archive(self) -> None:
        """대기열을 떠난 뒤 주차하지 못한 차량을 보관 상태로 전이합니다."""
        if self._state is not VehicleState.DEQUEUED:
            raise IllegalTransition(
                f"Vehicle {self.vehicle_id}: only vehicles that left the queue can be archived "
                f"(state: {self._state.value})"
            )
        self._state = VehicleState.ARCHIVED

    def reject(self) -> None:
        """대기열이 가득 차 입차하지 못하고 바로 떠나는 차량을 처리합니다."""
        if self._state is not VehicleState.NEUTRAL:
            raise IllegalTransition(
                f"Vehicle {self.vehicle_id}: only newly arrived vehicles can be turned away "
                f"(state: {self._state.value})"
            )
        self._state = VehicleState.ARCHIVED
        self._rejected = True

    # ------------------------------------------------------------------
    # 조회
    # ------------------------------------------------------------------
    @property
    def state(self) -> VehicleState:
        return self._state

    @property
    def parked(self) -> bool:
        return self._state is VehicleState.PARKED

    @property
    def queued(self) -> bool:
        return self._state is VehicleState.QUEUED

    @property
    def archived(self) -> bool:
        return self._state is VehicleState.ARCHIVED

    @property
    def rejected(self) -> bool:
        return self._rejected

    @property
    def satisfied(self) -> bool:
        return self._satisfied

    @property
    def was_parked(self) -> bool:
        return self._was_parked

    @property
    def was_queued(self) -> bool:
        return self._was_queued

    @property
    def parking_time(self) -> int:
        """주차 시각 (주차 전에는 0)"""
        return self._parking_time

    @property
    def departure_time(self) -> int:
        """주차 중에는 출차 예정 시각, 출차 후에는 실제 출차 시각"""
        return self._departure_time

    @property
    def exit_queue_time(self) -> int:
        return self._exit_queue_time

    @property
    def queuing_time(self) -> int:
        """대기열에서 보낸 시간 (대기한 적이 없으면 0)"""
        if not self._was_queued or self._state is VehicleState.QUEUED:
            return 0
        return self._exit_queue_time - self.arrival_time

    @property
    def stay(self) -> int:
        return self._departure_time - self._parking_time if self._was_parked else 0

    def __str__(self) -> str:
        """보관 기록용 차량 정보"""
        lines = [
            f"Vehicle vehID: {self.vehicle_id}",
            f"Arrival Time: {self.arrival_time}",
        ]
        if self._was_queued:
            lines.append(f"Exit from Queue: {self._exit_queue_time}")
            lines.append(f"Queuing Time: {self.queuing_time}")
        else:
            lines.append("Vehicle was not queued")

        if self._was_parked:
            lines.append(f"Entry to Car Park: {self._parking_time}")
            lines.append(f"Exit from Car Park: {self._departure_time}")
            lines.append(f"Parking Time: {self.stay}")
        else:
            lines.append("Vehicle was not parked")

        if self._satisfied:
            lines.append("Customer was satisfied")
        else:
            lines.append("Customer was not satisfied")
        return "\n".join(lines)

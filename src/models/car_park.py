"""
주차장 관리자 모듈

주차장은 차량 유형별 주차 구역(일반/소형/오토바이), 대기열, 보관 목록을 소유하며,
차량의 상태 전이를 호출하면서 구역/대기열 소속을 상태와 일치시킵니다.

주차 정책:
    - 일반 차량: 일반 주차면만 사용
    - 소형차: 소형차 주차면, 없으면 일반 주차면
    - 오토바이: 오토바이 주차면, 없으면 소형차 주차면
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from src.config import (
    DEFAULT_INTENDED_STAY,
    DEFAULT_MAX_CAR_SPACES,
    DEFAULT_MAX_MOTORCYCLE_SPACES,
    DEFAULT_MAX_QUEUE_SIZE,
    DEFAULT_MAX_SMALL_CAR_SPACES,
    MAXIMUM_QUEUE_TIME,
    MINIMUM_STAY,
    STATE_ARCHIVED,
    STATE_NEW,
    STATE_PARKED,
    STATE_QUEUED,
)
from src.models.exceptions import (
    InvalidDuration, NoSpaceAvailable, QueueFull, SimulationError
)
from src.models.vehicle import Vehicle, VehicleCategory, VehicleState

# 차량 유형별 사용 가능한 주차면 (우선순위 순)
ADMISSIBLE_SPACES: Dict[VehicleCategory, Tuple[VehicleCategory, ...]] = {
    VehicleCategory.REGULAR_CAR: (VehicleCategory.REGULAR_CAR,),
    VehicleCategory.SMALL_CAR: (VehicleCategory.SMALL_CAR, VehicleCategory.REGULAR_CAR),
    VehicleCategory.MOTORCYCLE: (VehicleCategory.MOTORCYCLE, VehicleCategory.SMALL_CAR),
}

# 전이 결과별 이벤트 이름
EVENT_NAMES = {
    (STATE_NEW, STATE_PARKED): "park",
    (STATE_NEW, STATE_QUEUED): "queue",
    (STATE_NEW, STATE_ARCHIVED): "reject",
    (STATE_QUEUED, STATE_PARKED): "queue_park",
    (STATE_QUEUED, STATE_ARCHIVED): "queue_fail",
    (STATE_PARKED, STATE_ARCHIVED): "depart",
}


@dataclass(frozen=True)
class Transition:
    """차량 상태 변화 알림 (|C:N>P| 형식으로 표기)"""
    time: int
    vehicle_id: str
    code: str
    source: str
    target: str

    @property
    def event(self) -> str:
        return EVENT_NAMES[(self.source, self.target)]

    def __str__(self) -> str:
        return f"|{self.code}:{self.source}>{self.target}|"


class CarPark:
    """주차장 관리자 클래스"""

    def __init__(self,
                 max_car_spaces: int = DEFAULT_MAX_CAR_SPACES,
                 max_small_car_spaces: int = DEFAULT_MAX_SMALL_CAR_SPACES,
                 max_motorcycle_spaces: int = DEFAULT_MAX_MOTORCYCLE_SPACES,
                 max_queue_size: int = DEFAULT_MAX_QUEUE_SIZE,
                 max_queue_time: int = MAXIMUM_QUEUE_TIME,
                 minimum_stay: int = MINIMUM_STAY,
                 default_intended_stay: int = DEFAULT_INTENDED_STAY):
        """
        주차장 관리자 초기화

        Args:
            max_car_spaces: 일반 차량 주차면 수
            max_small_car_spaces: 소형차 주차면 수
            max_motorcycle_spaces: 오토바이 주차면 수
            max_queue_size: 대기열 최대 길이
            max_queue_time: 대기열 최대 대기 시간
            minimum_stay: 최소 주차 시간
            default_intended_stay: 주차 시간이 지정되지 않은 차량의 주차 시간
        """
        for name, value in (("max_car_spaces", max_car_spaces),
                            ("max_small_car_spaces", max_small_car_spaces),
                            ("max_motorcycle_spaces", max_motorcycle_spaces),
                            ("max_queue_size", max_queue_size)):
            if value < 0:
                raise ValueError(f"{name} must not be negative, got {value}")
        if max_queue_time <= 0:
            raise ValueError(f"max_queue_time must be positive, got {max_queue_time}")

        self.capacities: Dict[VehicleCategory, int] = {
            VehicleCategory.REGULAR_CAR: max_car_spaces,
            VehicleCategory.SMALL_CAR: max_small_car_spaces,
            VehicleCategory.MOTORCYCLE: max_motorcycle_spaces,
        }
        self.max_queue_size = max_queue_size
        self.max_queue_time = max_queue_time
        self.minimum_stay = minimum_stay
        self.default_intended_stay = default_intended_stay

        # 차량 유형별 주차 구역 (소속은 차량 유형 기준)
        self._pools: Dict[VehicleCategory, List[Vehicle]] = {c: [] for c in VehicleCategory}
        # 주차면 유형별 점유 수 (용량 판단 기준)
        self._occupied: Dict[VehicleCategory, int] = {c: 0 for c in VehicleCategory}

        self._queue: List[Vehicle] = []
        self._archive: List[Vehicle] = []
        self._transitions: List[Transition] = []

        # 통계
        self.count = 0             # 생성한 차량 수
        self.num_dissatisfied = 0  # 대기 시간 초과로 떠난 차량 수
        self.num_rejected = 0      # 대기열이 가득 차 돌아간 차량 수

        self.logger = None

    def set_logger(self, logger) -> None:
        """로거 설정"""
        self.logger = logger

    @property
    def max_car_spaces(self) -> int:
        return self.capacities[VehicleCategory.REGULAR_CAR]

    @property
    def max_small_car_spaces(self) -> int:
        return self.capacities[VehicleCategory.SMALL_CAR]

    @property
    def max_motorcycle_spaces(self) -> int:
        return self.capacities[VehicleCategory.MOTORCYCLE]

    # ------------------------------------------------------------------
    # 차량 생성
    # ------------------------------------------------------------------
    def create_vehicle(self, category: VehicleCategory, time: int,
                       intended_duration: Optional[int] = None) -> Vehicle:
        """
        도착한 차량을 생성합니다. ID는 유형 코드 + 생성 순번입니다.

        Raises:
            InvalidArrival: time <= 0
        """
        vehicle = Vehicle(
            vehicle_id=f"{VehicleCategory(category).code}{self.count + 1}",
            category=category,
            arrival_time=time,
            intended_duration=intended_duration,
        )
        self.count += 1
        return vehicle

    # ------------------------------------------------------------------
    # 용량 조회
    # ------------------------------------------------------------------
    def _select_space(self, category: VehicleCategory) -> Optional[VehicleCategory]:
        for space in ADMISSIBLE_SPACES[category]:
            if self._occupied[space] < self.capacities[space]:
                return space
        return None

    def capacity_available(self, category: VehicleCategory) -> bool:
        """해당 유형의 차량이 지금 주차할 수 있는지 확인"""
        return self._select_space(VehicleCategory(category)) is not None

    def occupied_spaces(self, space: VehicleCategory) -> int:
        """주차면 유형별 점유 수 반환"""
        return self._occupied[space]

    # ------------------------------------------------------------------
    # 주차 / 출차
    # ------------------------------------------------------------------
    def park(self, vehicle: Vehicle, time: int, intended_duration: int) -> None:
        """
        차량을 주차합니다.

        차량은 자신의 유형 구역에 등록되며, 실제로 점유한 주차면 유형은
        vehicle.space에 기록됩니다.

        Args:
            vehicle: 주차할 차량
            time: 현재 시각
            intended_duration: 주차 예정 시간

        Raises:
            VehicleError: 차량 상태 전이 실패
            NoSpaceAvailable: 사용 가능한 주차면이 없는 경우
        """
        space = self._select_space(vehicle.category)
        if space is None:
            # 상태 오류가 있으면 그쪽이 먼저 드러나야 함
            vehicle.check_parked_entry(time, intended_duration, self.minimum_stay)
            raise NoSpaceAvailable(
                f"Vehicle {vehicle.vehicle_id}: no {vehicle.category.name.lower()} space available"
            )

        source = self._state_code(vehicle)
        vehicle.enter_parked_state(time, intended_duration, self.minimum_stay)
        vehicle.space = space
        self._occupied[space] += 1
        self._pools[vehicle.category].append(vehicle)
        self._notify(vehicle, source, STATE_PARKED, time)

    def _unpark(self, vehicle: Vehicle, time: int) -> None:
        vehicle.exit_parked_state(time)
        self._pools[vehicle.category].remove(vehicle)
        self._occupied[vehicle.space] -= 1
        self._archive.append(vehicle)
        self._notify(vehicle, STATE_PARKED, STATE_ARCHIVED, time)

    def process_departures(self, time: int, force: bool = False) -> List[Vehicle]:
        """
        출차 시각이 된 차량(force이면 전체)을 출차시키고 보관 목록에 추가합니다.

        Returns:
            출차한 차량 목록
        """
        departing = [
            vehicle
            for category in VehicleCategory
            for vehicle in self._pools[category]
            if force or time >= vehicle.departure_time
        ]
        for vehicle in departing:
            self._unpark(vehicle, time)
        return departing

    # ------------------------------------------------------------------
    # 대기열
    # ------------------------------------------------------------------
    def enqueue(self, vehicle: Vehicle, time: Optional[int] = None) -> None:
        """
        차량을 대기열 끝에 추가합니다.

        Args:
            vehicle: 대기할 차량
            time: 현재 시각 (없으면 도착 시각)

        Raises:
            VehicleError: 차량 상태 전이 실패
            QueueFull: 대기열이 가득 찬 경우
        """
        vehicle.check_queued_entry()
        if self.queue_full():
            raise QueueFull(
                f"Vehicle {vehicle.vehicle_id}: queue is full ({self.max_queue_size})"
            )
        vehicle.enter_queued_state()
        self._queue.append(vehicle)
        self._notify(vehicle, STATE_NEW, STATE_QUEUED,
                     vehicle.arrival_time if time is None else time)

    def dequeue_and_resolve(self, vehicle: Vehicle, exit_time: int) -> None:
        """
        차량을 대기열에서 꺼냅니다. 이후 주차하거나 보관 처리합니다.

        Raises:
            VehicleError: 차량 상태 전이 실패 또는 시간 제약 위반
            SimulationError: 다른 주차장의 대기열에 있는 차량인 경우
        """
        if vehicle.queued and vehicle not in self._queue:
            raise SimulationError(f"Vehicle {vehicle.vehicle_id} is not in this queue")
        vehicle.exit_queued_state(exit_time, self.max_queue_time)
        self._queue.remove(vehicle)

    def _archive_from_queue(self, vehicle: Vehicle, time: int) -> None:
        self.dequeue_and_resolve(vehicle, time)
        vehicle.archive()
        self._archive.append(vehicle)
        self.num_dissatisfied += 1
        self._notify(vehicle, STATE_QUEUED, STATE_ARCHIVED, time)

    def evict_stale_queue_entries(self, time: int) -> List[Vehicle]:
        """
        최대 대기 시간 이상 기다린 차량을 대기열에서 내보내고 보관합니다.

        Returns:
            내보낸 차량 목록
        """
        stale = [v for v in self._queue if time - v.arrival_time >= self.max_queue_time]
        for vehicle in stale:
            self._archive_from_queue(vehicle, time)
        return stale

    def admit_from_queue(self, time: int) -> List[Vehicle]:
        """
        대기열을 앞에서부터 한 번 훑으며 주차 가능한 차량을 주차시킵니다.

        주차하지 못한 차량은 순서를 유지한 채 대기열에 남습니다.

        Returns:
            주차한 차량 목록
        """
        admitted = []
        for vehicle in list(self._queue):
            if not self.capacity_available(vehicle.category):
                continue
            duration = self._intended_stay(vehicle)
            self.dequeue_and_resolve(vehicle, time)
            self.park(vehicle, time, duration)
            admitted.append(vehicle)
        return admitted

    # ------------------------------------------------------------------
    # 신규 도착
    # ------------------------------------------------------------------
    def _intended_stay(self, vehicle: Vehicle, intended_duration: Optional[int] = None) -> int:
        if intended_duration is None:
            intended_duration = vehicle.intended_duration
        if intended_duration is None:
            intended_duration = self.default_intended_stay
        if intended_duration < self.minimum_stay:
            raise InvalidDuration(
                f"Vehicle {vehicle.vehicle_id}: intended duration {intended_duration} "
                f"is below the minimum stay {self.minimum_stay}"
            )
        return intended_duration

    def try_admit_new_arrival(self, vehicle: Vehicle, time: int,
                              intended_duration: Optional[int] = None) -> str:
        """
        새로 도착한 차량을 처리합니다.

        빈 주차면이 있으면 바로 주차, 없으면 대기열, 대기열도 가득 차면
        바로 보관 목록으로 보냅니다.

        Args:
            vehicle: 도착한 차량
            time: 현재 시각
            intended_duration: 주차 예정 시간 (없으면 차량의 희망 시간 또는 기본값)

        Returns:
            str: "parked", "queued", "rejected" 중 하나
        """
        duration = self._intended_stay(vehicle, intended_duration)

        if self.capacity_available(vehicle.category):
            self.park(vehicle, time, duration)
            vehicle.intended_duration = duration
            return "parked"
        if not self.queue_full():
            self.enqueue(vehicle, time)
            vehicle.intended_duration = duration
            return "queued"

        vehicle.reject()
        vehicle.intended_duration = duration
        self._archive.append(vehicle)
        self.num_rejected += 1
        self._notify(vehicle, STATE_NEW, STATE_ARCHIVED, time)
        return "rejected"

    def close(self, time: int) -> None:
        """영업 종료: 모든 차량을 출차시키고 남은 대기 차량을 내보냅니다."""
        self.process_departures(time, force=True)
        for vehicle in list(self._queue):
            self._archive_from_queue(vehicle, time)

    # ------------------------------------------------------------------
    # 상태 알림
    # ------------------------------------------------------------------
    @staticmethod
    def _state_code(vehicle: Vehicle) -> str:
        if vehicle.state in (VehicleState.QUEUED, VehicleState.DEQUEUED):
            return STATE_QUEUED
        if vehicle.state is VehicleState.PARKED:
            return STATE_PARKED
        return STATE_NEW

    def _notify(self, vehicle: Vehicle, source: str, target: str, time: int) -> None:
        transition = Transition(time, vehicle.vehicle_id, vehicle.category.code, source, target)
        self._transitions.append(transition)
        if self.logger is not None:
            self.logger.add_event(
                time=time,
                vehicle_id=vehicle.vehicle_id,
                vehicle_type=vehicle.category.name.lower(),
                event=transition.event,
                transition=str(transition),
                satisfied=vehicle.satisfied,
            )

    def drain_transitions(self) -> List[Transition]:
        """마지막 호출 이후 발생한 상태 변화 목록을 반환하고 비웁니다."""
        transitions, self._transitions = self._transitions, []
        return transitions

    # ------------------------------------------------------------------
    # 조회
    # ------------------------------------------------------------------
    def pool(self, category: VehicleCategory) -> Tuple[Vehicle, ...]:
        return tuple(self._pools[VehicleCategory(category)])

    @property
    def queue(self) -> Tuple[Vehicle, ...]:
        return tuple(self._queue)

    @property
    def archive(self) -> Tuple[Vehicle, ...]:
        return tuple(self._archive)

    def num_cars(self) -> int:
        """주차 중인 일반 차량 수"""
        return len(self._pools[VehicleCategory.REGULAR_CAR])

    def num_small_cars(self) -> int:
        """주차 중인 소형차 수 (일반 주차면을 쓰는 소형차 포함)"""
        return len(self._pools[VehicleCategory.SMALL_CAR])

    def num_motorcycles(self) -> int:
        """주차 중인 오토바이 수 (소형차 주차면을 쓰는 오토바이 포함)"""
        return len(self._pools[VehicleCategory.MOTORCYCLE])

    def num_parked(self) -> int:
        return sum(len(pool) for pool in self._pools.values())

    def num_vehicles_in_queue(self) -> int:
        return len(self._queue)

    def car_park_empty(self) -> bool:
        return self.num_parked() == 0

    def car_park_full(self) -> bool:
        """세 유형의 주차면이 모두 가득 찬 경우에만 True"""
        return all(self._occupied[c] >= self.capacities[c] for c in VehicleCategory)

    def queue_empty(self) -> bool:
        return not self._queue

    def queue_full(self) -> bool:
        return len(self._queue) >= self.max_queue_size

    def status_counts(self) -> Dict[str, int]:
        """현재 주차장 상태 반환"""
        return {
            "created": self.count,
            "parked": self.num_parked(),
            "cars": self.num_cars(),
            "small_cars": self.num_small_cars(),
            "motorcycles": self.num_motorcycles(),
            "dissatisfied": self.num_dissatisfied,
            "rejected": self.num_rejected,
            "archived": len(self._archive),
            "queued": len(self._queue),
        }

    def initial_state(self) -> str:
        """주차장 구성 요약"""
        return (
            f"CarPark [maxCarSpaces: {self.max_car_spaces}"
            f" maxSmallCarSpaces: {self.max_small_car_spaces}"
            f" maxMotorCycleSpaces: {self.max_motorcycle_spaces}"
            f" maxQueueSize: {self.max_queue_size}]"
        )

    def final_state(self) -> str:
        """보관된 모든 차량의 기록"""
        lines = [f"Vehicles Processed: count: {self.count}, logged: {len(self._archive)}",
                 "Vehicle Record: "]
        for vehicle in self._archive:
            lines.append(f"{vehicle}\n")
        return "\n".join(lines) + "\n"

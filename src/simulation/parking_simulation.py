"""
주차장 시뮬레이션을 실행하는 모듈
"""
import simpy
from typing import Dict, Optional

from src.config import CLOSING_TIME
from src.models.car_park import CarPark
from src.models.generator import VehicleGenerator
from src.utils.helpers import format_status_line
from src.utils.logger import SimulationLogger


class ParkingSimulation:
    """
    주차장 시뮬레이션을 실행하는 클래스

    simpy 환경을 시계로 사용하며, 매 틱(1분)마다 아래 순서로 주차장을 갱신합니다.

    1. 출차 시각이 된 차량 출차
    2. 최대 대기 시간을 넘긴 대기 차량 내보내기
    3. 빈 주차면에 대기열 차량 입차
    4. 신규 도착 차량 처리 (영업 종료 전까지만)
    """

    def __init__(self,
                 car_park: CarPark,
                 generator: VehicleGenerator,
                 logger: Optional[SimulationLogger] = None,
                 closing_time: int = CLOSING_TIME,
                 env: Optional[simpy.Environment] = None,
                 verbose: bool = False):
        """
        시뮬레이션 객체를 초기화합니다.

        Args:
            car_park: 주차장
            generator: 차량 도착 생성기
            logger: 이벤트 로깅을 위한 로거 객체
            closing_time: 영업 종료 시각 (틱)
            env: SimPy 환경 (없으면 새로 생성)
            verbose: 틱별 상태 줄 출력 여부
        """
        if closing_time <= 0:
            raise ValueError(f"closing_time must be positive, got {closing_time}")

        self.env = env if env is not None else simpy.Environment()
        self.car_park = car_park
        self.generator = generator
        self.logger = logger
        self.closing_time = closing_time
        self.verbose = verbose

        if self.logger is not None:
            self.car_park.set_logger(self.logger)

    def step(self, time: int) -> None:
        """한 틱을 처리합니다."""
        self.car_park.process_departures(time)
        self.car_park.evict_stale_queue_entries(time)
        self.car_park.admit_from_queue(time)

        if time < self.closing_time:
            for category, intended_stay in self.generator.arrivals(time):
                vehicle = self.car_park.create_vehicle(category, time, intended_stay)
                self.car_park.try_admit_new_arrival(vehicle, time, intended_stay)

        self._record(time)

    def _record(self, time: int) -> None:
        transitions = self.car_park.drain_transitions()
        line = format_status_line(time, self.car_park, transitions)
        if self.verbose:
            print(line)
        if self.logger is not None:
            self.logger.log_status(line)
            self.logger.record_snapshot(time, self.car_park.status_counts())

    def tick_process(self):
        """영업 종료 시각까지 1틱씩 진행하는 simpy 프로세스"""
        while self.env.now < self.closing_time:
            yield self.env.timeout(1)
            self.step(int(self.env.now))

    def run(self) -> Dict[str, int]:
        """
        시뮬레이션을 실행합니다.

        영업 종료 후 남은 차량을 모두 출차시키고 대기열을 비웁니다.

        Returns:
            최종 주차장 현황
        """
        if self.logger is not None:
            self.logger.log_status(self.car_park.initial_state())

        self.env.process(self.tick_process())
        self.env.run()

        self.car_park.close(self.closing_time)
        self._record(self.closing_time)
        return self.car_park.status_counts()

"""
차량 도착을 생성하는 모듈입니다.

매 틱마다 승용차 도착 시행 1회(도착 시 소형차 여부 시행 1회)와
오토바이 도착 시행 1회를 수행합니다.
"""
import numpy as np
from typing import List, Optional, Tuple

from src.config import (
    SEED,
    MINIMUM_STAY,
    DEFAULT_CAR_PROB,
    DEFAULT_SMALL_CAR_PROB,
    DEFAULT_MOTORCYCLE_PROB,
    DEFAULT_INTENDED_STAY_MEAN,
    DEFAULT_INTENDED_STAY_SD,
)
from src.models.vehicle import VehicleCategory
from src.utils.helpers import bernoulli_trial, sample_intended_stay

Arrival = Tuple[VehicleCategory, int]


class VehicleGenerator:
    """
    시뮬레이션 동안 차량 도착을 생성하는 클래스입니다.
    """

    def __init__(self,
                 seed: Optional[int] = SEED,
                 car_prob: float = DEFAULT_CAR_PROB,
                 small_car_prob: float = DEFAULT_SMALL_CAR_PROB,
                 motorcycle_prob: float = DEFAULT_MOTORCYCLE_PROB,
                 stay_mean: float = DEFAULT_INTENDED_STAY_MEAN,
                 stay_sd: float = DEFAULT_INTENDED_STAY_SD,
                 minimum_stay: int = MINIMUM_STAY):
        """
        차량 생성기를 초기화합니다.

        Args:
            seed: 난수 시드 (같은 시드는 같은 도착 순서를 만듦)
            car_prob: 틱당 승용차 도착 확률
            small_car_prob: 도착한 승용차가 소형차일 확률
            motorcycle_prob: 틱당 오토바이 도착 확률
            stay_mean: 주차 시간 평균
            stay_sd: 주차 시간 표준편차
            minimum_stay: 최소 주차 시간
        """
        for name, prob in (("car_prob", car_prob),
                           ("small_car_prob", small_car_prob),
                           ("motorcycle_prob", motorcycle_prob)):
            if not 0.0 <= prob <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {prob}")
        if stay_sd < 0:
            raise ValueError(f"stay_sd must not be negative, got {stay_sd}")

        self.seed = seed
        self.car_prob = car_prob
        self.small_car_prob = small_car_prob
        self.motorcycle_prob = motorcycle_prob
        self.stay_mean = stay_mean
        self.stay_sd = stay_sd
        self.minimum_stay = minimum_stay

        self.rng = np.random.default_rng(seed)

    def new_car_trial(self) -> bool:
        return bernoulli_trial(self.rng, self.car_prob)

    def small_car_trial(self) -> bool:
        return bernoulli_trial(self.rng, self.small_car_prob)

    def motorcycle_trial(self) -> bool:
        return bernoulli_trial(self.rng, self.motorcycle_prob)

    def sample_intended_stay(self) -> int:
        """주차 예정 시간 샘플링 (최소 주차 시간 이상)"""
        return sample_intended_stay(self.rng, self.stay_mean, self.stay_sd, self.minimum_stay)

    def arrivals(self, time: int) -> List[Arrival]:
        """
        한 틱 동안 도착하는 차량 목록을 생성합니다.

        Args:
            time: 현재 시각 (로그/확장용)

        Returns:
            (차량 유형, 주차 예정 시간) 목록, 승용차가 오토바이보다 먼저
        """
        arrivals: List[Arrival] = []
        if self.new_car_trial():
            if self.small_car_trial():
                category = VehicleCategory.SMALL_CAR
            else:
                category = VehicleCategory.REGULAR_CAR
            arrivals.append((category, self.sample_intended_stay()))
        if self.motorcycle_trial():
            arrivals.append((VehicleCategory.MOTORCYCLE, self.sample_intended_stay()))
        return arrivals

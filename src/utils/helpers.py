"""
시뮬레이션에 필요한 유틸리티 함수들을 제공하는 모듈
"""
import numpy as np
from typing import Iterable

from src.config import MINIMUM_STAY


def bernoulli_trial(rng: np.random.Generator, prob: float) -> bool:
    """
    확률 prob로 성공하는 시행 1회

    Returns:
        bool: 성공 여부 (prob <= 0이면 항상 False, prob >= 1이면 항상 True)
    """
    if prob <= 0:
        return False
    if prob >= 1:
        return True
    return bool(rng.random() < prob)


def sample_intended_stay(rng: np.random.Generator, mean: float, sd: float,
                         minimum: int = MINIMUM_STAY) -> int:
    """
    차량의 주차 예정 시간을 정규분포에서 샘플링합니다.

    Args:
        rng: 난수 생성기
        mean: 평균 주차 시간 (분)
        sd: 표준편차 (분)
        minimum: 최소 주차 시간

    Returns:
        int: 주차 예정 시간 (최소 minimum)
    """
    minutes = rng.normal(mean, sd) if sd > 0 else mean
    return max(minimum, int(round(minutes)))


def queue_codes(vehicles: Iterable) -> str:
    """대기열 차량의 유형 코드를 순서대로 이어붙입니다 (예: "CSM")."""
    return "".join(vehicle.category.code for vehicle in vehicles)


def format_status_line(time: int, car_park, transitions: Iterable = ()) -> str:
    """
    틱별 상태 줄을 만듭니다.

    형식: time::count::P:n::C:n::S:n::M:n::D:n::A:n::Q:n<대기열 코드><전이 목록>

    Args:
        time: 현재 시각
        car_park: 주차장
        transitions: 이번 틱에 발생한 상태 변화
    """
    return (
        f"{time}::{car_park.count}"
        f"::P:{car_park.num_parked()}"
        f"::C:{car_park.num_cars()}"
        f"::S:{car_park.num_small_cars()}"
        f"::M:{car_park.num_motorcycles()}"
        f"::D:{car_park.num_dissatisfied}"
        f"::A:{len(car_park.archive)}"
        f"::Q:{car_park.num_vehicles_in_queue()}"
        f"{queue_codes(car_park.queue)}"
        + "".join(str(t) for t in transitions)
    )

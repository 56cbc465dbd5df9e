import pytest

from src.models.car_park import CarPark
from src.models.vehicle import Vehicle, VehicleCategory


@pytest.fixture
def small_park():
    """일반/소형/오토바이 각 1면, 대기열 1칸, 최대 대기 10분, 최소 주차 1분"""
    return CarPark(1, 1, 1, 1, max_queue_time=10, minimum_stay=1)


@pytest.fixture
def make_vehicle():
    counter = {"n": 0}

    def _make(category=VehicleCategory.REGULAR_CAR, arrival_time=1, intended_duration=None):
        counter["n"] += 1
        return Vehicle(
            vehicle_id=f"{VehicleCategory(category).code}{counter['n']}",
            category=category,
            arrival_time=arrival_time,
            intended_duration=intended_duration,
        )

    return _make

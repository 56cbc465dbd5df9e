import numpy as np
import pytest

from src.models.generator import VehicleGenerator
from src.models.vehicle import VehicleCategory
from src.utils.helpers import bernoulli_trial, sample_intended_stay


def test_same_seed_same_arrivals():
    a = VehicleGenerator(seed=7)
    b = VehicleGenerator(seed=7)
    assert [a.arrivals(t) for t in range(1, 50)] == [b.arrivals(t) for t in range(1, 50)]


def test_certain_and_impossible_trials():
    gen = VehicleGenerator(seed=1, car_prob=1.0, small_car_prob=0.0, motorcycle_prob=0.0)
    for t in range(1, 20):
        arrivals = gen.arrivals(t)
        assert [category for category, _ in arrivals] == [VehicleCategory.REGULAR_CAR]


def test_small_cars_and_motorcycles():
    gen = VehicleGenerator(seed=1, car_prob=1.0, small_car_prob=1.0, motorcycle_prob=1.0)
    categories = [category for category, _ in gen.arrivals(1)]
    assert categories == [VehicleCategory.SMALL_CAR, VehicleCategory.MOTORCYCLE]


def test_no_arrivals():
    gen = VehicleGenerator(seed=1, car_prob=0.0, motorcycle_prob=0.0)
    assert all(gen.arrivals(t) == [] for t in range(1, 100))


def test_intended_stay_respects_minimum():
    gen = VehicleGenerator(seed=3, stay_mean=5.0, stay_sd=30.0, minimum_stay=20)
    stays = [gen.sample_intended_stay() for _ in range(200)]
    assert min(stays) >= 20
    assert all(isinstance(s, int) for s in stays)


def test_zero_sd_returns_mean():
    rng = np.random.default_rng(0)
    assert sample_intended_stay(rng, 90.0, 0.0, minimum=20) == 90


@pytest.mark.parametrize("kwargs", [
    {"car_prob": 1.5},
    {"small_car_prob": -0.1},
    {"motorcycle_prob": 2.0},
    {"stay_sd": -1.0},
])
def test_invalid_parameters(kwargs):
    with pytest.raises(ValueError):
        VehicleGenerator(**kwargs)


def test_bernoulli_trial_frequency():
    rng = np.random.default_rng(42)
    hits = sum(bernoulli_trial(rng, 0.3) for _ in range(5000))
    assert 1300 < hits < 1700

import simpy

from src.models.car_park import CarPark
from src.models.generator import VehicleGenerator
from src.models.vehicle import VehicleCategory
from src.simulation.parking_simulation import ParkingSimulation
from src.utils.logger import SimulationLogger


def make_simulation(seed=11, closing_time=120, logger=None, **park_kwargs):
    park = CarPark(park_kwargs.pop("cars", 5), park_kwargs.pop("small_cars", 2),
                   park_kwargs.pop("motorcycles", 2), park_kwargs.pop("queue", 3))
    gen = VehicleGenerator(seed=seed, stay_mean=40.0, stay_sd=10.0)
    return ParkingSimulation(park, gen, logger=logger, closing_time=closing_time)


def test_run_ends_with_empty_car_park():
    sim = make_simulation()
    counts = sim.run()
    park = sim.car_park
    assert park.car_park_empty()
    assert park.queue_empty()
    assert counts["archived"] == park.count
    assert counts["created"] == park.count > 0


def test_simpy_clock_reaches_closing_time():
    env = simpy.Environment()
    park = CarPark(2, 1, 1, 1)
    sim = ParkingSimulation(park, VehicleGenerator(seed=1), closing_time=30, env=env)
    sim.run()
    assert env.now == 30


def test_no_arrivals_at_or_after_closing_time():
    park = CarPark(2, 1, 1, 1)
    gen = VehicleGenerator(seed=1, car_prob=1.0, motorcycle_prob=0.0)
    sim = ParkingSimulation(park, gen, closing_time=10)
    sim.step(10)
    assert park.count == 0
    sim.step(9)
    assert park.count == 1


def test_capacity_never_exceeded():
    logger = SimulationLogger()
    sim = make_simulation(seed=5, closing_time=300, logger=logger, cars=3, small_cars=1,
                          motorcycles=1, queue=2)
    sim.run()
    snapshots = logger.get_snapshot_dataframe()
    assert (snapshots["queued"] <= 2).all()
    assert (snapshots["cars"] <= 3).all()
    assert (snapshots["parked"] <= 5).all()


def test_same_seed_same_run():
    first = SimulationLogger()
    second = SimulationLogger()
    make_simulation(seed=3, logger=first).run()
    make_simulation(seed=3, logger=second).run()
    assert first.status_lines == second.status_lines


def test_status_lines_recorded():
    logger = SimulationLogger()
    sim = make_simulation(closing_time=20, logger=logger)
    sim.run()
    lines = logger.status_lines
    assert lines[0].startswith("CarPark [maxCarSpaces: 5")
    # 초기 상태 + 20틱 + 영업 종료 정리
    assert len(lines) == 22
    assert lines[1].startswith("1::")
    assert "::Q:" in lines[1]
    assert lines[-1].startswith("20::")
    assert "::P:0::" in lines[-1]


def test_space_capacity_held_every_tick():
    park = CarPark(3, 2, 2, 2)
    gen = VehicleGenerator(seed=5, car_prob=1.0, small_car_prob=0.5, motorcycle_prob=0.5,
                           stay_mean=40.0, stay_sd=10.0)
    sim = ParkingSimulation(park, gen, closing_time=300)
    for t in range(1, 300):
        sim.step(t)
        for category, capacity in park.capacities.items():
            assert park.occupied_spaces(category) <= capacity
        assert park.num_parked() == sum(park.occupied_spaces(c) for c in park.capacities)
        for vehicle in park.pool(VehicleCategory.REGULAR_CAR):
            assert vehicle.space is VehicleCategory.REGULAR_CAR

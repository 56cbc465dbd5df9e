import pytest

from src.config import DEFAULT_INTENDED_STAY
from src.models.car_park import CarPark, Transition
from src.models.exceptions import (
    IllegalTransition, InvalidDuration, NoSpaceAvailable, QueueFull, SimulationError
)
from src.models.vehicle import VehicleCategory

C = VehicleCategory.REGULAR_CAR
S = VehicleCategory.SMALL_CAR
M = VehicleCategory.MOTORCYCLE


def test_new_car_park_is_empty(small_park):
    assert small_park.car_park_empty()
    assert not small_park.car_park_full()
    assert small_park.queue_empty()
    assert not small_park.queue_full()
    assert small_park.count == 0
    assert small_park.num_dissatisfied == 0
    assert small_park.archive == ()


def test_caller_capacities_are_honoured():
    park = CarPark(3, 2, 1, 4)
    assert (park.max_car_spaces, park.max_small_car_spaces,
            park.max_motorcycle_spaces, park.max_queue_size) == (3, 2, 1, 4)
    assert park.initial_state() == (
        "CarPark [maxCarSpaces: 3 maxSmallCarSpaces: 2 "
        "maxMotorCycleSpaces: 1 maxQueueSize: 4]"
    )


def test_negative_capacity_rejected():
    with pytest.raises(ValueError):
        CarPark(-1, 1, 1, 1)
    with pytest.raises(ValueError):
        CarPark(1, 1, 1, 1, max_queue_time=0)


def test_create_vehicle_ids(small_park):
    first = small_park.create_vehicle(C, 1)
    second = small_park.create_vehicle(M, 1)
    third = small_park.create_vehicle(S, 2, 40)
    assert [first.vehicle_id, second.vehicle_id, third.vehicle_id] == ["C1", "M2", "S3"]
    assert third.intended_duration == 40
    assert small_park.count == 3


def test_arrival_park_queue_reject_scenario(small_park):
    first = small_park.create_vehicle(C, 1)
    assert small_park.try_admit_new_arrival(first, 1, 5) == "parked"
    assert small_park.num_cars() == 1

    second = small_park.create_vehicle(C, 2)
    assert small_park.try_admit_new_arrival(second, 2, 5) == "queued"
    assert small_park.num_vehicles_in_queue() == 1

    third = small_park.create_vehicle(C, 3)
    assert small_park.try_admit_new_arrival(third, 3, 5) == "rejected"
    assert len(small_park.archive) == 1
    assert small_park.num_vehicles_in_queue() == 1
    assert third.rejected and not third.satisfied
    assert small_park.num_rejected == 1

    departed = small_park.process_departures(6)
    assert departed == [first]
    assert small_park.num_cars() == 0

    admitted = small_park.admit_from_queue(6)
    assert admitted == [second]
    assert small_park.num_cars() == 1
    assert small_park.num_vehicles_in_queue() == 0
    assert second.parked and second.was_queued and second.satisfied
    assert second.departure_time == 11


def test_eviction_at_max_queue_time(small_park):
    blocker = small_park.create_vehicle(C, 1)
    small_park.try_admit_new_arrival(blocker, 1, 100)
    waiting = small_park.create_vehicle(C, 1)
    assert small_park.try_admit_new_arrival(waiting, 1, 30) == "queued"

    assert small_park.evict_stale_queue_entries(10) == []
    assert small_park.evict_stale_queue_entries(11) == [waiting]

    assert not waiting.satisfied
    assert waiting.archived
    assert small_park.archive.count(waiting) == 1
    assert small_park.num_dissatisfied == 1
    assert small_park.queue_empty()

    # 다시 처리되지 않음
    assert small_park.evict_stale_queue_entries(12) == []
    assert small_park.admit_from_queue(101) == []
    assert small_park.num_dissatisfied == 1


def test_small_car_overflows_to_regular_space(small_park):
    a = small_park.create_vehicle(S, 1)
    b = small_park.create_vehicle(S, 1)
    small_park.park(a, 1, 10)
    small_park.park(b, 1, 10)
    assert a.space is S
    assert b.space is C
    assert small_park.num_small_cars() == 2
    assert small_park.num_cars() == 0
    # 일반 주차면이 소형차로 찼으므로 일반 차량은 주차 불가
    assert not small_park.capacity_available(C)


def test_motorcycle_overflows_to_small_space(small_park):
    a = small_park.create_vehicle(M, 1)
    b = small_park.create_vehicle(M, 1)
    small_park.park(a, 1, 10)
    small_park.park(b, 1, 10)
    assert (a.space, b.space) == (M, S)
    assert small_park.num_motorcycles() == 2
    assert not small_park.capacity_available(M)
    # 소형차는 일반 주차면으로 갈 수 있음
    assert small_park.capacity_available(S)
    assert small_park.occupied_spaces(S) == 1


def test_regular_car_never_uses_small_space():
    park = CarPark(0, 5, 0, 1, minimum_stay=1)
    assert not park.capacity_available(C)
    assert park.capacity_available(S)
    assert not park.capacity_available(M)


def test_departure_frees_the_space_actually_used(small_park):
    moto = small_park.create_vehicle(M, 1)
    overflow = small_park.create_vehicle(M, 1)
    small_park.park(moto, 1, 5)
    small_park.park(overflow, 1, 10)
    assert small_park.process_departures(11) == [moto, overflow]
    assert small_park.occupied_spaces(M) == 0
    assert small_park.occupied_spaces(S) == 0
    assert small_park.car_park_empty()


def test_departures_only_when_due(small_park):
    v = small_park.create_vehicle(C, 1)
    small_park.park(v, 1, 10)
    assert small_park.process_departures(10) == []
    assert small_park.process_departures(11) == [v]
    assert v.departure_time == 11
    assert small_park.archive == (v,)


def test_forced_departures(small_park):
    v = small_park.create_vehicle(C, 1)
    small_park.park(v, 1, 100)
    assert small_park.process_departures(5, force=True) == [v]
    assert v.departure_time == 5


def test_park_without_space(small_park):
    small_park.park(small_park.create_vehicle(C, 1), 1, 10)
    late = small_park.create_vehicle(C, 2)
    with pytest.raises(NoSpaceAvailable):
        small_park.park(late, 2, 10)
    assert late.state.value == "neutral"


def test_transition_error_before_space_error(small_park):
    small_park.park(small_park.create_vehicle(C, 1), 1, 10)
    queued = small_park.create_vehicle(C, 2)
    small_park.enqueue(queued)
    with pytest.raises(IllegalTransition):
        small_park.park(queued, 3, 10)


def test_park_propagates_vehicle_errors(small_park):
    v = small_park.create_vehicle(C, 1)
    with pytest.raises(InvalidDuration):
        small_park.park(v, 1, 0)
    assert small_park.car_park_empty()


def test_enqueue_rules(small_park):
    a = small_park.create_vehicle(C, 1)
    b = small_park.create_vehicle(C, 1)
    small_park.enqueue(a)
    with pytest.raises(IllegalTransition):
        small_park.enqueue(a)
    with pytest.raises(QueueFull):
        small_park.enqueue(b)
    assert small_park.queue == (a,)
    assert not b.queued


def test_queue_full_is_a_simulation_error():
    assert issubclass(QueueFull, SimulationError)
    assert issubclass(NoSpaceAvailable, SimulationError)


def test_dequeue_from_other_car_park(small_park):
    other = CarPark(1, 1, 1, 1)
    v = other.create_vehicle(C, 1)
    other.enqueue(v)
    with pytest.raises(SimulationError):
        small_park.dequeue_and_resolve(v, 5)
    assert v.queued


def test_admit_from_queue_skips_blocked_vehicles():
    park = CarPark(1, 0, 1, 3, minimum_stay=1)
    park.try_admit_new_arrival(park.create_vehicle(C, 1), 1, 50)
    park.try_admit_new_arrival(park.create_vehicle(M, 1), 1, 10)

    car = park.create_vehicle(C, 2)
    moto = park.create_vehicle(M, 2)
    park.try_admit_new_arrival(car, 2, 10)
    park.try_admit_new_arrival(moto, 2, 10)
    assert park.queue == (car, moto)

    # 오토바이 자리만 비움
    park.process_departures(11)
    assert park.num_cars() == 1 and park.num_motorcycles() == 0
    assert park.admit_from_queue(11) == [moto]
    assert park.queue == (car,)


def test_admit_from_queue_keeps_order_for_remaining():
    park = CarPark(1, 0, 0, 3, minimum_stay=1)
    park.try_admit_new_arrival(park.create_vehicle(C, 1), 1, 10)
    waiting = [park.create_vehicle(C, 2) for _ in range(3)]
    for v in waiting:
        park.try_admit_new_arrival(v, 2, 10)

    park.process_departures(11)
    assert park.admit_from_queue(11) == [waiting[0]]
    assert park.queue == tuple(waiting[1:])


def test_admit_uses_default_stay_when_unknown(small_park):
    v = small_park.create_vehicle(C, 1)
    small_park.enqueue(v)
    small_park.admit_from_queue(2)
    assert v.departure_time == 2 + DEFAULT_INTENDED_STAY


def test_admitted_vehicles_never_queued(small_park):
    v = small_park.create_vehicle(M, 1)
    assert small_park.try_admit_new_arrival(v, 1, 5) == "parked"
    assert not v.was_queued
    assert v not in small_park.queue


def test_car_park_full(small_park):
    for category in (C, S, M):
        small_park.park(small_park.create_vehicle(category, 1), 1, 10)
    assert small_park.car_park_full()


def test_close_empties_everything(small_park):
    parked = small_park.create_vehicle(C, 1)
    queued = small_park.create_vehicle(C, 1)
    small_park.try_admit_new_arrival(parked, 1, 100)
    small_park.try_admit_new_arrival(queued, 1, 100)

    small_park.close(5)
    assert small_park.car_park_empty()
    assert small_park.queue_empty()
    assert set(small_park.archive) == {parked, queued}
    assert small_park.num_dissatisfied == 1
    assert parked.satisfied and not queued.satisfied


def test_transitions_are_drained(small_park):
    a = small_park.create_vehicle(C, 1)
    b = small_park.create_vehicle(C, 1)
    c = small_park.create_vehicle(C, 1)
    small_park.try_admit_new_arrival(a, 1, 5)
    small_park.try_admit_new_arrival(b, 1, 5)
    small_park.try_admit_new_arrival(c, 1, 5)

    transitions = small_park.drain_transitions()
    assert [str(t) for t in transitions] == ["|C:N>P|", "|C:N>Q|", "|C:N>A|"]
    assert [t.event for t in transitions] == ["park", "queue", "reject"]
    assert small_park.drain_transitions() == []

    small_park.process_departures(6)
    small_park.admit_from_queue(6)
    assert [str(t) for t in small_park.drain_transitions()] == ["|C:P>A|", "|C:Q>P|"]


def test_transition_forwarded_to_logger(small_park):
    events = []

    class Recorder:
        def add_event(self, **kwargs):
            events.append(kwargs)

    small_park.set_logger(Recorder())
    small_park.try_admit_new_arrival(small_park.create_vehicle(S, 3), 3, 5)
    assert events == [{
        "time": 3,
        "vehicle_id": "S1",
        "vehicle_type": "small_car",
        "event": "park",
        "transition": "|S:N>P|",
        "satisfied": True,
    }]
    assert isinstance(small_park.drain_transitions()[0], Transition)


def test_archive_round_trip(small_park):
    vehicles = []
    for t in range(1, 8):
        v = small_park.create_vehicle(C if t % 2 else S, t)
        vehicles.append(v)
        small_park.process_departures(t)
        small_park.evict_stale_queue_entries(t)
        small_park.admit_from_queue(t)
        small_park.try_admit_new_arrival(v, t, 3)
    small_park.close(8)

    archive = small_park.archive
    assert len(archive) == len(vehicles)
    assert all(archive.count(v) == 1 for v in vehicles)
    assert all(v.archived and not v.parked and not v.queued for v in archive)


def test_status_counts_and_final_state(small_park):
    v = small_park.create_vehicle(C, 1)
    small_park.try_admit_new_arrival(v, 1, 5)
    counts = small_park.status_counts()
    assert counts["created"] == 1
    assert counts["parked"] == 1
    assert counts["cars"] == 1
    assert counts["queued"] == 0

    small_park.close(6)
    record = small_park.final_state()
    assert record.startswith("Vehicles Processed: count: 1, logged: 1")
    assert "Vehicle vehID: C1" in record


def test_failed_arrival_leaves_vehicle_untouched(small_park):
    v = small_park.create_vehicle(C, 1)
    assert small_park.try_admit_new_arrival(v, 1, 30) == "parked"
    small_park.drain_transitions()

    with pytest.raises(IllegalTransition):
        small_park.try_admit_new_arrival(v, 2, 99)
    assert v.intended_duration == 30
    assert v.parked
    assert v.departure_time == 31
    assert small_park.queue_empty()
    assert small_park.drain_transitions() == []


def test_enqueue_records_current_time(small_park):
    late = small_park.create_vehicle(C, 1)
    small_park.enqueue(late, 4)
    assert small_park.drain_transitions()[0].time == 4

    park = CarPark(1, 1, 1, 2)
    early = park.create_vehicle(C, 3)
    park.enqueue(early)
    assert park.drain_transitions()[0].time == 3

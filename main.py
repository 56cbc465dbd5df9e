#!/usr/bin/env python3
"""
주차장 입차/대기열 시뮬레이션 메인 실행 파일

사용법:
    python main.py
    python main.py --cars 50 --small-cars 10 --motorcycles 5 --queue 5 --seed 7 --plot


이 파일은 주차장 시뮬레이션을 실행하고 결과를 저장/시각화합니다.
"""
import sys
import argparse
from datetime import datetime
import os

from src.config import (
    SEED, CLOSING_TIME,
    DEFAULT_MAX_CAR_SPACES, DEFAULT_MAX_SMALL_CAR_SPACES,
    DEFAULT_MAX_MOTORCYCLE_SPACES, DEFAULT_MAX_QUEUE_SIZE,
    DEFAULT_CAR_PROB, DEFAULT_SMALL_CAR_PROB, DEFAULT_MOTORCYCLE_PROB,
    DEFAULT_INTENDED_STAY_MEAN,
)
from src.models.car_park import CarPark
from src.models.exceptions import SimulationError
from src.models.generator import VehicleGenerator
from src.simulation.parking_simulation import ParkingSimulation
from src.utils.logger import SimulationLogger


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='주차장 시뮬레이션')
    parser.add_argument("--cars", type=int, default=DEFAULT_MAX_CAR_SPACES,
                        help=f"일반 차량 주차면 수 (기본값: {DEFAULT_MAX_CAR_SPACES})")
    parser.add_argument("--small-cars", type=int, default=DEFAULT_MAX_SMALL_CAR_SPACES,
                        help=f"소형차 주차면 수 (기본값: {DEFAULT_MAX_SMALL_CAR_SPACES})")
    parser.add_argument("--motorcycles", type=int, default=DEFAULT_MAX_MOTORCYCLE_SPACES,
                        help=f"오토바이 주차면 수 (기본값: {DEFAULT_MAX_MOTORCYCLE_SPACES})")
    parser.add_argument("--queue", type=int, default=DEFAULT_MAX_QUEUE_SIZE,
                        help=f"대기열 최대 길이 (기본값: {DEFAULT_MAX_QUEUE_SIZE})")
    parser.add_argument("--seed", type=int, default=SEED, help=f"랜덤 시드 (기본값: {SEED})")
    parser.add_argument("--car-prob", type=float, default=DEFAULT_CAR_PROB,
                        help="틱당 승용차 도착 확률")
    parser.add_argument("--small-car-prob", type=float, default=DEFAULT_SMALL_CAR_PROB,
                        help="승용차가 소형차일 확률")
    parser.add_argument("--motorcycle-prob", type=float, default=DEFAULT_MOTORCYCLE_PROB,
                        help="틱당 오토바이 도착 확률")
    parser.add_argument("--stay-mean", type=float, default=DEFAULT_INTENDED_STAY_MEAN,
                        help="평균 주차 시간 (분)")
    parser.add_argument("--stay-sd", type=float, default=None,
                        help="주차 시간 표준편차 (기본값: 평균의 0.33배)")
    parser.add_argument("--closing-time", type=int, default=CLOSING_TIME,
                        help=f"영업 종료 시각 (분, 기본값: {CLOSING_TIME})")
    parser.add_argument("--log", type=str, help="결과 저장 디렉토리 (기본값: 자동 생성)")
    parser.add_argument("--plot", action="store_true", help="주차 현황 그래프 저장")
    parser.add_argument("--verbose", action="store_true", help="틱별 상태 줄 출력")
    return parser.parse_args(argv)


def create_output_directory(prefix):
    """
    결과 파일을 저장할 디렉토리를 생성합니다.

    Args:
        prefix: 디렉토리 이름 접두사

    Returns:
        생성된 디렉토리 경로
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    output_dir = os.path.join("results", f"results_{prefix}_{timestamp}")

    if not os.path.exists(output_dir):
        os.makedirs(output_dir)
        print(f"[INFO] 결과 저장 디렉토리 생성: {output_dir}")

    return output_dir


def run(args) -> int:
    results_dir = args.log or create_output_directory("carpark")
    os.makedirs(results_dir, exist_ok=True)

    car_park = CarPark(args.cars, args.small_cars, args.motorcycles, args.queue)
    stay_sd = args.stay_sd if args.stay_sd is not None else 0.33 * args.stay_mean
    generator = VehicleGenerator(
        seed=args.seed,
        car_prob=args.car_prob,
        small_car_prob=args.small_car_prob,
        motorcycle_prob=args.motorcycle_prob,
        stay_mean=args.stay_mean,
        stay_sd=stay_sd,
    )
    logger = SimulationLogger(
        log_file=os.path.join(results_dir, "simulation_log.csv"),
        stats_file=os.path.join(results_dir, "simulation_stats.json"),
    )

    print("\n=== 시뮬레이션 설정 ===")
    print(f"  {car_park.initial_state()}")
    print(f"  - 영업 종료: {args.closing_time}분")
    print(f"  - 시드: {args.seed}")

    sim = ParkingSimulation(car_park, generator, logger,
                            closing_time=args.closing_time, verbose=args.verbose)
    counts = sim.run()

    with open(os.path.join(results_dir, "status.log"), "w", encoding="utf-8") as f:
        f.write("\n".join(logger.status_lines) + "\n")
    with open(os.path.join(results_dir, "vehicle_record.txt"), "w", encoding="utf-8") as f:
        f.write(car_park.final_state())
    logger.save_stats()

    print("\n=== 시뮬레이션 결과 ===")
    for key, value in counts.items():
        print(f"  - {key}: {value}")
    logger.print_summary()

    if args.plot:
        from src.utils.visualizer import ParkingVisualizer

        chart_path = os.path.join(results_dir, "occupancy.png")
        ParkingVisualizer(logger.get_snapshot_dataframe()).save(chart_path, title="주차장 현황")
        print(f"\n[INFO] 그래프가 {chart_path}에 저장되었습니다.")

    print(f"\n[INFO] 결과가 {results_dir}에 저장되었습니다.")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        return run(args)
    except (ValueError, SimulationError) as e:
        print(f"[ERROR] 시뮬레이션 실패: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""
시뮬레이션 이벤트를 기록하고 분석하는 로깅 시스템입니다.
"""
from typing import List, Dict, Any, Optional
import pandas as pd
import json
import csv

# 로그 엔트리 타입 정의
LogEntry = Dict[str, Any]
SnapshotEntry = Dict[str, Any]

LOG_COLUMNS = ['time', 'vehicle_id', 'vehicle_type', 'event', 'transition', 'satisfied']


class SimulationLogger:
    """시뮬레이션 이벤트를 기록하고 분석하는 클래스"""

    def __init__(self, log_file: Optional[str] = None, stats_file: Optional[str] = None):
        """
        로거를 초기화합니다.

        Args:
            log_file: CSV 이벤트 로그 파일 경로 (없으면 메모리에만 기록)
            stats_file: 통계 파일 경로
        """
        self.log_file = log_file
        self.stats_file = stats_file

        self.log: List[LogEntry] = []
        self.status_lines: List[str] = []
        self.snapshots: List[SnapshotEntry] = []

        # 로그 파일 초기화
        if self.log_file:
            with open(self.log_file, 'w', newline='', encoding='utf-8') as f:
                writer = csv.writer(f)
                writer.writerow(LOG_COLUMNS)

        # 통계 초기화
        self.stats = {
            "total_arrivals": 0,
            "successful_parks": 0,
            "queued": 0,
            "queue_parks": 0,
            "queue_fails": 0,
            "rejected": 0,
            "departures": 0,
        }

    def add_event(self, time: int, vehicle_id: str, vehicle_type: str, event: str,
                  transition: Optional[str] = None, satisfied: Optional[bool] = None) -> None:
        """
        시뮬레이션 이벤트를 로그에 추가합니다.

        Args:
            time: 이벤트 발생 시각 (틱)
            vehicle_id: 차량 ID
            vehicle_type: 차량 타입 ("regular_car", "small_car", "motorcycle")
            event: 이벤트 유형 (park, queue, queue_park, queue_fail, reject, depart)
            transition: 상태 표기 (|C:N>P| 형식)
            satisfied: 이벤트 직후 고객 만족 여부
        """
        entry: LogEntry = {
            "time": time,
            "vehicle_id": vehicle_id,
            "vehicle_type": vehicle_type,
            "event": event,
            "transition": transition,
            "satisfied": satisfied,
        }
        self.log.append(entry)

        if self.log_file:
            with open(self.log_file, 'a', newline='', encoding='utf-8') as f:
                writer = csv.writer(f)
                writer.writerow([entry[column] for column in LOG_COLUMNS])

        self.update_stats(event)

    def update_stats(self, event: str) -> None:
        """이벤트 유형별 통계를 갱신합니다."""
        if event in ("park", "queue", "reject"):
            self.stats["total_arrivals"] += 1

        if event == "park":
            self.stats["successful_parks"] += 1
        elif event == "queue":
            self.stats["queued"] += 1
        elif event == "queue_park":
            self.stats["successful_parks"] += 1
            self.stats["queue_parks"] += 1
        elif event == "queue_fail":
            self.stats["queue_fails"] += 1
        elif event == "reject":
            self.stats["rejected"] += 1
        elif event == "depart":
            self.stats["departures"] += 1

    def log_status(self, line: str) -> None:
        """틱별 상태 줄을 기록합니다."""
        self.status_lines.append(line)

    def record_snapshot(self, time: int, counts: Dict[str, int]) -> None:
        """틱별 주차장/대기열 현황을 기록합니다."""
        snapshot: SnapshotEntry = {"time": time}
        snapshot.update(counts)
        self.snapshots.append(snapshot)

    def get_dataframe(self) -> pd.DataFrame:
        """로그를 판다스 DataFrame으로 변환해 반환합니다."""
        return pd.DataFrame(self.log, columns=LOG_COLUMNS)

    def get_snapshot_dataframe(self) -> pd.DataFrame:
        """틱별 현황을 시간 인덱스 DataFrame으로 반환합니다."""
        df = pd.DataFrame(self.snapshots)
        if not df.empty:
            df = df.set_index("time")
        return df

    def calculate_dissatisfaction_rate(self) -> float:
        """
        불만족 비율 계산 (도착 차량 대비 대기 실패 + 입차 거절)

        Returns:
            불만족 비율(0~1)
        """
        if self.stats["total_arrivals"] == 0:
            return 0.0
        unhappy = self.stats["queue_fails"] + self.stats["rejected"]
        return unhappy / self.stats["total_arrivals"]

    def print_summary(self) -> None:
        """시뮬레이션 결과 요약을 출력합니다."""
        df = self.get_dataframe()

        print("=== 시뮬레이션 요약 ===")
        print(f"총 이벤트 수: {len(df)}")
        if df.empty:
            return

        print("\n이벤트 유형별 분포:")
        print(df.groupby("event").size())

        print("\n차량 유형 분포:")
        print(df.drop_duplicates("vehicle_id").groupby("vehicle_type").size())

        print(f"\n불만족 비율: {self.calculate_dissatisfaction_rate() * 100:.2f}%")

    def save_stats(self) -> None:
        """통계 정보를 JSON 파일로 저장"""
        if not self.stats_file:
            return
        with open(self.stats_file, 'w', encoding='utf-8') as f:
            json.dump(self.stats, f, ensure_ascii=False, indent=2)

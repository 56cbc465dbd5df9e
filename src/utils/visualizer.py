"""
주차장 상태를 시각화하는 모듈입니다.
"""
import matplotlib.pyplot as plt
import matplotlib as mpl
from typing import Optional, Tuple
import pandas as pd
import platform

# 한글 폰트 설정
if platform.system() == 'Windows':
    plt.rcParams['font.family'] = 'Malgun Gothic'  # 윈도우 한글 폰트
elif platform.system() == 'Darwin':  # macOS
    plt.rcParams['font.family'] = 'AppleGothic'    # 맥OS 한글 폰트
else:  # Linux
    plt.rcParams['font.family'] = 'NanumGothic'    # 리눅스 한글 폰트

mpl.rcParams['axes.unicode_minus'] = False   # 마이너스 기호 깨짐 방지


class ParkingVisualizer:
    """
    틱별 주차장 현황을 그래프로 표현하는 클래스
    """

    # 계열별 색상
    SERIES_COLORS = {
        'cars': 'tab:blue',
        'small_cars': 'tab:green',
        'motorcycles': 'tab:purple',
        'queued': 'tab:orange',
        'dissatisfied': 'tab:red',
    }

    SERIES_LABELS = {
        'cars': '일반 차량',
        'small_cars': '소형차',
        'motorcycles': '오토바이',
        'queued': '대기열',
        'dissatisfied': '누적 불만족',
    }

    def __init__(self, snapshots: pd.DataFrame):
        """
        Args:
            snapshots: SimulationLogger.get_snapshot_dataframe() 결과 (time 인덱스)
        """
        if snapshots.empty:
            raise ValueError("no snapshots to plot")
        self.snapshots = snapshots

    def plot(self, title: Optional[str] = None, figsize: Tuple[int, int] = (12, 8)):
        """
        주차 현황(위)과 대기열/불만족(아래) 그래프를 그립니다.

        Returns:
            matplotlib Figure
        """
        fig, (ax_park, ax_queue) = plt.subplots(2, 1, figsize=figsize, sharex=True)

        for column in ('cars', 'small_cars', 'motorcycles'):
            ax_park.plot(self.snapshots.index, self.snapshots[column],
                         color=self.SERIES_COLORS[column], label=self.SERIES_LABELS[column])
        ax_park.set_ylabel("주차 중인 차량 수")
        ax_park.legend(loc='upper left')
        ax_park.grid(True)

        for column in ('queued', 'dissatisfied'):
            ax_queue.plot(self.snapshots.index, self.snapshots[column],
                          color=self.SERIES_COLORS[column], label=self.SERIES_LABELS[column])
        ax_queue.set_xlabel("시간 (분)")
        ax_queue.set_ylabel("차량 수")
        ax_queue.legend(loc='upper left')
        ax_queue.grid(True)

        if title:
            fig.suptitle(title)
        fig.tight_layout()
        return fig

    def save(self, filename: str, title: Optional[str] = None) -> None:
        """그래프를 이미지 파일로 저장합니다."""
        fig = self.plot(title)
        fig.savefig(filename)
        plt.close(fig)

    def show(self, title: Optional[str] = None) -> None:
        self.plot(title)
        plt.show()

"""
시뮬레이션 환경 설정과 관련된 모든 상수 및 구성 값을 관리하는 모듈입니다.

시간 단위는 틱(분)입니다.
"""

# 시뮬레이션 기본 설정
SEED = 100                  # 난수 생성기 시드
CLOSING_TIME = 18 * 60      # 영업 종료 시각 (18시간, 분 단위)

# 주차 정책
MINIMUM_STAY = 20           # 최소 주차 시간 (분)
MAXIMUM_QUEUE_TIME = 25     # 대기열 최대 대기 시간 (분)

# 주차장 기본 용량
DEFAULT_MAX_CAR_SPACES = 100         # 일반 차량 주차면 수
DEFAULT_MAX_SMALL_CAR_SPACES = 30    # 소형차 전용 주차면 수 (일반 주차면과 별도 집계)
DEFAULT_MAX_MOTORCYCLE_SPACES = 20   # 오토바이 주차면 수
DEFAULT_MAX_QUEUE_SIZE = 10          # 대기열 최대 길이

# 차량 도착 확률 (틱당 시행 1회)
DEFAULT_CAR_PROB = 1.0          # 승용차 도착 확률
DEFAULT_SMALL_CAR_PROB = 0.20   # 도착한 승용차가 소형차일 확률
DEFAULT_MOTORCYCLE_PROB = 0.05  # 오토바이 도착 확률

# 주차 시간 분포 (정규분포)
DEFAULT_INTENDED_STAY_MEAN = 120.0
DEFAULT_INTENDED_STAY_SD = 0.33 * DEFAULT_INTENDED_STAY_MEAN
DEFAULT_INTENDED_STAY = int(DEFAULT_INTENDED_STAY_MEAN)  # 주차 시간이 지정되지 않은 차량에 적용

# 상태 표기 코드
STATE_NEW = "N"
STATE_QUEUED = "Q"
STATE_PARKED = "P"
STATE_ARCHIVED = "A"

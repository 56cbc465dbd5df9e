"""
주차장 시뮬레이션에서 사용하는 예외 클래스 모음

VehicleError 계열은 차량 상태 전이 위반을, SimulationError 계열은
주차장 정책(대기열, 주차면) 위반을 나타냅니다.
"""


class VehicleError(ValueError):
    """차량 상태 전이 또는 시간 제약 위반"""


class InvalidArrival(VehicleError):
    """도착 시간이 0 이하인 경우"""


class IllegalTransition(VehicleError):
    """현재 상태에서 허용되지 않는 상태 전이"""


class InvalidTiming(VehicleError):
    """시간 순서 위반 (예: 주차 시각 이전 출차)"""


class InvalidDuration(VehicleError):
    """주차 예정 시간이 최소 주차 시간보다 짧은 경우"""


class SimulationError(RuntimeError):
    """주차장 정책 위반"""


class QueueFull(SimulationError):
    """대기열이 가득 찬 상태에서 대기 시도"""


class NoSpaceAvailable(SimulationError):
    """차량 유형에 맞는 빈 주차면이 없는 상태에서 주차 시도"""

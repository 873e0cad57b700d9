"""
Error types raised by the pose engine.
"""


class FormFitnessError(Exception):
    """formfitness 예외의 기본 클래스"""


class DetectionError(FormFitnessError):
    """기준 포즈 로딩 실패"""

    def __init__(self, name: str, message: str = ""):
        self.name = name
        super().__init__(message or f"{self.__class__.__name__}: {name}")


class ImageNotFound(DetectionError):
    """이미지를 찾지 못했거나 픽셀 버퍼로 변환하지 못함"""


class NoPoseDetected(DetectionError):
    """이미지에서 포즈가 검출되지 않음"""


class JointUnavailable(FormFitnessError):
    """관절이 없거나 신뢰도가 임계값 이하"""

    def __init__(self, joint):
        self.joint = joint
        super().__init__(f"joint unavailable: {getattr(joint, 'value', joint)}")

"""
Exercise catalog.
"""

import uuid
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Exercise:
    """운동 항목 (기준 이미지 이름으로 기준 포즈를 찾음)"""
    name: str
    image_name: str
    icon_name: Optional[str] = None
    is_favorite: bool = False
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


def default_exercises() -> List[Exercise]:
    return [
        Exercise(name="Push-ups", image_name="pushups"),
        Exercise(name="Squats", image_name="squats"),
        Exercise(name="Downward Dog", image_name="downward-dog", icon_name="downward-dog-icon"),
        Exercise(name="Plank", image_name="plank3"),
        Exercise(name="Warrior 1", image_name="warrior-1", icon_name="warrior-1-icon"),
    ]


class ExerciseStore:
    """운동 목록과 즐겨찾기 관리"""

    def __init__(self, exercises: Optional[List[Exercise]] = None):
        self.exercises: List[Exercise] = exercises if exercises is not None else default_exercises()

    @property
    def favorite_exercises(self) -> List[Exercise]:
        return [e for e in self.exercises if e.is_favorite]

    def toggle_favorite(self, exercise: Exercise):
        for item in self.exercises:
            if item.id == exercise.id:
                item.is_favorite = not item.is_favorite
                return

    def find(self, name: str) -> Optional[Exercise]:
        """운동 이름 또는 이미지 이름으로 검색"""
        for item in self.exercises:
            if item.name == name or item.image_name == name:
                return item
        return None
